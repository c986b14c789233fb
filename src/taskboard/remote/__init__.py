"""Task service implementations: HTTP (httpx) and an offline in-memory demo service."""
