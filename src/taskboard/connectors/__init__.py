"""Presentation connectors (console REPL)."""
