"""Composition root, slash commands and the `taskboard` entry point."""
