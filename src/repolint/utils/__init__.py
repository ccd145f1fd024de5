"""Shared helpers: glob matching, dependency parsing, schema loading."""
