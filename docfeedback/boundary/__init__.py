"""Boundary adapters: database, Google Docs, LLM."""
