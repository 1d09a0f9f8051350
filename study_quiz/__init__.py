"""Markdown quiz service with identity-verified submissions."""

__version__ = "0.1.0"
