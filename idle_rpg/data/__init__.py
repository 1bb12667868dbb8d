"""Data models and externally defined tables."""
