"""urldedupe - Deduplicate large URL lists by normalized form."""

__version__ = "0.1.0"
