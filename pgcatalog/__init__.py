"""Query helpers for a PostgreSQL-backed data catalog over a DB-API connection."""

__version__ = "0.1.0"