"""Database repository helpers."""
