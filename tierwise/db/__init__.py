"""Database engine, sessions and transactions."""
