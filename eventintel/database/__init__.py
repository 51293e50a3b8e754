"""Database connection and ORM models."""
