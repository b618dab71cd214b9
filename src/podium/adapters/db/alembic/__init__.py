"""Packaged Alembic migration scripts for PODIUM."""
