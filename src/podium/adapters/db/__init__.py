"""Relational database plumbing shared by the SQLAlchemy adapters.

Holds the shared `MetaData`, portable column types, dialect detection, the
engine factory, and the packaged Alembic migrations.
"""
