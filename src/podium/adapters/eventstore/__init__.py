"""Event store adapters: the table schema plus in-memory and SQLAlchemy backends."""
