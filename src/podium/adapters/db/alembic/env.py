"""Alembic environment for the PODIUM tables.

The URL comes from ``-x url=...``, then ``sqlalchemy.url`` in the Alembic
config, then ``PODIUM_DB_URL``. Type and server-default drift are compared
in both modes; SQLite runs in batch mode because it cannot ALTER in place.
"""

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

# importing a schema module registers its tables on the shared metadata
import podium.adapters.eventstore.schema  # noqa: F401 # pylint: disable=unused-import
import podium.adapters.sequences.schema  # noqa: F401 # pylint: disable=unused-import
from podium.adapters.db.dialects import DialectName
from podium.adapters.db.metadata import metadata
from podium.config import ALEMBIC_URL_KEY, DB_URL_ENV_VAR

# pylint: disable=no-member

alembic_config = context.config

if alembic_config.config_file_name is not None:
    fileConfig(alembic_config.config_file_name)

COMPARE = {"compare_type": True, "compare_server_default": True}


def get_url() -> str:
    candidates = (
        context.get_x_argument(as_dictionary=True).get("url"),
        alembic_config.get_main_option(ALEMBIC_URL_KEY),
        os.environ.get(DB_URL_ENV_VAR),
    )
    for url in candidates:
        # an uninterpolated "%(...)s" placeholder counts as unset
        if url and "%(" not in url:  # pylint: disable=magic-value-comparison
            return url
    raise RuntimeError(f"Set {DB_URL_ENV_VAR} to your database URL.")


def run_migrations_offline() -> None:
    """Write the migration SQL instead of executing it."""
    context.configure(
        url=get_url(),
        target_metadata=metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **COMPARE,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = engine_from_config(
        {ALEMBIC_URL_KEY: get_url()}, prefix="sqlalchemy.", poolclass=pool.NullPool
    )
    with engine.connect() as connection:
        sqlite = DialectName.from_sqlalchemy(connection) is DialectName.SQLITE
        context.configure(
            connection=connection,
            target_metadata=metadata,
            render_as_batch=sqlite,
            **COMPARE,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
