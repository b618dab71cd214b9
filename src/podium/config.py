"""Where PODIUM finds its database and its migrations.

The database URL is read from ``PODIUM_DB_URL`` on every call, never cached,
so tests and the CLI can switch databases through the environment. Logging
options are plain click options with ``PODIUM_*`` environment fallbacks and
live with the CLI.
"""

import os
import sys
from importlib.resources import files
from typing import TextIO

from alembic.config import Config

DB_URL_ENV_VAR = "PODIUM_DB_URL"

ALEMBIC_URL_KEY = "sqlalchemy.url"  # pragma: no mutate
ALEMBIC_SCRIPT_LOCATION_KEY = "script_location"  # pragma: no mutate
MIGRATIONS_PACKAGE = "podium.adapters.db.alembic"


class DatabaseUrlNotSetError(Exception):
    """``PODIUM_DB_URL`` is missing or blank."""

    def __init__(self) -> None:
        super().__init__(f"{DB_URL_ENV_VAR} is not set")


def get_db_url() -> str:
    """The SQLAlchemy URL in ``PODIUM_DB_URL``.

    Raises:
        DatabaseUrlNotSetError: The variable is unset or empty.
    """
    url = os.environ.get(DB_URL_ENV_VAR, "").strip()
    if not url:
        raise DatabaseUrlNotSetError()
    return url


def build_alembic_config(db_url: str | None = None, stdout: TextIO = sys.stdout) -> Config:
    """An Alembic config running the migrations shipped inside the package.

    `db_url` may be left out for commands that only read the scripts
    (``heads``, ``history``). Alembic prints to `stdout`.
    """
    cfg = Config(stdout=stdout)
    cfg.set_main_option(ALEMBIC_SCRIPT_LOCATION_KEY, str(files(MIGRATIONS_PACKAGE)))
    if db_url is not None:
        cfg.set_main_option(ALEMBIC_URL_KEY, db_url)
    return cfg
