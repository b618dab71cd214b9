"""Parsing of ``-L NAME=LEVEL`` logger overrides.

Values may be repeated on the command line or packed into one
comma/space separated string (as read from ``PODIUM_LOGGER_LEVELS``).
"""

import logging
import re

import click

DEFAULT_LIB_LEVELS = {"sqlalchemy": logging.WARNING, "alembic": logging.WARNING}

_SEPARATORS = re.compile(r"[,\s]+")


def _normalize_items(value: str | list[str] | tuple[str, ...] | None) -> list[str]:
    """Flatten `value` into non-empty ``NAME=LEVEL`` fragments."""
    if not value:
        return []
    chunks = [value] if isinstance(value, str) else list(value)
    return [item for chunk in chunks for item in _SEPARATORS.split(chunk) if item]


def parse_log_level(
    ctx: click.Context,  # pylint: disable=unused-argument
    param: click.Parameter | None,  # pylint: disable=unused-argument
    value: str | list[str] | tuple[str, ...] | None,
) -> dict[str, int]:
    """Click callback turning ``NAME=LEVEL`` items into a name -> level mapping.

    Library defaults (`DEFAULT_LIB_LEVELS`) apply unless overridden.

    Raises:
        click.BadParameter: On an item without ``=`` or an unknown level name.
    """
    levels = dict(DEFAULT_LIB_LEVELS)
    for item in _normalize_items(value):
        name, sep, level_name = item.partition("=")
        if not sep:
            raise click.BadParameter(f"Expected NAME=LEVEL, got {item!r}")
        lvl = logging.getLevelNamesMapping().get(level_name.strip().upper())
        if lvl is None:
            raise click.BadParameter(f"Invalid log level: {level_name}")
        levels[name.strip()] = lvl
    return levels
