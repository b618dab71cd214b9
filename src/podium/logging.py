"""Logging for the PODIUM CLI.

Two sinks are installed for each invocation:

* a Rich console handler on stderr whose level follows ``-v``/``-q``;
* an optional *flight recorder*, a `MemoryHandler` that keeps recent records
  at DEBUG and writes them to a file once a WARNING or worse shows up.

The flight recorder is what makes a refused booking debuggable after the
fact: the DEBUG trail leading up to the warning is on disk even though the
console only showed the warning.
"""

from __future__ import annotations

import logging
import os
import platform
import sys
from dataclasses import dataclass, field
from logging.handlers import MemoryHandler
from pathlib import Path
from typing import TYPE_CHECKING, Literal

import alembic
import sqlalchemy
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from collections.abc import Mapping

PROJECT_PREFIX = "podium"
DEFAULT_FLIGHT_RECORDER_CAPACITY = 2000

CONSOLE_FORMAT = "%(prefix)s %(message)s"
DEBUG_CONSOLE_FORMAT = "%(asctime)s %(name)s: %(message)s"
RECORDER_FORMAT = (
    "[%(asctime)s] [%(process)d:%(threadName)s] "
    "%(levelname)s %(name)s:%(lineno)d: %(message)s"
)

type ColorSystem = Literal["auto", "standard", "256", "truecolor", "windows"]


class ThirdPartyPrefixFilter(logging.Filter):  # pylint: disable=too-few-public-methods
    """Set ``record.prefix`` to ``[library]`` for records from outside PODIUM."""

    def filter(self, record: logging.LogRecord) -> bool:
        top = record.name.partition(".")[0]
        record.prefix = "" if top == PROJECT_PREFIX else f"[{top}]"
        return True


def effective_level(verbose_count: int, quiet_count: int) -> int:
    """WARNING moved one step per -v (down) or -q (up), clamped to DEBUG..CRITICAL."""
    steps = quiet_count - verbose_count
    return min(logging.CRITICAL, max(logging.DEBUG, logging.WARNING + 10 * steps))


@dataclass(frozen=True)
class LoggingOptions:
    """What the top-level options asked for."""

    level: int = logging.WARNING
    debug: bool = False
    color: bool = True
    log_path: Path | None = None
    flight_recorder: bool = True
    capacity: int = DEFAULT_FLIGHT_RECORDER_CAPACITY
    flush_on_close: bool = False
    logger_levels: Mapping[str, int] = field(default_factory=dict)


def config_console_handler(
    level: int = logging.INFO, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Rich handler on stderr.

    In debug mode every record is shown together with its timestamp, logger
    name and a link to the source line; `level` is ignored.
    """
    color_system: ColorSystem | None = "auto" if color else None
    handler = RichHandler(
        level=logging.DEBUG if debug_mode else level,
        console=Console(color_system=color_system, stderr=True),
        rich_tracebacks=True,
        show_time=False,
        show_path=debug_mode,
        enable_link_path=debug_mode,
    )
    if debug_mode:
        handler.setFormatter(logging.Formatter(DEBUG_CONSOLE_FORMAT))
        return handler

    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    handler.addFilter(ThirdPartyPrefixFilter())
    return handler


def config_flight_recorder(
    path: Path,
    capacity: int = DEFAULT_FLIGHT_RECORDER_CAPACITY,
    flush_level: int = logging.WARNING,
    flush_on_close: bool = False,
) -> MemoryHandler:
    """Buffer up to `capacity` records and write them to `path` on flush.

    The file is truncated when the handler is built, so each run starts
    clean. A record at `flush_level` or above flushes the buffer; with
    `flush_on_close` whatever is left is written at shutdown too.
    """
    target = logging.FileHandler(path, mode="w", encoding="utf-8")
    target.setLevel(logging.DEBUG)
    target.setFormatter(logging.Formatter(RECORDER_FORMAT))
    return MemoryHandler(
        capacity, flushLevel=flush_level, target=target, flushOnClose=flush_on_close
    )


def build_handlers(options: LoggingOptions) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [
        config_console_handler(options.level, options.debug, options.color)
    ]
    if options.flight_recorder and options.log_path is not None:
        handlers.append(
            config_flight_recorder(
                options.log_path,
                capacity=options.capacity,
                flush_on_close=options.flush_on_close,
            )
        )
    return handlers


def install_handlers(
    handlers: list[logging.Handler], logger_levels: Mapping[str, int]
) -> None:
    """Reconfigure the root logger with `handlers` and set per-logger floors.

    Root stays at DEBUG so that the flight recorder sees everything; the
    console handler does its own filtering.
    """
    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)
    for name, level in logger_levels.items():
        logging.getLogger(name).setLevel(level)


def configure_logging(options: LoggingOptions) -> list[logging.Handler]:
    """Install the handlers `options` describe and return them."""
    handlers = build_handlers(options)
    install_handlers(handlers, options.logger_levels)
    return handlers


def log_startup(
    logger: logging.Logger,
    app_version: str,
    options: LoggingOptions,
    handlers: list[logging.Handler],
) -> None:
    """Banner at INFO, then the run's environment at DEBUG."""
    recorder_on = any(isinstance(h, MemoryHandler) for h in handlers)
    logger.info(
        "PODIUM %s (console=%s, flight-recorder=%s)",
        app_version,
        logging.getLevelName(options.level),
        "ON" if recorder_on else "OFF",
    )

    environment = {
        "Python": sys.version.split()[0],
        "Platform": f"{platform.system()} {platform.release()}",
        "PID": os.getpid(),
        "CWD": Path.cwd(),
        "Alembic": alembic.__version__,
        "SQLAlchemy": sqlalchemy.__version__,
        "Handlers": [type(h).__name__ for h in handlers],
    }
    for key, value in environment.items():
        logger.debug("%s: %s", key, value)

    if recorder_on:
        logger.debug(
            "Flight recorder: path=%s, capacity=%s, flush_on_close=%s",
            options.log_path,
            options.capacity,
            options.flush_on_close,
        )
    overrides = {
        name: logging.getLevelName(level)
        for name, level in options.logger_levels.items()
    }
    logger.debug("Per-logger overrides: %s", overrides or "<none>")
