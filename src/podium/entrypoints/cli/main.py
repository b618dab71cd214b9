"""The ``podium`` command.

The group callback turns the logging options into handlers before any
subcommand runs. Subcommands live one module per group:

- ``podium db``: forward-only schema management.
- ``podium speakers``: registration and availability blocks.
- ``podium bookings``: try-book and the booking lifecycle.
- ``podium contracts``: contracts, payments and withholding.
- ``podium pricing``: early-bird discount tiers.

Examples
    $ podium --version
    $ podium db upgrade --force
    $ podium bookings request spk-1 evt-9 --start 2025-05-01T09:00Z --end 2025-05-01T10:00Z --actor ops
"""

import logging
from pathlib import Path

import click
import click_extra as clickx
from platformdirs import user_log_dir

from podium import __version__
from podium.logging import (
    DEFAULT_FLIGHT_RECORDER_CAPACITY,
    LoggingOptions,
    configure_logging,
    effective_level,
    log_startup,
)

from .bookings import bookings as bookings_group
from .contracts import contracts as contracts_group
from .db import db as db_group
from .helpers.log_level_parser import parse_log_level
from .pricing import pricing as pricing_group
from .speakers import speakers as speakers_group

logger = logging.getLogger(__name__)


HELP = """PODIUM command-line interface.

    PODIUM manages the engagement lifecycle of event speakers: availability
    blocks, conflict-free bookings, contracts with numbered documents,
    payments with tax withholding, and early-bird discount tiers. Every change
    is recorded as an event, so the history of each speaker and contract can
    be replayed.
    """


@clickx.extra_group(
    version=__version__,
    help=HELP,
    params=[
        clickx.ColorOption(show_envvar=True),
        clickx.TimerOption(show_envvar=True),
        clickx.ExtraVersionOption(),
    ],
)
@click.option(
    "--verbose",
    "-v",
    "verbose_count",
    count=True,
    help="Raise console verbosity one level above WARNING per repetition.",
    default=0,
)
@click.option(
    "--quiet",
    "-q",
    "quiet_count",
    count=True,
    help="Lower console verbosity one level below WARNING per repetition.",
    default=0,
)
@click.option(
    "--debug/--no-debug",
    is_flag=True,
    help="Debug console output: timestamps, logger names and source links.",
    default=False,
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="File the flight recorder writes to.",
    default=Path(user_log_dir("podium", appauthor=False, ensure_exists=True))
    / "latest.log",
    envvar="PODIUM_LOG_PATH",
    show_default=True,
    show_envvar=True,
)
@click.option(
    "--flight-recorder-capacity",
    type=click.IntRange(min=1),
    default=DEFAULT_FLIGHT_RECORDER_CAPACITY,
    hidden=True,
    envvar="PODIUM_FLIGHT_RECORDER_CAPACITY",
    show_envvar=True,
    help="Number of records the flight recorder keeps in memory.",
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    "flight_recorder",
    is_flag=True,
    help=(
        "Keep the most recent log records in memory at DEBUG, whatever -v/-q "
        "say, and write them to --log-path once a WARNING or ERROR is logged."
    ),
    default=True,
    envvar="PODIUM_FLIGHT_RECORDER",
    show_envvar=True,
)
@click.option(
    "--force-flush/--no-force-flush",
    "force_flush_flight_recorder",
    is_flag=True,
    help="Also write the flight recorder to --log-path on a clean exit.",
    envvar="PODIUM_FORCE_FLUSH_FLIGHT_RECORDER",
    default=False,
    show_default=True,
    show_envvar=True,
)
@click.option(
    "-L",
    "--logger-level",
    "logger_levels",
    multiple=True,
    callback=parse_log_level,
    help=(
        "Minimum LEVEL for logger NAME (NAME=LEVEL), applied to console and "
        "flight recorder alike. Repeatable, or a comma/space list in "
        "PODIUM_LOGGER_LEVELS."
    ),
    envvar="PODIUM_LOGGER_LEVELS",
    default=("sqlalchemy=WARNING", "alembic=WARNING"),
    show_default=True,
    show_envvar=True,
)
@clickx.pass_context
def podium(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    ctx: click.Context,
    verbose_count: int,
    quiet_count: int,
    debug: bool,
    log_path: Path,
    flight_recorder_capacity: int,
    flight_recorder: bool,
    force_flush_flight_recorder: bool,
    logger_levels: dict[str, int],
) -> None:
    options = LoggingOptions(
        level=effective_level(verbose_count, quiet_count),
        debug=debug,
        color=ctx.color is not False,
        log_path=log_path,
        flight_recorder=flight_recorder,
        capacity=flight_recorder_capacity,
        flush_on_close=force_flush_flight_recorder,
        logger_levels=logger_levels,
    )
    handlers = configure_logging(options)
    log_startup(logger, __version__, options, handlers)
    ctx.call_on_close(logging.shutdown)


for _group in (db_group, speakers_group, bookings_group, contracts_group, pricing_group):
    podium.add_command(_group)
