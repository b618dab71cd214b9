"""Fixtures for end-to-end tests of the ``podium`` command.

Provides a test-only ``log-demo`` command that logs at every level, a
CliRunner whose flight recorder writes inside the isolated filesystem, and a
runner bound to a freshly migrated SQLite file.
"""

import logging

import click
import pytest
from click.testing import CliRunner

from podium.entrypoints.cli.main import podium

# pylint: disable=redefined-outer-name


@click.command()
def log_demo():
    """Log one message per level on 'podium.demo', plus some third-party noise."""
    logger = logging.getLogger("podium.demo")
    logger.debug("This is a debug-level test message.")
    logger.info("This is an info-level test message.")
    logger.warning("This is a warning-level test message.")
    logger.error("This is an error-level test message.")
    logger.critical("This is a critical-level test message.")
    third_party_logger = logging.getLogger("some.thirdparty")
    third_party_logger.debug("This is a debug-level third-party test message.")
    third_party_logger.info("This is an info-level third-party test message.")
    third_party_logger.warning("This is a warning-level third-party test message.")
    logger.debug("This is a final debug-level test message.")


def _remove_command_everywhere(group, name: str) -> None:
    """Drop `name` from the group and from click-extra's help sections."""
    group.commands.pop(name, None)
    if hasattr(group, "_default_section"):
        group._default_section.commands.pop(name, None)  # pylint: disable=protected-access
    for sec in getattr(group, "_sections", []):
        getattr(sec, "commands", {}).pop(name, None)


@pytest.fixture
def registered_log_demo():
    """Attach 'log-demo' to the top-level group for one test."""
    podium.add_command(log_demo, name="log-demo")
    try:
        yield
    finally:
        _remove_command_everywhere(podium, "log-demo")


@pytest.fixture
def runner():
    """CliRunner that keeps the default flight-recorder file in the cwd."""
    return CliRunner(env={"PODIUM_LOG_PATH": "latest.log"})


@pytest.fixture
def fs(runner):
    """Run the test inside an isolated working directory."""
    with runner.isolated_filesystem():
        yield


@pytest.fixture
def db_runner(tmp_path):
    """CliRunner pointed at a SQLite file that `db upgrade --force` has migrated."""
    cli = CliRunner(
        env={
            "PODIUM_DB_URL": f"sqlite+pysqlite:///{tmp_path / 'podium.db'}",
            "PODIUM_LOG_PATH": str(tmp_path / "latest.log"),
        }
    )
    result = cli.invoke(podium, ["db", "upgrade", "--force"])
    assert result.exit_code == 0, result.output
    return cli
