"""Default marks and shared fixtures for tests under `tests/contract/`."""

from collections.abc import Callable
from pathlib import Path

import pytest

from podium.adapters.unit_of_work import InMemoryStores, SqlAlchemyUnitOfWork
from podium.bootstrap import build_in_memory_bus, build_message_bus
from podium.service_layer.handlers import COMMAND_HANDLERS
from podium.service_layer.messagebus import MessageBus
from tests.helpers.markers import mark_items_under

# pylint: disable=unused-argument

CONTRACT_ROOT = Path(__file__).parent.resolve()
MARKER_NAME = "contract"

BusFactory = Callable[[], MessageBus]


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Add default `contract` marks to items in `tests/contract/`."""
    mark_items_under(CONTRACT_ROOT, MARKER_NAME, items)


@pytest.fixture(params=["memory", "sql_file", "postgres"])
def make_bus(request: pytest.FixtureRequest) -> BusFactory:
    """Factory for independent buses that share one backing store.

    Each bus has its own unit of work, the way two processes would.
    """
    if request.param == "memory":
        stores = InMemoryStores()
        return lambda: build_in_memory_bus(stores).message_bus

    match request.param:
        case "sql_file":
            engine = request.getfixturevalue("sqlite_engine_file")
        case "postgres":
            engine = request.getfixturevalue("postgres_engine")
        case _:
            raise ValueError(f"unknown backend: {request.param}")

    def _sql_bus() -> MessageBus:
        return build_message_bus(SqlAlchemyUnitOfWork(engine), COMMAND_HANDLERS)

    return _sql_bus
