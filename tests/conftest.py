"""Fixtures shared by every PODIUM test folder."""

from __future__ import annotations

import pytest

pytest_plugins = [
    "tests.fixtures.sqlite",
    "tests.fixtures.postgres",
    "tests.fixtures.datagen",
]


@pytest.fixture
def engine(request: pytest.FixtureRequest):
    """The engine fixture named by an indirect ``engine`` parameter.

    Lets one test run against both backends::

        @pytest.mark.parametrize(
            "engine", ["sqlite_engine_file", "postgres_engine"], indirect=True
        )
    """
    return request.getfixturevalue(request.param)
