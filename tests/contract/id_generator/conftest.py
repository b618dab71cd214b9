"""Id generator backends under test."""

import pytest

from podium.adapters.id_generators import SimpleIdGenerator, ULIDGenerator


@pytest.fixture(params=["ulid", "counter", "counter-prefixed"])
def id_generator(request: pytest.FixtureRequest):
    if request.param == "ulid":
        return ULIDGenerator()
    if request.param == "counter":
        return SimpleIdGenerator()
    return SimpleIdGenerator(prefix="pay-")
