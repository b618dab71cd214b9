"""EventSourcedRepository on the in-memory store."""

from dataclasses import dataclass

import pytest

from podium.adapters.eventstore.in_memory_adapters import InMemoryEventStore
from podium.adapters.id_generators import SimpleIdGenerator
from podium.domain.aggregates import Aggregate
from podium.domain.events import DomainEvent
from podium.interfaces.eventstore import VersionConflictError
from podium.service_layer.repositories import (
    AggregateNotFoundError,
    EventSourcedRepository,
    SpeakerRepository,
)
from podium.service_layer.repositories.event_mapper import EventMapper

# pylint: disable=redefined-outer-name,magic-value-comparison


@dataclass(frozen=True)
class TitleSet(DomainEvent):
    talk_id: str
    title: str

    @property
    def aggregate_id(self) -> str:
        return self.talk_id


@dataclass(frozen=True)
class AbstractSet(DomainEvent):
    talk_id: str
    text: str

    @property
    def aggregate_id(self) -> str:
        return self.talk_id


class Talk(Aggregate):
    STREAM_TYPE = "Talk"

    def __init__(self, aggregate_id):
        super().__init__(aggregate_id)
        self.title = None
        self.abstract = None

    def retitle(self, title):
        self._enqueue(TitleSet(self.aggregate_id, title))

    def describe(self, text):
        self._enqueue(AbstractSet(self.aggregate_id, text))

    def _apply(self, event):
        match event:
            case TitleSet(title=title):
                self.title = title
            case AbstractSet(text=text):
                self.abstract = text
            case _:
                raise ValueError(f"Talk cannot apply {type(event).__name__}")


@pytest.fixture
def store():
    return InMemoryEventStore()


@pytest.fixture
def repo(store):
    return EventSourcedRepository[Talk](
        store,
        SimpleIdGenerator(),
        EventMapper(registry={"TitleSet": TitleSet, "AbstractSet": AbstractSet}),
        aggregate_cls=Talk,
    )


def test_saved_talk_loads_back(repo, store):
    talk = Talk("talk-1")
    talk.retitle("Engines of the Analytical Kind")
    talk.describe("Notes on the Note G algorithm.")

    assert repo.store_events(talk, metadata={"command": "DraftTalk"}) == 2
    assert talk.version == 2 and not talk.has_pending_events

    stored = list(store.read_stream("talk-1"))
    assert [(e.version, e.event_type) for e in stored] == [(1, "TitleSet"), (2, "AbstractSet")]
    assert {e.stream_type for e in stored} == {"Talk"}
    assert all(e.metadata == {"command": "DraftTalk"} for e in stored)

    loaded = repo.load("talk-1")
    assert (loaded.title, loaded.abstract, loaded.version) == (
        "Engines of the Analytical Kind",
        "Notes on the Note G algorithm.",
        2,
    )


def test_empty_stream_is_not_found(repo):
    with pytest.raises(AggregateNotFoundError) as excinfo:
        repo.load("talk-404")
    assert (excinfo.value.aggregate_type_name, excinfo.value.aggregate_id) == (
        "Talk",
        "talk-404",
    )


def test_second_writer_from_same_version_conflicts(repo, store):
    talk = Talk("talk-2")
    talk.retitle("v1")
    repo.store_events(talk)

    first, second = repo.load("talk-2"), repo.load("talk-2")
    first.retitle("v2 by first")
    repo.store_events(first)
    second.retitle("v2 by second")

    with pytest.raises(VersionConflictError):
        repo.store_events(second)
    assert repo.load("talk-2").title == "v2 by first"
    assert [e.version for e in store.read_stream("talk-2")] == [1, 2]


def test_nothing_pending_appends_nothing(repo, store):
    assert repo.store_events(Talk("talk-3")) == 0
    assert not list(store.read_since())


def test_concrete_repositories_pin_their_aggregate(store):
    assert SpeakerRepository(store, SimpleIdGenerator()).aggregate_cls.STREAM_TYPE == "Speaker"
