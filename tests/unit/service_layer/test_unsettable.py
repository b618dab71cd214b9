"""Tests for the UNSET sentinel and `resolve`."""

import copy
import pickle

import pytest

from podium.domain.errors import InvalidValueError
from podium.service_layer.unsettable import UNSET, resolve


def test_unset_is_falsy_and_reads_as_its_name():
    assert not UNSET
    assert repr(UNSET) == "UNSET"


@pytest.mark.parametrize(
    "clone", [lambda v: pickle.loads(pickle.dumps(v)), copy.deepcopy], ids=["pickle", "deepcopy"]
)
def test_unset_stays_a_singleton(clone):
    assert clone(UNSET) is UNSET


@pytest.mark.parametrize(
    ("value", "clearable", "expected"),
    [
        (UNSET, False, "USD"),
        ("EUR", False, "EUR"),
        (None, True, None),
    ],
    ids=["kept", "replaced", "cleared"],
)
def test_resolve(value, clearable, expected):
    assert resolve(value, "USD", clearable=clearable, field="currency") == expected


def test_clearing_a_required_field_names_it():
    with pytest.raises(InvalidValueError, match="Invalid agreed_amount None: cannot be cleared"):
        resolve(None, "1000", clearable=False, field="agreed_amount")
