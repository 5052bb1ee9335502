"""Unit tests for the executable registry."""

from __future__ import annotations

import pytest

from cadence_worker.errors import ConfigurationError, ExecutableNotFoundError
from cadence_worker.executable_lookup import ExecutableLookup


class FirstActivity:
    pass


class SecondActivity:
    pass


def test_find_returns_registered_executable() -> None:
    lookup: ExecutableLookup[type] = ExecutableLookup()
    lookup.add("first", FirstActivity)

    assert lookup.find("first") is FirstActivity
    assert "first" in lookup
    assert len(lookup) == 1


def test_add_overwrites_existing_name() -> None:
    lookup: ExecutableLookup[type] = ExecutableLookup()
    lookup.add("activity", FirstActivity)
    lookup.add("activity", SecondActivity)

    assert lookup.find("activity") is SecondActivity
    assert lookup.names == ["activity"]


def test_find_unknown_name_raises_not_found() -> None:
    lookup: ExecutableLookup[type] = ExecutableLookup()

    with pytest.raises(ExecutableNotFoundError) as exc_info:
        lookup.find("missing")

    assert exc_info.value.name == "missing"
    # Distinguishable from execution errors, but still a LookupError.
    assert isinstance(exc_info.value, LookupError)


def test_add_after_freeze_is_rejected() -> None:
    lookup: ExecutableLookup[type] = ExecutableLookup()
    lookup.add("first", FirstActivity)
    lookup.freeze()

    with pytest.raises(ConfigurationError):
        lookup.add("second", SecondActivity)

    assert lookup.frozen
    assert lookup.find("first") is FirstActivity
