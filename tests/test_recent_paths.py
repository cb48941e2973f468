"""Tests for the persisted most-recently-used path list."""

from __future__ import annotations

import json

import pytest

from studieasy.application.settings import MAX_RECENT_PATHS, RECENT_PATHS_KEY, RecentPathsStore


def test_empty_store_returns_empty_list(settings_store) -> None:
    assert RecentPathsStore(settings_store).get() == []


def test_add_moves_existing_path_to_front(settings_store) -> None:
    store = RecentPathsStore(settings_store)

    store.add("foo")
    store.add("bar")
    result = store.add("foo")

    assert result == ["foo", "bar"]
    assert store.get() == ["foo", "bar"]


def test_capacity_drops_oldest(settings_store) -> None:
    store = RecentPathsStore(settings_store)

    for index in range(MAX_RECENT_PATHS + 1):
        store.add(f"path-{index}")

    paths = store.get()
    assert len(paths) == MAX_RECENT_PATHS
    assert paths[0] == f"path-{MAX_RECENT_PATHS}"
    assert "path-0" not in paths


def test_paths_persist_between_instances(settings_store) -> None:
    RecentPathsStore(settings_store).add("notes/lectures")

    assert RecentPathsStore(settings_store).get() == ["notes/lectures"]
    assert json.loads(settings_store.value(RECENT_PATHS_KEY)) == ["notes/lectures"]


@pytest.mark.parametrize("stored", ["not json", json.dumps({"a": 1}), json.dumps("foo")])
def test_unreadable_value_is_treated_as_empty(settings_store, stored: str) -> None:
    settings_store.setValue(RECENT_PATHS_KEY, stored)
    store = RecentPathsStore(settings_store)

    assert store.get() == []
    assert store.add("foo") == ["foo"]


def test_non_string_items_are_ignored(settings_store) -> None:
    settings_store.setValue(RECENT_PATHS_KEY, json.dumps(["a", 3, None, "b"]))

    assert RecentPathsStore(settings_store).get() == ["a", "b"]


def test_clear(settings_store) -> None:
    store = RecentPathsStore(settings_store)
    store.add("foo")

    store.clear()

    assert store.get() == []


def test_custom_capacity(settings_store) -> None:
    store = RecentPathsStore(settings_store, capacity=2)
    for path in ("a", "b", "c"):
        store.add(path)

    assert store.capacity == 2
    assert store.get() == ["c", "b"]

    with pytest.raises(ValueError):
        RecentPathsStore(settings_store, capacity=0)
