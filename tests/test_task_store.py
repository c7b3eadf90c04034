# tests/test_task_store.py

from __future__ import annotations

import pytest

from note_alarm.core.errors import NotFoundError, ValidationError
from note_alarm.tasks.task_models import MAX_INTERVAL_MINUTES, coerce_interval
from note_alarm.tasks.task_store import TaskStore


def _titles(store: TaskStore) -> list[str]:
    return [t.title for t in store.list_tasks()]


def _abc() -> tuple[TaskStore, dict[str, str]]:
    store = TaskStore()
    ids = {name: store.create(name, "", 1).id for name in ("A", "B", "C")}
    return store, ids


def test_create_appends_and_strips() -> None:
    store = TaskStore()
    t1 = store.create("  Pay bills ", "  electricity ", 3)
    t2 = store.create("Water plants")

    assert _titles(store) == ["Pay bills", "Water plants"]
    assert t1.description == "electricity"
    assert t1.interval_minutes == 3
    assert t2.interval_minutes == 5
    assert t1.id != t2.id
    assert t1.created_at.endswith("Z")


@pytest.mark.parametrize("raw", [0, -3, None, "", "abc", 0.4, True])
def test_create_coerces_bad_interval_to_default(raw) -> None:
    store = TaskStore()
    assert store.create("x", "", raw).interval_minutes == 5


@pytest.mark.parametrize(("raw", "expected"), [("7", 7), ("12min", 12), (2.9, 2), (" 4 ", 4)])
def test_create_parses_numeric_interval(raw, expected) -> None:
    store = TaskStore()
    assert store.create("x", "", raw).interval_minutes == expected


def test_empty_title_rejected_and_list_unchanged() -> None:
    store = TaskStore()
    store.create("keep me")
    events: list[int] = []
    store.subscribe(lambda tasks: events.append(len(tasks)))

    with pytest.raises(ValidationError):
        store.create("   ", "desc", 5)

    assert _titles(store) == ["keep me"]
    assert events == []


def test_ids_are_never_reused_with_frozen_clock() -> None:
    store = TaskStore(clock_ms=lambda: 1000)
    a = store.create("a")
    store.delete(a.id)
    b = store.create("b")
    c = store.create("c")
    assert len({a.id, b.id, c.id}) == 3


def test_load_keeps_ids_ahead_of_restored_ones() -> None:
    source = TaskStore(clock_ms=lambda: 5000)
    old = source.create("old")

    store = TaskStore(clock_ms=lambda: 10)
    store.load(source.list_tasks())
    new = store.create("new")
    assert int(new.id) > int(old.id)


def test_update_replaces_in_place() -> None:
    store, ids = _abc()
    before = store.get(ids["B"])

    updated = store.update(ids["B"], " B2 ", "notes", "9")

    assert _titles(store) == ["A", "B2", "C"]
    assert updated.id == before.id
    assert updated.created_at == before.created_at
    assert updated.interval_minutes == 9


def test_update_validation_and_missing_id() -> None:
    store, ids = _abc()
    with pytest.raises(ValidationError):
        store.update(ids["A"], "", "", 1)
    with pytest.raises(NotFoundError):
        store.update("nope", "x", "", 1)
    assert _titles(store) == ["A", "B", "C"]


def test_delete() -> None:
    store, ids = _abc()
    store.delete(ids["B"])
    assert _titles(store) == ["A", "C"]
    with pytest.raises(NotFoundError):
        store.delete(ids["B"])


def test_reorder_forward_and_backward() -> None:
    store, ids = _abc()
    assert store.reorder(ids["A"], ids["B"]) is True
    assert _titles(store) == ["B", "A", "C"]

    store, ids = _abc()
    assert store.reorder(ids["C"], ids["A"]) is True
    assert _titles(store) == ["C", "A", "B"]


def test_reorder_uses_target_index_from_before_removal() -> None:
    store, ids = _abc()
    store.create("D", "", 1)
    # A at 0, C at 2: remove A -> [B, C, D], insert at 2 -> [B, C, A, D]
    store.reorder(ids["A"], ids["C"])
    assert _titles(store) == ["B", "C", "A", "D"]


def test_reorder_noop_cases_do_not_notify() -> None:
    store, ids = _abc()
    events: list[int] = []
    store.subscribe(lambda tasks: events.append(len(tasks)))

    assert store.reorder(ids["A"], ids["A"]) is False
    assert store.reorder(ids["A"], "missing") is False
    assert store.reorder("missing", ids["A"]) is False
    assert _titles(store) == ["A", "B", "C"]
    assert events == []


def test_listeners_get_snapshots_and_can_unsubscribe() -> None:
    store = TaskStore()
    seen: list[tuple] = []
    unsubscribe = store.subscribe(seen.append)

    store.create("a")
    store.create("b")
    unsubscribe()
    store.create("c")

    assert [len(s) for s in seen] == [1, 2]
    assert isinstance(seen[0], tuple)


@pytest.mark.parametrize(
    "raw",
    [10**400, float("inf"), 1e300, "1" + "0" * 400, "9" * 5000, "  +0000000000000000000000000012345678"],
)
def test_huge_interval_is_clamped(raw) -> None:
    store = TaskStore()
    assert store.create("x", "", raw).interval_minutes == MAX_INTERVAL_MINUTES


@pytest.mark.parametrize("raw", ["-" + "9" * 5000, float("-inf"), float("nan"), "0" * 5000])
def test_huge_negative_or_zero_interval_uses_default(raw) -> None:
    assert coerce_interval(raw) == 5


def test_leading_zeros_do_not_count_as_huge() -> None:
    assert coerce_interval("0" * 50 + "42") == 42


def test_update_clamps_huge_interval() -> None:
    store, ids = _abc()
    updated = store.update(ids["A"], "A", "", 10**400)
    assert updated.interval_minutes == MAX_INTERVAL_MINUTES
