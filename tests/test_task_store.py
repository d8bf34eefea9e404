"""
Tests for the in-memory task store.
"""

import pytest

from worktimer.domain.models import TaskAction, TaskState, UNCATEGORIZED
from worktimer.services.task_store import TaskStore


@pytest.fixture
def store(engine):
    return TaskStore(engine)


def test_add_assigns_unique_ids(store):
    first = store.add("Write report", "Work")
    second = store.add("Write report", "Work")
    assert first != second
    assert len(store) == 2
    assert store.get(first).folder == "Work"


@pytest.mark.parametrize("description", ["", "   "])
def test_add_rejects_blank_description(store, description):
    with pytest.raises(ValueError):
        store.add(description)
    assert len(store) == 0


def test_delete_returns_removed_task(store):
    task_id = store.add("Write report")
    removed = store.delete(task_id)
    assert removed.id == task_id
    assert task_id not in store
    assert store.delete(task_id) is None


def test_move_to_folder_accepts_any_name(store):
    task_id = store.add("Write report", "Work")
    assert store.move_to_folder(task_id, "Does not exist")
    assert store.get(task_id).folder == "Does not exist"
    assert store.move_to_folder(task_id, None)
    assert store.get(task_id).folder is None
    assert not store.move_to_folder("missing", "Work")


def test_apply_action_dispatches_to_engine(store, clock):
    task_id = store.add("Write report")
    assert store.apply_action(task_id, TaskAction.START)
    clock.advance(5)
    assert store.apply_action(task_id, TaskAction.PAUSE)
    assert store.get(task_id).total_duration == 5
    assert not store.apply_action(task_id, TaskAction.PAUSE)
    assert store.apply_action(task_id, TaskAction.RESUME)
    clock.advance(5)
    assert store.apply_action(task_id, TaskAction.COMPLETE)
    assert store.get(task_id).state == TaskState.COMPLETED
    assert store.current_duration(task_id) == 10


def test_apply_action_unknown_task(store):
    with pytest.raises(KeyError):
        store.apply_action("missing", TaskAction.START)


def test_tasks_by_folder_groups_in_insertion_order(store):
    a = store.add("A", "Work")
    b = store.add("B")
    c = store.add("C", "Work")
    d = store.add("D", "Home")
    assert store.tasks_by_folder() == {
        "Work": [a, c],
        UNCATEGORIZED: [b],
        "Home": [d],
    }


def test_remove_folder_tasks_only_touches_that_folder(store):
    keep_home = store.add("Dishes", "Home")
    keep_none = store.add("Loose end")
    for name in ("One", "Two", "Three"):
        store.add(name, "Work")

    removed = store.remove_folder_tasks("Work")

    assert sorted(t.description for t in removed) == ["One", "Three", "Two"]
    assert [t.id for t in store.all()] == [keep_home, keep_none]


def test_load_replaces_collection(store):
    store.add("Old")
    other = TaskStore()
    new_id = other.add("New")
    store.load(other.snapshot())
    assert [t.id for t in store.all()] == [new_id]
