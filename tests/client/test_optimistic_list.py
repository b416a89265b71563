from __future__ import annotations

import pytest

from src.client.optimistic_list import PLACEHOLDER_ID, OptimisticTodoList, TodoSession
from src.client.query_client import QueryError
from src.domain.entities.todo import Todo
from src.domain.value_objects.ids import TodoId


def _todo(todo_id: str, description: str) -> Todo:
    return Todo(id=TodoId(todo_id), description=description)


def test_placeholder_shown_then_replaced() -> None:
    display = OptimisticTodoList([_todo("a", "first")])
    token = display.begin_add("second")
    assert display.snapshot()[-1] == _todo(PLACEHOLDER_ID, "second")
    assert display.pending == 1

    display.resolve_add(token, _todo("b", "second"))
    assert display.snapshot() == [_todo("a", "first"), _todo("b", "second")]
    assert display.pending == 0


def test_concurrent_adds_matched_by_token_not_id() -> None:
    display = OptimisticTodoList()
    t1 = display.begin_add("one")
    t2 = display.begin_add("two")

    display.resolve_add(t2, _todo("id-2", "two"))
    display.resolve_add(t1, _todo("id-1", "one"))
    assert [t.id for t in display.snapshot()] == ["id-1", "id-2"]


def test_failed_add_is_rolled_back() -> None:
    display = OptimisticTodoList()
    token = display.begin_add("doomed")
    display.fail_add(token)
    assert display.snapshot() == []


def test_apply_replaces_by_id_or_appends() -> None:
    display = OptimisticTodoList([_todo("a", "old")])
    display.apply(_todo("a", "new"))
    display.apply(_todo("b", "other"))
    assert display.snapshot() == [_todo("a", "new"), _todo("b", "other")]


def test_replace_all_keeps_pending_rows() -> None:
    display = OptimisticTodoList([_todo("a", "stale")])
    display.begin_add("pending")
    display.replace_all([_todo("z", "fresh")])
    assert [t.id for t in display.snapshot()] == ["z", PLACEHOLDER_ID]


class _FakeClient:
    def __init__(self) -> None:
        self.fail = False

    def todos(self) -> list[Todo]:
        return [_todo("a", "buy milk")]

    def add_todo(self, description: str) -> Todo:
        if self.fail:
            raise QueryError("down")
        return _todo("new", description)

    def update_todo(self, todo_id: str, description: str) -> Todo:
        return _todo(todo_id, description)


def test_session_flow() -> None:
    client = _FakeClient()
    session = TodoSession(client)
    assert session.refresh() == [_todo("a", "buy milk")]

    session.add("eggs")
    session.update("a", "buy milk and eggs")
    assert session.display.snapshot() == [
        _todo("a", "buy milk and eggs"),
        _todo("new", "eggs"),
    ]

    client.fail = True
    with pytest.raises(QueryError):
        session.add("never")
    assert session.display.pending == 0
    assert len(session.display.snapshot()) == 2
