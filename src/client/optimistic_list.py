"""Client-side display list with optimistic updates.

A mutation is shown immediately as a provisional record and replaced once the
service answers. Provisional records are matched by the request token handed
out when they were inserted, never by id: every pending add shares the same
placeholder id.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Protocol

from src.domain.entities.todo import Todo
from src.domain.value_objects.ids import TodoId
from src.logging_config import LOG_NAME

PLACEHOLDER_ID = TodoId("temp-id")

logger = logging.getLogger(LOG_NAME)


@dataclass
class _Row:
    todo: Todo
    token: Optional[int] = None

    @property
    def provisional(self) -> bool:
        return self.token is not None


class OptimisticTodoList:
    """Ordered list of todos as displayed, including pending additions."""

    def __init__(self, todos: Iterable[Todo] = ()) -> None:
        self._rows: list[_Row] = [_Row(t) for t in todos]
        self._tokens = itertools.count(1)

    def replace_all(self, todos: Iterable[Todo]) -> None:
        """Install a server snapshot, keeping rows still awaiting a response."""
        pending = [row for row in self._rows if row.provisional]
        self._rows = [_Row(t) for t in todos] + pending

    def begin_add(self, description: str) -> int:
        token = next(self._tokens)
        self._rows.append(_Row(Todo(id=PLACEHOLDER_ID, description=description), token))
        return token

    def resolve_add(self, token: int, todo: Todo) -> None:
        index = self._index_of_token(token)
        if index is None:
            logger.debug("No pending row for token", extra={"token": token})
            self.apply(todo)
            return
        self._rows[index] = _Row(todo)

    def fail_add(self, token: int) -> None:
        index = self._index_of_token(token)
        if index is not None:
            del self._rows[index]

    def apply(self, todo: Todo) -> None:
        """Replace the confirmed row with ``todo.id`` or append it."""
        for i, row in enumerate(self._rows):
            if not row.provisional and row.todo.id == todo.id:
                self._rows[i] = _Row(todo)
                return
        self._rows.append(_Row(todo))

    def snapshot(self) -> list[Todo]:
        return [row.todo for row in self._rows]

    @property
    def pending(self) -> int:
        return sum(1 for row in self._rows if row.provisional)

    def _index_of_token(self, token: int) -> Optional[int]:
        for i, row in enumerate(self._rows):
            if row.token == token:
                return i
        return None


class _ClientProto(Protocol):
    def todos(self) -> list[Todo]: ...

    def add_todo(self, description: str) -> Todo: ...

    def update_todo(self, todo_id: str, description: str) -> Todo: ...


class TodoSession:
    """Drive a :class:`OptimisticTodoList` from a query client."""

    def __init__(self, client: _ClientProto, display: Optional[OptimisticTodoList] = None) -> None:
        self._client = client
        self.display = display or OptimisticTodoList()

    def refresh(self) -> list[Todo]:
        self.display.replace_all(self._client.todos())
        return self.display.snapshot()

    def add(self, description: str) -> Todo:
        token = self.display.begin_add(description)
        try:
            todo = self._client.add_todo(description)
        except Exception:
            self.display.fail_add(token)
            raise
        self.display.resolve_add(token, todo)
        return todo

    def update(self, todo_id: str, description: str) -> Todo:
        todo = self._client.update_todo(todo_id, description)
        self.display.apply(todo)
        return todo
