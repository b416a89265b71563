from __future__ import annotations

import uuid
from typing import Callable

from src.domain.entities.todo import Todo
from src.domain.value_objects.ids import TodoId
from src.infrastructure.ttl_cache import TTLCache

from ..todos import TodosRepo


def new_todo_id() -> str:
    return str(uuid.uuid4())


class TodosRepoCache(TodosRepo):
    """:class:`TodosRepo` kept in a :class:`TTLCache` of id -> description.

    Generated ids are not checked against the cache; uuid4 collisions are
    treated as impossible.
    """

    def __init__(
        self,
        cache: TTLCache[str, str],
        id_factory: Callable[[], str] = new_todo_id,
    ) -> None:
        self._cache = cache
        self._id_factory = id_factory

    def list_all(self) -> list[Todo]:
        return [
            Todo(id=TodoId(todo_id), description=description)
            for todo_id, description in self._cache.items()
        ]

    def get_by_id(self, todo_id: str) -> Todo:
        return Todo(id=TodoId(todo_id), description=self._cache.get(todo_id))

    def add(self, description: str) -> Todo:
        todo_id = self._id_factory()
        self._cache.set(todo_id, description)
        return Todo(id=TodoId(todo_id), description=description)

    def update(self, todo_id: str, description: str) -> Todo:
        self._cache.set(todo_id, description)
        return Todo(id=TodoId(todo_id), description=description)
