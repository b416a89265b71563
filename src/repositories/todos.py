from __future__ import annotations

from abc import ABC, abstractmethod

from src.domain.entities.todo import Todo


class TodosRepo(ABC):
    """Repository interface for todo items."""

    @abstractmethod
    def list_all(self) -> list[Todo]:
        """
        Return every live todo. Order is not part of the contract.

        Example:
            >>> repo.list_all()
            [Todo(id='3f2c...', description='buy milk')]
        """

    @abstractmethod
    def get_by_id(self, todo_id: str) -> Todo:
        """
        Fetch a todo by identifier.

        A missing or expired id yields ``Todo(id=todo_id, description=None)``
        instead of an error.

        :param todo_id: Identifier of the todo.
        """

    @abstractmethod
    def add(self, description: str) -> Todo:
        """
        Create a todo under a freshly generated identifier.

        :param description: Text of the new todo.
        :return: The stored record.
        """

    @abstractmethod
    def update(self, todo_id: str, description: str) -> Todo:
        """
        Store ``description`` under ``todo_id``.

        The write is unconditional: an unknown or expired id is created.
        """
