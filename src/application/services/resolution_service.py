from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional, Type

from pydantic import BaseModel, ConfigDict, StrictStr, ValidationError

from src.application.errors import (
    InputValidationError,
    InternalError,
    ResolutionError,
    UnknownOperationError,
)
from src.domain.entities.todo import Todo
from src.logging_config import LOG_NAME
from src.repositories.todos import TodosRepo

logger = logging.getLogger(LOG_NAME)


class _Args(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class NoArgs(_Args):
    pass


class TodoArgs(_Args):
    id: StrictStr


class AddTodoArgs(_Args):
    description: StrictStr


class UpdateTodoArgs(_Args):
    id: StrictStr
    description: StrictStr


class ResolutionService:
    """Resolve the todo schema's named queries and mutations.

    Queries: ``todos``, ``todo(id)``. Mutations: ``addTodo(description)``,
    ``updateTodo(id, description)``. Arguments are validated before the
    repository is touched; a missing todo is returned as a shell with no
    description rather than an error.
    """

    def __init__(self, repo: TodosRepo) -> None:
        self._repo = repo
        self._operations: dict[str, tuple[Type[_Args], Callable[[Any], Any]]] = {
            "todos": (NoArgs, lambda args: self.todos()),
            "todo": (TodoArgs, lambda args: self.todo(args.id)),
            "addTodo": (AddTodoArgs, lambda args: self.add_todo(args.description)),
            "updateTodo": (
                UpdateTodoArgs,
                lambda args: self.update_todo(args.id, args.description),
            ),
        }

    @property
    def operations(self) -> list[str]:
        return list(self._operations)

    # Queries
    def todos(self) -> list[Todo]:
        return self._repo.list_all()

    def todo(self, todo_id: str) -> Todo:
        return self._repo.get_by_id(todo_id)

    # Mutations
    def add_todo(self, description: str) -> Todo:
        todo = self._repo.add(description)
        logger.info("Todo added", extra={"todo_id": todo.id})
        return todo

    def update_todo(self, todo_id: str, description: str) -> Todo:
        todo = self._repo.update(todo_id, description)
        logger.info("Todo updated", extra={"todo_id": todo.id})
        return todo

    def resolve(self, operation: str, variables: Optional[Mapping[str, Any]] = None) -> Any:
        """Run ``operation`` and return its JSON-ready result.

        Raises :class:`ResolutionError` subclasses for bad input, unknown
        operations and unexpected failures.
        """

        try:
            args_model, handler = self._operations[operation]
        except KeyError:
            raise UnknownOperationError(f"Unknown operation '{operation}'") from None

        try:
            args = args_model.model_validate(dict(variables or {}))
        except ValidationError as exc:
            details = [
                {"field": ".".join(str(p) for p in err["loc"]), "reason": err["msg"]}
                for err in exc.errors()
            ]
            raise InputValidationError(
                f"Invalid arguments for '{operation}'", details=details
            ) from exc

        try:
            result = handler(args)
        except ResolutionError:
            raise
        except Exception as exc:
            logger.exception("Resolver failed", extra={"operation": operation})
            raise InternalError("Internal error while resolving request") from exc

        if isinstance(result, list):
            return [todo.to_payload() for todo in result]
        return result.to_payload()

    def execute(
        self, operation: str, variables: Optional[Mapping[str, Any]] = None
    ) -> dict[str, Any]:
        """Return a response payload: ``{"data": ...}`` or ``{"data": None, "errors": [...]}``."""

        payload, _ = self.execute_with_status(operation, variables)
        return payload

    def execute_with_status(
        self,
        operation: str,
        variables: Optional[Mapping[str, Any]] = None,
        *,
        request_id: Optional[str] = None,
    ) -> tuple[dict[str, Any], int]:
        """Like :meth:`execute`, also returning the HTTP status for the payload."""

        try:
            result = self.resolve(operation, variables)
        except ResolutionError as exc:
            extra: dict[str, Any] = {"operation": operation, "code": exc.code}
            if request_id is not None:
                extra["request_id"] = request_id
            logger.warning("Request rejected", extra=extra)
            return {"data": None, "errors": [exc.to_payload()]}, exc.http_status
        return {"data": {operation: result}}, 200
