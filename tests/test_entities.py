import pytest
from pydantic import ValidationError

from src.domain.entities.todo import Todo
from src.domain.value_objects.ids import TodoId


def test_todo_payload_and_found() -> None:
    todo = Todo(id=TodoId("a"), description="buy milk")
    assert todo.found
    assert todo.to_payload() == {"id": "a", "description": "buy milk"}


def test_todo_shell_without_description() -> None:
    shell = Todo(id=TodoId("a"))
    assert not shell.found
    assert shell.to_payload() == {"id": "a", "description": None}


def test_todo_is_immutable() -> None:
    todo = Todo(id=TodoId("a"), description="x")
    with pytest.raises(ValidationError):
        todo.description = "y"  # type: ignore[misc]


def test_todo_requires_id() -> None:
    with pytest.raises(ValidationError):
        Todo.model_validate({"description": "x"})
