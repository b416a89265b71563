from __future__ import annotations

from typing import List

import pytest

from src.client.query_client import QueryError
from src.domain.entities.todo import Todo
from src.domain.value_objects.ids import TodoId


class _FakeClient:
    def __init__(self, rows: List[Todo]) -> None:
        self.rows = rows
        self.calls: List[str] = []

    def todos(self) -> List[Todo]:
        self.calls.append("todos")
        return self.rows

    def todo(self, todo_id: str) -> Todo:
        self.calls.append(f"todo:{todo_id}")
        for t in self.rows:
            if t.id == todo_id:
                return t
        return Todo(id=TodoId(todo_id))

    def add_todo(self, description: str) -> Todo:
        self.calls.append(f"add:{description}")
        return Todo(id=TodoId("new"), description=description)

    def update_todo(self, todo_id: str, description: str) -> Todo:
        self.calls.append(f"update:{todo_id}")
        raise QueryError("Invalid arguments", code="BAD_USER_INPUT")


@pytest.fixture
def fake(monkeypatch: pytest.MonkeyPatch) -> _FakeClient:
    import src.cli.todos as todos_cli

    client = _FakeClient([Todo(id=TodoId("a"), description="buy milk")])
    monkeypatch.setattr(todos_cli, "QueryClient", lambda base_url=None: client)
    return client


def test_cli_list(fake: _FakeClient, capsys: pytest.CaptureFixture[str]) -> None:
    import src.cli.todos as todos_cli

    assert todos_cli.main(["list"]) == 0
    assert "a: buy milk" in capsys.readouterr().out
    assert fake.calls == ["todos"]


def test_cli_list_empty(fake: _FakeClient, capsys: pytest.CaptureFixture[str]) -> None:
    import src.cli.todos as todos_cli

    fake.rows = []
    assert todos_cli.main(["list"]) == 0
    assert "No todos." in capsys.readouterr().out


def test_cli_get_missing(fake: _FakeClient, capsys: pytest.CaptureFixture[str]) -> None:
    import src.cli.todos as todos_cli

    assert todos_cli.main(["get", "zzz"]) == 1
    assert "No todo with id zzz" in capsys.readouterr().out


def test_cli_add(fake: _FakeClient, capsys: pytest.CaptureFixture[str]) -> None:
    import src.cli.todos as todos_cli

    assert todos_cli.main(["add", "eggs"]) == 0
    assert "new: eggs" in capsys.readouterr().out
    assert fake.calls == ["add:eggs"]


def test_cli_reports_service_errors(fake: _FakeClient, capsys: pytest.CaptureFixture[str]) -> None:
    import src.cli.todos as todos_cli

    assert todos_cli.main(["update", "a", "x"]) == 2
    assert "Error: Invalid arguments" in capsys.readouterr().out


def test_cli_requires_command() -> None:
    import src.cli.todos as todos_cli

    with pytest.raises(SystemExit):
        todos_cli.main([])
