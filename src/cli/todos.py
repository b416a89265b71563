from __future__ import annotations

import argparse
from typing import Iterable, List, Sequence

from src.client.query_client import QueryClient, QueryError
from src.domain.entities.todo import Todo


def _format_rows(todos: Iterable[Todo]) -> str:
    out_lines: List[str] = []
    for t in todos:
        description = t.description if t.description is not None else "-"
        out_lines.append(f"{t.id}: {description}")
    return "\n".join(out_lines)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Query and mutate todos on a running service")
    p.add_argument("--url", default=None, help="Service URL (defaults to TODO_SERVER_URL)")
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List all todos")

    get = sub.add_parser("get", help="Show one todo")
    get.add_argument("id")

    add = sub.add_parser("add", help="Create a todo")
    add.add_argument("description")

    upd = sub.add_parser("update", help="Replace a todo's description")
    upd.add_argument("id")
    upd.add_argument("description")
    return p


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    client = QueryClient(base_url=args.url)

    try:
        if args.command == "list":
            rows = client.todos()
            if not rows:
                print("No todos.")
                return 0
            print(_format_rows(rows))
        elif args.command == "get":
            todo = client.todo(args.id)
            if not todo.found:
                print(f"No todo with id {args.id}.")
                return 1
            print(_format_rows([todo]))
        elif args.command == "add":
            print(_format_rows([client.add_todo(args.description)]))
        else:
            print(_format_rows([client.update_todo(args.id, args.description)]))
    except QueryError as exc:
        print(f"Error: {exc}")
        return 2
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
