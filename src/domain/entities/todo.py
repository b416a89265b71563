from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

from ..value_objects.ids import TodoId


class Todo(BaseModel):
    """A todo record.

    ``description`` is ``None`` only for the shell returned when an id is
    looked up but no live entry exists.

    >>> Todo(id=TodoId("a"), description="buy milk").to_payload()
    {'id': 'a', 'description': 'buy milk'}
    """

    id: TodoId
    description: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def found(self) -> bool:
        return self.description is not None

    def to_payload(self) -> dict[str, Optional[str]]:
        return {"id": self.id, "description": self.description}
