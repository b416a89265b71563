from __future__ import annotations

import logging
import random
import time
from typing import Any, Mapping, Optional, Protocol, cast

import requests

from src.config.settings import settings
from src.domain.entities.todo import Todo
from src.logging_config import LOG_NAME


class _HasHeaders(Protocol):
    headers: Mapping[str, str]


logger = logging.getLogger(LOG_NAME)

# addTodo creates a new id on every call, so it is never replayed.
_RETRYABLE_OPERATIONS = {"todos", "todo", "updateTodo"}
_RETRYABLE_STATUS = {429, 502, 503, 504}


class QueryError(RuntimeError):
    """Raised when the todo service rejects a request or cannot be reached."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code


class QueryClient:
    """Client for the todo query endpoint with timeout and retries.

    Features:
    - One ``POST`` per operation with ``{"operationName", "variables"}``.
    - Exponential backoff with jitter on 429/502/503/504 and connection
      failures, for idempotent operations only.
    - Errors reported by the service are raised as :class:`QueryError`.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: int = 3,
        backoff_factor: float = 0.5,
    ) -> None:
        self.base_url = (base_url or settings.server_url).rstrip("/") + "/"
        self.timeout = float(timeout if timeout is not None else settings.timeout)
        self.max_retries = int(max_retries)
        self.backoff_factor = float(backoff_factor)

        self._session = requests.Session()
        self._session.headers.update({"Content-Type": "application/json"})

    def execute(self, operation: str, variables: Optional[Mapping[str, Any]] = None) -> Any:
        """POST ``operation`` and return ``data[operation]`` from the response."""

        body = {"operationName": operation, "variables": dict(variables or {})}
        retries = self.max_retries if operation in _RETRYABLE_OPERATIONS else 0
        attempt = 0
        last_error: Optional[Exception] = None

        while attempt <= retries:
            try:
                resp = self._session.request(
                    method="POST", url=self.base_url, json=body, timeout=self.timeout
                )
            except (requests.Timeout, requests.ConnectionError) as exc:
                last_error = exc
                retry_after = self._compute_sleep_seconds(attempt)
                logger.warning(
                    "QueryClient %s exception: %s. Retrying in %.2fs (attempt %d/%d)",
                    operation,
                    type(exc).__name__,
                    retry_after,
                    attempt + 1,
                    retries,
                )
                attempt += 1
                if attempt > retries:
                    break
                time.sleep(retry_after)
                continue

            if resp.status_code in _RETRYABLE_STATUS and attempt < retries:
                retry_after = self._compute_sleep_seconds(attempt, resp)
                logger.warning(
                    "QueryClient %s failed with %s. Retrying in %.2fs (attempt %d/%d)",
                    operation,
                    resp.status_code,
                    retry_after,
                    attempt + 1,
                    retries,
                )
                attempt += 1
                time.sleep(retry_after)
                continue

            return self._unwrap(operation, resp)

        raise QueryError(f"Request failed after retries: {last_error}")

    def todos(self) -> list[Todo]:
        return [Todo.model_validate(item) for item in self.execute("todos") or []]

    def todo(self, todo_id: str) -> Todo:
        return Todo.model_validate(self.execute("todo", {"id": todo_id}))

    def add_todo(self, description: str) -> Todo:
        return Todo.model_validate(self.execute("addTodo", {"description": description}))

    def update_todo(self, todo_id: str, description: str) -> Todo:
        return Todo.model_validate(
            self.execute("updateTodo", {"id": todo_id, "description": description})
        )

    def _unwrap(self, operation: str, resp: requests.Response) -> Any:
        try:
            payload = resp.json()
        except ValueError:
            raise QueryError(
                f"Service error {resp.status_code}: {resp.text[:200]}",
                status_code=resp.status_code,
            ) from None

        errors = payload.get("errors") if isinstance(payload, Mapping) else None
        if errors:
            first = errors[0] if isinstance(errors, list) else {}
            code = (first.get("extensions") or {}).get("code")
            raise QueryError(
                str(first.get("message", "Unknown error")),
                code=code,
                status_code=resp.status_code,
            )
        if not 200 <= resp.status_code < 300:
            raise QueryError(
                f"Service error {resp.status_code}: {resp.text[:200]}",
                status_code=resp.status_code,
            )

        data = payload.get("data") if isinstance(payload, Mapping) else None
        if not isinstance(data, Mapping) or operation not in data:
            raise QueryError(f"Malformed response for '{operation}'", status_code=resp.status_code)
        return data[operation]

    def _compute_sleep_seconds(self, attempt: int, response: Optional[_HasHeaders] = None) -> float:
        """Compute sleep duration for retries.

        - Respect Retry-After header if provided and valid.
        - Otherwise exponential backoff: backoff_factor * (2**attempt) + jitter.
        """
        if response is not None:
            headers = cast(Mapping[str, str], response.headers)
            ra = headers.get("Retry-After")
            if ra:
                try:
                    return max(0.0, float(int(ra)))
                except (TypeError, ValueError):
                    pass

        base: float = float(self.backoff_factor) * float(2**attempt)
        jitter: float = float(random.uniform(0.0, 0.1))
        return float(base + jitter)
