from __future__ import annotations

from typing import Any, Optional


class ResolutionError(RuntimeError):
    """Base error for a query/mutation that could not be resolved."""

    code = "INTERNAL_SERVER_ERROR"
    http_status = 500

    def __init__(self, message: str, details: Optional[list[dict[str, Any]]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or []

    def to_payload(self) -> dict[str, Any]:
        extensions: dict[str, Any] = {"code": self.code}
        if self.details:
            extensions["details"] = self.details
        return {"message": self.message, "extensions": extensions}


class InputValidationError(ResolutionError):
    """A required argument is missing, null or of the wrong type."""

    code = "BAD_USER_INPUT"
    http_status = 400


class UnknownOperationError(ResolutionError):
    """The requested operation name is not part of the schema."""

    code = "UNKNOWN_OPERATION"
    http_status = 400


class InternalError(ResolutionError):
    """Unexpected failure while resolving a single request."""
