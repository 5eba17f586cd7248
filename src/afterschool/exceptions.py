"""Error taxonomy for the lessons API.

``AfterschoolError`` subclasses are rendered by the server as
``{"error": ..., "message": ...}`` with their ``status_code``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class AfterschoolError(Exception):
    """Base error with an HTTP status, a short error tag and a message."""

    status_code = 500
    error = "Internal error"

    def __init__(self, message: str, error: Optional[str] = None) -> None:
        if error is not None:
            self.error = error
        self.message = message
        super().__init__(message)

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.error, "message": self.message}


class ValidationError(AfterschoolError):
    """Caller input is missing or invalid. Never reaches the store."""

    status_code = 400
    error = "Invalid request"

    def __init__(
        self,
        message: str,
        error: Optional[str] = None,
        required: Optional[List[str]] = None,
    ) -> None:
        super().__init__(message, error)
        self.required = required

    def to_body(self) -> Dict[str, Any]:
        body = super().to_body()
        if self.required is not None:
            body["required"] = list(self.required)
        return body


class MissingFieldsError(ValidationError):
    """Raised when an order lacks one of its required fields."""

    error = "Missing required fields"

    def __init__(self, required: List[str], missing: List[str]) -> None:
        super().__init__(
            f"Please provide {_join_fields(required)}",
            required=required,
        )
        self.missing = missing


class InvalidSpacesError(ValidationError):
    error = "Invalid spaces value"

    def __init__(self) -> None:
        super().__init__("Spaces must be a non-negative number")


class NotFoundError(AfterschoolError):
    status_code = 404
    error = "Not found"


class LessonNotFoundError(NotFoundError):
    """Raised when an update targets a lesson ID that does not exist."""

    error = "Lesson not found"

    def __init__(self, lesson_id: str) -> None:
        self.lesson_id = lesson_id
        super().__init__(f"No lesson with id {lesson_id}")


class StoreError(AfterschoolError):
    """A persistence failure, tagged with the operation that failed."""

    status_code = 500


class StartupError(AfterschoolError):
    """Raised when the document store is unreachable at boot."""


# ── Store-level errors (raised by DocumentStore implementations) ──────


class DocumentStoreError(Exception):
    """Raised when the underlying document store fails."""


class InvalidDocumentIdError(DocumentStoreError):
    """Raised when a value cannot be parsed into the store's identity format."""

    def __init__(self, raw: object) -> None:
        self.raw = raw
        super().__init__(f"Invalid document id: {raw!r}")


def _join_fields(fields: List[str]) -> str:
    if len(fields) <= 1:
        return "".join(fields)
    return ", ".join(fields[:-1]) + ", and " + fields[-1]
