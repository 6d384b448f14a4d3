from __future__ import annotations

from typing import Any, Optional


class TaskAPIError(Exception):
    """
    Base for errors that map onto a `{success: false, ...}` JSON response.
    """
    status_code: int = 500
    message: str = "Server error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        self.message = message or self.message

    def to_content(self) -> dict[str, Any]:
        return {"success": False, "error": self.message}


class ValidationError(TaskAPIError):
    status_code = 400
    message = "Validation failed"

    def __init__(self, errors: list[dict[str, Any]], message: Optional[str] = None):
        super().__init__(message)
        self.errors = errors

    def to_content(self) -> dict[str, Any]:
        return {"success": False, "errors": self.errors}


class NotFoundError(TaskAPIError):
    # Also raised when the resource exists but belongs to someone else
    status_code = 404
    message = "Task not found"


class StoreError(TaskAPIError):
    status_code = 500
    message = "Server error"


def format_validation_errors(raw_errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Flatten pydantic error dicts into `{field, message, location}` entries.
    """
    formatted = []
    for err in raw_errors:
        loc = [str(part) for part in err.get("loc", ())]
        location = loc[0] if loc else "body"
        field = ".".join(loc[1:]) if len(loc) > 1 else location
        formatted.append({"field": field, "message": err.get("msg", "Invalid value"), "location": location})
    return formatted
