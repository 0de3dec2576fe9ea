"""Errors raised by the recurring task engine."""
from typing import Any, Dict, Optional


class RecurrenceError(Exception):
    """Base exception for recurring task errors"""

    code = "RECURRENCE_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class InvalidTemplate(RecurrenceError):
    code = "INVALID_TEMPLATE"


class InvalidException(RecurrenceError):
    code = "INVALID_EXCEPTION"


class TemplateNotFound(RecurrenceError):
    code = "TEMPLATE_NOT_FOUND"

    def __init__(self, template_id: int):
        super().__init__(
            f"Recurring task {template_id} not found", {"template_id": template_id}
        )


class ExceptionNotFound(RecurrenceError):
    code = "EXCEPTION_NOT_FOUND"

    def __init__(self, exception_id: int):
        super().__init__(
            f"Recurrence exception {exception_id} not found", {"exception_id": exception_id}
        )


class StorageError(RecurrenceError):
    """The store failed for a reason other than a duplicate occurrence."""

    code = "STORAGE_ERROR"
