"""
Form Intake Service — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions raised by the service layer.
How:   Each exception carries a message and an optional context dict. Global
       handlers registered in main.py turn them into the JSON failure envelope
       `{"success": false, "message": ..., "error": ...}`.

Exception Hierarchy:
    IntakeError (base)
    └── DatabaseError            → 500 Internal Server Error

Only insert failures reach the caller. Table-creation and mail errors are
logged where they happen and never raised past their own component.
"""

from typing import Any, Dict, Optional


class IntakeError(Exception):
    """
    Base exception for all Form Intake Service errors.

    Attributes:
        message:  Short caller-facing description
        context:  Extra debugging info, logged server-side
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class DatabaseError(IntakeError):
    """
    Raised when persisting a submission fails.

    When:    Connection refused, constraint violation, lost connection mid-insert.
    HTTP:    500 Internal Server Error

    The driver's own message travels in `error` and is returned to the caller
    as-is; the transaction has already been rolled back when this is raised.
    """

    def __init__(
        self,
        error: str,
        message: str = "Database error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.error = error
