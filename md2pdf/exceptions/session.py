"""Session-related exceptions."""

from typing import Any, Dict, Optional

from md2pdf.exceptions.base import Md2PdfError


class InvalidSessionStateError(Md2PdfError):
    """Raised when the session is in an invalid state for the requested operation."""

    default_code = "INVALID_SESSION_STATE"

    def __init__(self, state: str, operation: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            f"Cannot {operation}: session is already {state.lower()}",
            details={"state": state, "operation": operation, **(details or {})},
        )
        self.state = state
        self.operation = operation
