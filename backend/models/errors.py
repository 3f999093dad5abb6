"""Typed failures for document operations."""
from dataclasses import dataclass, field
from typing import Any, Dict

MALFORMED_DOCUMENT = "MALFORMED_DOCUMENT"
EMPTY_INPUT = "EMPTY_INPUT"
EMPTY_DOCUMENT = "EMPTY_DOCUMENT"
BUSY = "BUSY"
NOT_FOUND = "NOT_FOUND"
UNSUPPORTED_MEDIA = "UNSUPPORTED_MEDIA"
UNRENDERABLE_TEXT = "UNRENDERABLE_TEXT"


@dataclass
class PdfError:
    """Structured error from a document operation."""
    code: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)


class PdfOperationError(Exception):
    """Raised when a document operation fails; carries a PdfError."""

    def __init__(self, error: PdfError):
        self.error = error
        super().__init__(error.message)

    @classmethod
    def of(cls, code: str, message: str, **details: Any) -> "PdfOperationError":
        return cls(PdfError(code=code, message=message, details=details))
