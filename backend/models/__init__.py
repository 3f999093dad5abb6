"""Data models for OK PDF."""
from .document import PageInfo, PageText, ExtractedText, UploadedFile, ToolOutput, PAGE_DELIMITER
from .conversation import ChatMessage, ChatSession, USER_ROLE, MODEL_ROLE
from .errors import PdfError, PdfOperationError
from .api import ToolInfo, PageGeometry, ExtractResponse, ChatMessageOut, ChatResponse

__all__ = [
    "PageInfo",
    "PageText",
    "ExtractedText",
    "UploadedFile",
    "ToolOutput",
    "PAGE_DELIMITER",
    "ChatMessage",
    "ChatSession",
    "USER_ROLE",
    "MODEL_ROLE",
    "PdfError",
    "PdfOperationError",
    "ToolInfo",
    "PageGeometry",
    "ExtractResponse",
    "ChatMessageOut",
    "ChatResponse",
]
