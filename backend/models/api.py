"""API response models for OK PDF."""
from datetime import datetime
from typing import List

from pydantic import BaseModel


class ToolInfo(BaseModel):
    """One entry of the tool menu."""
    id: str
    title: str
    description: str


class PageGeometry(BaseModel):
    page_number: int
    width: float
    height: float


class ExtractResponse(BaseModel):
    """Extracted text of an uploaded PDF."""
    text: str
    page_count: int
    pages: List[PageGeometry]


class ChatMessageOut(BaseModel):
    role: str
    content: str
    timestamp: datetime


class ChatResponse(BaseModel):
    """Answer to a chat question plus the transcript so far."""
    answer: str
    conversation_id: str
    history: List[ChatMessageOut]
