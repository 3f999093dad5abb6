"""Conversation data models."""
from dataclasses import dataclass
from datetime import datetime
from typing import List

USER_ROLE = "user"
MODEL_ROLE = "model"


@dataclass
class ChatMessage:
    """One entry of the chat transcript."""
    role: str  # "user" or "model"
    content: str
    timestamp: datetime


@dataclass
class ChatSession:
    """Chat transcript about one uploaded document."""
    conversation_id: str
    document_name: str
    messages: List[ChatMessage]
    created_at: datetime
