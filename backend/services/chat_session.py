"""Chat session manager holding per-document chat transcripts in memory."""
import logging
import uuid
from collections import OrderedDict
from datetime import datetime
from typing import Optional

from config import MAX_CHAT_SESSIONS
from models.conversation import ChatMessage, ChatSession, USER_ROLE, MODEL_ROLE
from models.errors import PdfOperationError, NOT_FOUND

logger = logging.getLogger(__name__)


class ChatSessionManager:
    """Keeps the most recently used chat transcripts for the lifetime of the process."""

    def __init__(self, max_sessions: int = MAX_CHAT_SESSIONS):
        """
        Args:
            max_sessions: Upper bound on stored sessions; the least recently
                used session is dropped when a new one would exceed it
        """
        self.max_sessions = max_sessions
        self._sessions: "OrderedDict[str, ChatSession]" = OrderedDict()
        logger.info(f"ChatSessionManager initialized (in-memory, max_sessions={max_sessions})")

    def get_or_create_session(
        self,
        document_name: str,
        conversation_id: Optional[str] = None
    ) -> ChatSession:
        """
        Get existing session or create a new one.

        An unknown conversation_id starts a new session with a fresh ID.
        """
        if conversation_id:
            session = self._sessions.get(conversation_id)
            if session is not None:
                self._sessions.move_to_end(conversation_id)
                logger.info(f"Retrieved existing session: {conversation_id} with {len(session.messages)} messages")
                return session
            logger.warning(f"Session {conversation_id} not found, creating new one")

        session = ChatSession(
            conversation_id=self._generate_conversation_id(),
            document_name=document_name,
            messages=[],
            created_at=datetime.now()
        )
        self._sessions[session.conversation_id] = session
        self._evict()
        logger.info(f"Created new session: {session.conversation_id} for {document_name}")
        return session

    def get_session(self, conversation_id: str) -> ChatSession:
        session = self._sessions.get(conversation_id)
        if session is None:
            raise PdfOperationError.of(
                NOT_FOUND,
                f"Conversation {conversation_id} not found",
                conversation_id=conversation_id
            )
        return session

    def add_user_message(self, conversation_id: str, content: str) -> ChatMessage:
        return self._append(conversation_id, USER_ROLE, content)

    def add_model_message(self, conversation_id: str, content: str) -> ChatMessage:
        return self._append(conversation_id, MODEL_ROLE, content)

    def clear(self, conversation_id: str) -> None:
        """Drop a transcript."""
        if self._sessions.pop(conversation_id, None) is None:
            raise PdfOperationError.of(
                NOT_FOUND,
                f"Conversation {conversation_id} not found",
                conversation_id=conversation_id
            )
        logger.info(f"Cleared session {conversation_id}")

    def __len__(self) -> int:
        return len(self._sessions)

    def _evict(self) -> None:
        while len(self._sessions) > self.max_sessions:
            evicted_id, _ = self._sessions.popitem(last=False)
            logger.info(f"Evicted least recently used session {evicted_id}")

    def _append(self, conversation_id: str, role: str, content: str) -> ChatMessage:
        message = ChatMessage(role=role, content=content, timestamp=datetime.now())
        self.get_session(conversation_id).messages.append(message)
        logger.debug(f"Added {role} message to session {conversation_id}")
        return message

    def _generate_conversation_id(self) -> str:
        return f"conv_{uuid.uuid4().hex[:12]}"
