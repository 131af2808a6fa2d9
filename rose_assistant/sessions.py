import threading
from datetime import datetime
from typing import Dict, List, Optional

from . import settings
from .models import ChatMessage, Conversation


class SessionStore:
    """In-memory conversations keyed by phone number.

    Each conversation keeps at most ``max_messages`` turns; once
    ``max_sessions`` conversations exist, the least recently updated one is
    dropped to make room for a new phone number.
    """

    def __init__(
        self,
        default_language: Optional[str] = None,
        max_messages: Optional[int] = None,
        max_sessions: Optional[int] = None,
    ):
        self.default_language = default_language or settings.DEFAULT_LANGUAGE
        self.max_messages = settings.MAX_STORED_MESSAGES if max_messages is None else max_messages
        self.max_sessions = settings.MAX_SESSIONS if max_sessions is None else max_sessions
        self._sessions: Dict[str, Conversation] = {}
        self._lock = threading.Lock()

    def get_or_create(self, phone_number: str) -> Conversation:
        with self._lock:
            conv = self._sessions.get(phone_number)
            if conv is None:
                if self.max_sessions > 0 and len(self._sessions) >= self.max_sessions:
                    stale = min(self._sessions.values(), key=lambda c: c.last_updated)
                    del self._sessions[stale.phone_number]
                conv = Conversation(phone_number=phone_number, language=self.default_language)
                self._sessions[phone_number] = conv
            return conv

    def get(self, phone_number: str) -> Optional[Conversation]:
        return self._sessions.get(phone_number)

    def append(self, phone_number: str, role: str, content: str) -> None:
        conv = self.get_or_create(phone_number)
        with self._lock:
            conv.messages.append(ChatMessage(role=role, content=content))
            if self.max_messages > 0 and len(conv.messages) > self.max_messages:
                del conv.messages[:-self.max_messages]
            conv.last_updated = datetime.utcnow()

    def record_intent(self, phone_number: str, intent: str) -> None:
        conv = self.get_or_create(phone_number)
        with self._lock:
            conv.last_intent = intent
            conv.total_interactions += 1

    def set_language(self, phone_number: str, language: str) -> None:
        conv = self.get_or_create(phone_number)
        with self._lock:
            conv.language = language

    def recent(self, phone_number: str, n: Optional[int] = None) -> List[ChatMessage]:
        """Copy of the last ``n`` turns (default ``HISTORY_WINDOW``)."""
        n = settings.HISTORY_WINDOW if n is None else n
        conv = self._sessions.get(phone_number)
        if conv is None or n <= 0:
            return []
        return [m.model_copy() for m in conv.messages[-n:]]

    def all(self) -> List[Conversation]:
        """Conversations, most recently updated first."""
        return sorted(self._sessions.values(), key=lambda c: c.last_updated, reverse=True)
