"""Conversation store: where compaction reads the active conversation from."""

import logging
import threading
from abc import ABC, abstractmethod

from ..types.types import Conversation

logger = logging.getLogger(__name__)


class ConversationStore(ABC):
    """Access to the conversations of the running agent."""

    @property
    @abstractmethod
    def last_conversation(self) -> Conversation | None:
        """The most recently stored conversation, if any."""

    @abstractmethod
    def get(self, session_id: str) -> Conversation | None:
        pass

    @abstractmethod
    def put(self, conversation: Conversation) -> None:
        pass


class InMemoryConversationStore(ConversationStore):
    """Process-local store keyed by session id."""

    def __init__(self):
        self._conversations: dict[str, Conversation] = {}
        self._last_session_id: str | None = None
        self._lock = threading.Lock()

    @property
    def last_conversation(self) -> Conversation | None:
        with self._lock:
            if self._last_session_id is None:
                return None
            return self._conversations.get(self._last_session_id)

    def get(self, session_id: str) -> Conversation | None:
        with self._lock:
            return self._conversations.get(session_id)

    def put(self, conversation: Conversation) -> None:
        with self._lock:
            self._conversations[conversation.session_id] = conversation
            self._last_session_id = conversation.session_id
        logger.debug("Stored conversation %s", conversation.session_id)

    def remove(self, session_id: str) -> Conversation | None:
        with self._lock:
            conversation = self._conversations.pop(session_id, None)
            if self._last_session_id == session_id:
                self._last_session_id = None
            return conversation
