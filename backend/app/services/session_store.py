"""
In-memory session bookkeeping for the chat API.

Maps session ids to ConversationContext objects. Each session has its own lock
so that two turns of the same conversation never run at the same time, while
different sessions proceed in parallel.
"""

import logging
import threading
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from agents.intent_classifier import EntityExtractor
from agents.orchestrator import ConversationContext

logger = logging.getLogger(__name__)


@dataclass
class _Session:
    context: ConversationContext
    lock: threading.Lock = field(default_factory=threading.Lock)
    last_seen: float = field(default_factory=time.monotonic)


class SessionStore:
    """Thread-safe store of conversations with idle expiry."""

    def __init__(self, ttl_seconds: int = 3600, context_window: int = 10):
        self.ttl_seconds = ttl_seconds
        self.context_window = context_window
        self._sessions: Dict[str, _Session] = {}
        self._lock = threading.Lock()
        self._extractor = EntityExtractor()

    def _evict_expired(self, now: float) -> None:
        expired = [sid for sid, s in self._sessions.items() if now - s.last_seen > self.ttl_seconds]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.info(f"Evicted {len(expired)} idle sessions")

    def _get_or_create(self, session_id: Optional[str], seed: Optional[List[Dict[str, str]]]) -> _Session:
        with self._lock:
            now = time.monotonic()
            self._evict_expired(now)

            session_id = session_id or str(uuid.uuid4())
            session = self._sessions.get(session_id)
            if session is None:
                context = ConversationContext(conversation_id=session_id, context_window=self.context_window)
                for message in seed or []:
                    context.add_message(message["role"], message["content"])
                    if message["role"] == "user":
                        context.remember(self._extractor.extract(message["content"]))
                session = _Session(context=context)
                self._sessions[session_id] = session
                logger.info(f"Created session {session_id}")

            session.last_seen = now
            return session

    @contextmanager
    def session(
        self,
        session_id: Optional[str] = None,
        seed: Optional[List[Dict[str, str]]] = None
    ) -> Iterator[ConversationContext]:
        """
        Hold a session for the duration of one turn.

        `seed` (earlier role/content messages) only applies to new sessions.
        """
        session = self._get_or_create(session_id, seed)
        with session.lock:
            yield session.context
            session.last_seen = time.monotonic()

    def get(self, session_id: str) -> Optional[ConversationContext]:
        with self._lock:
            session = self._sessions.get(session_id)
            return session.context if session else None

    def reset(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
