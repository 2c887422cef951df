"""
Storage backends for chat sessions.

Sessions live in an in-process dictionary by default. When a Redis URL is
configured they are kept in Redis instead, serialized as JSON.
"""

import threading
from abc import ABC, abstractmethod
from typing import Dict, Iterator, Optional

import redis

from tubechat.models.schemas import ChatSession
from tubechat.utils.logger import logging


class SessionStore(ABC):
    """Keyed storage for chat sessions."""

    @abstractmethod
    def get(self, session_id: str) -> Optional[ChatSession]:
        ...

    @abstractmethod
    def set(self, session: ChatSession) -> None:
        ...

    @abstractmethod
    def delete(self, session_id: str) -> bool:
        ...

    @abstractmethod
    def iterate(self) -> Iterator[ChatSession]:
        ...

    def __len__(self) -> int:
        return sum(1 for _ in self.iterate())


class InMemorySessionStore(SessionStore):
    """Process-local store backed by a dictionary."""

    def __init__(self):
        self._sessions: Dict[str, ChatSession] = {}
        self._lock = threading.Lock()

    def get(self, session_id: str) -> Optional[ChatSession]:
        with self._lock:
            return self._sessions.get(session_id)

    def set(self, session: ChatSession) -> None:
        with self._lock:
            self._sessions[session.id] = session

    def delete(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def iterate(self) -> Iterator[ChatSession]:
        # Snapshot so callers may delete while iterating
        with self._lock:
            sessions = list(self._sessions.values())
        return iter(sessions)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


class RedisSessionStore(SessionStore):
    """Store that keeps sessions in Redis as JSON documents."""

    def __init__(self, client: "redis.Redis", prefix: str = "tubechat:session:"):
        self._client = client
        self._prefix = prefix

    def _key(self, session_id: str) -> str:
        return f"{self._prefix}{session_id}"

    def get(self, session_id: str) -> Optional[ChatSession]:
        value = self._client.get(self._key(session_id))
        if not value:
            return None
        return ChatSession.model_validate_json(value)

    def set(self, session: ChatSession) -> None:
        self._client.set(self._key(session.id), session.model_dump_json())

    def delete(self, session_id: str) -> bool:
        return bool(self._client.delete(self._key(session_id)))

    def iterate(self) -> Iterator[ChatSession]:
        for key in self._client.scan_iter(match=f"{self._prefix}*"):
            value = self._client.get(key)
            if value:
                yield ChatSession.model_validate_json(value)


def create_session_store(redis_url: Optional[str] = None) -> SessionStore:
    """
    Build the session store for the application.

    Args:
        redis_url: Redis connection URL; when empty or unreachable an
            in-memory store is used

    Returns:
        A SessionStore instance
    """
    if not redis_url:
        return InMemorySessionStore()

    try:
        client = redis.from_url(redis_url)
        client.ping()
        logging.info("Redis session store configured successfully")
        return RedisSessionStore(client)
    except redis.RedisError as e:
        logging.error(f"Error configuring Redis: {e}")
        logging.info("Falling back to in-memory session store")
        return InMemorySessionStore()
