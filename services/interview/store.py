"""
Interview Session Store

Keeps ConversationState between engine calls so the engine itself holds
no session state.

- InMemorySessionStore: process-local dict, optional idle TTL
- RedisSessionStore: JSON in Redis, survives restarts

Usage:
    from services.interview.store import get_session_store

    store = await get_session_store()
    state = await store.get(session_id)
"""

import asyncio
import copy
import json
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from config.settings import settings
from services.interview.state import ConversationState
from utils.cache import get_redis_client, interview_key
from utils.exceptions import SessionStoreError
from utils.logging import get_logger

logger = get_logger(__name__)


class SessionStore(ABC):
    """get / put / remove of interview state by session id."""

    @abstractmethod
    async def get(self, session_id: str) -> Optional[ConversationState]:
        """Return the stored state, or None if unknown or expired."""
        pass

    @abstractmethod
    async def put(self, state: ConversationState) -> None:
        """Insert or replace the state for state.session_id."""
        pass

    @abstractmethod
    async def remove(self, session_id: str) -> bool:
        """Delete a session. Returns True if something was removed."""
        pass

    async def exists(self, session_id: str) -> bool:
        return await self.get(session_id) is not None


class InMemorySessionStore(SessionStore):
    """
    Dict-backed store for a single process.

    Stores serialized copies so callers never share mutable state with
    the store. Sessions are kept forever unless ttl_minutes is given, in
    which case they expire after that much inactivity.
    """

    def __init__(self, ttl_minutes: Optional[int] = None):
        self.ttl_minutes = ttl_minutes
        self._sessions: Dict[str, Dict[str, Any]] = {}

    def _expiry(self) -> Optional[datetime]:
        if self.ttl_minutes is None:
            return None
        return datetime.now() + timedelta(minutes=self.ttl_minutes)

    async def get(self, session_id: str) -> Optional[ConversationState]:
        entry = self._sessions.get(session_id)
        if entry is None:
            return None

        expires_at = entry.get("expires_at")
        if expires_at is not None and expires_at <= datetime.now():
            del self._sessions[session_id]
            logger.debug(f"Session {session_id} expired")
            return None

        return ConversationState.from_dict(copy.deepcopy(entry["data"]))

    async def put(self, state: ConversationState) -> None:
        self._sessions[state.session_id] = {
            "data": copy.deepcopy(state.to_dict()),
            "expires_at": self._expiry(),
        }

    async def remove(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    async def cleanup_expired(self) -> int:
        """Remove expired sessions. Returns count removed."""
        now = datetime.now()
        expired = [
            sid for sid, entry in self._sessions.items()
            if entry.get("expires_at") is not None and entry["expires_at"] <= now
        ]

        for sid in expired:
            del self._sessions[sid]

        if expired:
            logger.info(f"Cleaned up {len(expired)} expired interview sessions")

        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)


class RedisSessionStore(SessionStore):
    """
    Redis-backed store.

    Sessions are JSON strings under interview_key(id). Without a TTL they
    persist until removed; with one, every put refreshes the expiry.
    """

    def __init__(self, redis_client, ttl_minutes: Optional[int] = None):
        self._redis = redis_client
        self.ttl_minutes = ttl_minutes

    def _key(self, session_id: str) -> str:
        return interview_key(session_id)

    async def get(self, session_id: str) -> Optional[ConversationState]:
        try:
            data = await self._redis.get(self._key(session_id))
        except Exception as e:
            logger.error(f"Redis get failed for {session_id}: {e}")
            raise SessionStoreError(details={"operation": "get", "session_id": session_id}) from e

        if not data:
            return None

        try:
            return ConversationState.from_dict(json.loads(data))
        except (json.JSONDecodeError, KeyError, ValueError) as e:
            logger.warning(f"Corrupted session data for '{session_id}': {e}")
            return None

    async def put(self, state: ConversationState) -> None:
        key = self._key(state.session_id)
        payload = json.dumps(state.to_dict())
        try:
            if self.ttl_minutes is None:
                await self._redis.set(key, payload)
            else:
                await self._redis.setex(key, timedelta(minutes=self.ttl_minutes), payload)
        except Exception as e:
            logger.error(f"Redis save failed for {state.session_id}: {e}")
            raise SessionStoreError(details={"operation": "put", "session_id": state.session_id}) from e

    async def remove(self, session_id: str) -> bool:
        try:
            deleted = await self._redis.delete(self._key(session_id))
        except Exception as e:
            logger.error(f"Redis delete failed for {session_id}: {e}")
            raise SessionStoreError(details={"operation": "remove", "session_id": session_id}) from e
        return bool(deleted)


# Singleton instance
_session_store: Optional[SessionStore] = None


async def get_session_store() -> SessionStore:
    """
    Get or create the session store singleton.

    Uses Redis when REDIS_URL is set and reachable, otherwise memory.
    """
    global _session_store
    if _session_store is None:
        redis = await get_redis_client()
        if redis is not None:
            _session_store = RedisSessionStore(redis, ttl_minutes=settings.SESSION_TTL_MINUTES)
            logger.info("Interview sessions stored in Redis")
        else:
            _session_store = InMemorySessionStore(ttl_minutes=settings.SESSION_TTL_MINUTES)
            logger.info("Interview sessions stored in memory")
    return _session_store


def reset_session_store() -> None:
    """Drop the singleton (used on shutdown and in tests)."""
    global _session_store
    _session_store = None


async def sweep_expired_sessions(interval_seconds: float) -> None:
    """
    Periodically drop idle in-memory sessions until cancelled.

    Redis expires keys on its own, so there is nothing to sweep there.
    """
    logger.info(f"Session sweeper running every {interval_seconds:g}s")
    while True:
        await asyncio.sleep(interval_seconds)
        store = await get_session_store()
        if isinstance(store, InMemorySessionStore):
            await store.cleanup_expired()
