"""
Chat session lifecycle: creation, mutation, expiry and statistics.
"""

import asyncio
import random
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from tubechat.config import config, chat_config
from tubechat.core.chat.store import SessionStore
from tubechat.core.transcriber import TranscriptFetcher
from tubechat.core.video_info import VideoInfoFetcher, placeholder_title
from tubechat.models.schemas import (
    ChatMessage,
    ChatSession,
    Role,
    SessionStats,
    SessionValidation,
    utc_now,
)
from tubechat.utils.error_handling import SessionNotFoundError, TranscriptError, TranscriptErrorCode
from tubechat.utils.helpers import build_watch_url
from tubechat.utils.logger import logging


def validate_session(session: Any) -> SessionValidation:
    """
    Structural check run before a session is used to build context.

    Returns:
        SessionValidation with any errors found
    """
    errors: List[str] = []

    if session is None:
        return SessionValidation(is_valid=False, errors=["Session is null or undefined"])

    if not isinstance(getattr(session, "id", None), str) or not session.id:
        errors.append("Session ID is missing or invalid")

    if not isinstance(getattr(session, "video_id", None), str) or not session.video_id:
        errors.append("Video ID is missing or invalid")

    if not isinstance(getattr(session, "transcript", None), list):
        errors.append("Transcript is missing or not an array")

    if not isinstance(getattr(session, "messages", None), list):
        errors.append("Messages array is missing or invalid")

    if not isinstance(getattr(session, "created_at", None), datetime):
        errors.append("Created date is missing or invalid")

    return SessionValidation(is_valid=not errors, errors=errors)


def session_stats(session: ChatSession) -> SessionStats:
    """Aggregate read-only statistics for a session."""
    roles = [message.role for message in session.messages]
    duration = session.updated_at - session.created_at
    return SessionStats(
        total_messages=len(roles),
        user_messages=roles.count(Role.USER),
        assistant_messages=roles.count(Role.ASSISTANT),
        transcript_segments=len(session.transcript),
        total_transcript_length=sum(len(segment.text) for segment in session.transcript),
        session_duration_ms=int(duration.total_seconds() * 1000),
        last_activity=session.updated_at,
    )


class SessionManager:
    """Owns chat sessions in a store and manages their lifecycle."""

    def __init__(
        self,
        store: SessionStore,
        transcript_fetcher: Optional[TranscriptFetcher] = None,
        video_info: Optional[VideoInfoFetcher] = None,
    ):
        self.store = store
        self.transcript_fetcher = transcript_fetcher or TranscriptFetcher()
        self.video_info = video_info or VideoInfoFetcher()
        self._locks: Dict[str, asyncio.Lock] = {}

    def lock(self, session_id: str) -> asyncio.Lock:
        """Lock serializing writers of one session."""
        return self._locks.setdefault(session_id, asyncio.Lock())

    def get(self, session_id: Optional[str]) -> Optional[ChatSession]:
        if not session_id:
            return None
        return self.store.get(session_id)

    async def get_or_create(
        self,
        session_id: Optional[str],
        video_id: str,
        language: Optional[str] = None,
        fallback_languages: Optional[List[str]] = None,
        timeout: float = chat_config.TRANSCRIPT_FETCH_TIMEOUT,
    ) -> ChatSession:
        """
        Return the session for ``session_id`` or start a new one for the video.

        A new session fetches the transcript (with language fallback) and the
        video title before it is stored.

        Args:
            session_id: Existing session ID, if any
            video_id: YouTube video ID
            language: Preferred caption language
            fallback_languages: Languages to try after the preferred one
            timeout: Seconds allowed for each of the transcript fetch and title lookup

        Returns:
            The resolved or newly created ChatSession

        Raises:
            TranscriptError: when no transcript could be fetched
        """
        existing = self.get(session_id)
        if existing is not None:
            if existing.video_id != video_id:
                logging.warning(
                    f"Session {existing.id} belongs to video {existing.video_id}, not {video_id}; keeping session video"
                )
            return existing

        language = language or config.DEFAULT_LANGUAGE
        try:
            result = await asyncio.wait_for(
                asyncio.to_thread(
                    self.transcript_fetcher.fetch_with_fallback,
                    video_id,
                    language,
                    fallback_languages,
                ),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            raise TranscriptError(
                f"Timed out fetching transcript for video {video_id}",
                TranscriptErrorCode.NETWORK_ERROR,
                video_id=video_id,
                language=language,
            ) from e

        try:
            title = await asyncio.wait_for(
                asyncio.to_thread(self.video_info.get_title, video_id),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            logging.warning(f"Timed out reading title for video {video_id}")
            title = placeholder_title(video_id)

        now = utc_now()
        session = ChatSession(
            id=str(uuid.uuid4()),
            video_id=video_id,
            video_title=title,
            video_url=build_watch_url(video_id),
            language=result.language,
            transcript=result.segments,
            messages=[],
            created_at=now,
            updated_at=now,
        )
        self.store.set(session)
        logging.info(
            f"Created session {session.id} for video {video_id} with {len(session.transcript)} segments ({result.language})"
        )
        return session

    def append_turn(self, session: ChatSession, message: ChatMessage) -> ChatSession:
        """
        Append a message to the session log and bump ``updated_at``.

        Raises:
            SessionNotFoundError: the session was deleted or reaped meanwhile
        """
        if self.store.get(session.id) is None:
            raise SessionNotFoundError(session.id)
        session.messages.append(message)
        session.updated_at = max(session.updated_at, utc_now())
        self.store.set(session)
        return session

    def delete(self, session_id: str) -> bool:
        self.release_lock(session_id)
        return self.store.delete(session_id)

    def release_lock(self, session_id: str) -> None:
        """Forget a session's lock unless a turn still holds it."""
        lock = self._locks.get(session_id)
        if lock is not None and not lock.locked():
            del self._locks[session_id]

    def reap(self, max_age_ms: int, now: Optional[datetime] = None) -> int:
        """
        Delete every session whose last activity is older than ``max_age_ms``.

        Args:
            max_age_ms: Maximum age in milliseconds
            now: Reference time (defaults to the current time)

        Returns:
            Number of sessions removed
        """
        cutoff = (now or datetime.now(timezone.utc)) - timedelta(milliseconds=max_age_ms)
        removed = 0
        for session in self.store.iterate():
            if session.updated_at < cutoff and self.delete(session.id):
                removed += 1
        return removed

    def maybe_reap(self) -> int:
        """Run the reaper on a random fraction of calls."""
        if random.random() >= chat_config.REAP_PROBABILITY:
            return 0
        removed = self.reap(chat_config.SESSION_MAX_AGE_MS)
        if removed:
            logging.info(f"Cleaned up {removed} old chat sessions")
        return removed

    def stats(self, session: ChatSession) -> SessionStats:
        return session_stats(session)

    def validate(self, session: Any) -> SessionValidation:
        return validate_session(session)
