"""
Dependency providers for the API routes.
"""

from functools import lru_cache

from fastapi import Depends

from tubechat.config import config
from tubechat.core.chat.handler import ChatHandler
from tubechat.core.chat.session import SessionManager
from tubechat.core.chat.store import create_session_store
from tubechat.core.completion import CompletionService
from tubechat.core.transcriber import TranscriptFetcher


@lru_cache(maxsize=1)
def get_transcript_fetcher() -> TranscriptFetcher:
    return TranscriptFetcher()


@lru_cache(maxsize=1)
def get_session_manager() -> SessionManager:
    """Process-wide session manager shared by all requests."""
    return SessionManager(create_session_store(config.REDIS_URL), transcript_fetcher=get_transcript_fetcher())


@lru_cache(maxsize=1)
def get_completion_service() -> CompletionService:
    return CompletionService()


def get_chat_handler(
    session_manager: SessionManager = Depends(get_session_manager),
    completion_service: CompletionService = Depends(get_completion_service),
) -> ChatHandler:
    return ChatHandler(session_manager, completion_service)
