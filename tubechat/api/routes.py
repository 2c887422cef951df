"""
API routes for the YouTube transcript chat application.
"""

import asyncio
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Path
from fastapi.responses import PlainTextResponse

from tubechat.api.dependencies import get_chat_handler, get_session_manager, get_transcript_fetcher
from tubechat.api.schemas import (
    ChatRequest,
    ChatResponse,
    DeleteResponse,
    SessionResponse,
    SessionView,
    TranscriptRequest,
    TranscriptResponse,
)
from tubechat.config import config, chat_config
from tubechat.core.chat.handler import ChatHandler
from tubechat.core.chat.session import SessionManager
from tubechat.core.formatter import available_formats, render_output, transcript_metadata
from tubechat.core.transcriber import TranscriptFetcher
from tubechat.models.schemas import OutputFormat, TranscriptResult
from tubechat.utils.error_handling import (
    SessionNotFoundError,
    TranscriptError,
    TranscriptErrorCode,
)
from tubechat.utils.helpers import extract_video_id
from tubechat.utils.logger import logging

router = APIRouter(prefix="/api/v1", tags=["youtube"])

_TEXT_MEDIA_TYPES = {
    OutputFormat.TEXT_ONLY: "text/plain",
    OutputFormat.SRT: "text/plain",
    OutputFormat.VTT: "text/vtt",
}


@router.get("/transcript")
async def transcript_options():
    """Return supported languages, formats and defaults."""
    return {
        "supported_languages": [
            {"code": code, "name": name} for code, name in config.SUPPORTED_LANGUAGES.items()
        ],
        "available_formats": available_formats(),
        "default_language": config.DEFAULT_LANGUAGE,
        "default_format": OutputFormat.DETAILED.value,
        "fallback_languages": config.FALLBACK_LANGUAGES,
    }


@router.post("/transcript", response_model=TranscriptResponse)
async def get_transcript(
    request: TranscriptRequest,
    fetcher: TranscriptFetcher = Depends(get_transcript_fetcher),
):
    """
    Fetch the transcript of a YouTube video in the requested format.

    - text_only, srt and vtt are returned as plain text
    - other formats are returned as JSON with metadata
    """
    video_id = extract_video_id(request.url)
    if not video_id:
        raise TranscriptError("Invalid YouTube URL format", TranscriptErrorCode.INVALID_URL)

    logging.info(f"Fetching transcript for {video_id} ({request.lang}, {request.format.value})")

    if request.use_fallback:
        call = asyncio.to_thread(
            fetcher.fetch_with_fallback, video_id, request.lang, request.fallback_languages
        )
    else:
        call = asyncio.to_thread(fetcher.fetch, video_id, request.lang)

    try:
        fetched = await asyncio.wait_for(call, timeout=chat_config.TRANSCRIPT_FETCH_TIMEOUT)
    except asyncio.TimeoutError as e:
        raise TranscriptError(
            f"Timed out fetching transcript for video {video_id}",
            TranscriptErrorCode.NETWORK_ERROR,
            video_id=video_id,
            language=request.lang,
        ) from e

    if isinstance(fetched, TranscriptResult):
        result = fetched
    else:
        result = TranscriptResult(
            segments=fetched,
            language=request.lang,
            language_name=config.SUPPORTED_LANGUAGES.get(request.lang, request.lang),
            attempted_languages=[request.lang],
        )

    output = render_output(result.segments, request.format)

    if request.format in _TEXT_MEDIA_TYPES:
        headers = {
            "X-Video-ID": video_id,
            "X-Language": result.language,
            "X-Format": request.format.value,
        }
        if request.format in (OutputFormat.SRT, OutputFormat.VTT):
            headers["Content-Disposition"] = f'attachment; filename="{video_id}.{request.format.value}"'
        return PlainTextResponse(output, media_type=_TEXT_MEDIA_TYPES[request.format], headers=headers)

    metadata = transcript_metadata(result.segments)
    metadata["fetched_at"] = datetime.now(timezone.utc).isoformat()

    return TranscriptResponse(
        video_id=video_id,
        url=request.url,
        requested_language=request.lang,
        actual_language=result.language,
        language_name=result.language_name,
        format=request.format,
        used_fallback=request.use_fallback and result.language != request.lang,
        attempted_languages=result.attempted_languages,
        metadata=metadata,
        transcript=output,
    )


@router.post("/chat", response_model=ChatResponse)
async def chat_with_video(
    chat_request: ChatRequest,
    handler: ChatHandler = Depends(get_chat_handler),
):
    """Send a message about a video and get a transcript-grounded reply."""
    result = await handler.handle_turn(
        message=chat_request.message,
        video_id=chat_request.video_id,
        session_id=chat_request.session_id,
        model=chat_request.model,
        temperature=chat_request.temperature,
        max_tokens=chat_request.max_tokens,
        language=chat_request.language,
        narrow_context=chat_request.narrow_context,
    )
    return ChatResponse(
        message=result.message,
        session_id=result.session_id,
        usage=result.usage,
        model=result.model,
    )


@router.get("/chat/{session_id}", response_model=SessionResponse)
async def get_chat_session(
    session_id: str = Path(..., description="Chat session ID"),
    manager: SessionManager = Depends(get_session_manager),
):
    """Get a chat session's messages and statistics."""
    session = manager.get(session_id)
    if session is None:
        raise SessionNotFoundError(session_id)

    return SessionResponse(
        session=SessionView(**session.model_dump(exclude={"transcript"})),
        statistics=manager.stats(session),
    )


@router.delete("/chat/{session_id}", response_model=DeleteResponse)
async def delete_chat_session(
    session_id: str = Path(..., description="Chat session ID"),
    manager: SessionManager = Depends(get_session_manager),
):
    """Delete a chat session."""
    if not manager.delete(session_id):
        raise SessionNotFoundError(session_id)

    logging.info(f"Deleted session {session_id}")
    return DeleteResponse(
        success=True,
        message=f"Session {session_id} deleted successfully",
        timestamp=datetime.now(timezone.utc),
    )
