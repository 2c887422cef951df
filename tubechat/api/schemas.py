from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from tubechat.config import config, chat_config
from tubechat.models.schemas import ChatMessage, OutputFormat, SessionStats, TokenUsage
from tubechat.utils.helpers import is_valid_video_id


def _check_language(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in config.SUPPORTED_LANGUAGES:
        raise ValueError(f"Language '{value}' is not supported")
    return value


class TranscriptRequest(BaseModel):
    """Model for transcript requests."""
    url: str
    lang: str = config.DEFAULT_LANGUAGE
    format: OutputFormat = OutputFormat.DETAILED
    use_fallback: bool = True
    fallback_languages: List[str] = Field(default_factory=lambda: list(config.FALLBACK_LANGUAGES))

    @field_validator("url")
    def validate_url(cls, v):
        if not v or not v.strip():
            raise ValueError("YouTube URL is required")
        return v.strip()

    @field_validator("lang")
    def validate_lang(cls, v):
        return _check_language(v)


class ChatRequest(BaseModel):
    """Model for chat requests."""
    message: str = Field(max_length=chat_config.MAX_MESSAGE_LENGTH)
    video_id: str
    session_id: Optional[str] = None
    model: Optional[str] = None
    temperature: Optional[float] = Field(
        default=None, ge=chat_config.MIN_TEMPERATURE, le=chat_config.MAX_TEMPERATURE
    )
    max_tokens: Optional[int] = Field(default=None, ge=1, le=chat_config.MAX_COMPLETION_TOKENS)
    language: Optional[str] = None
    narrow_context: bool = False

    @field_validator("message")
    def validate_message(cls, v):
        if not v.strip():
            raise ValueError("Message cannot be empty")
        return v

    @field_validator("video_id")
    def validate_video_id(cls, v):
        if not is_valid_video_id(v):
            raise ValueError("Invalid YouTube video ID format")
        return v

    @field_validator("session_id")
    def validate_session_id(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Session ID must be a non-empty string if provided")
        return v

    @field_validator("language")
    def validate_language(cls, v):
        return _check_language(v)


class ChatResponse(BaseModel):
    """Model for chat responses."""
    message: ChatMessage
    session_id: str
    usage: TokenUsage
    model: str


class SessionView(BaseModel):
    """Session fields exposed to clients; the transcript itself is omitted."""
    id: str
    video_id: str
    video_title: str
    video_url: str
    language: Optional[str] = None
    messages: List[ChatMessage]
    created_at: datetime
    updated_at: datetime


class SessionResponse(BaseModel):
    """Model for session detail responses."""
    session: SessionView
    statistics: SessionStats


class DeleteResponse(BaseModel):
    success: bool
    message: str
    timestamp: datetime


class TranscriptResponse(BaseModel):
    """Model for JSON transcript responses."""
    success: bool = True
    video_id: str
    url: str
    requested_language: str
    actual_language: str
    language_name: str
    format: OutputFormat
    used_fallback: bool
    attempted_languages: List[str]
    metadata: Dict[str, Any]
    transcript: Any
