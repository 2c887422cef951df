"""
Data models for the YouTube transcript chat application.
"""
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, List

from pydantic import BaseModel, Field, computed_field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(seconds: float, always_hours: bool = False, decimal_marker: str = ".") -> str:
    """
    Render seconds as HH:MM:SS.mmm (MM:SS.mmm when under an hour).

    Args:
        seconds: Time offset in seconds
        always_hours: Always include the hours field (subtitle cue style)
        decimal_marker: Separator between seconds and milliseconds

    Returns:
        Formatted time string
    """
    total_ms = int(round(max(seconds, 0.0) * 1000))
    hours, remainder = divmod(total_ms, 3_600_000)
    minutes, remainder = divmod(remainder, 60_000)
    secs, millis = divmod(remainder, 1000)

    if hours > 0 or always_hours:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}{decimal_marker}{millis:03d}"
    return f"{minutes:02d}:{secs:02d}{decimal_marker}{millis:03d}"


class Role(str, Enum):
    """Roles a chat message can carry."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class OutputFormat(str, Enum):
    """Output formats for a rendered transcript."""
    DETAILED = "detailed"
    SIMPLE = "simple"
    TEXT_ONLY = "text_only"
    SRT = "srt"
    VTT = "vtt"
    SEGMENTS = "segments"


class TranscriptSegment(BaseModel):
    """One timed caption unit."""
    start: float = Field(ge=0)
    duration: float = Field(ge=0)
    text: str

    model_config = {"frozen": True}

    @computed_field
    @property
    def end(self) -> float:
        return self.start + self.duration

    @computed_field
    @property
    def start_time(self) -> str:
        return format_timestamp(self.start)

    @computed_field
    @property
    def end_time(self) -> str:
        return format_timestamp(self.end)


class ChatMessage(BaseModel):
    """A single message in a session log. Never edited after creation."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    role: Role
    content: str
    timestamp: datetime = Field(default_factory=utc_now)
    video_id: Optional[str] = None
    video_title: Optional[str] = None

    model_config = {"frozen": True}


class ContextMessage(BaseModel):
    """The role/content projection handed to the language model."""
    role: Role
    content: str


class ChatSession(BaseModel):
    """One video plus its conversation, kept for the process lifetime."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    video_id: str
    video_title: str
    video_url: str
    language: Optional[str] = None
    transcript: List[TranscriptSegment] = Field(default_factory=list)
    messages: List[ChatMessage] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class SessionStats(BaseModel):
    """Read-only aggregates over a session."""
    total_messages: int
    user_messages: int
    assistant_messages: int
    transcript_segments: int
    total_transcript_length: int
    session_duration_ms: int
    last_activity: datetime


class SessionValidation(BaseModel):
    """Outcome of a structural session check."""
    is_valid: bool
    errors: List[str] = Field(default_factory=list)


class TokenUsage(BaseModel):
    """Token counters reported by the completion service."""
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class CompletionResult(BaseModel):
    """Generated text plus usage from one completion call."""
    text: str
    usage: TokenUsage = Field(default_factory=TokenUsage)
    model_used: str

    model_config = {"protected_namespaces": ()}


class TranscriptResult(BaseModel):
    """A fetched transcript and the language it was found in."""
    segments: List[TranscriptSegment]
    language: str
    language_name: str
    attempted_languages: List[str] = Field(default_factory=list)


class ChatTurnResult(BaseModel):
    """Outcome of one successful chat turn."""
    message: ChatMessage
    session_id: str
    usage: TokenUsage
    model: str
