"""
Centralized error handling for the application.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Dict, Any, List


class TranscriptErrorCode(str, Enum):
    """Failure kinds reported by the transcript source."""
    INVALID_URL = "INVALID_URL"
    VIDEO_NOT_FOUND = "VIDEO_NOT_FOUND"
    NO_CAPTIONS_AVAILABLE = "NO_CAPTIONS_AVAILABLE"
    LANGUAGE_NOT_AVAILABLE = "LANGUAGE_NOT_AVAILABLE"
    PRIVATE_VIDEO = "PRIVATE_VIDEO"
    REGION_BLOCKED = "REGION_BLOCKED"
    NETWORK_ERROR = "NETWORK_ERROR"
    RATE_LIMITED = "RATE_LIMITED"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class CompletionErrorCode(str, Enum):
    """Failure kinds reported by the completion service."""
    API_KEY_INVALID = "API_KEY_INVALID"
    RATE_LIMITED = "RATE_LIMITED"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    MODEL_NOT_FOUND = "MODEL_NOT_FOUND"
    CONTENT_FILTERED = "CONTENT_FILTERED"
    NETWORK_ERROR = "NETWORK_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


# Failures that say something about the video itself; trying another
# caption language cannot help.
VIDEO_LEVEL_ERRORS = frozenset({
    TranscriptErrorCode.VIDEO_NOT_FOUND,
    TranscriptErrorCode.PRIVATE_VIDEO,
    TranscriptErrorCode.REGION_BLOCKED,
    TranscriptErrorCode.NO_CAPTIONS_AVAILABLE,
})

_TRANSCRIPT_STATUS = {
    TranscriptErrorCode.INVALID_URL: 400,
    TranscriptErrorCode.VIDEO_NOT_FOUND: 404,
    TranscriptErrorCode.NO_CAPTIONS_AVAILABLE: 404,
    TranscriptErrorCode.LANGUAGE_NOT_AVAILABLE: 404,
    TranscriptErrorCode.PRIVATE_VIDEO: 403,
    TranscriptErrorCode.REGION_BLOCKED: 403,
    TranscriptErrorCode.RATE_LIMITED: 429,
    TranscriptErrorCode.NETWORK_ERROR: 502,
}

_COMPLETION_STATUS = {
    CompletionErrorCode.API_KEY_INVALID: 401,
    CompletionErrorCode.RATE_LIMITED: 429,
    CompletionErrorCode.QUOTA_EXCEEDED: 402,
    CompletionErrorCode.MODEL_NOT_FOUND: 404,
    CompletionErrorCode.CONTENT_FILTERED: 400,
    CompletionErrorCode.NETWORK_ERROR: 503,
}


class TubeChatError(Exception):
    """Base class for errors that map onto a structured API response."""

    code: str = "INTERNAL_ERROR"
    status_code: int = 500
    error: str = "Internal server error"

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details if details is not None else message

    def suggestions(self) -> List[str]:
        return [
            "Try again in a few moments",
            "Check your internet connection",
            "Contact support if the issue persists",
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.error,
            "code": self.code,
            "details": self.details,
            "suggestions": self.suggestions(),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }


class TranscriptError(TubeChatError):
    """Raised when captions cannot be fetched for a video."""

    error = "Failed to fetch video transcript"

    def __init__(
        self,
        message: str,
        code: TranscriptErrorCode,
        video_id: Optional[str] = None,
        language: Optional[str] = None,
    ):
        super().__init__(message)
        self.kind = code
        self.code = code.value
        self.status_code = get_status_code_for_transcript_error(code)
        self.video_id = video_id
        self.language = language

    @property
    def is_video_level(self) -> bool:
        return self.kind in VIDEO_LEVEL_ERRORS

    def suggestions(self) -> List[str]:
        return get_suggestions_for_transcript_error(self.kind)

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload["video_id"] = self.video_id
        payload["language"] = self.language
        return payload


class CompletionError(TubeChatError):
    """Raised when the language model call fails."""

    error = "Failed to generate AI response"

    def __init__(self, message: str, code: CompletionErrorCode, status_code: Optional[int] = None):
        super().__init__(message)
        self.kind = code
        self.code = code.value
        self.status_code = status_code or _COMPLETION_STATUS.get(code, 500)

    def suggestions(self) -> List[str]:
        return get_suggestions_for_completion_error(self.kind)


class SessionNotFoundError(TubeChatError):
    code = "SESSION_NOT_FOUND"
    status_code = 404
    error = "Session not found"

    def __init__(self, session_id: str):
        super().__init__(f"No chat session found with ID: {session_id}")
        self.session_id = session_id


class SessionValidationError(TubeChatError):
    code = "INVALID_SESSION"
    status_code = 400
    error = "Invalid session data"

    def __init__(self, errors: List[str]):
        super().__init__("Session failed validation", details=errors)
        self.errors = errors


class InputValidationError(TubeChatError):
    code = "VALIDATION_ERROR"
    status_code = 400
    error = "Validation failed"

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors), details=errors)
        self.errors = errors

    def suggestions(self) -> List[str]:
        return ["Correct the listed fields and resend the request"]


def get_status_code_for_transcript_error(code: TranscriptErrorCode) -> int:
    """Get appropriate HTTP status code for a transcript error kind."""
    return _TRANSCRIPT_STATUS.get(code, 500)


def get_suggestions_for_transcript_error(code: TranscriptErrorCode) -> List[str]:
    """Get helpful suggestions based on transcript error kind."""
    if code == TranscriptErrorCode.NO_CAPTIONS_AVAILABLE:
        return [
            "Try a different video that has captions enabled",
            "Check if the video has auto-generated captions",
            "Contact the video creator to add captions",
        ]
    if code == TranscriptErrorCode.LANGUAGE_NOT_AVAILABLE:
        return [
            "Try using English (en) as it's most commonly available",
            "Enable fallback languages in your request",
            "Check available languages for this video",
        ]
    if code == TranscriptErrorCode.PRIVATE_VIDEO:
        return [
            "Ensure the video is public",
            "Check if you have permission to access this video",
            "Try a different public video",
        ]
    if code == TranscriptErrorCode.REGION_BLOCKED:
        return [
            "Try accessing from a different region",
            "Try a different video that's available in your region",
        ]
    if code == TranscriptErrorCode.RATE_LIMITED:
        return [
            "Wait a few minutes before trying again",
            "Reduce the frequency of requests",
        ]
    return [
        "Try again in a few moments",
        "Check your internet connection",
        "Verify the YouTube URL is correct",
    ]


def get_suggestions_for_completion_error(code: CompletionErrorCode) -> List[str]:
    """Get helpful suggestions based on completion error kind."""
    if code == CompletionErrorCode.API_KEY_INVALID:
        return [
            "Verify your API key is correct",
            "Ensure the API key is properly set in environment variables",
        ]
    if code == CompletionErrorCode.RATE_LIMITED:
        return [
            "Wait a few moments before trying again",
            "Try using a different model if available",
        ]
    if code == CompletionErrorCode.QUOTA_EXCEEDED:
        return [
            "Check your billing and usage limits",
            "Monitor your API usage in the provider dashboard",
        ]
    if code == CompletionErrorCode.CONTENT_FILTERED:
        return [
            "Rephrase your question to avoid potentially sensitive content",
            "Focus on factual questions about the video transcript",
        ]
    if code == CompletionErrorCode.MODEL_NOT_FOUND:
        return ["Check the model name and try again"]
    return [
        "Try again in a few moments",
        "Check your internet connection",
        "Contact support if the issue persists",
    ]
