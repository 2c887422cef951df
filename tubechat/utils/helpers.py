"""
Helper utility functions for the YouTube transcript chat application.
"""

import re
from typing import Optional

VIDEO_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{11}$")

_URL_PATTERN = re.compile(
    r"(?:youtube\.com/(?:[^/]+/.+/|(?:v|e(?:mbed)?|shorts|live)/|.*[?&]v=)|youtu\.be/)([^\"&?/\s]{11})",
    re.IGNORECASE,
)


def extract_video_id(url: str) -> Optional[str]:
    """
    Extract the video ID from a YouTube URL.

    Accepts watch, short-link, embed, shorts and live URLs. A bare
    11-character ID is returned as is.
    """
    if not url:
        return None
    candidate = url.strip()
    if VIDEO_ID_PATTERN.match(candidate):
        return candidate
    match = _URL_PATTERN.search(candidate)
    return match.group(1) if match else None


def is_valid_video_id(video_id: str) -> bool:
    """Check whether a string has the shape of a YouTube video ID."""
    return bool(video_id) and VIDEO_ID_PATTERN.match(video_id) is not None


def build_watch_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id}"


def truncate_text(text: str, max_length: int = 100, suffix: str = "...") -> str:
    """
    Truncate text to a maximum length.

    Args:
        text: Text to truncate
        max_length: Maximum length
        suffix: Suffix to add if truncated

    Returns:
        Truncated text
    """
    if len(text) <= max_length:
        return text
    return text[:max_length - len(suffix)] + suffix
