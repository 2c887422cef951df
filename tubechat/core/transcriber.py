"""
Module for fetching YouTube caption transcripts.
"""

from typing import Any, List, Optional

import requests
from retry.api import retry_call
from youtube_transcript_api import (
    AgeRestricted,
    CouldNotRetrieveTranscript,
    InvalidVideoId,
    IpBlocked,
    NoTranscriptFound,
    RequestBlocked,
    TranscriptsDisabled,
    VideoUnavailable,
    VideoUnplayable,
    YouTubeRequestFailed,
    YouTubeTranscriptApi,
)

from tubechat.config import config, chat_config
from tubechat.core.formatter import format_segments
from tubechat.models.schemas import TranscriptResult, TranscriptSegment
from tubechat.utils.error_handling import TranscriptError, TranscriptErrorCode
from tubechat.utils.logger import logging

TRANSIENT_ERRORS = (requests.exceptions.ConnectionError, requests.exceptions.Timeout)


def classify_transcript_error(error: Exception, video_id: str, language: str) -> TranscriptError:
    """
    Map a transcript library failure onto a TranscriptError.

    Args:
        error: Exception raised while fetching
        video_id: Video ID for context
        language: Language for context

    Returns:
        Structured TranscriptError
    """
    if isinstance(error, TranscriptError):
        return error

    def _error(message: str, code: TranscriptErrorCode) -> TranscriptError:
        return TranscriptError(message, code, video_id=video_id, language=language)

    if isinstance(error, (VideoUnavailable, InvalidVideoId)):
        return _error(f"Video {video_id} is not available or does not exist", TranscriptErrorCode.VIDEO_NOT_FOUND)

    if isinstance(error, TranscriptsDisabled):
        return _error(f"No captions available for video {video_id}", TranscriptErrorCode.NO_CAPTIONS_AVAILABLE)

    if isinstance(error, NoTranscriptFound):
        return _error(
            f"Language '{language}' not available for video {video_id}",
            TranscriptErrorCode.LANGUAGE_NOT_AVAILABLE,
        )

    if isinstance(error, AgeRestricted):
        return _error(f"Video {video_id} is private or restricted", TranscriptErrorCode.PRIVATE_VIDEO)

    if isinstance(error, VideoUnplayable):
        # The library only exposes YouTube's free-text reason here
        reason = " ".join([str(getattr(error, "reason", "") or "")] + [str(r) for r in getattr(error, "sub_reasons", [])])
        if "country" in reason.lower() or "region" in reason.lower():
            return _error(f"Video {video_id} is blocked in your region", TranscriptErrorCode.REGION_BLOCKED)
        return _error(f"Video {video_id} is private or restricted", TranscriptErrorCode.PRIVATE_VIDEO)

    if isinstance(error, (IpBlocked, RequestBlocked)):
        return _error(
            f"Rate limited while fetching transcript for video {video_id}",
            TranscriptErrorCode.RATE_LIMITED,
        )

    if isinstance(error, YouTubeRequestFailed):
        if "429" in str(getattr(error, "reason", "")):
            return _error(
                f"Rate limited while fetching transcript for video {video_id}",
                TranscriptErrorCode.RATE_LIMITED,
            )
        return _error(
            f"Network error while fetching transcript for video {video_id}",
            TranscriptErrorCode.NETWORK_ERROR,
        )

    if isinstance(error, requests.exceptions.RequestException):
        return _error(
            f"Network error while fetching transcript for video {video_id}",
            TranscriptErrorCode.NETWORK_ERROR,
        )

    if isinstance(error, CouldNotRetrieveTranscript):
        return _error(
            f"Failed to fetch transcript for video {video_id} in language {language}",
            TranscriptErrorCode.UNKNOWN_ERROR,
        )

    return _error(
        f"Failed to fetch transcript for video {video_id} in language {language}: {error}",
        TranscriptErrorCode.UNKNOWN_ERROR,
    )


class TranscriptFetcher:
    """Class to handle caption retrieval for YouTube videos."""

    def __init__(self, client: Optional[YouTubeTranscriptApi] = None):
        """
        Initialize the fetcher.

        Args:
            client: Transcript API client (a default one is created if None)
        """
        self.client = client or YouTubeTranscriptApi()

    def _fetch_raw(self, video_id: str, language: str) -> Any:
        return retry_call(
            self.client.fetch,
            fargs=[video_id],
            fkwargs={"languages": [language]},
            exceptions=TRANSIENT_ERRORS,
            tries=chat_config.TRANSCRIPT_FETCH_RETRIES,
            delay=chat_config.TRANSCRIPT_FETCH_RETRY_DELAY,
            backoff=chat_config.TRANSCRIPT_FETCH_BACKOFF,
            logger=logging,
        )

    def fetch(self, video_id: str, language: str = config.DEFAULT_LANGUAGE) -> List[TranscriptSegment]:
        """
        Fetch captions for a video in one language.

        Args:
            video_id: YouTube video ID
            language: Language code

        Returns:
            Ordered transcript segments

        Raises:
            TranscriptError: classified failure
        """
        try:
            captions = self._fetch_raw(video_id, language)
        except Exception as e:
            raise classify_transcript_error(e, video_id, language) from e

        segments = format_segments(captions)
        if not segments:
            raise TranscriptError(
                f"No captions found for video {video_id} in language {language}",
                TranscriptErrorCode.NO_CAPTIONS_AVAILABLE,
                video_id=video_id,
                language=language,
            )
        return segments

    def fetch_with_fallback(
        self,
        video_id: str,
        preferred_language: str = config.DEFAULT_LANGUAGE,
        fallback_languages: Optional[List[str]] = None,
    ) -> TranscriptResult:
        """
        Fetch captions, trying fallback languages in order.

        Stops at the first success. Video-level failures (not found,
        private, region blocked, no captions at all) are raised at once
        without trying further languages.

        Args:
            video_id: YouTube video ID
            preferred_language: Language tried first
            fallback_languages: Languages tried afterwards, in order

        Returns:
            TranscriptResult with the language actually used
        """
        if fallback_languages is None:
            fallback_languages = config.FALLBACK_LANGUAGES

        languages = [preferred_language] + [lang for lang in fallback_languages if lang != preferred_language]
        attempted = []

        for language in languages:
            attempted.append(language)
            try:
                segments = self.fetch(video_id, language)
            except TranscriptError as e:
                if e.is_video_level:
                    raise
                logging.info(f"Failed to fetch transcript for {video_id} in {language} ({e.code}), trying next language...")
                continue

            return TranscriptResult(
                segments=segments,
                language=language,
                language_name=config.SUPPORTED_LANGUAGES.get(language, language),
                attempted_languages=attempted,
            )

        raise TranscriptError(
            f"No transcript available for video {video_id} in any of the attempted languages: {', '.join(languages)}",
            TranscriptErrorCode.LANGUAGE_NOT_AVAILABLE,
            video_id=video_id,
            language=preferred_language,
        )
