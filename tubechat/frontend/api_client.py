"""
API client for communicating with the YouTube transcript chat backend.
"""

import requests
from typing import Dict, List, Any, Optional, Union
from urllib.parse import urljoin
from tubechat.config import config
from tubechat.utils.helpers import extract_video_id


class ApiClient:
    """Client for interacting with the YouTube transcript chat API."""

    def __init__(self, base_url: str = config.PUBLIC_URL, timeout: float = 120):
        """
        Initialize the API client.

        Args:
            base_url: Base URL of the API
            timeout: Seconds to wait for each HTTP response
        """
        self.base_url = base_url
        self.api_base = urljoin(base_url, "/api/v1/")
        self.timeout = timeout

    def _url(self, endpoint: str) -> str:
        """Get the full URL for an endpoint."""
        return urljoin(self.api_base, endpoint)

    def get_transcript(
        self,
        url: str,
        lang: str = config.DEFAULT_LANGUAGE,
        fmt: str = "detailed",
        use_fallback: bool = True,
        fallback_languages: Optional[List[str]] = None,
    ) -> Union[str, Dict[str, Any]]:
        """
        Fetch a video's transcript.

        Args:
            url: YouTube video URL
            lang: Preferred caption language
            fmt: Output format
            use_fallback: Whether other languages may be tried
            fallback_languages: Languages to try after the preferred one

        Returns:
            Plain text for text formats, otherwise the JSON response
        """
        payload: Dict[str, Any] = {"url": url, "lang": lang, "format": fmt, "use_fallback": use_fallback}
        if fallback_languages is not None:
            payload["fallback_languages"] = fallback_languages

        response = requests.post(self._url("transcript"), json=payload, timeout=self.timeout)
        response.raise_for_status()

        if response.headers.get("content-type", "").startswith("application/json"):
            return response.json()
        return response.text

    def chat_with_video(
        self,
        video_id: str,
        message: str,
        session_id: Optional[str] = None,
        **options: Any,
    ) -> Dict[str, Any]:
        """
        Chat with a video based on its transcript.

        Args:
            video_id: YouTube video ID
            message: User message/question
            session_id: Session ID for continuing a conversation
            **options: model, temperature, max_tokens, language, narrow_context

        Returns:
            Dictionary with the assistant message, session ID and usage
        """
        payload = {
            "video_id": video_id,
            "message": message
        }

        if session_id:
            payload["session_id"] = session_id
        payload.update({key: value for key, value in options.items() if value is not None})

        response = requests.post(self._url("chat"), json=payload, timeout=self.timeout)

        response.raise_for_status()
        return response.json()

    def get_session(self, session_id: str) -> Dict[str, Any]:
        """
        Get a chat session with its messages and statistics.

        Returns:
            Session details, or a dict with an error when it does not exist
        """
        response = requests.get(self._url(f"chat/{session_id}"), timeout=self.timeout)

        if response.status_code == 404:
            return {"error": "Session not found"}

        response.raise_for_status()
        return response.json()

    def delete_session(self, session_id: str) -> bool:
        response = requests.delete(self._url(f"chat/{session_id}"), timeout=self.timeout)
        if response.status_code == 404:
            return False
        response.raise_for_status()
        return True

    def extract_video_id(self, url: str) -> Optional[str]:
        """Extract YouTube video ID from a URL."""
        return extract_video_id(url)
