"""
Configuration for pytest tests.
"""

import os
import shutil
from pathlib import Path

import pytest

# Settings are read when tubechat.config is imported, so set them first
TEST_DATA_DIR = Path("test_data")
os.environ["GROQ_API_KEY"] = os.environ.get("GROQ_API_KEY", "test_api_key")
os.environ["ENVIRONMENT"] = "development"
os.environ["DATA_DIR"] = str(TEST_DATA_DIR)
os.environ["LOGS_DIR"] = str(TEST_DATA_DIR / "logs")
os.environ["REAP_PROBABILITY"] = "0"
os.environ["TRANSCRIPT_FETCH_RETRY_DELAY"] = "0"
os.environ.pop("REDIS_URL", None)

from langchain_core.messages import AIMessage  # noqa: E402

from tubechat.core.chat.session import SessionManager  # noqa: E402
from tubechat.core.chat.store import InMemorySessionStore  # noqa: E402
from tubechat.core.formatter import format_segments  # noqa: E402
from tubechat.models.schemas import (  # noqa: E402
    ChatMessage,
    ChatSession,
    CompletionResult,
    Role,
    TokenUsage,
    TranscriptResult,
)


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Remove the test data directory after the run."""
    yield
    shutil.rmtree(TEST_DATA_DIR, ignore_errors=True)


@pytest.fixture(scope="session")
def test_video_id():
    return "V3TUEeB0kW0"


@pytest.fixture(scope="session")
def test_video_url():
    """Return a test YouTube video URL."""
    return "https://youtu.be/V3TUEeB0kW0?si=-InVol0JhtWji-6R"


@pytest.fixture
def raw_captions():
    """Caption items as the scraper hands them over."""
    return [
        {"start": "0", "duration": "2", "text": "hello"},
        {"start": "2", "duration": "3", "text": "world"},
        {"start": "5.5", "duration": "4.25", "text": "python testing\nwith pytest"},
        {"start": "61", "duration": "3", "text": "  fixtures make testing easy  "},
    ]


@pytest.fixture
def transcript(raw_captions):
    return format_segments(raw_captions)


def make_session(transcript=None, message_count=0, **overrides):
    """Build a session with alternating user/assistant messages."""
    session = ChatSession(
        video_id=overrides.pop("video_id", "V3TUEeB0kW0"),
        video_title=overrides.pop("video_title", "Test Video"),
        video_url=overrides.pop("video_url", "https://www.youtube.com/watch?v=V3TUEeB0kW0"),
        transcript=transcript or [],
        **overrides,
    )
    for index in range(message_count):
        role = Role.USER if index % 2 == 0 else Role.ASSISTANT
        session.messages.append(ChatMessage(role=role, content=f"message {index}"))
    return session


class FakeTranscriptFetcher:
    """Stands in for TranscriptFetcher; records calls."""

    def __init__(self, segments=None, error=None, language="en"):
        self.segments = segments or []
        self.error = error
        self.language = language
        self.calls = []

    def fetch(self, video_id, language="en"):
        self.calls.append((video_id, language))
        if self.error:
            raise self.error
        return self.segments

    def fetch_with_fallback(self, video_id, preferred_language="en", fallback_languages=None):
        self.calls.append((video_id, preferred_language))
        if self.error:
            raise self.error
        return TranscriptResult(
            segments=self.segments,
            language=self.language,
            language_name="English",
            attempted_languages=[preferred_language],
        )


class FakeVideoInfo:
    def get_title(self, video_id):
        return f"Title of {video_id}"


class FakeCompletionService:
    """Returns a canned reply, or raises the configured error."""

    def __init__(self, text="This is the answer.", error=None):
        self.text = text
        self.error = error
        self.calls = []

    async def complete(self, messages, model=None, temperature=None, max_tokens=None):
        self.calls.append({"messages": messages, "model": model, "temperature": temperature, "max_tokens": max_tokens})
        if self.error:
            raise self.error
        return CompletionResult(
            text=self.text,
            usage=TokenUsage(prompt_tokens=100, completion_tokens=20, total_tokens=120),
            model_used=model or "llama-3.3-70b-versatile",
        )


@pytest.fixture
def fake_fetcher(transcript):
    return FakeTranscriptFetcher(segments=transcript)


@pytest.fixture
def session_manager(fake_fetcher):
    return SessionManager(InMemorySessionStore(), transcript_fetcher=fake_fetcher, video_info=FakeVideoInfo())


@pytest.fixture
def fake_completion():
    return FakeCompletionService()


@pytest.fixture
def ai_message():
    """A provider reply as langchain returns it."""
    return AIMessage(
        content="The video is about testing.",
        usage_metadata={"input_tokens": 50, "output_tokens": 10, "total_tokens": 60},
        response_metadata={"model_name": "llama-3.3-70b-versatile"},
    )


@pytest.fixture
def session_factory():
    """Factory fixture for building sessions."""
    return make_session


@pytest.fixture
def fetcher_factory():
    return FakeTranscriptFetcher


@pytest.fixture
def completion_factory():
    return FakeCompletionService
