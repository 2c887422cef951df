"""
Tests for the HTTP API.
"""

import pytest
from fastapi.testclient import TestClient

from tubechat.api.app import app
from tubechat.api.dependencies import (
    get_completion_service,
    get_session_manager,
    get_transcript_fetcher,
)
from tubechat.utils.error_handling import (
    CompletionError,
    CompletionErrorCode,
    TranscriptError,
    TranscriptErrorCode,
)


@pytest.fixture
def client(session_manager, fake_fetcher, fake_completion):
    """Test client wired to in-memory fakes."""
    app.dependency_overrides[get_session_manager] = lambda: session_manager
    app.dependency_overrides[get_transcript_fetcher] = lambda: fake_fetcher
    app.dependency_overrides[get_completion_service] = lambda: fake_completion
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["name"] == "YouTube Transcript Chat"
    assert "X-Process-Time" in response.headers


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "sessions": 0}


def test_transcript_options(client):
    data = client.get("/api/v1/transcript").json()

    assert {"code": "en", "name": "English"} in data["supported_languages"]
    assert data["default_format"] == "detailed"
    assert len(data["available_formats"]) == 6


def test_transcript_json(client, test_video_url, test_video_id):
    response = client.post("/api/v1/transcript", json={"url": test_video_url, "format": "segments"})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["video_id"] == test_video_id
    assert data["actual_language"] == "en"
    assert data["used_fallback"] is False
    assert data["metadata"]["total_segments"] == 4
    assert "fetched_at" in data["metadata"]
    assert data["transcript"][0] == {
        "id": 1, "start": 0.0, "end": 2.0, "duration": 2.0, "text": "hello", "word_count": 1,
    }


def test_transcript_detailed_includes_display_times(client, test_video_url):
    data = client.post("/api/v1/transcript", json={"url": test_video_url}).json()

    assert data["transcript"][3]["start_time"] == "01:01.000"


def test_transcript_text_only(client, test_video_url, test_video_id):
    response = client.post("/api/v1/transcript", json={"url": test_video_url, "format": "text_only"})

    assert response.status_code == 200
    assert response.text.startswith("hello world python testing with pytest")
    assert response.headers["X-Video-ID"] == test_video_id
    assert response.headers["X-Format"] == "text_only"


def test_transcript_srt_download(client, test_video_url, test_video_id):
    response = client.post(
        "/api/v1/transcript", json={"url": test_video_url, "format": "srt", "use_fallback": False}
    )

    assert response.status_code == 200
    assert response.text.startswith("1\n00:00:00,000 --> 00:00:02,000\nhello\n")
    assert response.headers["Content-Disposition"] == f'attachment; filename="{test_video_id}.srt"'


def test_transcript_vtt(client, test_video_url):
    response = client.post("/api/v1/transcript", json={"url": test_video_url, "format": "vtt"})

    assert response.headers["content-type"].startswith("text/vtt")
    assert response.text.startswith("WEBVTT\n\n")


def test_transcript_invalid_url(client):
    response = client.post("/api/v1/transcript", json={"url": "https://example.com/video"})

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_URL"


def test_transcript_error_is_mapped(client, fake_fetcher, test_video_url):
    fake_fetcher.error = TranscriptError("private", TranscriptErrorCode.PRIVATE_VIDEO, video_id="V3TUEeB0kW0")

    response = client.post("/api/v1/transcript", json={"url": test_video_url})

    assert response.status_code == 403
    data = response.json()
    assert data["code"] == "PRIVATE_VIDEO"
    assert data["video_id"] == "V3TUEeB0kW0"
    assert data["suggestions"]


def test_unsupported_language_is_rejected(client, test_video_url):
    response = client.post("/api/v1/transcript", json={"url": test_video_url, "lang": "xx"})

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_chat_round_trip(client, test_video_id):
    response = client.post("/api/v1/chat", json={"video_id": test_video_id, "message": "Summarize it"})

    assert response.status_code == 200
    data = response.json()
    assert data["message"]["role"] == "assistant"
    assert data["message"]["content"] == "This is the answer."
    assert data["usage"]["total_tokens"] == 120

    session = client.get(f"/api/v1/chat/{data['session_id']}").json()
    assert [message["role"] for message in session["session"]["messages"]] == ["user", "assistant"]
    assert "transcript" not in session["session"]
    assert session["statistics"]["total_messages"] == 2
    assert session["statistics"]["transcript_segments"] == 4


@pytest.mark.parametrize(
    "payload",
    [
        {"video_id": "V3TUEeB0kW0", "message": "   "},
        {"video_id": "V3TUEeB0kW0", "message": "x" * 4001},
        {"video_id": "not-an-id", "message": "hello"},
        {"video_id": "V3TUEeB0kW0", "message": "hello", "temperature": 2.5},
        {"video_id": "V3TUEeB0kW0", "message": "hello", "max_tokens": 0},
        {"video_id": "V3TUEeB0kW0", "message": "hello", "session_id": ""},
        {"message": "hello"},
    ],
)
def test_chat_validation(client, fake_completion, payload):
    response = client.post("/api/v1/chat", json=payload)

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"
    assert fake_completion.calls == []


def test_chat_completion_failure(client, fake_completion, test_video_id):
    fake_completion.error = CompletionError("bad key", CompletionErrorCode.API_KEY_INVALID)

    response = client.post("/api/v1/chat", json={"video_id": test_video_id, "message": "hello"})

    assert response.status_code == 401
    assert response.json()["code"] == "API_KEY_INVALID"


def test_unknown_session(client):
    response = client.get("/api/v1/chat/does-not-exist")

    assert response.status_code == 404
    assert response.json()["code"] == "SESSION_NOT_FOUND"


def test_delete_session(client, test_video_id):
    session_id = client.post(
        "/api/v1/chat", json={"video_id": test_video_id, "message": "hello"}
    ).json()["session_id"]

    response = client.delete(f"/api/v1/chat/{session_id}")

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert client.get(f"/api/v1/chat/{session_id}").status_code == 404
    assert client.delete(f"/api/v1/chat/{session_id}").status_code == 404
