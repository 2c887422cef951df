"""
Tests for context building and token budgeting.
"""

import pytest

from tubechat.core.chat.budget import estimate_tokens, total_tokens, trim_to_budget
from tubechat.core.chat.context import build_context, format_transcript_context
from tubechat.core.prompts import TRUNCATION_MARKER
from tubechat.models.schemas import ContextMessage, Role, TranscriptSegment


def test_transcript_lines_use_short_timestamps(transcript):
    rendered = format_transcript_context(transcript)
    lines = rendered.split("\n")

    assert lines[0] == "[0:00] hello"
    assert lines[2] == "[0:05] python testing with pytest"
    assert lines[3] == "[1:01] fixtures make testing easy"


def test_long_transcript_is_truncated():
    transcript = [TranscriptSegment(start=i, duration=1, text="x" * 50) for i in range(100)]

    rendered = format_transcript_context(transcript, max_chars=1000)

    assert rendered.endswith(TRUNCATION_MARKER)
    assert len(rendered) == 900 + len(TRUNCATION_MARKER)


def test_build_context_keeps_last_twenty_messages(session_factory, transcript):
    session = session_factory(transcript=transcript, message_count=25)

    context = build_context(session)

    assert len(context) == 21
    assert context[0].role == Role.SYSTEM
    assert context[1].content == "message 5"
    assert context[-1].content == "message 24"


def test_system_message_grounds_the_video(session_factory, transcript):
    session = session_factory(transcript=transcript)

    system = build_context(session)[0].content

    assert "Title: Test Video" in system
    assert "Total Segments: 4" in system
    assert "[0:02] world" in system


def test_build_context_without_system_prompt(session_factory):
    session = session_factory(message_count=3)

    context = build_context(session, include_system_prompt=False)

    assert [message.role for message in context] == [Role.USER, Role.ASSISTANT, Role.USER]


def test_narrowed_context_only_includes_relevant_segments(session_factory, transcript):
    session = session_factory(transcript=transcript)

    system = build_context(session, query="pytest")[0].content

    assert "python testing with pytest" in system
    assert "[0:00] hello" not in system


def test_narrowed_context_falls_back_to_leading_segments(session_factory, transcript):
    session = session_factory(transcript=transcript)

    system = build_context(session, query="kubernetes")[0].content

    assert "[0:00] hello" in system
    assert "[1:01] fixtures make testing easy" in system


def test_estimate_tokens():
    assert estimate_tokens("") == 0
    assert estimate_tokens("abcd") == 1
    assert estimate_tokens("abcde") == 2


def _message(role, chars):
    return ContextMessage(role=role, content="x" * chars)


def test_trim_drops_oldest_history_first():
    messages = [_message(Role.SYSTEM, 400)] + [_message(Role.USER, 400) for _ in range(5)]

    trimmed = trim_to_budget(messages, max_tokens=300)

    assert trimmed[0] is messages[0]
    assert trimmed[1:] == messages[-2:]
    assert total_tokens(trimmed) <= 300


def test_trim_is_identity_within_budget():
    messages = [_message(Role.SYSTEM, 40), _message(Role.USER, 40)]
    assert trim_to_budget(messages, max_tokens=100) == messages


def test_trim_is_idempotent():
    messages = [_message(Role.SYSTEM, 400)] + [_message(Role.USER, 300) for _ in range(6)]

    once = trim_to_budget(messages, max_tokens=400)

    assert trim_to_budget(once, max_tokens=400) == once


def test_oversized_first_message_is_kept_alone():
    messages = [_message(Role.SYSTEM, 4000), _message(Role.USER, 40)]

    trimmed = trim_to_budget(messages, max_tokens=100)

    assert trimmed == [messages[0]]


@pytest.mark.parametrize("messages", [[], [ContextMessage(role=Role.USER, content="hi")]])
def test_trim_edge_inputs(messages):
    assert trim_to_budget(messages, max_tokens=0 if messages else -1) == messages
