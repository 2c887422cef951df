"""
Tests for transcript formatting and output rendering.
"""

import pytest
from pydantic import ValidationError

from tubechat.core.formatter import (
    available_formats,
    format_segments,
    render_output,
    transcript_metadata,
)
from tubechat.models.schemas import OutputFormat, TranscriptSegment, format_timestamp


def test_format_segments_normalizes_fields(raw_captions):
    """Test numeric strings, embedded newlines and padding are cleaned up."""
    segments = format_segments(raw_captions)

    assert len(segments) == 4
    assert segments[0].start == 0.0
    assert segments[0].duration == 2.0
    assert segments[0].end == 2.0
    assert segments[2].text == "python testing with pytest"
    assert segments[2].end == pytest.approx(9.75)
    assert segments[3].text == "fixtures make testing easy"


def test_format_segments_accepts_dur_and_objects():
    class Snippet:
        def __init__(self, text, start, duration):
            self.text = text
            self.start = start
            self.duration = duration

    segments = format_segments([{"start": 1, "dur": 2, "text": "a"}, Snippet("b", 3, 1)])

    assert [seg.text for seg in segments] == ["a", "b"]
    assert segments[0].end == 3.0
    assert segments[1].start == 3.0


def test_format_segments_keeps_input_order():
    segments = format_segments([
        {"start": 10, "duration": 1, "text": "later"},
        {"start": 0, "duration": 1, "text": "earlier"},
    ])
    assert [seg.text for seg in segments] == ["later", "earlier"]


def test_format_segments_empty():
    assert format_segments([]) == []


def test_segment_rejects_negative_times():
    with pytest.raises(ValidationError):
        TranscriptSegment(start=-1, duration=1, text="x")
    with pytest.raises(ValidationError):
        TranscriptSegment(start=0, duration=-0.5, text="x")


def test_display_timestamps():
    """Test display strings drop the hours field under an hour."""
    segment = TranscriptSegment(start=61, duration=3, text="x")
    assert segment.start_time == "01:01.000"
    assert segment.end_time == "01:04.000"

    assert format_timestamp(3725.5) == "01:02:05.500"
    assert format_timestamp(0.0015, always_hours=True, decimal_marker=",") == "00:00:00,002"


def test_text_only():
    segments = format_segments([
        {"start": 0, "duration": 2, "text": "hello"},
        {"start": 2, "duration": 3, "text": "world"},
    ])
    assert render_output(segments, OutputFormat.TEXT_ONLY) == "hello world"


def test_srt_block():
    segments = format_segments([{"start": 0, "duration": 2, "text": "hello"}])

    assert render_output(segments, "srt") == "1\n00:00:00,000 --> 00:00:02,000\nhello\n"


def test_srt_blocks_are_numbered_and_separated(transcript):
    srt = render_output(transcript, OutputFormat.SRT)
    blocks = srt.split("\n\n")

    assert len(blocks) == 4
    assert blocks[1].startswith("2\n00:00:02,000 --> 00:00:05,000\nworld")
    assert blocks[3].startswith("4\n00:01:01,000 --> 00:01:04,000\n")


def test_vtt_output(transcript):
    vtt = render_output(transcript, OutputFormat.VTT)

    assert vtt.startswith("WEBVTT\n\n00:00:00.000 --> 00:00:02.000\nhello\n")
    assert "00:00:05.500 --> 00:00:09.750\npython testing with pytest\n" in vtt


def test_simple_output(transcript):
    simple = render_output(transcript, OutputFormat.SIMPLE)
    assert simple[0] == {"text": "hello", "start": 0.0, "duration": 2.0}


def test_segments_output(transcript):
    segments = render_output(transcript, OutputFormat.SEGMENTS)

    assert [item["id"] for item in segments] == [1, 2, 3, 4]
    assert segments[2]["word_count"] == 4
    assert segments[2]["end"] == pytest.approx(9.75)


def test_detailed_output_returns_segments(transcript):
    detailed = render_output(transcript, OutputFormat.DETAILED)

    assert detailed == transcript
    assert detailed is not transcript


def test_empty_transcript_in_every_format():
    assert render_output([], OutputFormat.TEXT_ONLY) == ""
    assert render_output([], OutputFormat.SRT) == ""
    assert render_output([], OutputFormat.VTT) == "WEBVTT\n\n"
    assert render_output([], OutputFormat.SIMPLE) == []
    assert render_output([], OutputFormat.SEGMENTS) == []
    assert render_output([], OutputFormat.DETAILED) == []


def test_transcript_metadata(transcript):
    metadata = transcript_metadata(transcript)

    assert metadata["total_segments"] == 4
    assert metadata["total_duration"] == 64.0
    assert metadata["word_count"] == 10
    assert transcript_metadata([])["total_duration"] == 0


def test_available_formats():
    codes = [item["code"] for item in available_formats()]
    assert codes == [fmt.value for fmt in OutputFormat]
