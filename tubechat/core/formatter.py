"""
Module for normalizing caption segments and rendering them into output formats.
"""

from typing import Any, Dict, Iterable, List, Union

from tubechat.models.schemas import OutputFormat, TranscriptSegment, format_timestamp

FORMAT_DESCRIPTIONS = {
    OutputFormat.DETAILED: "Detailed format with timestamps and metadata",
    OutputFormat.SIMPLE: "Simple format with basic text and timing",
    OutputFormat.TEXT_ONLY: "Plain text only, no timing information",
    OutputFormat.SRT: "SubRip subtitle format (.srt)",
    OutputFormat.VTT: "WebVTT subtitle format (.vtt)",
    OutputFormat.SEGMENTS: "Segmented format with additional metadata",
}


def _field(item: Any, *names: str) -> Any:
    for name in names:
        if isinstance(item, dict):
            if name in item:
                return item[name]
        elif hasattr(item, name):
            return getattr(item, name)
    raise KeyError(f"Caption item is missing field '{names[0]}'")


def format_segments(raw: Iterable[Any]) -> List[TranscriptSegment]:
    """
    Normalize raw caption items into transcript segments.

    Items may be dicts or objects exposing ``start``, ``duration`` (or
    ``dur``) and ``text``; numeric fields may arrive as strings. Input
    order is kept as is.

    Args:
        raw: Caption items in chronological order

    Returns:
        List of TranscriptSegment objects
    """
    segments = []
    for item in raw:
        text = str(_field(item, "text")).replace("\r\n", " ").replace("\n", " ").strip()
        segments.append(
            TranscriptSegment(
                start=float(_field(item, "start")),
                duration=float(_field(item, "duration", "dur")),
                text=text,
            )
        )
    return segments


def _cue_time(seconds: float, decimal_marker: str) -> str:
    return format_timestamp(seconds, always_hours=True, decimal_marker=decimal_marker)


def render_srt(segments: List[TranscriptSegment]) -> str:
    blocks = [
        f"{index}\n{_cue_time(seg.start, ',')} --> {_cue_time(seg.end, ',')}\n{seg.text}\n"
        for index, seg in enumerate(segments, start=1)
    ]
    return "\n".join(blocks)


def render_vtt(segments: List[TranscriptSegment]) -> str:
    blocks = [
        f"{_cue_time(seg.start, '.')} --> {_cue_time(seg.end, '.')}\n{seg.text}\n"
        for seg in segments
    ]
    return "WEBVTT\n\n" + "\n".join(blocks)


def render_output(
    segments: List[TranscriptSegment],
    fmt: Union[OutputFormat, str] = OutputFormat.DETAILED,
) -> Union[str, List[Any]]:
    """
    Project a transcript into the requested output format.

    Args:
        segments: Formatted transcript segments
        fmt: Desired output format

    Returns:
        A string for text_only/srt/vtt, otherwise a list
    """
    fmt = OutputFormat(fmt)

    if fmt == OutputFormat.TEXT_ONLY:
        return " ".join(seg.text for seg in segments)

    if fmt == OutputFormat.SIMPLE:
        return [
            {"text": seg.text, "start": seg.start, "duration": seg.duration}
            for seg in segments
        ]

    if fmt == OutputFormat.SRT:
        return render_srt(segments)

    if fmt == OutputFormat.VTT:
        return render_vtt(segments)

    if fmt == OutputFormat.SEGMENTS:
        return [
            {
                "id": index,
                "start": seg.start,
                "end": seg.end,
                "duration": seg.duration,
                "text": seg.text,
                "word_count": len(seg.text.split()),
            }
            for index, seg in enumerate(segments, start=1)
        ]

    return list(segments)


def transcript_metadata(segments: List[TranscriptSegment]) -> Dict[str, Any]:
    """Summary figures for a transcript."""
    return {
        "total_segments": len(segments),
        "total_duration": segments[-1].end if segments else 0,
        "word_count": sum(len(seg.text.split()) for seg in segments),
    }


def available_formats() -> List[Dict[str, str]]:
    return [
        {"code": fmt.value, "description": description}
        for fmt, description in FORMAT_DESCRIPTIONS.items()
    ]
