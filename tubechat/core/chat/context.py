"""
Assembly of the ordered message list sent to the language model.
"""

from typing import List, Optional

from tubechat.config import chat_config
from tubechat.core.prompts import SYSTEM_PROMPT, VIDEO_CONTEXT_TEMPLATE, TRUNCATION_MARKER
from tubechat.core.relevance import find_relevant_segments
from tubechat.models.schemas import ChatSession, ContextMessage, Role, TranscriptSegment


def _short_timestamp(seconds: float) -> str:
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}:{secs:02d}"


def format_transcript_context(
    transcript: List[TranscriptSegment],
    max_chars: int = chat_config.MAX_TRANSCRIPT_CHARS,
) -> str:
    """
    Render a transcript as one ``[M:SS] text`` line per segment.

    Text longer than ``max_chars`` is cut 100 characters short of the limit
    and a truncation marker is appended.
    """
    rendered = "\n".join(
        f"[{_short_timestamp(segment.start)}] {segment.text}" for segment in transcript
    )

    if len(rendered) > max_chars:
        rendered = rendered[:max_chars - 100] + TRUNCATION_MARKER

    return rendered


def _select_transcript(session: ChatSession, query: Optional[str]) -> List[TranscriptSegment]:
    if query is None:
        return session.transcript

    relevant = find_relevant_segments(query, session.transcript, chat_config.RELEVANT_SEGMENT_LIMIT)
    if relevant:
        return relevant
    return session.transcript[:chat_config.NARROW_FALLBACK_SEGMENTS]


def build_context(
    session: ChatSession,
    include_system_prompt: bool = True,
    query: Optional[str] = None,
) -> List[ContextMessage]:
    """
    Build conversation context for the completion call.

    The system message, when included, always comes first, followed by the
    most recent history messages in chronological order.

    Args:
        session: Chat session data
        include_system_prompt: Whether to include the grounding system message
        query: Narrow the transcript block to segments relevant to this text

    Returns:
        Ordered list of context messages
    """
    messages: List[ContextMessage] = []

    if include_system_prompt:
        system_content = VIDEO_CONTEXT_TEMPLATE.format(
            system_prompt=SYSTEM_PROMPT,
            title=session.video_title,
            url=session.video_url,
            video_id=session.video_id,
            segment_count=len(session.transcript),
            transcript=format_transcript_context(_select_transcript(session, query)),
        )
        messages.append(ContextMessage(role=Role.SYSTEM, content=system_content))

    recent = session.messages[-chat_config.MAX_CONTEXT_MESSAGES:] if chat_config.MAX_CONTEXT_MESSAGES > 0 else []
    messages.extend(ContextMessage(role=message.role, content=message.content) for message in recent)

    return messages
