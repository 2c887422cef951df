"""
Keyword relevance scoring for narrowing a transcript to a query.
"""

from typing import List

from tubechat.models.schemas import TranscriptSegment

PHRASE_BONUS = 5
MIN_TOKEN_LENGTH = 3


def _score(segment_text: str, tokens: List[str], phrase: str) -> int:
    score = sum(segment_text.count(token) for token in tokens)
    if phrase and phrase in segment_text:
        score += PHRASE_BONUS
    return score


def find_relevant_segments(
    query: str,
    transcript: List[TranscriptSegment],
    max_segments: int = 10,
) -> List[TranscriptSegment]:
    """
    Rank transcript segments against a free-text query.

    Tokens of two characters or fewer are ignored. With no usable tokens the
    first ``max_segments`` segments are returned unscored. Otherwise the
    best-scoring segments are kept and returned in transcript order.

    Args:
        query: User's question or message
        transcript: Full transcript
        max_segments: Maximum number of segments to return

    Returns:
        At most ``max_segments`` segments in chronological order
    """
    if max_segments <= 0:
        return []

    # Phrase match ignores surrounding whitespace
    phrase = query.lower().strip()
    tokens = [word for word in phrase.split() if len(word) >= MIN_TOKEN_LENGTH]

    if not tokens:
        return list(transcript[:max_segments])

    scored = [
        (index, _score(segment.text.lower(), tokens, phrase))
        for index, segment in enumerate(transcript)
    ]
    matching = [item for item in scored if item[1] > 0]

    # sorted() is stable, so equal scores keep transcript order
    top = sorted(matching, key=lambda item: item[1], reverse=True)[:max_segments]
    top.sort(key=lambda item: item[0])

    return [transcript[index] for index, _ in top]
