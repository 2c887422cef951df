"""
Token estimation and budget trimming for model context.

Estimates use a characters-per-token heuristic; they steer trimming only
and are not meant for billing. A real tokenizer can replace
``estimate_tokens`` without changing callers.
"""

import math
from typing import List

from tubechat.models.schemas import ContextMessage

CHARS_PER_TOKEN = 4


def estimate_tokens(text: str) -> int:
    """Approximate token count: one token per four characters, rounded up."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def total_tokens(messages: List[ContextMessage]) -> int:
    return sum(estimate_tokens(message.content) for message in messages)


def trim_to_budget(messages: List[ContextMessage], max_tokens: int = 12000) -> List[ContextMessage]:
    """
    Drop the oldest conversation messages until the context fits the budget.

    The first message (the system message, when present) is never removed.
    If it alone exceeds the budget it is still returned, so callers must
    tolerate overflow in that case.

    Args:
        messages: Ordered context messages
        max_tokens: Maximum estimated tokens

    Returns:
        Trimmed messages, order preserved
    """
    if not messages or total_tokens(messages) <= max_tokens:
        return messages

    head, tail = messages[0], list(messages[1:])
    head_tokens = estimate_tokens(head.content)
    tail_tokens = total_tokens(tail)

    while tail and head_tokens + tail_tokens > max_tokens:
        dropped = tail.pop(0)
        tail_tokens -= estimate_tokens(dropped.content)

    return [head] + tail
