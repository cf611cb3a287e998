"""Heuristic token counting for sample-text cost estimates.

The estimate is tokenizer-agnostic: the larger of a word-based and a
character-based guess. A leading ``[TOKEN_MULTIPLIER:N]`` marker scales the
result, which lets a short sample stand in for a much longer conversation.
"""

import math
import re
from config.constants import MAX_TOKEN_MULTIPLIER

_MULTIPLIER_RE = re.compile(r"^\[TOKEN_MULTIPLIER:(\d+)\]")
_SPECIAL_CHARS_RE = re.compile(r"""[.,!?;:'"()\[\]{}]""")
_DIGIT_RE = re.compile(r"[0-9]")


def split_multiplier(text: str) -> tuple[int, str]:
    """Strip leading multiplier markers, returning (multiplier, remaining text)."""
    multiplier = 1
    match = _MULTIPLIER_RE.match(text)
    while match:
        multiplier *= int(match.group(1), 10)
        text = text[match.end():]
        match = _MULTIPLIER_RE.match(text)
    return multiplier, text


def _base_estimate(text: str) -> int:
    if not text:
        return 0
    word_count = len(text.split())
    special_chars = len(_SPECIAL_CHARS_RE.findall(text))
    numeric_chars = len(_DIGIT_RE.findall(text))

    word_estimate = math.ceil(word_count * 1.3 + special_chars * 0.5 + numeric_chars * 0.3)
    # Long unbroken strings undercount on words alone
    character_estimate = math.ceil(len(text) / 4)
    return max(word_estimate, character_estimate)


def estimate_token_count(text: str) -> int:
    """Approximate the number of tokens in ``text``."""
    if not text:
        return 0
    multiplier, clean_text = split_multiplier(text)
    return _base_estimate(clean_text) * multiplier


def with_multiplier(text: str, multiplier: int) -> str:
    """Prefix ``text`` with a multiplier marker, clamped to 1..MAX_TOKEN_MULTIPLIER."""
    safe = max(1, min(int(multiplier), MAX_TOKEN_MULTIPLIER))
    if safe == 1:
        return text
    return f"[TOKEN_MULTIPLIER:{safe}]{text}"
