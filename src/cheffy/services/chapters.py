"""Chapter marker parsing for video descriptions."""

from __future__ import annotations

import re
from typing import List, Pattern

from cheffy.models.recipe import RecipeStep

MIN_TITLE_CHARS = 4

_PLAIN_CHAPTER_PATTERN = re.compile(
    r"(?:(\d{1,2}):)?(\d{1,2}):(\d{2})[ \t]+(.+?)(?=\n|(?:\d{1,2}:)?\d{1,2}:\d{2}|$)"
)
_BRACKETED_CHAPTER_PATTERN = re.compile(
    r"\[(?:(\d{1,2}):)?(\d{1,2}):(\d{2})\]\s*(.+?)(?=\n|\[|$)"
)
_TITLE_SEPARATORS = " \t-–—:|"


def _parse_with(pattern: Pattern[str], description: str) -> List[RecipeStep]:
    steps: List[RecipeStep] = []
    for hours, minutes, seconds, title in pattern.findall(description):
        instruction = title.strip().lstrip(_TITLE_SEPARATORS).strip()
        if len(instruction) < MIN_TITLE_CHARS:
            continue
        timestamp = int(hours or 0) * 3600 + int(minutes) * 60 + int(seconds)
        steps.append(RecipeStep(timestamp_seconds=timestamp, instruction=instruction))
    return steps


def parse_chapters(description: str) -> List[RecipeStep]:
    """Parse chapter markers out of a description.

    ``M:SS Title`` lines are tried first, then the ``[M:SS] Title`` variant. Titles of three
    characters or fewer are discarded. An optional leading hour component is honoured.
    """

    if not description:
        return []
    steps = _parse_with(_PLAIN_CHAPTER_PATTERN, description)
    if steps:
        return steps
    return _parse_with(_BRACKETED_CHAPTER_PATTERN, description)


__all__ = ["parse_chapters"]
