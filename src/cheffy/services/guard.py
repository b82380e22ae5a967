"""Duration bounding and final deduplication of recipe steps."""

from __future__ import annotations

from typing import Iterable, List, Optional

from cheffy.models.recipe import RecipeStep
from cheffy.utils.text import jaccard_similarity

FINAL_MIN_GAP_SECONDS = 10
SIMILARITY_THRESHOLD = 0.6


def filter_by_duration(steps: Iterable[RecipeStep], duration: Optional[float]) -> List[RecipeStep]:
    """Drop every step whose timestamp lies beyond ``duration``.

    Without a positive duration there is no bound and the steps pass through unchanged.
    """

    if duration is None or duration <= 0:
        return list(steps)
    return [step for step in steps if step.timestamp_seconds <= duration]


def drop_close_steps(steps: Iterable[RecipeStep], min_gap: int = FINAL_MIN_GAP_SECONDS) -> List[RecipeStep]:
    """Keep a step only if it starts at least ``min_gap`` seconds after the last kept step."""

    kept: List[RecipeStep] = []
    for step in steps:
        if kept and step.timestamp_seconds - kept[-1].timestamp_seconds < min_gap:
            continue
        kept.append(step)
    return kept


def drop_similar_steps(steps: Iterable[RecipeStep], threshold: float = SIMILARITY_THRESHOLD) -> List[RecipeStep]:
    """Drop a step whose instruction is too similar to the last kept one."""

    kept: List[RecipeStep] = []
    for step in steps:
        if kept and jaccard_similarity(step.instruction, kept[-1].instruction) > threshold:
            continue
        kept.append(step)
    return kept


def sort_steps(steps: Iterable[RecipeStep]) -> List[RecipeStep]:
    return sorted(steps, key=lambda step: step.timestamp_seconds)


def finalize_steps(steps: Iterable[RecipeStep], duration: Optional[float]) -> List[RecipeStep]:
    """Bound, order and deduplicate a step list before it leaves the pipeline.

    Steps are sorted before the spacing pass so consecutive output steps are always at least
    :data:`FINAL_MIN_GAP_SECONDS` apart and never more similar than :data:`SIMILARITY_THRESHOLD`.
    """

    bounded = sort_steps(filter_by_duration(steps, duration))
    spaced = drop_close_steps(bounded)
    return sort_steps(drop_similar_steps(spaced))


__all__ = [
    "FINAL_MIN_GAP_SECONDS",
    "SIMILARITY_THRESHOLD",
    "drop_close_steps",
    "drop_similar_steps",
    "filter_by_duration",
    "finalize_steps",
    "sort_steps",
]
