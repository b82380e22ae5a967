"""Generic placeholder steps for videos without any transcript."""

from __future__ import annotations

from typing import List, Optional

from cheffy.models.recipe import RecipeStep

SHORT_VIDEO_SECONDS = 300
INTRO_WINDOW_SECONDS = 5
INTRODUCTION_LABEL = "Introduction"
STAGE_LABELS = (
    "Introduction and ingredients overview",
    "Preparation and setup",
    "Start cooking process",
    "Main cooking steps",
    "Finishing touches",
    "Final presentation and serving",
)


def step_count_for(duration: float) -> int:
    """Number of steps, introduction included, to spread across a video of ``duration`` seconds."""

    minutes = int(duration // 60)
    if duration < SHORT_VIDEO_SECONDS:
        return min(4, max(2, minutes))
    return min(6, max(3, minutes))


def synthesize_steps(duration: Optional[float]) -> List[RecipeStep]:
    """Spread generic stage labels evenly across a video.

    Nothing is produced without a positive duration, and every timestamp stays strictly below
    it. A ``0:00`` introduction is prepended for videos longer than five seconds unless a step
    already falls inside the first five seconds.
    """

    if duration is None or duration <= 0:
        return []

    total = step_count_for(duration)
    with_intro = duration > INTRO_WINDOW_SECONDS
    spaced = total - 1 if with_intro else total
    labels = STAGE_LABELS[1:] if with_intro else STAGE_LABELS
    interval = int(duration // (spaced + 1))

    steps: List[RecipeStep] = []
    for index in range(spaced):
        timestamp = interval * (index + 1)
        if timestamp < duration:
            label = labels[index] if index < len(labels) else f"Step {index + 1}"
            steps.append(RecipeStep(timestamp_seconds=timestamp, instruction=label))

    if with_intro and (not steps or steps[0].timestamp_seconds > INTRO_WINDOW_SECONDS):
        steps.insert(0, RecipeStep(timestamp_seconds=0, instruction=INTRODUCTION_LABEL))
    return steps


__all__ = ["STAGE_LABELS", "step_count_for", "synthesize_steps"]
