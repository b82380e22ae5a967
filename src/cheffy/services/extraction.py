"""Heuristic extraction of cooking steps from timed transcript segments.

Three tiers trade precision for coverage:

* :func:`extract_filtered` keeps only groups that read like cooking instructions;
* :func:`extract_aggressive` samples fixed windows across the video with a light spam filter;
* :func:`extract_lenient` emits one step per contiguous chunk of segments.

None of the tiers invents text that is not present in the transcript.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Pattern, Sequence

from cheffy.models.recipe import RecipeStep, StepCategory
from cheffy.models.transcript import SegmentGroup, TranscriptSegment
from cheffy.services.guard import SIMILARITY_THRESHOLD, drop_similar_steps, sort_steps

GROUP_GAP_SECONDS = 3
MIN_SEGMENT_CHARS = 5
MIN_GROUP_CHARS = 10
MIN_STEP_CHARS = 15
LONG_INSTRUCTION_CHARS = 30
STEP_SPACING_SECONDS = 20
WINDOW_SECONDS = 5
TARGET_STEP_COUNT = 8
DUPLICATE_WINDOW_SECONDS = 5
MIN_LENIENT_CHUNK = 10
LENIENT_CHUNK_DIVISOR = 6

RECIPE_ACTION_KEYWORDS = (
    "add", "mix", "stir", "cook", "fry", "boil", "bake", "roast", "grill", "steam", "sauté", "saute",
    "simmer", "braise", "sear", "caramelize", "deglaze", "reduce", "heat", "warm",
    "chop", "cut", "slice", "dice", "mince", "peel", "grate", "shred", "julienne",
    "whisk", "beat", "fold", "knead", "roll", "press", "crush",
    "season", "salt", "pepper", "garnish", "drizzle", "sprinkle", "toss",
    "combine", "blend", "marinate", "marinade", "coat", "dredge",
    "serve", "plate", "arrange", "top", "finish",
    "추가", "넣어", "볶아", "끓여", "굽어", "찌고", "자르고", "썰고", "다지고",
    "갈아", "섞어", "양념", "볶음", "끓임", "굽기", "찜", "튀김",
)

CONVERSATIONAL_KEYWORDS = (
    "subscribe", "like", "comment", "share", "video", "channel", "thanks", "thank you",
    "welcome", "hello", "hey", "hi", "guys", "everyone", "today",
    "before we", "if you", "you can", "you should", "i hope", "i think",
    "make sure", "don't forget", "remember", "also", "by the way",
    "구독", "좋아요", "댓글", "공유", "영상", "채널", "감사", "안녕", "오늘",
)

SPAM_KEYWORDS = (
    "subscribe", "like", "comment", "share", "channel", "video", "thanks", "thank you",
    "구독", "좋아요", "댓글",
)

STEP_INDICATORS = (
    "first", "next", "then", "now", "after", "add the", "put the", "place the",
    "pour", "mix in", "stir in", "add in",
    "단계", "첫", "다음", "그리고", "이제", "마지막", "넣고", "넣어서",
)

INGREDIENT_NAMES = (
    "chicken", "beef", "pork", "fish", "vegetable", "onion", "garlic", "tomato", "rice", "noodle",
    "pasta", "egg", "cheese", "butter", "oil", "flour", "sugar", "salt", "pepper", "water", "sauce",
    "broth", "stock", "meat", "ingredient", "carrot", "potato", "bell pepper", "mushroom",
    "spinach", "lettuce", "celery", "herb", "spice",
)

RECIPE_START_KEYWORDS = (
    "ingredient", "recipe", "cook", "make", "prepare", "add", "mix", "chop", "cut",
    "재료", "요리", "만들", "준비",
)

MEASUREMENT_UNITS = (
    "cup", "cups", "tbsp", "tsp", "tablespoon", "tablespoons", "teaspoon", "teaspoons",
    "gram", "grams", "g", "kg", "ounce", "ounces", "oz", "pound", "pounds", "lb", "lbs",
    "ml", "liter", "liters", "litre", "litres", "minute", "minutes", "min", "hour", "hours",
    "degrees",
)
KOREAN_MEASUREMENT_UNITS = ("분", "시간", "컵", "스푼", "티스푼", "그램")

CATEGORY_KEYWORDS = {
    StepCategory.PREP: (
        "prep", "chop", "cut", "slice", "dice", "mince", "peel", "grate", "shred", "wash", "rinse",
        "measure", "marinate", "whisk", "mix", "knead", "ingredient",
        "썰", "다지", "손질", "재료", "준비",
    ),
    StepCategory.COOKING: (
        "cook", "fry", "boil", "bake", "roast", "grill", "steam", "sauté", "saute", "simmer",
        "braise", "sear", "heat", "reduce",
        "볶", "끓", "굽", "찌", "튀기",
    ),
    StepCategory.SERVING: (
        "serve", "plate", "garnish", "arrange", "enjoy", "presentation",
        "완성", "담아",
    ),
}


def keyword_pattern(keywords: Sequence[str], *, whole_word: bool) -> Pattern[str]:
    """Compile ``keywords`` into one case-insensitive pattern.

    Latin keywords must start on a word boundary (and end on one when ``whole_word``, allowing a
    plural ``s``); other scripts attach particles to words, so they match as plain substrings.
    """

    latin = sorted((word for word in keywords if word.isascii()), key=len, reverse=True)
    other = sorted((word for word in keywords if not word.isascii()), key=len, reverse=True)
    alternatives = []
    if latin:
        suffix = r"s?\b" if whole_word else ""
        alternatives.append(r"\b(?:%s)%s" % ("|".join(re.escape(word) for word in latin), suffix))
    if other:
        alternatives.append("(?:%s)" % "|".join(re.escape(word) for word in other))
    return re.compile("|".join(alternatives), re.IGNORECASE)


ACTION_PATTERN = keyword_pattern(RECIPE_ACTION_KEYWORDS, whole_word=False)
CONVERSATIONAL_PATTERN = keyword_pattern(CONVERSATIONAL_KEYWORDS, whole_word=True)
SPAM_PATTERN = keyword_pattern(SPAM_KEYWORDS, whole_word=True)
STEP_INDICATOR_PATTERN = keyword_pattern(STEP_INDICATORS, whole_word=False)
INGREDIENT_PATTERN = keyword_pattern(INGREDIENT_NAMES, whole_word=False)
RECIPE_START_PATTERN = keyword_pattern(RECIPE_START_KEYWORDS, whole_word=False)
MEASUREMENT_PATTERN = re.compile(
    r"\d+\s*(?:(?:%s)\b|%s)"
    % (
        "|".join(re.escape(unit) for unit in sorted(MEASUREMENT_UNITS, key=len, reverse=True)),
        "|".join(re.escape(unit) for unit in sorted(KOREAN_MEASUREMENT_UNITS, key=len, reverse=True)),
    ),
    re.IGNORECASE,
)
CATEGORY_PATTERNS = {
    category: keyword_pattern(words, whole_word=False) for category, words in CATEGORY_KEYWORDS.items()
}

STRICT_FILLER_PATTERNS = (
    re.compile(r"^(?:so|now|then|and|but|or|well|okay|ok|alright|right|yeah|yes|no|hmm|um|uh)\b\s*,?\s*", re.IGNORECASE),
    re.compile(r"^(?:이제|그래서|그리고|그런데|그럼|음|어|아)\s*,?\s*"),
)
LIGHT_FILLER_PATTERNS = (
    re.compile(
        r"^(?:so|now|then|and|but|or|well|okay|ok|alright|right|yeah|yes|no|hmm|um|uh|hey|hi|hello)\b\s*,?\s*",
        re.IGNORECASE,
    ),
    re.compile(r"^(?:이제|그래서|그리고|그런데|그럼|음|어|아|안녕)\s*,?\s*"),
)


# --------------------------------------------------------------------------- #
# Text helpers                                                                #
# --------------------------------------------------------------------------- #
def strip_leading_filler(text: str, patterns: Sequence[Pattern[str]] = STRICT_FILLER_PATTERNS) -> str:
    """Collapse whitespace and remove one leading filler word per pattern."""

    cleaned = " ".join(text.split())
    for pattern in patterns:
        cleaned = pattern.sub("", cleaned, count=1)
    return cleaned.strip()


def finish_sentence(text: str) -> str:
    """Capitalise the first letter and make sure the text ends with punctuation."""

    if not text:
        return text
    sentence = text[0].upper() + text[1:]
    if not sentence.endswith((".", "!", "?")):
        sentence += "."
    return sentence


def clean_instruction(text: str, patterns: Sequence[Pattern[str]] = STRICT_FILLER_PATTERNS) -> str:
    """Turn raw caption text into a tidy instruction sentence."""

    return finish_sentence(strip_leading_filler(text, patterns))


def is_instruction_candidate(text: str) -> bool:
    """Decide whether grouped caption text reads like a cooking instruction.

    Conversational content is rejected outright; otherwise the text needs an action or a step
    indicator, plus a measurement, an ingredient, or enough length to carry detail.
    """

    if len(text) <= MIN_STEP_CHARS or CONVERSATIONAL_PATTERN.search(text):
        return False
    has_cue = bool(ACTION_PATTERN.search(text) or STEP_INDICATOR_PATTERN.search(text))
    has_detail = bool(
        MEASUREMENT_PATTERN.search(text) or INGREDIENT_PATTERN.search(text) or len(text) > LONG_INSTRUCTION_CHARS
    )
    return has_cue and has_detail


def classify_step(instruction: str) -> Optional[StepCategory]:
    """Assign the category whose keyword appears earliest in ``instruction``."""

    best: Optional[StepCategory] = None
    best_position = len(instruction) + 1
    for category, pattern in CATEGORY_PATTERNS.items():
        match = pattern.search(instruction)
        if match and match.start() < best_position:
            best, best_position = category, match.start()
    return best


# --------------------------------------------------------------------------- #
# Grouping                                                                    #
# --------------------------------------------------------------------------- #
def _usable(segment: TranscriptSegment, max_duration: Optional[float]) -> Optional[str]:
    if max_duration is not None and segment.start_seconds > max_duration:
        return None
    text = segment.text.strip()
    if len(text) < MIN_SEGMENT_CHARS:
        return None
    return text


def group_segments(
    segments: Iterable[TranscriptSegment],
    max_duration: Optional[float] = None,
    gap_seconds: int = GROUP_GAP_SECONDS,
) -> List[SegmentGroup]:
    """Cluster segments whose start falls within ``gap_seconds`` of the running group's end."""

    groups: List[SegmentGroup] = []
    start = end = 0
    texts: List[str] = []

    def flush() -> None:
        combined = " ".join(texts).strip()
        if len(combined) >= MIN_GROUP_CHARS:
            groups.append(SegmentGroup(start_seconds=start, end_seconds=end, text=combined))

    for segment in segments:
        text = _usable(segment, max_duration)
        if text is None:
            continue
        timestamp = segment.start_seconds
        if texts and timestamp - end <= gap_seconds:
            texts.append(text)
            end = max(end, segment.end_seconds)
            continue
        if texts:
            flush()
        start, end, texts = timestamp, max(timestamp, segment.end_seconds), [text]
    if texts:
        flush()
    return groups


def window_segments(
    segments: Iterable[TranscriptSegment],
    max_duration: Optional[float] = None,
    window_seconds: int = WINDOW_SECONDS,
) -> List[SegmentGroup]:
    """Cut segments into fixed windows anchored at each window's first segment."""

    windows: List[SegmentGroup] = []
    start = end = 0
    texts: List[str] = []
    for segment in segments:
        text = _usable(segment, max_duration)
        if text is None:
            continue
        timestamp = segment.start_seconds
        if texts and timestamp - start <= window_seconds:
            texts.append(text)
            end = timestamp
            continue
        if texts:
            windows.append(SegmentGroup(start_seconds=start, end_seconds=end, text=" ".join(texts).strip()))
        start = end = timestamp
        texts = [text]
    if texts:
        windows.append(SegmentGroup(start_seconds=start, end_seconds=end, text=" ".join(texts).strip()))
    return windows


def merge_close_steps(steps: Iterable[RecipeStep], min_gap: int = STEP_SPACING_SECONDS) -> List[RecipeStep]:
    """Fold a step into its predecessor when it starts less than ``min_gap`` seconds later."""

    merged: List[RecipeStep] = []
    for step in steps:
        if merged and step.timestamp_seconds - merged[-1].timestamp_seconds < min_gap:
            previous = merged[-1]
            combined = f"{previous.instruction.rstrip('.')}. {step.instruction}"
            merged[-1] = previous.model_copy(update={"instruction": combined})
            continue
        merged.append(step)
    return merged


# --------------------------------------------------------------------------- #
# Tiers                                                                       #
# --------------------------------------------------------------------------- #
def extract_filtered(
    segments: Sequence[TranscriptSegment], max_duration: Optional[float] = None
) -> List[RecipeStep]:
    """Tier A: keep only groups that read like cooking instructions."""

    candidates: List[RecipeStep] = []
    for group in group_segments(segments, max_duration):
        if not is_instruction_candidate(group.text):
            continue
        instruction = clean_instruction(group.text)
        if instruction:
            candidates.append(RecipeStep(timestamp_seconds=group.start_seconds, instruction=instruction))
    return drop_similar_steps(merge_close_steps(candidates), SIMILARITY_THRESHOLD)


def _light_step(timestamp: int, text: str) -> Optional[RecipeStep]:
    cleaned = strip_leading_filler(text, LIGHT_FILLER_PATTERNS)
    if len(cleaned) <= MIN_STEP_CHARS or SPAM_PATTERN.search(cleaned):
        return None
    return RecipeStep(timestamp_seconds=timestamp, instruction=finish_sentence(cleaned))


def _dedupe_by_time(steps: Iterable[RecipeStep], window: int = DUPLICATE_WINDOW_SECONDS) -> List[RecipeStep]:
    kept: List[RecipeStep] = []
    for step in steps:
        if any(abs(step.timestamp_seconds - other.timestamp_seconds) < window for other in kept):
            continue
        kept.append(step)
    return kept


def extract_aggressive(
    segments: Sequence[TranscriptSegment], max_duration: Optional[float] = None
) -> List[RecipeStep]:
    """Tier B: sample every Nth five-second window, aiming for roughly six to eight steps."""

    windows = window_segments(segments, max_duration)
    if not windows:
        return []
    interval = max(2, len(windows) // TARGET_STEP_COUNT)

    steps: List[RecipeStep] = []
    for window in windows[::interval]:
        if len(window.text) < MIN_STEP_CHARS:
            continue
        step = _light_step(window.start_seconds, window.text)
        if step is not None:
            steps.append(step)

    first = windows[0]
    if (
        RECIPE_START_PATTERN.search(first.text)
        and len(first.text) > MIN_STEP_CHARS
        and not any(abs(step.timestamp_seconds - first.start_seconds) < DUPLICATE_WINDOW_SECONDS for step in steps)
    ):
        instruction = finish_sentence(strip_leading_filler(first.text))
        steps.insert(0, RecipeStep(timestamp_seconds=first.start_seconds, instruction=instruction))

    return sort_steps(_dedupe_by_time(steps))


def extract_lenient(
    segments: Sequence[TranscriptSegment], max_duration: Optional[float] = None
) -> List[RecipeStep]:
    """Tier C: one step per contiguous chunk of segments, filtered only for channel spam."""

    if not segments:
        return []
    chunk_size = max(MIN_LENIENT_CHUNK, len(segments) // LENIENT_CHUNK_DIVISOR)

    steps: List[RecipeStep] = []
    for index in range(0, len(segments), chunk_size):
        chunk = segments[index:index + chunk_size]
        timestamp = chunk[0].start_seconds
        combined = " ".join(segment.text.strip() for segment in chunk).strip()
        if (max_duration is not None and timestamp > max_duration) or len(combined) < MIN_GROUP_CHARS:
            continue
        if SPAM_PATTERN.search(combined):
            continue
        step = _light_step(timestamp, combined)
        if step is not None:
            steps.append(step)
    return steps


__all__ = [
    "classify_step",
    "clean_instruction",
    "extract_aggressive",
    "extract_filtered",
    "extract_lenient",
    "finish_sentence",
    "group_segments",
    "is_instruction_candidate",
    "keyword_pattern",
    "merge_close_steps",
    "strip_leading_filler",
    "window_segments",
]
