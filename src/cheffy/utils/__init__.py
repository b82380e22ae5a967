"""Utility helpers shared across Cheffy modules."""

from cheffy.utils.text import jaccard_similarity
from cheffy.utils.time import format_time
from cheffy.utils.validation import InvalidYouTubeURLError, extract_video_id

__all__ = ["InvalidYouTubeURLError", "extract_video_id", "format_time", "jaccard_similarity"]
