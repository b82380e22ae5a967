"""Service layer for the Cheffy application."""

from typing import Any, Dict, List, Optional, Protocol


class SupportsClose(Protocol):
    """Protocol describing resources that can be closed."""

    def close(self) -> None:
        """Release any acquired resources."""


class TranscriptSource(Protocol):
    """Anything able to return raw caption items for a video.

    Implementations raise on failure; the error message may embed an
    ``Available languages: a, b, c`` hint that callers are free to mine.
    """

    def fetch(self, video_id: str, language: Optional[str] = None) -> List[Dict[str, Any]]:
        """Return raw caption items, optionally for an explicit language code."""


class DurationSource(Protocol):
    """Oracle returning a video's length in seconds, or ``None`` when unknown."""

    def get_duration(self, video_id: str) -> Optional[float]:
        """Look up the duration of ``video_id``."""


__all__ = ["DurationSource", "SupportsClose", "TranscriptSource"]
