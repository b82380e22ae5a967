"""Validation helpers for YouTube URLs and identifiers."""

from __future__ import annotations

import re
from urllib.parse import parse_qs, urlparse


class InvalidYouTubeURLError(ValueError):
    """Raised when a provided URL is not a valid YouTube video link."""


_VIDEO_ID_PATTERN = re.compile(r"^[0-9A-Za-z_-]{11}$")
_PATH_ID_PATTERN = re.compile(r"/(?:embed|shorts|live|v)/([0-9A-Za-z_-]{11})")
_LOOSE_ID_PATTERNS = (
    re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/)([0-9A-Za-z_-]{11})(?![0-9A-Za-z_-])"),
    re.compile(r"youtube\.com/watch\?.*?\bv=([0-9A-Za-z_-]{11})(?![0-9A-Za-z_-])"),
)


def extract_video_id(url: str) -> str:
    """Extract and validate a YouTube video ID from a URL or raw ID string."""

    stripped = (url or "").strip()
    if not stripped:
        raise InvalidYouTubeURLError("YouTube URL is required")
    if _VIDEO_ID_PATTERN.fullmatch(stripped):
        return stripped

    candidate_url = stripped if "://" in stripped else f"https://{stripped}"
    parsed = urlparse(candidate_url)
    host = parsed.netloc.lower()

    if host in {"youtu.be", "www.youtu.be"}:
        candidate = parsed.path.lstrip("/").split("/", 1)[0]
        if _VIDEO_ID_PATTERN.fullmatch(candidate):
            return candidate

    if host.endswith("youtube.com") or host.endswith("youtube-nocookie.com"):
        if parsed.path == "/watch":
            candidate_list = parse_qs(parsed.query).get("v", [])
            if candidate_list and _VIDEO_ID_PATTERN.fullmatch(candidate_list[0]):
                return candidate_list[0]
        else:
            path_match = _PATH_ID_PATTERN.search(parsed.path)
            if path_match:
                return path_match.group(1)

    for pattern in _LOOSE_ID_PATTERNS:
        match = pattern.search(stripped)
        if match:
            return match.group(1)

    raise InvalidYouTubeURLError(f"Invalid YouTube URL or video ID: {url!r}")


__all__ = ["InvalidYouTubeURLError", "extract_video_id"]
