"""Timestamp formatting helpers."""

from __future__ import annotations


def format_time(seconds: float) -> str:
    """Render ``seconds`` as ``M:SS``.

    There is no hour component, so an hour-long video renders as ``60:00``.
    """

    total = max(0, int(seconds))
    minutes, secs = divmod(total, 60)
    return f"{minutes}:{secs:02d}"


__all__ = ["format_time"]
