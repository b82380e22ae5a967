"""Video metadata lookups backed by ``yt-dlp``."""

from __future__ import annotations

from typing import Any, Dict, Optional

import yt_dlp
from rich.console import Console
from yt_dlp.utils import YoutubeDLError

from cheffy.services.page import watch_url


class YtDlpDurationSource:
    """:class:`~cheffy.services.DurationSource` that reads the duration via ``yt-dlp``.

    Only metadata is requested; no media is downloaded.
    """

    def __init__(self, *, console: Optional[Console] = None) -> None:
        self._console = console or Console()

    def extract_video_metadata(self, video_id: str) -> Dict[str, Any]:
        """Retrieve YouTube metadata without downloading media.

        Parameters
        ----------
        video_id:
            YouTube identifier for the target video.

        Returns
        -------
        dict
            Mapping with the video id, title, channel and duration in seconds.
        """

        self._console.log("Extracting YouTube metadata via yt-dlp")
        ydl_opts = {"quiet": True, "no_warnings": True, "skip_download": True}
        with yt_dlp.YoutubeDL(ydl_opts) as ydl:
            info = ydl.extract_info(watch_url(video_id), download=False) or {}

        return {
            "video_id": info.get("id", video_id),
            "video_title": info.get("title", ""),
            "channel_name": info.get("uploader", ""),
            "duration_seconds": info.get("duration"),
        }

    def get_duration(self, video_id: str) -> Optional[float]:
        try:
            duration = self.extract_video_metadata(video_id).get("duration_seconds")
        except YoutubeDLError as exc:
            self._console.log(f"[yellow]Duration lookup failed:[/yellow] {exc}")
            return None
        if not duration or float(duration) <= 0:
            return None
        return float(duration)


__all__ = ["YtDlpDurationSource"]
