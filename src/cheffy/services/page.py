"""Watch-page fetching and the scraping strategies that read embedded player data."""

from __future__ import annotations

import json
import re
from typing import Any, Callable, Dict, List, Optional, Sequence

import httpx
from rich.console import Console

from cheffy.config.settings import Settings, get_settings

WATCH_URL_TEMPLATE = "https://www.youtube.com/watch?v={video_id}"

CaptionUrlScraper = Callable[[str], Optional[str]]

_BASE_URL_PATTERN = re.compile(r'"baseUrl":\s*"((?:[^"\\]|\\.)+)"')
_CAPTION_TRACKS_PATTERN = re.compile(r'"captionTracks":\s*(?=\[)')


def watch_url(video_id: str) -> str:
    """Return the canonical watch-page URL for ``video_id``."""

    return WATCH_URL_TEMPLATE.format(video_id=video_id)


class PageFetcher:
    """Fetch HTML and caption documents with browser-like headers.

    Sites may reject requests carrying a default library user agent, so every request goes out
    with the configured ``User-Agent``, ``Accept`` and ``Accept-Language`` headers.
    """

    def __init__(
        self,
        *,
        settings: Optional[Settings] = None,
        console: Optional[Console] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._console = console or Console()
        self._client = client or httpx.Client(
            timeout=httpx.Timeout(self._settings.http_timeout_seconds),
            follow_redirects=True,
        )
        self._headers = {
            "User-Agent": self._settings.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": self._settings.accept_language,
        }

    def fetch(self, url: str) -> Optional[str]:
        """Return the response body for ``url`` or ``None`` on any failure."""

        try:
            response = self._client.get(url, headers=self._headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._console.log(
                f"[yellow]Page fetch returned {exc.response.status_code}:[/yellow] {url[:100]}"
            )
            return None
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            self._console.log(f"[yellow]Page fetch failed:[/yellow] {exc} ({url[:100]!r})")
            return None
        return response.text

    def fetch_watch_page(self, video_id: str) -> Optional[str]:
        """Fetch the watch-page HTML for ``video_id``."""

        return self.fetch(watch_url(video_id))

    def close(self) -> None:
        """Close the underlying HTTP client."""

        self._client.close()


def extract_json_value(html: str, start: int) -> Optional[Any]:
    """Decode the JSON value that begins at ``start`` in ``html``."""

    try:
        value, _ = json.JSONDecoder().raw_decode(html, start)
    except json.JSONDecodeError:
        return None
    return value


def extract_json_object(html: str, marker: str) -> Optional[Dict[str, Any]]:
    """Decode the object assigned to a JavaScript variable such as ``ytInitialData``."""

    match = re.search(rf'{re.escape(marker)}"?\]?\s*=\s*(?=\{{)', html)
    if match is None:
        return None
    value = extract_json_value(html, match.end())
    return value if isinstance(value, dict) else None


def decode_json_string(raw: str) -> str:
    """Decode the body of a JSON string literal, tolerating malformed escapes."""

    try:
        return json.loads(f'"{raw}"')
    except json.JSONDecodeError:
        decoded = re.sub(r"\\u([0-9a-fA-F]{4})", lambda match: chr(int(match.group(1), 16)), raw)
        return decoded.replace("\\n", "\n").replace('\\"', '"').replace("\\'", "'").replace("\\/", "/")


def dig(value: Any, *keys: str) -> Any:
    """Walk nested dictionaries, returning ``None`` as soon as a level is missing."""

    for key in keys:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def select_caption_track(tracks: Sequence[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Pick the best caption track.

    Priority is manual English, then auto-generated English, then the first track offered.
    """

    usable = [track for track in tracks if isinstance(track, dict)]
    if not usable:
        return None
    english = [track for track in usable if str(track.get("languageCode", "")).startswith("en")]
    manual_english = [track for track in english if str(track.get("kind", "")).lower() != "asr"]
    if manual_english:
        return manual_english[0]
    if english:
        return english[0]
    return usable[0]


def _track_url(tracks: Any) -> Optional[str]:
    if not isinstance(tracks, list):
        return None
    track = select_caption_track(tracks)
    if track and track.get("baseUrl"):
        return str(track["baseUrl"])
    return None


def caption_url_from_player_response(html: str) -> Optional[str]:
    """Read the caption track list out of the embedded ``ytInitialPlayerResponse`` object."""

    player_response = extract_json_object(html, "ytInitialPlayerResponse")
    if not player_response:
        return None
    return _track_url(dig(player_response, "captions", "playerCaptionsTracklistRenderer", "captionTracks"))


def caption_url_from_caption_tracks(html: str) -> Optional[str]:
    """Find a bare ``"captionTracks": [...]`` array anywhere in the page."""

    match = _CAPTION_TRACKS_PATTERN.search(html)
    if match is None:
        return None
    return _track_url(extract_json_value(html, match.end()))


def caption_url_from_base_url(html: str) -> Optional[str]:
    """Take the first ``"baseUrl"`` that looks like a timed-text endpoint."""

    for match in _BASE_URL_PATTERN.finditer(html):
        url = decode_json_string(match.group(1))
        if "timedtext" in url or "caption" in url:
            return url
    return None


CAPTION_URL_SCRAPERS: List[CaptionUrlScraper] = [
    caption_url_from_player_response,
    caption_url_from_caption_tracks,
    caption_url_from_base_url,
]


def find_caption_url(html: str, scrapers: Sequence[CaptionUrlScraper] = CAPTION_URL_SCRAPERS) -> Optional[str]:
    """Run ``scrapers`` in order and return the first caption URL found."""

    for scraper in scrapers:
        url = scraper(html)
        if url:
            return url
    return None


__all__ = [
    "CAPTION_URL_SCRAPERS",
    "CaptionUrlScraper",
    "PageFetcher",
    "caption_url_from_base_url",
    "caption_url_from_caption_tracks",
    "caption_url_from_player_response",
    "decode_json_string",
    "dig",
    "extract_json_object",
    "extract_json_value",
    "find_caption_url",
    "select_caption_track",
    "watch_url",
]
