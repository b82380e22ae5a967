"""Best-effort extraction of a video's description from its watch page."""

from __future__ import annotations

import html
import re
from typing import Callable, List, Optional, Sequence

from rich.console import Console

from cheffy.config.settings import Settings, get_settings
from cheffy.services.page import PageFetcher, decode_json_string, dig, extract_json_object

DescriptionScraper = Callable[[str], Optional[str]]

_SHORT_DESCRIPTION_PATTERN = re.compile(r'"shortDescription":"((?:[^"\\]|\\.)+)"')
_DESCRIPTION_PATTERN = re.compile(r'"description":"((?:[^"\\]|\\.)+)"')
_META_DESCRIPTION_PATTERN = re.compile(r'<meta\s+name="description"\s+content="([^"]+)"', re.IGNORECASE)


def description_from_short_description(page: str) -> Optional[str]:
    match = _SHORT_DESCRIPTION_PATTERN.search(page)
    return decode_json_string(match.group(1)) if match else None


def description_from_json_field(page: str) -> Optional[str]:
    match = _DESCRIPTION_PATTERN.search(page)
    return decode_json_string(match.group(1)) if match else None


def description_from_meta_tag(page: str) -> Optional[str]:
    match = _META_DESCRIPTION_PATTERN.search(page)
    return html.unescape(match.group(1)) if match else None


def description_from_initial_data(page: str) -> Optional[str]:
    """Join the description runs nested in the ``ytInitialData`` watch-next results."""

    data = extract_json_object(page, "ytInitialData")
    if not data:
        return None
    contents = dig(data, "contents", "twoColumnWatchNextResults", "results", "results", "contents")
    if not isinstance(contents, list):
        return None
    for content in contents:
        runs = dig(content, "videoSecondaryInfoRenderer", "description", "runs")
        if isinstance(runs, list) and runs:
            return "".join(str(run.get("text", "")) for run in runs if isinstance(run, dict))
    return None


DESCRIPTION_SCRAPERS: List[DescriptionScraper] = [
    description_from_short_description,
    description_from_json_field,
    description_from_meta_tag,
    description_from_initial_data,
]


class DescriptionAcquirer:
    """Fetch the watch page and pull the video description out of it.

    Every failure, from the network to an unrecognised page layout, yields an empty string.
    """

    def __init__(
        self,
        *,
        settings: Optional[Settings] = None,
        console: Optional[Console] = None,
        page_fetcher: Optional[PageFetcher] = None,
        scrapers: Sequence[DescriptionScraper] = DESCRIPTION_SCRAPERS,
    ) -> None:
        self._settings = settings or get_settings()
        self._console = console or Console()
        self._page_fetcher = page_fetcher or PageFetcher(settings=self._settings, console=self._console)
        self._scrapers = list(scrapers)

    def acquire(self, video_id: str) -> str:
        """Return the description of ``video_id`` or ``""``."""

        page = self._page_fetcher.fetch_watch_page(video_id)
        if not page:
            return ""
        for scraper in self._scrapers:
            description = scraper(page)
            if description and description.strip():
                self._console.log(f"Got description ({len(description)} chars) via {scraper.__name__}")
                return description
        self._console.log("[yellow]Could not extract description from video page[/yellow]")
        return ""


__all__ = [
    "DESCRIPTION_SCRAPERS",
    "DescriptionAcquirer",
    "DescriptionScraper",
    "description_from_initial_data",
    "description_from_json_field",
    "description_from_meta_tag",
    "description_from_short_description",
]
