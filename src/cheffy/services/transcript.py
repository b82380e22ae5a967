"""Transcript acquisition service with fallback strategies."""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from rich.console import Console
from youtube_transcript_api import YouTubeTranscriptApi
from youtube_transcript_api._errors import CouldNotRetrieveTranscript, NoTranscriptFound

from cheffy.config.settings import Settings, get_settings
from cheffy.models.transcript import TranscriptSegment
from cheffy.services import TranscriptSource
from cheffy.services.page import PageFetcher, find_caption_url

# Offsets below this value are assumed to be seconds rather than milliseconds.
SECONDS_OFFSET_CEILING = 100_000

OFFSET_KEYS = ("offset", "start", "startTimeMs", "startTime", "time")
DURATION_KEYS = ("duration", "dur")
TEXT_KEYS = ("text", "transcript", "content")
MILLISECOND_KEYS = frozenset({"startTimeMs"})

_AVAILABLE_LANGUAGES_PATTERN = re.compile(r"Available languages:\s*([^)\n]+)", re.IGNORECASE)
_TEXT_ELEMENT_PATTERN = re.compile(r"<text\b([^>]*)>(.*?)</text>", re.DOTALL)
_PARAGRAPH_ELEMENT_PATTERN = re.compile(r"<p\b([^>]*)>(.*?)</p>", re.DOTALL)
_ATTRIBUTE_PATTERN = re.compile(r'(\w+)="([^"]*)"')
_TAG_PATTERN = re.compile(r"<[^>]+>")


class TranscriptUnavailableError(RuntimeError):
    """Raised when no caption track exists in the requested languages."""


class YouTubeCaptionSource:
    """:class:`TranscriptSource` backed by ``youtube_transcript_api``.

    When the requested languages are missing, the raised :class:`TranscriptUnavailableError`
    advertises the codes that do exist as ``Available languages: a, b``.
    """

    def __init__(
        self,
        *,
        settings: Optional[Settings] = None,
        api: Optional[YouTubeTranscriptApi] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._api = api or YouTubeTranscriptApi()

    def fetch(self, video_id: str, language: Optional[str] = None) -> List[Dict[str, Any]]:
        languages = (language,) if language else tuple(self._settings.default_languages)
        try:
            fetched = self._api.fetch(video_id, languages=languages)
        except NoTranscriptFound as exc:
            available = self.available_languages(video_id)
            hint = f" (Available languages: {', '.join(available)})" if available else ""
            raise TranscriptUnavailableError(
                f"No transcript in {', '.join(languages)} for {video_id}{hint}"
            ) from exc
        return fetched.to_raw_data()

    def available_languages(self, video_id: str) -> List[str]:
        """Return the language codes of every caption track offered for ``video_id``."""

        try:
            return [transcript.language_code for transcript in self._api.list(video_id)]
        except CouldNotRetrieveTranscript:
            return []


def parse_available_languages(message: str) -> List[str]:
    """Mine an ``Available languages: a, b, c`` hint out of an error message."""

    match = _AVAILABLE_LANGUAGES_PATTERN.search(message or "")
    if match is None:
        return []
    return [code.strip() for code in match.group(1).split(",") if code.strip()]


def _first_present(item: Mapping[str, Any], keys: Sequence[str]) -> Tuple[Optional[str], Any]:
    for key in keys:
        if item.get(key) is not None:
            return key, item[key]
    return None, None


def _to_number(value: Any) -> float:
    if isinstance(value, bool) or value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return max(number, 0.0)


def normalize_items(items: Iterable[Mapping[str, Any]]) -> List[TranscriptSegment]:
    """Convert raw caption items of any known shape into millisecond segments.

    Offsets under :data:`SECONDS_OFFSET_CEILING` are treated as seconds and rescaled, together
    with their duration, unless the field name itself declares milliseconds. Items whose text is
    empty after trimming are dropped.
    """

    segments: List[TranscriptSegment] = []
    for item in items:
        if not isinstance(item, Mapping):
            continue
        offset_key, raw_offset = _first_present(item, OFFSET_KEYS)
        _, raw_duration = _first_present(item, DURATION_KEYS)
        _, raw_text = _first_present(item, TEXT_KEYS)

        offset = _to_number(raw_offset)
        duration = _to_number(raw_duration)
        if offset_key not in MILLISECOND_KEYS and offset < SECONDS_OFFSET_CEILING:
            offset *= 1000
            duration *= 1000

        text = " ".join(html.unescape(str(raw_text or "")).split())
        if not text:
            continue
        segments.append(TranscriptSegment(offset_ms=int(round(offset)), duration_ms=int(round(duration)), text=text))
    return segments


def _element_body(body: str) -> str:
    # caption bodies arrive entity-escaped twice
    return html.unescape(html.unescape(_TAG_PATTERN.sub("", body))).strip()


def parse_timed_text(document: str) -> List[Dict[str, Any]]:
    """Parse YouTube timed-text XML into raw caption items.

    Supports the classic ``<text start="S" dur="D">`` format (seconds) and the ``srv3``
    ``<p t="MS" d="MS">`` format (milliseconds).
    """

    items: List[Dict[str, Any]] = []
    for attributes, body in _TEXT_ELEMENT_PATTERN.findall(document or ""):
        attrs = dict(_ATTRIBUTE_PATTERN.findall(attributes))
        if "start" not in attrs:
            continue
        items.append({"start": attrs["start"], "dur": attrs.get("dur", "0"), "text": _element_body(body)})
    if items:
        return items

    for attributes, body in _PARAGRAPH_ELEMENT_PATTERN.findall(document or ""):
        attrs = dict(_ATTRIBUTE_PATTERN.findall(attributes))
        if "t" not in attrs:
            continue
        items.append({"startTimeMs": attrs["t"], "duration": attrs.get("d", "0"), "text": _element_body(body)})
    return items


@dataclass(slots=True)
class AcquisitionState:
    """Per-request bookkeeping shared by the acquisition strategies."""

    video_id: str
    default_error: str = ""
    advertised_languages: List[str] = field(default_factory=list)
    attempted_languages: Set[str] = field(default_factory=set)
    language_attempts: int = 0
    failures: List[str] = field(default_factory=list)


TranscriptStrategy = Callable[[AcquisitionState], Optional[List[TranscriptSegment]]]


def first_success(
    strategies: Sequence[TranscriptStrategy], state: AcquisitionState
) -> List[TranscriptSegment]:
    """Run ``strategies`` in order and return the first non-empty result."""

    for strategy in strategies:
        segments = strategy(state)
        if segments:
            return segments
    return []


class TranscriptAcquirer:
    """Service responsible for obtaining timed transcript segments for a video.

    Strategies run in order, each only when everything before it produced nothing:

    1. the default caption track;
    2. every language advertised by the default failure, English first;
    3. the configured fallback languages when no language list could be mined;
    4. scraping a caption-track URL out of the watch page and parsing its timed-text XML.

    No strategy failure is fatal; :meth:`acquire` always returns a list, possibly empty.
    """

    def __init__(
        self,
        *,
        settings: Optional[Settings] = None,
        console: Optional[Console] = None,
        source: Optional[TranscriptSource] = None,
        page_fetcher: Optional[PageFetcher] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._console = console or Console()
        self._source = source or YouTubeCaptionSource(settings=self._settings)
        self._page_fetcher = page_fetcher or PageFetcher(settings=self._settings, console=self._console)
        self._max_language_attempts = max(1, self._settings.max_language_attempts)

    @property
    def strategies(self) -> List[TranscriptStrategy]:
        """Ordered acquisition strategies."""

        return [
            self.fetch_default,
            self.fetch_advertised_languages,
            self.fetch_fallback_languages,
            self.scrape_watch_page,
        ]

    def acquire(self, video_id: str) -> List[TranscriptSegment]:
        """Return transcript segments for ``video_id`` from the first strategy that yields any."""

        self._console.log(f"Fetching transcript for {video_id}")
        state = AcquisitionState(video_id=video_id)
        segments = first_success(self.strategies, state)
        if segments:
            self._console.log(f"[green]Transcript ready:[/green] {len(segments)} segments")
        else:
            self._console.log(
                f"[yellow]All transcript strategies failed for {video_id}[/yellow] "
                f"({len(state.failures)} failures); captions may be disabled or missing"
            )
        return segments

    def fetch_default(self, state: AcquisitionState) -> Optional[List[TranscriptSegment]]:
        """Request the default caption track."""

        try:
            segments = normalize_items(self._source.fetch(state.video_id))
        except Exception as exc:  # noqa: BLE001 - any source failure is recoverable
            state.default_error = str(exc)
            state.advertised_languages = parse_available_languages(state.default_error)
            self._record_failure(state, "default", exc)
            return None
        if not segments:
            state.failures.append("default: no segments")
        return segments

    def fetch_advertised_languages(self, state: AcquisitionState) -> Optional[List[TranscriptSegment]]:
        """Retry each language mined from the default failure, preferring English."""

        languages = state.advertised_languages
        if not languages:
            return None
        ordered = ["en", *[code for code in languages if code != "en"]] if "en" in languages else list(languages)
        self._console.log(f"Trying advertised languages: {', '.join(ordered)}")
        for language in ordered:
            segments, _ = self._try_language(state, language)
            if segments:
                return segments
        return None

    def fetch_fallback_languages(self, state: AcquisitionState) -> Optional[List[TranscriptSegment]]:
        """Retry the configured fallback languages when no language list could be mined.

        Each failure is mined again; the first language it advertises gets one attempt.
        """

        if state.advertised_languages:
            return None
        self._console.log(f"Trying fallback languages: {', '.join(self._settings.fallback_languages)}")
        for language in self._settings.fallback_languages:
            segments, error = self._try_language(state, language)
            if segments:
                return segments
            advertised = parse_available_languages(error)
            if advertised:
                segments, _ = self._try_language(state, advertised[0])
                if segments:
                    return segments
        return None

    def scrape_watch_page(self, state: AcquisitionState) -> Optional[List[TranscriptSegment]]:
        """Scrape a caption-track URL from the watch page and parse its timed text."""

        self._console.log("Scraping caption track from the watch page")
        page = self._page_fetcher.fetch_watch_page(state.video_id)
        if not page:
            state.failures.append("scrape: page unavailable")
            return None
        caption_url = find_caption_url(page)
        if not caption_url:
            self._console.log("[yellow]Could not find a caption track URL in page HTML[/yellow]")
            state.failures.append("scrape: no caption url")
            return None
        document = self._page_fetcher.fetch(caption_url)
        if not document:
            state.failures.append("scrape: caption document unavailable")
            return None
        segments = normalize_items(parse_timed_text(document))
        if segments:
            self._console.log(f"Scraped {len(segments)} segments from page captions")
        else:
            state.failures.append("scrape: caption document empty")
        return segments

    def _try_language(self, state: AcquisitionState, language: str) -> Tuple[Optional[List[TranscriptSegment]], str]:
        if language in state.attempted_languages:
            return None, ""
        if state.language_attempts >= self._max_language_attempts:
            self._console.log(
                f"[yellow]Language attempt limit reached ({self._max_language_attempts}); skipping {language}[/yellow]"
            )
            return None, ""
        state.attempted_languages.add(language)
        state.language_attempts += 1
        try:
            segments = normalize_items(self._source.fetch(state.video_id, language=language))
        except Exception as exc:  # noqa: BLE001 - any source failure is recoverable
            self._record_failure(state, language, exc)
            return None, str(exc)
        if segments:
            self._console.log(f"[green]Fetched {len(segments)} segments ({language})[/green]")
        return segments, ""

    def _record_failure(self, state: AcquisitionState, label: str, exc: Exception) -> None:
        message = str(exc)
        state.failures.append(f"{label}: {message}")
        self._console.log(f"[yellow]Transcript fetch failed ({label}):[/yellow] {message[:100]}")


__all__ = [
    "AcquisitionState",
    "TranscriptAcquirer",
    "TranscriptStrategy",
    "TranscriptUnavailableError",
    "YouTubeCaptionSource",
    "first_success",
    "normalize_items",
    "parse_available_languages",
    "parse_timed_text",
]
