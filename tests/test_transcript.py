import json
from types import SimpleNamespace

import pytest

from cheffy.config.settings import Settings
from cheffy.services.page import watch_url
from cheffy.services.transcript import (
    TranscriptAcquirer,
    TranscriptUnavailableError,
    YouTubeCaptionSource,
    normalize_items,
    parse_available_languages,
    parse_timed_text,
)

from helpers import FakePageFetcher, FakeSource

VIDEO_ID = "dQw4w9WgXcQ"
ITEMS = [{"text": "Add the salt", "start": 1.5, "duration": 2.0}]


def build_acquirer(source, console, settings=None, pages=None):
    return TranscriptAcquirer(
        settings=settings or Settings(),
        console=console,
        source=source,
        page_fetcher=FakePageFetcher(pages),
    )


def test_parse_available_languages():
    message = "No transcript in en for abc (Available languages: ko, es)"
    assert parse_available_languages(message) == ["ko", "es"]
    assert parse_available_languages("Video unavailable") == []


def test_normalize_items_handles_field_variants():
    segments = normalize_items(
        [
            {"text": "Add the salt", "start": 1.5, "duration": 2.0},
            {"transcript": "Chop", "offset": 3, "dur": 1},
            {"content": "Late", "offset": 250000, "duration": 3000},
            {"text": "Exact", "startTimeMs": 500, "duration": 1200},
            {"text": "   ", "start": 9},
            {"text": "Fish &amp; chips", "time": "12"},
        ]
    )
    assert [(s.offset_ms, s.duration_ms, s.text) for s in segments] == [
        (1500, 2000, "Add the salt"),
        (3000, 1000, "Chop"),
        (250000, 3000, "Late"),
        (500, 1200, "Exact"),
        (12000, 0, "Fish & chips"),
    ]


def test_parse_timed_text_classic_format():
    document = '<transcript><text start="1.5" dur="2.0">Add the &amp;amp; salt</text><text start="4">Stir</text></transcript>'
    items = parse_timed_text(document)
    assert items == [
        {"start": "1.5", "dur": "2.0", "text": "Add the & salt"},
        {"start": "4", "dur": "0", "text": "Stir"},
    ]
    segments = normalize_items(items)
    assert [(s.offset_ms, s.duration_ms) for s in segments] == [(1500, 2000), (4000, 0)]


def test_parse_timed_text_srv3_format():
    document = '<timedtext><body><p t="1500" d="2000">Stir <s>well</s></p></body></timedtext>'
    segments = normalize_items(parse_timed_text(document))
    assert [(s.offset_ms, s.duration_ms, s.text) for s in segments] == [(1500, 2000, "Stir well")]


def test_default_track_wins(console):
    source = FakeSource({None: ITEMS})
    segments = build_acquirer(source, console).acquire(VIDEO_ID)
    assert len(segments) == 1
    assert source.calls == [None]


def test_advertised_languages_prefer_english(console):
    source = FakeSource(
        {None: TranscriptUnavailableError("No transcript (Available languages: ko, en)"), "en": ITEMS}
    )
    assert build_acquirer(source, console).acquire(VIDEO_ID)
    assert source.calls == [None, "en"]


def test_advertised_languages_in_listed_order(console):
    source = FakeSource({None: TranscriptUnavailableError("(Available languages: es, ko)"), "ko": ITEMS})
    assert build_acquirer(source, console).acquire(VIDEO_ID)
    assert source.calls == [None, "es", "ko"]


def test_fallback_languages_when_nothing_advertised(console):
    source = FakeSource({None: RuntimeError("boom"), "es": ITEMS})
    assert build_acquirer(source, console).acquire(VIDEO_ID)
    assert source.calls == [None, "en", "es"]


def test_fallback_failure_is_mined_for_languages(console):
    source = FakeSource(
        {
            None: RuntimeError("boom"),
            "en": TranscriptUnavailableError("No transcript (Available languages: fr)"),
            "fr": ITEMS,
        }
    )
    assert build_acquirer(source, console).acquire(VIDEO_ID)
    assert source.calls == [None, "en", "fr"]


def test_language_attempts_are_capped(console):
    settings = Settings(CHEFFY_MAX_LANGUAGE_ATTEMPTS=2)
    source = FakeSource({None: TranscriptUnavailableError("(Available languages: de, fr, it, ja)")})
    acquirer = build_acquirer(source, console, settings=settings)
    assert acquirer.acquire(VIDEO_ID) == []
    assert source.calls == [None, "de", "fr"]


def test_scrapes_caption_track_from_watch_page(console):
    player_response = {
        "captions": {
            "playerCaptionsTracklistRenderer": {
                "captionTracks": [
                    {"baseUrl": "https://www.youtube.com/api/timedtext?v=x&lang=es", "languageCode": "es"},
                    {"baseUrl": "https://www.youtube.com/api/timedtext?v=x&lang=en", "languageCode": "en", "kind": "asr"},
                ]
            }
        }
    }
    page = f"<html><script>var ytInitialPlayerResponse = {json.dumps(player_response)};</script></html>"
    pages = {
        watch_url(VIDEO_ID): page,
        "https://www.youtube.com/api/timedtext?v=x&lang=en": '<transcript><text start="1.5" dur="2">Add the &amp;amp; salt</text></transcript>',
    }
    source = FakeSource({None: RuntimeError("boom")})
    segments = build_acquirer(source, console, pages=pages).acquire(VIDEO_ID)

    assert source.calls == [None, "en", "es", "ko"]
    assert [(s.offset_ms, s.text) for s in segments] == [(1500, "Add the & salt")]


def test_all_strategies_failing_returns_empty(console):
    source = FakeSource({None: RuntimeError("boom")})
    assert build_acquirer(source, console).acquire(VIDEO_ID) == []


class FakeTranscriptApi:
    def __init__(self):
        self.requests = []

    def fetch(self, video_id, languages):
        self.requests.append((video_id, languages))
        return SimpleNamespace(to_raw_data=lambda: list(ITEMS))

    def list(self, video_id):
        return [SimpleNamespace(language_code="en"), SimpleNamespace(language_code="ko")]


def test_caption_source_uses_requested_language():
    api = FakeTranscriptApi()
    source = YouTubeCaptionSource(settings=Settings(), api=api)
    assert source.fetch(VIDEO_ID) == ITEMS
    assert source.fetch(VIDEO_ID, language="ko") == ITEMS
    assert api.requests == [(VIDEO_ID, ("en",)), (VIDEO_ID, ("ko",))]
    assert source.available_languages(VIDEO_ID) == ["en", "ko"]


@pytest.mark.parametrize("item", [None, "text", 42])
def test_normalize_items_ignores_non_mappings(item):
    assert normalize_items([item]) == []
