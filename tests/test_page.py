import json

import httpx
import pytest

from cheffy.config.settings import Settings
from cheffy.services.page import (
    PageFetcher,
    decode_json_string,
    dig,
    extract_json_object,
    find_caption_url,
    select_caption_track,
    watch_url,
)
from cheffy.services.transcript import TranscriptAcquirer

from helpers import FakeSource


def make_fetcher(handler, console):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return PageFetcher(settings=Settings(), console=console, client=client)


def test_fetch_sends_browser_headers(console):
    seen = {}

    def handler(request):
        seen["user_agent"] = request.headers["user-agent"]
        seen["accept_language"] = request.headers["accept-language"]
        return httpx.Response(200, text="<html>ok</html>")

    fetcher = make_fetcher(handler, console)
    assert fetcher.fetch_watch_page("dQw4w9WgXcQ") == "<html>ok</html>"
    assert "Mozilla/5.0" in seen["user_agent"]
    assert seen["accept_language"] == Settings().accept_language
    fetcher.close()


def test_fetch_returns_none_on_error_status(console):
    fetcher = make_fetcher(lambda request: httpx.Response(404, text="missing"), console)
    assert fetcher.fetch("https://www.youtube.com/watch?v=dQw4w9WgXcQ") is None


def test_fetch_returns_none_on_transport_error(console):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    fetcher = make_fetcher(handler, console)
    assert fetcher.fetch("https://www.youtube.com/watch?v=dQw4w9WgXcQ") is None


def test_fetch_returns_none_on_malformed_url(console):
    requested = []
    fetcher = make_fetcher(lambda request: requested.append(request) or httpx.Response(200), console)
    assert fetcher.fetch("https://www.youtube.com/api/timedtext?v=x\n&lang=en") is None
    assert fetcher.fetch("https://www.youtube.com/" + "a" * 70000) is None
    assert requested == []


def test_malformed_caption_url_degrades_to_empty_transcript(console):
    player_response = {
        "captions": {
            "playerCaptionsTracklistRenderer": {
                "captionTracks": [{"baseUrl": "https://www.youtube.com/api/timedtext?v=x\n", "languageCode": "en"}]
            }
        }
    }
    page = f"<script>var ytInitialPlayerResponse = {json.dumps(player_response)};</script>"

    def handler(request):
        if str(request.url) == watch_url("dQw4w9WgXcQ"):
            return httpx.Response(200, text=page)
        return httpx.Response(404)

    acquirer = TranscriptAcquirer(
        settings=Settings(),
        console=console,
        source=FakeSource({None: RuntimeError("boom")}),
        page_fetcher=make_fetcher(handler, console),
    )
    assert acquirer.acquire("dQw4w9WgXcQ") == []


def test_watch_url():
    assert watch_url("dQw4w9WgXcQ") == "https://www.youtube.com/watch?v=dQw4w9WgXcQ"


@pytest.mark.parametrize(
    "tracks, expected",
    [
        ([{"languageCode": "en", "kind": "asr", "baseUrl": "a"}, {"languageCode": "en", "baseUrl": "b"}], "b"),
        ([{"languageCode": "es", "baseUrl": "a"}, {"languageCode": "en", "kind": "asr", "baseUrl": "b"}], "b"),
        ([{"languageCode": "es", "baseUrl": "a"}, {"languageCode": "ko", "baseUrl": "b"}], "a"),
    ],
)
def test_select_caption_track(tracks, expected):
    assert select_caption_track(tracks)["baseUrl"] == expected


def test_select_caption_track_without_tracks():
    assert select_caption_track([]) is None


def test_find_caption_url_from_bare_caption_tracks():
    html = '<script>"captionTracks":[{"baseUrl":"https://www.youtube.com/api/timedtext?lang=en","languageCode":"en"}]</script>'
    assert find_caption_url(html) == "https://www.youtube.com/api/timedtext?lang=en"


def test_find_caption_url_from_escaped_base_url():
    html = r'<script>"baseUrl":"https:\/\/i.ytimg.com\/vi\/x.jpg","baseUrl":"https:\/\/www.youtube.com\/api\/timedtext?v=1&lang=en"</script>'
    assert find_caption_url(html) == "https://www.youtube.com/api/timedtext?v=1&lang=en"


def test_find_caption_url_without_captions():
    assert find_caption_url("<html></html>") is None


def test_extract_json_object_supports_window_assignment():
    html = '<script>window["ytInitialData"] = {"a": {"b": 1}};</script>'
    assert extract_json_object(html, "ytInitialData") == {"a": {"b": 1}}
    assert extract_json_object("<script>var other = {};</script>", "ytInitialData") is None


def test_decode_json_string_tolerates_bad_escapes():
    assert decode_json_string(r"Café\nTime") == "Café\nTime"
    assert decode_json_string(r"bad \q escape é") == "bad \\q escape é"


def test_dig():
    assert dig({"a": {"b": {"c": 3}}}, "a", "b", "c") == 3
    assert dig({"a": None}, "a", "b") is None
