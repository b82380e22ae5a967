"""Fakes shared across the test modules."""

from cheffy.models.transcript import TranscriptSegment
from cheffy.services.page import watch_url
from cheffy.services.transcript import TranscriptUnavailableError

NON_COOKING_SENTENCES = (
    "The weather in the mountains was lovely this morning",
    "We walked along the river for a long while",
    "Birds were singing in the tall pine trees",
    "The old stone bridge crossed a quiet stream",
    "Children played near the meadow gates",
)


def seg(seconds, text, duration=2):
    return TranscriptSegment(offset_ms=int(seconds * 1000), duration_ms=int(duration * 1000), text=text)


def non_cooking_segments(count=20, spacing=3):
    return [seg(index * spacing, NON_COOKING_SENTENCES[index % len(NON_COOKING_SENTENCES)]) for index in range(count)]


def cooking_segments():
    return [
        seg(0, "hey guys welcome back to my channel"),
        seg(30, "first add 2 cups of flour to the bowl"),
        seg(60, "then whisk in three eggs until smooth"),
        seg(90, "bake for 20 minutes at 180 degrees"),
    ]


class FakeSource:
    """Transcript source answering from a ``{language: items-or-exception}`` table."""

    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def fetch(self, video_id, language=None):
        self.calls.append(language)
        outcome = self.responses.get(language, TranscriptUnavailableError(f"No transcript in {language}"))
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakePageFetcher:
    def __init__(self, pages=None):
        self.pages = pages or {}
        self.requested = []

    def fetch(self, url):
        self.requested.append(url)
        return self.pages.get(url)

    def fetch_watch_page(self, video_id):
        return self.fetch(watch_url(video_id))


class StubTranscriptAcquirer:
    def __init__(self, segments=()):
        self.segments = list(segments)
        self.calls = []

    def acquire(self, video_id):
        self.calls.append(video_id)
        return list(self.segments)


class StubDescriptionAcquirer:
    def __init__(self, description=""):
        self.description = description
        self.calls = []

    def acquire(self, video_id):
        self.calls.append(video_id)
        return self.description


class StubDurationSource:
    def __init__(self, duration):
        self.duration = duration
        self.calls = []

    def get_duration(self, video_id):
        self.calls.append(video_id)
        return self.duration
