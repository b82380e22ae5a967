import pytest

from cheffy.utils.text import jaccard_similarity
from cheffy.utils.time import format_time
from cheffy.utils.validation import InvalidYouTubeURLError, extract_video_id


@pytest.mark.parametrize(
    "seconds, expected",
    [(0, "0:00"), (5, "0:05"), (65, "1:05"), (599, "9:59"), (3600, "60:00"), (59.9, "0:59")],
)
def test_format_time(seconds, expected):
    assert format_time(seconds) == expected


def test_similarity_identical_and_disjoint():
    assert jaccard_similarity("chop the onion", "chop the onion") == 1.0
    assert jaccard_similarity("chop onion", "boil water") == 0.0


def test_similarity_is_case_insensitive_and_symmetric():
    first, second = "Add the salt", "add the pepper"
    assert jaccard_similarity(first, second) == pytest.approx(0.5)
    assert jaccard_similarity(second, first) == jaccard_similarity(first, second)


def test_similarity_of_empty_inputs_is_zero():
    assert jaccard_similarity("", "") == 0.0
    assert jaccard_similarity("   ", "salt") == 0.0


@pytest.mark.parametrize(
    "url",
    [
        "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=42s",
        "https://m.youtube.com/watch?feature=share&v=dQw4w9WgXcQ",
        "https://youtu.be/dQw4w9WgXcQ",
        "https://youtu.be/dQw4w9WgXcQ?si=abc123",
        "https://www.youtube.com/embed/dQw4w9WgXcQ",
        "https://www.youtube.com/shorts/dQw4w9WgXcQ",
        "youtube.com/watch?v=dQw4w9WgXcQ",
        "dQw4w9WgXcQ",
        "  dQw4w9WgXcQ  ",
    ],
)
def test_extract_video_id(url):
    assert extract_video_id(url) == "dQw4w9WgXcQ"


@pytest.mark.parametrize("url", ["https://example.com/video", "not a url", "https://youtu.be/short"])
def test_extract_video_id_rejects_invalid(url):
    with pytest.raises(InvalidYouTubeURLError, match="Invalid YouTube URL"):
        extract_video_id(url)


@pytest.mark.parametrize("url", ["", "   ", None])
def test_extract_video_id_requires_input(url):
    with pytest.raises(InvalidYouTubeURLError, match="YouTube URL is required"):
        extract_video_id(url)
