from cheffy.services.chapters import parse_chapters


def _pairs(steps):
    return [(step.timestamp_seconds, step.instruction) for step in steps]


def test_parses_plain_chapter_lines():
    steps = parse_chapters("0:00 Intro\n1:30 Chop onions\n")
    assert _pairs(steps) == [(0, "Intro"), (90, "Chop onions")]


def test_skips_short_titles():
    description = "Full recipe below!\n0:00 Hi\n2:00 Whisk the eggs\n10:05 Serve and enjoy"
    assert _pairs(parse_chapters(description)) == [(120, "Whisk the eggs"), (605, "Serve and enjoy")]


def test_title_runs_until_next_inline_timestamp():
    steps = parse_chapters("0:00 Intro 1:30 Chop the onions 4:00 Fry them")
    assert _pairs(steps) == [(0, "Intro"), (90, "Chop the onions"), (240, "Fry them")]


def test_falls_back_to_bracketed_markers():
    steps = parse_chapters("[0:15] Chop onions\n[2:05] Fry onions")
    assert _pairs(steps) == [(15, "Chop onions"), (125, "Fry onions")]


def test_hour_component_and_separators():
    steps = parse_chapters("0:30 - Boil the pasta\n1:02:03 | Let it rest")
    assert _pairs(steps) == [(30, "Boil the pasta"), (3723, "Let it rest")]


def test_description_without_markers():
    assert parse_chapters("") == []
    assert parse_chapters("My favourite weeknight dinner, ready in no time.") == []
