import pytest

from cheffy.services.synthesis import STAGE_LABELS, step_count_for, synthesize_steps


def test_four_minute_video():
    steps = synthesize_steps(240)
    assert [step.timestamp_seconds for step in steps] == [0, 60, 120, 180]
    assert steps[0].instruction == "Introduction"
    assert [step.instruction for step in steps[1:]] == list(STAGE_LABELS[1:4])


@pytest.mark.parametrize("duration", [3, 30, 240, 299, 300, 600, 3600])
def test_steps_stay_inside_video(duration):
    steps = synthesize_steps(duration)
    assert steps
    assert all(step.timestamp_seconds < duration for step in steps)
    limit = 4 if duration < 300 else 6
    assert len(steps) <= limit


def test_introduction_only_for_videos_longer_than_five_seconds():
    assert synthesize_steps(30)[0].timestamp_seconds == 0
    assert all(step.instruction != "Introduction" for step in synthesize_steps(3))


@pytest.mark.parametrize("duration", [None, 0, -5])
def test_unknown_duration_produces_nothing(duration):
    assert synthesize_steps(duration) == []


def test_step_count_bounds():
    assert step_count_for(60) == 2
    assert step_count_for(240) == 4
    assert step_count_for(300) == 5
    assert step_count_for(7200) == 6
