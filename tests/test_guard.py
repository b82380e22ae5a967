from cheffy.models.recipe import RecipeStep
from cheffy.services.guard import drop_similar_steps, filter_by_duration, finalize_steps
from cheffy.utils.text import jaccard_similarity


def step(seconds, instruction):
    return RecipeStep(timestamp_seconds=seconds, instruction=instruction)


def test_filter_by_duration_drops_late_steps():
    steps = [step(0, "Intro"), step(100, "Chop onions"), step(200, "Serve")]
    assert [s.timestamp_seconds for s in filter_by_duration(steps, 150)] == [0, 100]


def test_filter_by_duration_without_bound_keeps_everything():
    steps = [step(0, "Intro"), step(500, "Serve")]
    assert filter_by_duration(steps, None) == steps
    assert filter_by_duration(steps, 0) == steps


def test_filter_by_duration_is_idempotent():
    steps = [step(10, "Chop"), step(90, "Fry"), step(150, "Plate")]
    once = filter_by_duration(steps, 100)
    assert filter_by_duration(once, 100) == once


def test_drop_similar_steps_compares_with_last_kept():
    steps = [step(0, "Add the salt to the pot"), step(20, "Add the salt to the pot now"), step(40, "Bake the bread")]
    assert [s.timestamp_seconds for s in drop_similar_steps(steps)] == [0, 40]


def test_finalize_sorts_spaces_and_dedupes():
    steps = [
        step(30, "Fry the onions until golden"),
        step(0, "Chop the onions finely"),
        step(5, "Peel the garlic cloves"),
        step(45, "Fry the onions until golden brown"),
        step(200, "Plate and serve"),
    ]
    final = finalize_steps(steps, 150)
    assert [s.timestamp_seconds for s in final] == [0, 30]


def test_finalize_output_invariants_and_idempotence():
    phrases = ["Chop the onions", "Fry the garlic", "Boil water for pasta", "Season with salt", "Chop the onions finely"]
    steps = [step(seconds, phrases[index % len(phrases)]) for index, seconds in enumerate(range(0, 120, 7))]
    final = finalize_steps(steps, 100)
    for previous, current in zip(final, final[1:]):
        assert current.timestamp_seconds - previous.timestamp_seconds >= 10
        assert jaccard_similarity(previous.instruction, current.instruction) <= 0.6
    assert all(s.timestamp_seconds <= 100 for s in final)
    assert finalize_steps(final, 100) == final
