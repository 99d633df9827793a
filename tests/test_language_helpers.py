import pytest

from src.narrative.inflection import (
    ensure_sentence,
    first_person_clause,
    join_series,
    lower_first,
    starts_with_past_tense_verb,
)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Led the OAuth 2.0 migration.", "I led the OAuth 2.0 migration"),
        ("reduced login failures by 40%", "I reduced login failures by 40%"),
        ("I built the release train", "I built the release train"),
        ("OAuth migration", None),
        ("Speed improvements", None),
        ("", None),
    ],
)
def test_first_person_clause(text, expected):
    assert first_person_clause(text) == expected


@pytest.mark.parametrize("word", ["Speed", "Hundred", "Red", "Feed"])
def test_ed_words_that_are_not_actions(word):
    assert not starts_with_past_tense_verb(f"{word} things")


def test_lower_first_keeps_acronyms_and_pronoun():
    assert lower_first("API latency dropped") == "API latency dropped"
    assert lower_first("I shipped it") == "I shipped it"
    assert lower_first("Reduced churn") == "reduced churn"


def test_join_series_uses_oxford_comma():
    assert join_series(["speed"]) == "speed"
    assert join_series(["speed", "quality"]) == "speed and quality"
    assert join_series(["speed", "quality", "revenue"]) == "speed, quality, and revenue"
    assert join_series([]) == ""


def test_ensure_sentence_tidies_fragments():
    assert ensure_sentence("i shipped the the release ,") == "I shipped the release."
    assert ensure_sentence("Done!!") == "Done!"
    assert ensure_sentence("   ") == ""
