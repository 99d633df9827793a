import pytest

from scripts.validate_phrasebank import validate
from src.narrative.phrasebank import (
    NARRATIVE_TYPES,
    PHRASE_TABLE,
    TONES,
    contains_banned_phrase,
    phrase_bank,
)


def test_phrase_tables_pass_lint():
    assert validate() == []


def test_every_type_and_tone_has_a_bank():
    assert set(PHRASE_TABLE) == {(t, tone) for t in NARRATIVE_TYPES for tone in TONES}


def test_tone_changes_vocabulary_independent_of_type():
    results = phrase_bank("review", "results")
    technical = phrase_bank("review", "technical")
    assert results.verbs != technical.verbs
    assert results.transitions != technical.transitions
    assert results.connectors == technical.connectors


def test_unknown_bank_raises_key_error():
    with pytest.raises(KeyError):
        phrase_bank("memo", "results")


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Delivering Tangible Value to the Organization daily", True),
        ("That was a best-in-class launch", True),
        ("Cut p95 latency by 30%", False),
        ("", False),
    ],
)
def test_contains_banned_phrase(text, expected):
    assert contains_banned_phrase(text) is expected
