"""Compose a complete first-person narrative from logged impact entries."""

from __future__ import annotations

import logging
from typing import Iterable, Literal, cast

from .allocator import PhraseAllocator, seed_from_parts
from .analyzer import analyze_entries
from .builders import build_body, build_closing, build_opening
from .models import ImpactEntry
from .phrasebank import NARRATIVE_TYPES, TITLES, TONES, scrub_banned_phrases
from .themes import DEFAULT_TOP_THEMES, aggregate_themes

logger = logging.getLogger(__name__)

NO_ENTRIES_MESSAGE = "No impact entries found. Start capturing your wins to generate narratives."

NarrativeType = Literal["review", "promotion", "role-change"]
Tone = Literal["results", "leadership", "technical", "balanced"]


def normalize_narrative_type(value: str) -> NarrativeType:
    key = (value or "").strip().lower()
    if key not in NARRATIVE_TYPES:
        raise ValueError(f"Unknown narrative type '{value}'. Expected one of {', '.join(NARRATIVE_TYPES)}")
    return cast(NarrativeType, key)


def normalize_tone(value: str) -> Tone:
    key = (value or "").strip().lower()
    if key not in TONES:
        raise ValueError(f"Unknown tone '{value}'. Expected one of {', '.join(TONES)}")
    return cast(Tone, key)


def entries_seed(entries: Iterable[ImpactEntry], narrative_type: str, tone: str) -> int:
    parts: list[object] = [narrative_type, tone]
    for entry in entries:
        parts.extend((entry.id, entry.what_you_did, entry.problem_solved))
    return seed_from_parts(parts)


def generate(
    entries: Iterable[ImpactEntry],
    narrative_type: str = "review",
    tone: str = "balanced",
    *,
    allocator: PhraseAllocator | None = None,
    top_themes: int = DEFAULT_TOP_THEMES,
) -> str:
    """Build a markdown narrative: title, opening, theme paragraphs, closing.

    The same entries, type and tone always yield the same text. An empty
    collection yields ``NO_ENTRIES_MESSAGE``. Unknown types or tones raise
    ``ValueError``.
    """
    narrative_type = normalize_narrative_type(narrative_type)
    tone = normalize_tone(tone)
    items = tuple(entries or ())
    if not items:
        return NO_ENTRIES_MESSAGE

    analyzed = analyze_entries(items)
    summary = aggregate_themes(analyzed, top_n=top_themes)
    if allocator is None:
        allocator = PhraseAllocator(narrative_type, tone, seed=entries_seed(items, narrative_type, tone))
    logger.debug(
        "generating %s/%s narrative from %d entries across %d themes",
        narrative_type,
        tone,
        len(items),
        len(summary.ranked),
    )

    sections = [TITLES[narrative_type], build_opening(summary, narrative_type, tone, allocator)]
    for bucket in summary.selected:
        body = build_body(bucket, narrative_type, tone, allocator)
        if body:
            sections.append(body)
        else:
            logger.debug("theme %s has no outcome text, paragraph omitted", bucket.key)
    sections.append(build_closing(summary, narrative_type, tone, allocator))
    return scrub_banned_phrases("\n\n".join(section for section in sections if section))


__all__ = [
    "NO_ENTRIES_MESSAGE",
    "NarrativeType",
    "Tone",
    "normalize_narrative_type",
    "normalize_tone",
    "entries_seed",
    "generate",
]
