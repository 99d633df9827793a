"""Entry filtering and at-a-glance statistics over a user's impact log."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Sequence

from .analyzer import parse_beneficiaries
from .models import ImpactEntry
from .tags import normalize_custom_tag, resolve_tag

TOP_STAKEHOLDERS = 8
TOP_STRENGTHS = 3
GAP_COUNT = 2


@dataclass(frozen=True)
class TagCount:
    tag: str
    label: str
    color: str
    count: int


@dataclass(frozen=True)
class StrengthsAndGaps:
    strengths: tuple[TagCount, ...]
    gaps: tuple[TagCount, ...]


@dataclass(frozen=True)
class ImpactStats:
    total_entries: int
    this_month: int
    unique_tags: int
    top_tag: TagCount | None


def filter_entries(
    entries: Iterable[ImpactEntry],
    *,
    query: str | None = None,
    tags: Sequence[str] | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
) -> list[ImpactEntry]:
    """Keyword, tag and week range filters; every supplied filter must match.

    The keyword is a case-insensitive substring test over the four free-text
    fields. An entry passes the tag filter if it carries any selected tag.
    Date bounds are inclusive and apply to ``week_of``.
    """
    needle = (query or "").strip().lower()
    wanted = {normalize_custom_tag(tag) for tag in tags or () if normalize_custom_tag(tag)}
    result: list[ImpactEntry] = []
    for entry in entries:
        if needle:
            haystack = " ".join(
                (entry.what_you_did, entry.who_benefited, entry.problem_solved, entry.evidence)
            ).lower()
            if needle not in haystack:
                continue
        if wanted and not wanted.intersection(normalize_custom_tag(tag) for tag in entry.tags):
            continue
        if date_from and entry.week_of < date_from:
            continue
        if date_to and entry.week_of > date_to:
            continue
        result.append(entry)
    return result


def _tag_count(tag: str, count: int) -> TagCount:
    info = resolve_tag(tag)
    return TagCount(tag=tag, label=info.label, color=info.color, count=count)


def tag_distribution(entries: Iterable[ImpactEntry]) -> list[TagCount]:
    counts: Counter[str] = Counter()
    for entry in entries:
        for tag in dict.fromkeys(normalize_custom_tag(tag) for tag in entry.tags):
            if tag:
                counts[tag] += 1
    # Counter.most_common keeps first-seen order for ties
    return [_tag_count(tag, count) for tag, count in counts.most_common()]


def stakeholder_frequency(
    entries: Iterable[ImpactEntry], limit: int = TOP_STAKEHOLDERS
) -> list[tuple[str, int]]:
    counts: Counter[str] = Counter()
    for entry in entries:
        for name in parse_beneficiaries(entry.who_benefited):
            counts[name] += 1
    return counts.most_common(limit)


def strengths_and_gaps(entries: Iterable[ImpactEntry]) -> StrengthsAndGaps:
    distribution = tag_distribution(entries)
    strengths = tuple(distribution[:TOP_STRENGTHS])
    gaps: tuple[TagCount, ...] = ()
    if len(distribution) > TOP_STRENGTHS:
        gaps = tuple(reversed(distribution[-GAP_COUNT:]))
    return StrengthsAndGaps(strengths=strengths, gaps=gaps)


def impact_stats(entries: Iterable[ImpactEntry], today: date | None = None) -> ImpactStats:
    items = list(entries)
    today = today or date.today()
    this_month = sum(
        1 for entry in items
        if entry.created_at.year == today.year and entry.created_at.month == today.month
    )
    distribution = tag_distribution(items)
    return ImpactStats(
        total_entries=len(items),
        this_month=this_month,
        unique_tags=len(distribution),
        top_tag=distribution[0] if distribution else None,
    )


__all__ = [
    "TagCount",
    "StrengthsAndGaps",
    "ImpactStats",
    "filter_entries",
    "tag_distribution",
    "stakeholder_frequency",
    "strengths_and_gaps",
    "impact_stats",
]
