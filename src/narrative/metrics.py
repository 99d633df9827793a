"""Pull quantifiable tokens out of free text.

Every category is a plain regex scan. Matches are trimmed and deduplicated in
first-seen order, and nothing here raises: empty or odd input simply yields an
empty ``MetricSet``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

COUNT_NOUNS: tuple[str, ...] = (
    "users?",
    "customers?",
    "teams?",
    "people",
    "person",
    "engineers?",
    "stakeholders?",
    "professionals?",
    "subscribers?",
    "readers?",
    "attendees?",
    "participants?",
    "clients?",
)

_PERCENT = re.compile(r"\d+(?:\.\d+)?%")
_CURRENCY = re.compile(r"\$\d+(?:,\d{3})*(?:\.\d{1,2})?[KMB]?\b", re.IGNORECASE)
_MULTIPLIER = re.compile(
    r"\b\d+(?:\.\d+)?x\b(?:\s+(?:improvement|increase|faster|better|growth)\b)?",
    re.IGNORECASE,
)
_COUNT = re.compile(
    r"\b\d+(?:,\d{3})*\+?\s*(?:" + "|".join(COUNT_NOUNS) + r")\b",
    re.IGNORECASE,
)
# Alternation order matters: "Q3 2024" must be consumed before the bare year.
_TIMEFRAME = re.compile(
    r"\bQ[1-4](?:\s+\d{4})?\b"
    r"|\bwithin\s+\d+\s+(?:day|week|month)s?\b"
    r"|\bin\s+\d+\s+(?:day|week|month)s?\b"
    r"|\b(?:19|20)\d{2}\b"
    r"|\bfirst-ever\b",
    re.IGNORECASE,
)


def _unique(values: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(value for value in values if value))


def _scan(pattern: re.Pattern[str], text: str) -> tuple[str, ...]:
    return _unique(" ".join(match.group(0).split()) for match in pattern.finditer(text))


@dataclass(frozen=True)
class MetricSet:
    percentages: tuple[str, ...] = ()
    currency: tuple[str, ...] = ()
    multipliers: tuple[str, ...] = ()
    counts: tuple[str, ...] = ()
    timeframes: tuple[str, ...] = ()

    @property
    def headline(self) -> tuple[str, ...]:
        """Quantities worth quoting on their own (everything except timeframes)."""
        return _unique((*self.percentages, *self.currency, *self.multipliers, *self.counts))

    @property
    def all(self) -> tuple[str, ...]:
        return _unique((*self.headline, *self.timeframes))

    def is_empty(self) -> bool:
        return not self.all


def extract_metrics(text: object) -> MetricSet:
    source = text if isinstance(text, str) else ("" if text is None else str(text))
    if not source.strip():
        return MetricSet()
    return MetricSet(
        percentages=_scan(_PERCENT, source),
        currency=_scan(_CURRENCY, source),
        multipliers=_scan(_MULTIPLIER, source),
        counts=_scan(_COUNT, source),
        timeframes=_scan(_TIMEFRAME, source),
    )


def merge_metrics(groups: Iterable[Iterable[str]]) -> tuple[str, ...]:
    return _unique(value for group in groups for value in group)


__all__ = ["COUNT_NOUNS", "MetricSet", "extract_metrics", "merge_metrics"]
