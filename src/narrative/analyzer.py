"""Enrich raw impact entries with metrics, beneficiaries, theme and salience."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from .metrics import MetricSet, extract_metrics
from .models import ImpactEntry
from .tags import FALLBACK_THEME, normalize_custom_tag, tag_label

_BENEFICIARY_SPLIT = re.compile(r"[,;&]+")

# Impact score weights
PERCENT_WEIGHT = 3
CURRENCY_WEIGHT = 4
COUNT_WEIGHT = 2
BENEFICIARY_WEIGHT = 1
EVIDENCE_WEIGHT = 2
EVIDENCE_MIN_CHARS = 50


@dataclass(frozen=True)
class AnalyzedEntry:
    entry: ImpactEntry
    metrics: MetricSet
    beneficiaries: tuple[str, ...]
    theme_key: str
    theme: str
    impact_score: int

    @property
    def outcome_text(self) -> str:
        """What the entry achieved, preferring the problem it solved."""
        return (self.entry.problem_solved or "").strip() or (self.entry.what_you_did or "").strip()

    @property
    def has_outcome(self) -> bool:
        return bool(self.outcome_text)


def parse_beneficiaries(text: str | None) -> tuple[str, ...]:
    pieces = (piece.strip() for piece in _BENEFICIARY_SPLIT.split(text or ""))
    return tuple(piece for piece in pieces if piece)


def impact_score(metrics: MetricSet, beneficiaries: Iterable[str], evidence: str | None) -> int:
    score = (
        PERCENT_WEIGHT * len(metrics.percentages)
        + CURRENCY_WEIGHT * len(metrics.currency)
        + COUNT_WEIGHT * len(metrics.counts)
        + BENEFICIARY_WEIGHT * len(tuple(beneficiaries))
    )
    if len((evidence or "").strip()) > EVIDENCE_MIN_CHARS:
        score += EVIDENCE_WEIGHT
    return score


def analyze_entry(entry: ImpactEntry) -> AnalyzedEntry:
    # One pass over all three narrative fields; metrics are not attributed to a field.
    combined = "\n".join(
        part for part in (entry.what_you_did, entry.problem_solved, entry.evidence) if part
    )
    metrics = extract_metrics(combined)
    beneficiaries = parse_beneficiaries(entry.who_benefited)
    theme_key = normalize_custom_tag(entry.primary_tag) or FALLBACK_THEME
    return AnalyzedEntry(
        entry=entry,
        metrics=metrics,
        beneficiaries=beneficiaries,
        theme_key=theme_key,
        theme=tag_label(theme_key),
        impact_score=impact_score(metrics, beneficiaries, entry.evidence),
    )


def analyze_entries(entries: Iterable[ImpactEntry]) -> tuple[AnalyzedEntry, ...]:
    return tuple(analyze_entry(entry) for entry in entries)


__all__ = [
    "AnalyzedEntry",
    "parse_beneficiaries",
    "impact_score",
    "analyze_entry",
    "analyze_entries",
]
