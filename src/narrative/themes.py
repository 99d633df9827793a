"""Group analyzed entries into themes and rank them for body coverage."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping

from .analyzer import AnalyzedEntry
from .metrics import merge_metrics

DEFAULT_TOP_THEMES = 3


@dataclass
class ThemeBucket:
    key: str
    label: str
    entries: list[AnalyzedEntry] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.entries)

    def ranked_entries(self) -> tuple[AnalyzedEntry, ...]:
        """Entries by impact score, highest first; ties keep logging order."""
        return tuple(sorted(self.entries, key=lambda item: -item.impact_score))

    def outcome_entries(self) -> tuple[AnalyzedEntry, ...]:
        return tuple(item for item in self.ranked_entries() if item.has_outcome)


@dataclass(frozen=True)
class ThemeSummary:
    entries: tuple[AnalyzedEntry, ...]
    buckets: tuple[ThemeBucket, ...]
    ranked: tuple[ThemeBucket, ...]
    selected: tuple[ThemeBucket, ...]
    beneficiaries: tuple[str, ...]
    metrics: tuple[str, ...]
    headline_metrics: tuple[str, ...]
    by_beneficiary: Mapping[str, tuple[AnalyzedEntry, ...]]

    def top_beneficiaries(self, limit: int | None = None) -> tuple[str, ...]:
        """Beneficiaries by how many entries name them, ties in first-seen order."""
        ranked = sorted(self.beneficiaries, key=lambda name: -len(self.by_beneficiary[name]))
        return tuple(ranked if limit is None else ranked[:limit])


def aggregate_themes(
    analyzed: Iterable[AnalyzedEntry], top_n: int = DEFAULT_TOP_THEMES
) -> ThemeSummary:
    entries = tuple(analyzed)
    buckets: dict[str, ThemeBucket] = {}
    by_beneficiary: dict[str, list[AnalyzedEntry]] = {}
    for item in entries:
        bucket = buckets.get(item.theme_key)
        if bucket is None:
            bucket = buckets[item.theme_key] = ThemeBucket(key=item.theme_key, label=item.theme)
        bucket.entries.append(item)
        for name in dict.fromkeys(item.beneficiaries):
            by_beneficiary.setdefault(name, []).append(item)

    ordered = tuple(buckets.values())
    # sorted() is stable, so equal-sized themes keep first-seen order
    ranked = tuple(sorted(ordered, key=lambda bucket: -bucket.size))
    return ThemeSummary(
        entries=entries,
        buckets=ordered,
        ranked=ranked,
        selected=ranked[: max(top_n, 0)],
        beneficiaries=tuple(by_beneficiary),
        metrics=merge_metrics(item.metrics.all for item in entries),
        headline_metrics=merge_metrics(item.metrics.headline for item in entries),
        by_beneficiary={name: tuple(items) for name, items in by_beneficiary.items()},
    )


__all__ = ["DEFAULT_TOP_THEMES", "ThemeBucket", "ThemeSummary", "aggregate_themes"]
