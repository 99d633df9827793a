"""Impact records and the field limits shared by every validation boundary."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Mapping

# Free-text limits. The API schemas and the record store both read these so the
# two independent checks can never disagree.
ENTRY_FIELD_LIMITS: Mapping[str, int] = {
    "what_you_did": 2000,
    "who_benefited": 500,
    "problem_solved": 500,
    "evidence": 1000,
}

STAKEHOLDER_FIELD_LIMITS: Mapping[str, int] = {
    "name": 200,
    "team": 200,
    "what_they_care_about": 1000,
    "how_you_impacted": 1000,
}

MAX_TAGS_PER_ENTRY = 10
MAX_TAG_LENGTH = 50


@dataclass(frozen=True)
class ImpactEntry:
    """One logged contribution."""

    id: str
    created_at: datetime
    week_of: date
    what_you_did: str
    who_benefited: str = ""
    problem_solved: str = ""
    evidence: str = ""
    tags: tuple[str, ...] = field(default_factory=tuple)

    @property
    def primary_tag(self) -> str | None:
        return self.tags[0] if self.tags else None


@dataclass(frozen=True)
class Stakeholder:
    """A person the user's work affects. Linked to entries only by name."""

    id: str
    name: str
    team: str = ""
    what_they_care_about: str = ""
    how_you_impacted: str = ""


def _length_issues(values: Mapping[str, object], limits: Mapping[str, int]) -> list[str]:
    issues: list[str] = []
    for name, limit in limits.items():
        value = values.get(name) or ""
        if len(str(value)) > limit:
            issues.append(f"{name} exceeds {limit} characters")
    return issues


def validate_entry_fields(values: Mapping[str, object]) -> list[str]:
    """Return a list of problems with an entry's mutable fields (empty when valid)."""
    issues: list[str] = []
    if not str(values.get("what_you_did") or "").strip():
        issues.append("what_you_did is required")
    issues.extend(_length_issues(values, ENTRY_FIELD_LIMITS))
    tags = values.get("tags") or ()
    if len(tuple(tags)) > MAX_TAGS_PER_ENTRY:
        issues.append(f"at most {MAX_TAGS_PER_ENTRY} tags are allowed")
    return issues


def validate_stakeholder_fields(values: Mapping[str, object]) -> list[str]:
    issues: list[str] = []
    if not str(values.get("name") or "").strip():
        issues.append("name is required")
    issues.extend(_length_issues(values, STAKEHOLDER_FIELD_LIMITS))
    return issues


__all__ = [
    "ENTRY_FIELD_LIMITS",
    "STAKEHOLDER_FIELD_LIMITS",
    "MAX_TAGS_PER_ENTRY",
    "MAX_TAG_LENGTH",
    "ImpactEntry",
    "Stakeholder",
    "validate_entry_fields",
    "validate_stakeholder_fields",
]
