from datetime import date, datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.narrative.models import ENTRY_FIELD_LIMITS, MAX_TAGS_PER_ENTRY, ImpactEntry
from src.narrative.tags import normalize_custom_tag


class EntryIn(BaseModel):
    """Mutable fields of an impact entry, used for both create and full replace."""

    # Lengths are measured on the trimmed text, the same as the record store.
    model_config = ConfigDict(str_strip_whitespace=True)

    week_of: date
    what_you_did: str = Field(..., max_length=ENTRY_FIELD_LIMITS["what_you_did"])
    who_benefited: str = Field("", max_length=ENTRY_FIELD_LIMITS["who_benefited"])
    problem_solved: str = Field("", max_length=ENTRY_FIELD_LIMITS["problem_solved"])
    evidence: str = Field("", max_length=ENTRY_FIELD_LIMITS["evidence"])
    tags: List[str] = Field(default_factory=list)

    @field_validator("what_you_did")
    @classmethod
    def _required_text(cls, value: str) -> str:
        if not value:
            raise ValueError("what_you_did must not be blank")
        return value

    @field_validator("tags")
    @classmethod
    def _normalize_tags(cls, value: List[str]) -> List[str]:
        tags = list(dict.fromkeys(t for t in (normalize_custom_tag(tag) for tag in value) if t))
        if len(tags) > MAX_TAGS_PER_ENTRY:
            raise ValueError(f"at most {MAX_TAGS_PER_ENTRY} tags are allowed")
        return tags


class EntryOut(BaseModel):
    id: str
    created_at: datetime
    week_of: date
    what_you_did: str
    who_benefited: str = ""
    problem_solved: str = ""
    evidence: str = ""
    tags: List[str] = Field(default_factory=list)

    @classmethod
    def from_record(cls, entry: ImpactEntry) -> "EntryOut":
        return cls(
            id=entry.id,
            created_at=entry.created_at,
            week_of=entry.week_of,
            what_you_did=entry.what_you_did,
            who_benefited=entry.who_benefited,
            problem_solved=entry.problem_solved,
            evidence=entry.evidence,
            tags=list(entry.tags),
        )


class EntryList(BaseModel):
    entries: List[EntryOut]
    count: int
