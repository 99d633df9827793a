from typing import List, Literal, Optional

from pydantic import BaseModel

NarrativeType = Literal["review", "promotion", "role-change"]
Tone = Literal["results", "leadership", "technical", "balanced"]
Provider = Literal["template", "llm"]


class NarrativeRequest(BaseModel):
    """Request payload for generating a narrative from the caller's entries.

    ``entry_ids`` narrows generation to specific entries; when omitted every
    entry the caller owns is used.
    """

    type: NarrativeType = "review"
    tone: Tone = "balanced"
    provider: Provider = "template"
    entry_ids: Optional[List[str]] = None


class NarrativeMeta(BaseModel):
    type: NarrativeType
    tone: Tone
    provider: Provider
    entry_count: int
    remaining_today: Optional[int] = None


class NarrativeResponse(BaseModel):
    narrative: str
    meta: NarrativeMeta
