from typing import List, Optional

from pydantic import BaseModel


class TagCountOut(BaseModel):
    tag: str
    label: str
    color: str
    count: int


class StakeholderCountOut(BaseModel):
    name: str
    count: int


class StatsOut(BaseModel):
    total_entries: int
    this_month: int
    unique_tags: int
    top_tag: Optional[TagCountOut] = None


class InsightsResponse(BaseModel):
    stats: StatsOut
    tag_distribution: List[TagCountOut]
    stakeholders: List[StakeholderCountOut]
    strengths: List[TagCountOut]
    gaps: List[TagCountOut]
