from typing import List

from pydantic import BaseModel, ConfigDict, Field

from src.narrative.models import MAX_TAG_LENGTH


class TagOut(BaseModel):
    tag: str
    label: str
    color: str
    custom: bool = False


class TagList(BaseModel):
    """Known impact tags first, then the caller's custom tags sorted by name."""

    tags: List[TagOut]


class CustomTagIn(BaseModel):
    # Blank names reach the store, which reports them as RECORD_INVALID.
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., max_length=MAX_TAG_LENGTH)
