from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.narrative.models import STAKEHOLDER_FIELD_LIMITS, Stakeholder


class StakeholderIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., max_length=STAKEHOLDER_FIELD_LIMITS["name"])
    team: str = Field("", max_length=STAKEHOLDER_FIELD_LIMITS["team"])
    what_they_care_about: str = Field("", max_length=STAKEHOLDER_FIELD_LIMITS["what_they_care_about"])
    how_you_impacted: str = Field("", max_length=STAKEHOLDER_FIELD_LIMITS["how_you_impacted"])

    @field_validator("name")
    @classmethod
    def _required_name(cls, value: str) -> str:
        if not value:
            raise ValueError("name must not be blank")
        return value


class StakeholderOut(BaseModel):
    id: str
    name: str
    team: str = ""
    what_they_care_about: str = ""
    how_you_impacted: str = ""

    @classmethod
    def from_record(cls, stakeholder: Stakeholder) -> "StakeholderOut":
        return cls(
            id=stakeholder.id,
            name=stakeholder.name,
            team=stakeholder.team,
            what_they_care_about=stakeholder.what_they_care_about,
            how_you_impacted=stakeholder.how_you_impacted,
        )


class StakeholderList(BaseModel):
    stakeholders: List[StakeholderOut]
    count: int
