from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from skillswap.constants import SKILL_NAME_MAX_LENGTH, SKILL_NAME_MIN_LENGTH


class SkillRead(BaseModel):
    id: int
    name: str
    category: str | None = None

    model_config = ConfigDict(from_attributes=True)


class SkillCreate(BaseModel):
    name: str = Field(min_length=SKILL_NAME_MIN_LENGTH, max_length=SKILL_NAME_MAX_LENGTH)
    category: str | None = None
    description: str | None = None


class SkillProposal(SkillRead):
    description: str | None = None
    is_approved: bool = False
