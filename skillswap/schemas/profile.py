from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from skillswap.constants import Availability, NAME_MAX_LENGTH, NAME_MIN_LENGTH, SkillLevel, SkillType


class ProfileSkillRead(BaseModel):
    id: int = Field(description="UserSkill id")
    skill_id: int
    skill_name: str
    category: str | None = None
    level: SkillLevel


class ProfileRead(BaseModel):
    id: int
    name: str
    email: str
    location: str | None = None
    profile_photo: str | None = None
    is_public: bool
    availability: list[str] = Field(default_factory=list)
    skills_offered: list[ProfileSkillRead] = Field(default_factory=list)
    skills_wanted: list[ProfileSkillRead] = Field(default_factory=list)


class ProfileUpdate(BaseModel):
    name: str = Field(min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    location: str | None = None
    profile_photo: str | None = None
    is_public: bool
    availability: list[Availability] = Field(default_factory=list)

    @field_validator("location", "profile_photo", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("profile_photo")
    @classmethod
    def _validate_photo_url(cls, v: str | None) -> str | None:
        if v is None:
            return None
        if not v.startswith(("http://", "https://")):
            raise ValueError("profile_photo must be an http(s) URL")
        return v


class UserSkillCreate(BaseModel):
    skill_id: int
    type: SkillType
    level: SkillLevel
    description: str | None = None


class MessageResponse(BaseModel):
    message: str
