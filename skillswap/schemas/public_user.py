from __future__ import annotations

from pydantic import BaseModel, Field

from skillswap.constants import SkillLevel


class SkillClaimRead(BaseModel):
    id: int = Field(description="UserSkill id")
    name: str
    category: str | None = None
    level: SkillLevel


class PublicUser(BaseModel):
    id: int
    name: str
    location: str | None = None
    profile_photo: str | None = None
    availability: list[str] = Field(default_factory=list)
    skills_offered: list[SkillClaimRead] = Field(default_factory=list)
    skills_wanted: list[SkillClaimRead] = Field(default_factory=list)
    average_rating: float = 0.0
    total_ratings: int = 0


class Pagination(BaseModel):
    current_page: int
    total_pages: int
    total_count: int
    has_next: bool
    has_prev: bool


class UserSearchFilters(BaseModel):
    search: str | None = None
    skill_category: str | None = None
    location: str | None = None
    skill_level: SkillLevel | None = None
    availability: str | None = None


class UsersPage(BaseModel):
    users: list[PublicUser]
    pagination: Pagination
    filters: UserSearchFilters


class MatchedSkillRead(BaseModel):
    user_offered: str
    other_wanted: str
    level_difference: int


class MatchResultRead(BaseModel):
    user_id: int
    score: int
    matched_skills: list[MatchedSkillRead] = Field(default_factory=list)


class UserMatch(BaseModel):
    user: PublicUser
    match: MatchResultRead
