from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from skillswap.constants import RequestStatus
from skillswap.schemas.public_user import Pagination
from skillswap.schemas.rating import RatingRead


class SwapRequestCreate(BaseModel):
    receiver_id: int
    sender_skill_id: int
    receiver_skill_id: int
    message: str | None = None


class SwapRequestCreated(BaseModel):
    id: int
    status: RequestStatus
    created_at: datetime


class SwapRequestAction(BaseModel):
    action: Literal["ACCEPTED", "REJECTED"]


class SwapRequestUpdated(BaseModel):
    id: int
    status: RequestStatus
    updated_at: datetime
    completed_at: datetime | None = None


class ParticipantSummary(BaseModel):
    id: int
    name: str
    location: str | None = None
    profile_photo: str | None = None
    average_rating: float = 0.0
    total_ratings: int = 0


class SkillSummary(BaseModel):
    id: int | None = None
    name: str
    category: str | None = None


class SwapRequestDetail(BaseModel):
    id: int
    sender_id: int
    receiver_id: int
    sender_skill_id: int
    receiver_skill_id: int
    message: str | None = None
    status: RequestStatus
    created_at: datetime
    updated_at: datetime
    completed_at: datetime | None = None
    sender: ParticipantSummary
    receiver: ParticipantSummary
    sender_skill: SkillSummary
    receiver_skill: SkillSummary
    rating: RatingRead | None = None


class SwapRequestPage(BaseModel):
    requests: list[SwapRequestDetail] = Field(default_factory=list)
    pagination: Pagination
