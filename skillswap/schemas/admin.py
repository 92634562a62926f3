from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class AdminStatsResponse(BaseModel):
    generated_at: datetime
    total_users: int
    active_users: int
    total_swaps: int
    completed_swaps: int
    pending_swaps: int
    total_skills: int
    pending_skills: int


class AdminUserRow(BaseModel):
    id: int
    name: str
    email: str
    location: str | None = None
    is_banned: bool
    created_at: datetime
    sent_requests: int
    received_requests: int


class AdminSkillRow(BaseModel):
    id: int
    name: str
    category: str | None = None
    description: str | None = None
    is_approved: bool
    created_at: datetime
    user_count: int


class AdminUserRef(BaseModel):
    id: int
    name: str
    email: str


class AdminSwapRow(BaseModel):
    id: int
    status: str
    created_at: datetime
    sender: AdminUserRef
    receiver: AdminUserRef


class AdminDataPage(BaseModel):
    type: Literal["users", "skills", "swaps"]
    items: list[AdminUserRow] | list[AdminSkillRow] | list[AdminSwapRow]
    total_count: int
    total_pages: int


class AdminSwapDetail(BaseModel):
    id: int
    status: str
    message: str | None = None
    created_at: datetime
    requester_name: str
    recipient_name: str
    skill_offered_name: str
    skill_wanted_name: str
    rating: int | None = None


class AdminMessageRead(BaseModel):
    id: int
    title: str
    content: str
    user_id: int | None = None
    is_global: bool
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GlobalMessageCreate(BaseModel):
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)


class AdminActionRequest(BaseModel):
    action: str
    target_id: int | None = None
    data: dict[str, Any] = Field(default_factory=dict)


class AdminActionResponse(BaseModel):
    message: str


class ApproveSkillRequest(BaseModel):
    skill_id: int
    approved: bool


class BanUserRequest(BaseModel):
    user_id: int


class ToggleMessageRequest(BaseModel):
    message_id: int
    is_active: bool


class ToggleMessageResponse(BaseModel):
    message: str
    data: AdminMessageRead


class LocationCount(BaseModel):
    location: str
    count: int


class MonthCount(BaseModel):
    month: str
    count: int


class SkillRequestCount(BaseModel):
    skill: str
    requests: int


class StatusCount(BaseModel):
    status: str
    count: int


class UserActivityReport(BaseModel):
    total_registrations: int
    registrations_this_month: int
    active_users_last_week: int
    top_locations: list[LocationCount] = Field(default_factory=list)
    registrations_by_month: list[MonthCount] = Field(default_factory=list)


class SwapStatisticsReport(BaseModel):
    total_requests: int
    completion_rate: float
    popular_skills: list[SkillRequestCount] = Field(default_factory=list)
    swaps_by_status: list[StatusCount] = Field(default_factory=list)
    average_rating: float
    swaps_by_month: list[MonthCount] = Field(default_factory=list)


class MetricSummary(BaseModel):
    average: float
    count: int
