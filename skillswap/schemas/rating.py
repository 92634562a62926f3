from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from skillswap.constants import RATING_MAX, RATING_MIN


class RatingCreate(BaseModel):
    swap_request_id: int
    rating: int = Field(ge=RATING_MIN, le=RATING_MAX, strict=True)
    feedback: str | None = None


class RatingRead(BaseModel):
    id: int
    swap_request_id: int
    giver_id: int
    receiver_id: int
    rating: int
    feedback: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
