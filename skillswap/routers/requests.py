from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from skillswap.constants import RequestStatus
from skillswap.database import get_db
from skillswap.models.user import User
from skillswap.routers.dependencies import get_current_user, page_params
from skillswap.schemas.profile import MessageResponse
from skillswap.schemas.swap_request import (
    SwapRequestAction,
    SwapRequestCreate,
    SwapRequestCreated,
    SwapRequestPage,
    SwapRequestUpdated,
)
from skillswap.services import swap_service


router = APIRouter(prefix="/requests", tags=["requests"])


@router.get("", response_model=SwapRequestPage)
def list_my_requests(
    direction: Literal["sent", "received", "all"] = Query(default="all"),
    status_filter: RequestStatus | Literal["all"] | None = Query(default=None, alias="status"),
    paging: tuple[int, int] = Depends(page_params),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> SwapRequestPage:
    page, limit = paging
    return swap_service.list_requests(
        db,
        current_user,
        direction=direction,
        status_filter=status_filter,
        page=page,
        limit=limit,
    )


@router.post("", response_model=SwapRequestCreated, status_code=status.HTTP_201_CREATED)
def create_request(
    payload: SwapRequestCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> SwapRequestCreated:
    return swap_service.create_request(db, current_user, payload)


@router.put("/{request_id}", response_model=SwapRequestUpdated)
def respond_to_request(
    request_id: int,
    payload: SwapRequestAction,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> SwapRequestUpdated:
    return swap_service.respond_to_request(db, current_user, request_id, payload.action)


@router.delete("/{request_id}", response_model=MessageResponse)
def delete_request(
    request_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    swap_service.delete_request(db, current_user, request_id)
    return MessageResponse(message="Request deleted successfully")
