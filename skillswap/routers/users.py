from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from skillswap.config import settings
from skillswap.constants import Availability, SkillLevel
from skillswap.database import get_db
from skillswap.models.user import User
from skillswap.routers.dependencies import get_current_user, get_optional_user, page_params
from skillswap.schemas.public_user import PublicUser, UserMatch, UserSearchFilters, UsersPage
from skillswap.services import user_service


router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=UsersPage)
def search_users(
    search: str | None = Query(default=None),
    skill_category: str | None = Query(default=None),
    location: str | None = Query(default=None),
    skill_level: SkillLevel | None = Query(default=None),
    availability: Availability | None = Query(default=None),
    paging: tuple[int, int] = Depends(page_params),
    db: Session = Depends(get_db),
) -> UsersPage:
    page, limit = paging
    filters = UserSearchFilters(
        search=search or None,
        skill_category=skill_category or None,
        location=location or None,
        skill_level=skill_level,
        availability=availability,
    )
    return user_service.search_users(db, filters, page=page, limit=limit)


@router.get("/matches", response_model=list[UserMatch])
def list_matches(
    request: Request,
    limit: int = Query(default=settings.pagination_default_limit, ge=1, le=settings.pagination_max_limit),
    min_score: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[UserMatch]:
    return user_service.find_matches(
        db,
        current_user,
        limit=limit,
        min_score=min_score,
        max_workers=settings.match_workers,
        metrics=getattr(request.app.state, "metrics", None),
    )


@router.get("/{user_id}", response_model=PublicUser)
def read_user(
    user_id: int,
    db: Session = Depends(get_db),
    viewer: User | None = Depends(get_optional_user),
) -> PublicUser:
    return user_service.get_public_user(db, user_id, viewer=viewer)
