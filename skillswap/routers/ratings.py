from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from skillswap.database import get_db
from skillswap.models.user import User
from skillswap.routers.dependencies import get_current_user
from skillswap.schemas.rating import RatingCreate, RatingRead
from skillswap.services.swap_service import rate_swap


router = APIRouter(prefix="/ratings", tags=["ratings"])


@router.post("", response_model=RatingRead, status_code=status.HTTP_201_CREATED)
def create_rating(
    payload: RatingCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> RatingRead:
    return rate_swap(db, current_user, payload)
