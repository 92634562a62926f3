from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from skillswap.database import get_db
from skillswap.models.user import User
from skillswap.routers.dependencies import get_current_user
from skillswap.schemas.profile import MessageResponse, ProfileRead, ProfileSkillRead, ProfileUpdate, UserSkillCreate
from skillswap.services import profile_service


router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=ProfileRead)
def read_my_profile(current_user: User = Depends(get_current_user)) -> ProfileRead:
    return profile_service.build_profile(current_user)


@router.put("", response_model=ProfileRead)
def update_my_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ProfileRead:
    return profile_service.update_profile(db, current_user, payload)


@router.post("/skills", response_model=ProfileSkillRead, status_code=status.HTTP_201_CREATED)
def add_my_skill(
    payload: UserSkillCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ProfileSkillRead:
    return profile_service.add_user_skill(db, current_user, payload)


@router.delete("/skills/{user_skill_id}", response_model=MessageResponse)
def remove_my_skill(
    user_skill_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    profile_service.remove_user_skill(db, current_user, user_skill_id)
    return MessageResponse(message="Skill removed successfully")
