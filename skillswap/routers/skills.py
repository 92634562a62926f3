from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from skillswap.database import get_db
from skillswap.models.skills import Skill
from skillswap.models.user import User
from skillswap.routers.dependencies import get_current_user
from skillswap.schemas.skills import SkillCreate, SkillProposal, SkillRead


router = APIRouter(prefix="/skills", tags=["skills"])


@router.get("", response_model=list[SkillRead])
def list_skills(db: Session = Depends(get_db)) -> list[SkillRead]:
    skills = (
        db.query(Skill)
        .filter(Skill.is_approved.is_(True))
        .order_by(Skill.category.asc(), Skill.name.asc())
        .all()
    )
    return [SkillRead.model_validate(s) for s in skills]


@router.post("", response_model=SkillProposal, status_code=status.HTTP_201_CREATED)
def propose_skill(
    payload: SkillCreate,
    db: Session = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> SkillProposal:
    name = payload.name.strip()
    # Catalogue names are unique regardless of case.
    existing = db.query(Skill).filter(func.lower(Skill.name) == name.lower()).first()
    if existing is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Skill already exists")
    skill = Skill(name=name, category=payload.category, description=payload.description, is_approved=False)
    db.add(skill)
    db.commit()
    db.refresh(skill)
    return SkillProposal.model_validate(skill)
