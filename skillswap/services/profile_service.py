# profile_service.py
import logging
from typing import Iterable

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from skillswap.models.skills import Skill
from skillswap.models.user import User
from skillswap.models.user_skill import UserSkill
from skillswap.schemas.profile import ProfileRead, ProfileSkillRead, ProfileUpdate, UserSkillCreate
from skillswap.schemas.public_user import PublicUser, SkillClaimRead
from skillswap.services.matching import ClaimType, ProficiencyLevel, ProfileSnapshot, SkillClaim


logger = logging.getLogger(__name__)


def average_rating(values: Iterable[int]) -> tuple[float, int]:
    ratings = [int(v) for v in values if v is not None]
    if not ratings:
        return 0.0, 0
    return round(sum(ratings) / len(ratings), 1), len(ratings)


def _claims_of(user: User, claim_type: str) -> list[UserSkill]:
    return [us for us in user.user_skills if us.type == claim_type]


def to_skill_claim(user_skill: UserSkill) -> SkillClaim:
    return SkillClaim(
        name=user_skill.skill.name,
        level=ProficiencyLevel(user_skill.level),
        type=ClaimType(user_skill.type),
        category=user_skill.skill.category,
    )


def build_snapshot(user: User) -> ProfileSnapshot:
    """Turn an ORM user into the immutable input of the match scorer."""
    return ProfileSnapshot(
        user_id=user.id,
        location=user.location,
        availability=frozenset(user.availability or []),
        offered=tuple(to_skill_claim(us) for us in _claims_of(user, ClaimType.OFFERED.value)),
        wanted=tuple(to_skill_claim(us) for us in _claims_of(user, ClaimType.WANTED.value)),
    )


def build_public_user(user: User) -> PublicUser:
    avg, total = average_rating(r.rating for r in user.received_ratings)

    def claims(claim_type: str) -> list[SkillClaimRead]:
        return [
            SkillClaimRead(id=us.id, name=us.skill.name, category=us.skill.category, level=us.level)
            for us in _claims_of(user, claim_type)
        ]

    return PublicUser(
        id=user.id,
        name=user.name,
        location=user.location,
        profile_photo=user.profile_photo,
        availability=list(user.availability or []),
        skills_offered=claims(ClaimType.OFFERED.value),
        skills_wanted=claims(ClaimType.WANTED.value),
        average_rating=avg,
        total_ratings=total,
    )


def _profile_skill(us: UserSkill) -> ProfileSkillRead:
    return ProfileSkillRead(
        id=us.id,
        skill_id=us.skill.id,
        skill_name=us.skill.name,
        category=us.skill.category,
        level=us.level,
    )


def build_profile(user: User) -> ProfileRead:
    return ProfileRead(
        id=user.id,
        name=user.name,
        email=user.email,
        location=user.location,
        profile_photo=user.profile_photo,
        is_public=bool(user.is_public),
        availability=list(user.availability or []),
        skills_offered=[_profile_skill(us) for us in _claims_of(user, ClaimType.OFFERED.value)],
        skills_wanted=[_profile_skill(us) for us in _claims_of(user, ClaimType.WANTED.value)],
    )


def update_profile(db: Session, user: User, payload: ProfileUpdate) -> ProfileRead:
    user.name = payload.name
    user.location = payload.location
    user.profile_photo = payload.profile_photo
    user.is_public = payload.is_public
    # Keep first occurrence order, drop duplicates.
    user.availability = list(dict.fromkeys(payload.availability))
    db.add(user)
    db.commit()
    db.refresh(user)
    return build_profile(user)


def add_user_skill(db: Session, user: User, payload: UserSkillCreate) -> ProfileSkillRead:
    skill = db.query(Skill).filter(Skill.id == payload.skill_id).first()
    if skill is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Skill not found")

    existing = (
        db.query(UserSkill)
        .filter(UserSkill.user_id == user.id)
        .filter(UserSkill.skill_id == payload.skill_id)
        .filter(UserSkill.type == payload.type)
        .first()
    )
    if existing is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You already have this skill in your list")

    user_skill = UserSkill(
        user_id=user.id,
        skill_id=skill.id,
        type=payload.type,
        level=payload.level,
        description=payload.description,
    )
    db.add(user_skill)
    db.commit()
    db.refresh(user_skill)
    logger.info("profile.skill_added user_id=%s skill=%s type=%s", user.id, skill.name, payload.type)
    return _profile_skill(user_skill)


def remove_user_skill(db: Session, user: User, user_skill_id: int) -> None:
    user_skill = (
        db.query(UserSkill)
        .filter(UserSkill.id == user_skill_id)
        .filter(UserSkill.user_id == user.id)
        .first()
    )
    if user_skill is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Skill not found or access denied")
    db.delete(user_skill)
    db.commit()
