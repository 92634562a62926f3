from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from skillswap.models.rating import Rating
from skillswap.models.swap_request import SwapRequest
from skillswap.models.user import User
from skillswap.models.user_skill import UserSkill
from skillswap.schemas.rating import RatingCreate, RatingRead
from skillswap.schemas.swap_request import (
    ParticipantSummary,
    SkillSummary,
    SwapRequestCreate,
    SwapRequestCreated,
    SwapRequestDetail,
    SwapRequestPage,
    SwapRequestUpdated,
)
from skillswap.services.profile_service import average_rating
from skillswap.services.user_service import build_pagination


logger = logging.getLogger(__name__)

UNKNOWN_SKILL = "Unknown Skill"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _participant(user: User) -> ParticipantSummary:
    avg, total = average_rating(r.rating for r in user.received_ratings)
    return ParticipantSummary(
        id=user.id,
        name=user.name,
        location=user.location,
        profile_photo=user.profile_photo,
        average_rating=avg,
        total_ratings=total,
    )


def _skill_summary(user_skill: UserSkill | None) -> SkillSummary:
    if user_skill is None or user_skill.skill is None:
        return SkillSummary(id=None, name=UNKNOWN_SKILL)
    return SkillSummary(id=user_skill.skill.id, name=user_skill.skill.name, category=user_skill.skill.category)


def load_user_skills(db: Session, ids: set[int]) -> dict[int, UserSkill]:
    if not ids:
        return {}
    rows = db.query(UserSkill).options(selectinload(UserSkill.skill)).filter(UserSkill.id.in_(ids)).all()
    return {row.id: row for row in rows}


def _detail(swap: SwapRequest, claims: dict[int, UserSkill]) -> SwapRequestDetail:
    return SwapRequestDetail(
        id=swap.id,
        sender_id=swap.sender_id,
        receiver_id=swap.receiver_id,
        sender_skill_id=swap.sender_skill_id,
        receiver_skill_id=swap.receiver_skill_id,
        message=swap.message,
        status=swap.status,
        created_at=swap.created_at,
        updated_at=swap.updated_at,
        completed_at=swap.completed_at,
        sender=_participant(swap.sender),
        receiver=_participant(swap.receiver),
        sender_skill=_skill_summary(claims.get(swap.sender_skill_id)),
        receiver_skill=_skill_summary(claims.get(swap.receiver_skill_id)),
        rating=RatingRead.model_validate(swap.rating) if swap.rating is not None else None,
    )


def list_requests(
    db: Session,
    user: User,
    *,
    direction: str = "all",
    status_filter: str | None = None,
    page: int = 1,
    limit: int = 10,
) -> SwapRequestPage:
    query = db.query(SwapRequest)
    if direction == "sent":
        query = query.filter(SwapRequest.sender_id == user.id)
    elif direction == "received":
        query = query.filter(SwapRequest.receiver_id == user.id)
    else:
        query = query.filter(or_(SwapRequest.sender_id == user.id, SwapRequest.receiver_id == user.id))

    if status_filter and status_filter != "all":
        query = query.filter(SwapRequest.status == status_filter)

    total_count = query.count()
    swaps = (
        query.options(
            selectinload(SwapRequest.sender).selectinload(User.received_ratings),
            selectinload(SwapRequest.receiver).selectinload(User.received_ratings),
            selectinload(SwapRequest.rating),
        )
        .order_by(SwapRequest.created_at.desc(), SwapRequest.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    claim_ids = {s.sender_skill_id for s in swaps} | {s.receiver_skill_id for s in swaps}
    claims = load_user_skills(db, claim_ids)

    return SwapRequestPage(
        requests=[_detail(s, claims) for s in swaps],
        pagination=build_pagination(page, limit, total_count),
    )


def _offered_claim(db: Session, user_skill_id: int, user_id: int) -> UserSkill | None:
    return (
        db.query(UserSkill)
        .filter(UserSkill.id == user_skill_id)
        .filter(UserSkill.user_id == user_id)
        .filter(UserSkill.type == "OFFERED")
        .first()
    )


def create_request(db: Session, sender: User, payload: SwapRequestCreate) -> SwapRequestCreated:
    if payload.receiver_id == sender.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot send a request to yourself")

    receiver = db.query(User).filter(User.id == payload.receiver_id).first()
    if receiver is None or receiver.is_banned:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Receiver not found")

    if _offered_claim(db, payload.sender_skill_id, sender.id) is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid sender skill. You can only offer skills you have listed.",
        )
    if _offered_claim(db, payload.receiver_skill_id, receiver.id) is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid receiver skill. You can only request skills they have offered.",
        )

    duplicate = (
        db.query(SwapRequest)
        .filter(SwapRequest.sender_id == sender.id)
        .filter(SwapRequest.receiver_id == receiver.id)
        .filter(SwapRequest.sender_skill_id == payload.sender_skill_id)
        .filter(SwapRequest.receiver_skill_id == payload.receiver_skill_id)
        .filter(SwapRequest.status == "PENDING")
        .first()
    )
    if duplicate is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You already have a pending request for these skills",
        )

    message = (payload.message or "").strip() or None
    swap = SwapRequest(
        sender_id=sender.id,
        receiver_id=receiver.id,
        sender_skill_id=payload.sender_skill_id,
        receiver_skill_id=payload.receiver_skill_id,
        message=message,
        status="PENDING",
    )
    db.add(swap)
    db.commit()
    db.refresh(swap)
    logger.info("swap.created id=%s sender=%s receiver=%s", swap.id, sender.id, receiver.id)
    return SwapRequestCreated(id=swap.id, status=swap.status, created_at=swap.created_at)


def _get_request(db: Session, request_id: int) -> SwapRequest:
    swap = db.query(SwapRequest).filter(SwapRequest.id == request_id).first()
    if swap is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Request not found")
    return swap


def respond_to_request(db: Session, user: User, request_id: int, action: str) -> SwapRequestUpdated:
    swap = _get_request(db, request_id)
    if swap.receiver_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only accept or reject requests sent to you",
        )
    if swap.status != "PENDING":
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Request has already been processed")

    now = _utc_now()
    swap.status = action
    swap.updated_at = now
    if action == "ACCEPTED":
        swap.completed_at = now
    db.commit()
    db.refresh(swap)
    logger.info("swap.%s id=%s by=%s", action.lower(), swap.id, user.id)
    return SwapRequestUpdated(
        id=swap.id,
        status=swap.status,
        updated_at=swap.updated_at,
        completed_at=swap.completed_at,
    )


def delete_request(db: Session, user: User, request_id: int) -> None:
    swap = _get_request(db, request_id)
    if swap.sender_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only delete requests you sent")
    if swap.status != "PENDING":
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only pending requests can be deleted")
    db.delete(swap)
    db.commit()
    logger.info("swap.deleted id=%s by=%s", request_id, user.id)


def rate_swap(db: Session, user: User, payload: RatingCreate) -> RatingRead:
    swap = db.query(SwapRequest).filter(SwapRequest.id == payload.swap_request_id).first()
    if swap is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Swap request not found")
    if swap.status not in ("ACCEPTED", "COMPLETED"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You can only rate accepted or completed swap requests",
        )
    if user.id not in (swap.sender_id, swap.receiver_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only rate swap requests you are part of",
        )
    if swap.rating is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="This swap request has already been rated")

    rated_user_id = swap.receiver_id if swap.sender_id == user.id else swap.sender_id
    rating = Rating(
        swap_request_id=swap.id,
        giver_id=user.id,
        receiver_id=rated_user_id,
        rating=payload.rating,
        feedback=(payload.feedback or "").strip() or None,
    )
    db.add(rating)
    if swap.status == "ACCEPTED":
        swap.status = "COMPLETED"
    db.commit()
    db.refresh(rating)
    logger.info("swap.rated id=%s giver=%s receiver=%s rating=%s", swap.id, user.id, rated_user_id, payload.rating)
    return RatingRead.model_validate(rating)
