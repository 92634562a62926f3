from __future__ import annotations

import csv
import io
import logging
import math
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from skillswap.config import is_admin_account
from skillswap.constants import ROLE_USER
from skillswap.models.admin_message import AdminMessage
from skillswap.models.rating import Rating
from skillswap.models.skills import Skill
from skillswap.models.swap_request import SwapRequest
from skillswap.models.user import User
from skillswap.models.user_skill import UserSkill
from skillswap.schemas.admin import (
    AdminDataPage,
    AdminMessageRead,
    AdminSkillRow,
    AdminStatsResponse,
    AdminSwapDetail,
    AdminSwapRow,
    AdminUserRef,
    AdminUserRow,
    GlobalMessageCreate,
    LocationCount,
    MonthCount,
    SkillRequestCount,
    StatusCount,
    SwapStatisticsReport,
    UserActivityReport,
)
from skillswap.services.swap_service import UNKNOWN_SKILL, load_user_skills


logger = logging.getLogger(__name__)

ACTIVE_WINDOW = timedelta(days=7)
REPORT_MONTHS = 12
TOP_N = 10


def _iso_now() -> datetime:
    return datetime.now(timezone.utc)


def _month_key(dt: datetime) -> str:
    return dt.strftime("%Y-%m")


def _months_back(now: datetime, months: int) -> datetime:
    year, month = now.year, now.month - months
    while month <= 0:
        month += 12
        year -= 1
    return datetime(year, month, 1, tzinfo=timezone.utc)


def _by_month(values: Iterable[datetime]) -> list[MonthCount]:
    counter: Counter[str] = Counter(_month_key(v) for v in values if v is not None)
    return [MonthCount(month=m, count=c) for m, c in sorted(counter.items(), reverse=True)]


def _count(db: Session, column, *criteria) -> int:
    query = db.query(func.count(column))
    for criterion in criteria:
        query = query.filter(criterion)
    return int(query.scalar() or 0)


def get_stats(db: Session) -> AdminStatsResponse:
    now = _iso_now()
    return AdminStatsResponse(
        generated_at=now,
        total_users=_count(db, User.id, User.role == ROLE_USER),
        active_users=_count(db, User.id, User.role == ROLE_USER, User.updated_at >= now - ACTIVE_WINDOW),
        total_swaps=_count(db, SwapRequest.id),
        completed_swaps=_count(db, SwapRequest.id, SwapRequest.status == "COMPLETED"),
        pending_swaps=_count(db, SwapRequest.id, SwapRequest.status == "PENDING"),
        total_skills=_count(db, Skill.id),
        pending_skills=_count(db, Skill.id, Skill.is_approved.is_(False)),
    )


def _total_pages(total_count: int, limit: int) -> int:
    return math.ceil(total_count / limit) if limit else 0


def _request_counts(db: Session, column, user_ids: list[int]) -> dict[int, int]:
    if not user_ids:
        return {}
    rows = db.query(column, func.count(SwapRequest.id)).filter(column.in_(user_ids)).group_by(column).all()
    return {int(user_id): int(c) for user_id, c in rows}


def get_data_page(db: Session, data_type: str, *, page: int, limit: int) -> AdminDataPage:
    skip = (page - 1) * limit

    if data_type == "users":
        total = _count(db, User.id, User.role == ROLE_USER)
        users = (
            db.query(User)
            .filter(User.role == ROLE_USER)
            .order_by(User.created_at.desc(), User.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        ids = [u.id for u in users]
        sent_counts = _request_counts(db, SwapRequest.sender_id, ids)
        received_counts = _request_counts(db, SwapRequest.receiver_id, ids)
        items: list[Any] = [
            AdminUserRow(
                id=u.id,
                name=u.name,
                email=u.email,
                location=u.location,
                is_banned=bool(u.is_banned),
                created_at=u.created_at,
                sent_requests=int(sent_counts.get(u.id, 0)),
                received_requests=int(received_counts.get(u.id, 0)),
            )
            for u in users
        ]
        return AdminDataPage(type="users", items=items, total_count=total, total_pages=_total_pages(total, limit))

    if data_type == "skills":
        total = _count(db, Skill.id)
        rows = (
            db.query(Skill, func.count(UserSkill.id))
            .outerjoin(UserSkill, UserSkill.skill_id == Skill.id)
            .group_by(Skill.id)
            .order_by(Skill.created_at.desc(), Skill.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        items = [
            AdminSkillRow(
                id=s.id,
                name=s.name,
                category=s.category,
                description=s.description,
                is_approved=bool(s.is_approved),
                created_at=s.created_at,
                user_count=int(c or 0),
            )
            for s, c in rows
        ]
        return AdminDataPage(type="skills", items=items, total_count=total, total_pages=_total_pages(total, limit))

    if data_type == "swaps":
        total = _count(db, SwapRequest.id)
        swaps = (
            db.query(SwapRequest)
            .options(selectinload(SwapRequest.sender), selectinload(SwapRequest.receiver))
            .order_by(SwapRequest.created_at.desc(), SwapRequest.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        items = [
            AdminSwapRow(
                id=s.id,
                status=s.status,
                created_at=s.created_at,
                sender=AdminUserRef(id=s.sender.id, name=s.sender.name, email=s.sender.email),
                receiver=AdminUserRef(id=s.receiver.id, name=s.receiver.name, email=s.receiver.email),
            )
            for s in swaps
        ]
        return AdminDataPage(type="swaps", items=items, total_count=total, total_pages=_total_pages(total, limit))

    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid data type")


def list_swaps(db: Session) -> list[AdminSwapDetail]:
    swaps = (
        db.query(SwapRequest)
        .options(
            selectinload(SwapRequest.sender),
            selectinload(SwapRequest.receiver),
            selectinload(SwapRequest.rating),
        )
        .order_by(SwapRequest.created_at.desc(), SwapRequest.id.desc())
        .all()
    )
    claims = load_user_skills(db, {s.sender_skill_id for s in swaps} | {s.receiver_skill_id for s in swaps})

    def skill_name(claim_id: int) -> str:
        claim = claims.get(claim_id)
        return claim.skill.name if claim is not None and claim.skill is not None else UNKNOWN_SKILL

    return [
        AdminSwapDetail(
            id=s.id,
            status=s.status,
            message=s.message,
            created_at=s.created_at,
            requester_name=s.sender.name,
            recipient_name=s.receiver.name,
            skill_offered_name=skill_name(s.sender_skill_id),
            skill_wanted_name=skill_name(s.receiver_skill_id),
            rating=s.rating.rating if s.rating is not None else None,
        )
        for s in swaps
    ]


def list_global_messages(db: Session, *, active_only: bool) -> list[AdminMessageRead]:
    query = db.query(AdminMessage).filter(AdminMessage.is_global.is_(True))
    if active_only:
        query = query.filter(AdminMessage.is_active.is_(True))
    rows = query.order_by(AdminMessage.created_at.desc(), AdminMessage.id.desc()).all()
    return [AdminMessageRead.model_validate(m) for m in rows]


def create_global_message(db: Session, payload: GlobalMessageCreate) -> AdminMessage:
    message = AdminMessage(title=payload.title, content=payload.content, is_global=True, is_active=True)
    db.add(message)
    db.commit()
    db.refresh(message)
    logger.info("admin.message_created id=%s", message.id)
    return message


def _get_or_404(db: Session, model, object_id: int | None, label: str):
    obj = db.query(model).filter(model.id == object_id).first() if object_id is not None else None
    if obj is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
    return obj


def set_user_banned(db: Session, user_id: int | None, banned: bool) -> User:
    user = _get_or_404(db, User, user_id, "User")
    if banned and is_admin_account(user.role, user.email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Admin accounts cannot be banned")
    user.is_banned = banned
    db.commit()
    logger.info("admin.user_%s user_id=%s", "banned" if banned else "unbanned", user.id)
    return user


def set_skill_approved(db: Session, skill_id: int | None, approved: bool) -> Skill:
    skill = _get_or_404(db, Skill, skill_id, "Skill")
    skill.is_approved = approved
    db.commit()
    logger.info("admin.skill_%s skill_id=%s", "approved" if approved else "rejected", skill.id)
    return skill


def delete_skill(db: Session, skill_id: int | None) -> None:
    skill = _get_or_404(db, Skill, skill_id, "Skill")
    db.delete(skill)
    db.commit()
    logger.info("admin.skill_deleted skill_id=%s", skill_id)


def set_message_active(db: Session, message_id: int, is_active: bool) -> AdminMessage:
    message = _get_or_404(db, AdminMessage, message_id, "Message")
    message.is_active = is_active
    db.commit()
    db.refresh(message)
    return message


def delete_message(db: Session, message_id: int) -> None:
    message = _get_or_404(db, AdminMessage, message_id, "Message")
    db.delete(message)
    db.commit()
    logger.info("admin.message_deleted id=%s", message_id)


def perform_action(db: Session, action: str, target_id: int | None, data: dict[str, Any]) -> str:
    if action == "ban_user":
        set_user_banned(db, target_id, True)
        return "User banned successfully"
    if action == "unban_user":
        set_user_banned(db, target_id, False)
        return "User unbanned successfully"
    if action == "approve_skill":
        set_skill_approved(db, target_id, True)
        return "Skill approved successfully"
    if action == "reject_skill":
        set_skill_approved(db, target_id, False)
        return "Skill rejected successfully"
    if action == "send_global_message":
        try:
            payload = GlobalMessageCreate.model_validate(data or {})
        except ValueError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Title and content are required") from exc
        create_global_message(db, payload)
        return "Global message sent successfully"
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid action")


def user_activity_report(db: Session) -> UserActivityReport:
    now = _iso_now()
    month_start = _months_back(now, 0)

    location_rows = (
        db.query(User.location, func.count(User.id).label("c"))
        .filter(User.role == ROLE_USER)
        .filter(User.location.isnot(None))
        .filter(User.location != "")
        .group_by(User.location)
        .order_by(func.count(User.id).desc(), User.location.asc())
        .limit(TOP_N)
        .all()
    )
    created = [
        c
        for (c,) in db.query(User.created_at)
        .filter(User.role == ROLE_USER)
        .filter(User.created_at >= _months_back(now, REPORT_MONTHS - 1))
        .all()
    ]

    return UserActivityReport(
        total_registrations=_count(db, User.id, User.role == ROLE_USER),
        registrations_this_month=_count(db, User.id, User.role == ROLE_USER, User.created_at >= month_start),
        active_users_last_week=_count(db, User.id, User.role == ROLE_USER, User.updated_at >= now - ACTIVE_WINDOW),
        top_locations=[LocationCount(location=loc, count=int(c)) for loc, c in location_rows],
        registrations_by_month=_by_month(created),
    )


def swap_statistics_report(db: Session) -> SwapStatisticsReport:
    now = _iso_now()
    total = _count(db, SwapRequest.id)
    completed = _count(db, SwapRequest.id, SwapRequest.status == "COMPLETED")

    swaps = db.query(SwapRequest.sender_skill_id, SwapRequest.receiver_skill_id).all()
    claims = load_user_skills(db, {a for a, _ in swaps} | {b for _, b in swaps})
    skill_counter: Counter[str] = Counter()
    for sender_skill_id, receiver_skill_id in swaps:
        for claim_id in (sender_skill_id, receiver_skill_id):
            claim = claims.get(claim_id)
            if claim is not None and claim.skill is not None:
                skill_counter[claim.skill.name] += 1

    status_rows = db.query(SwapRequest.status, func.count(SwapRequest.id)).group_by(SwapRequest.status).all()
    avg_rating = db.query(func.avg(Rating.rating)).scalar()
    created = [
        c
        for (c,) in db.query(SwapRequest.created_at)
        .filter(SwapRequest.created_at >= _months_back(now, REPORT_MONTHS - 1))
        .all()
    ]

    completion_rate = (completed / total) * 100 if total else 0.0
    return SwapStatisticsReport(
        total_requests=total,
        completion_rate=round(completion_rate, 2),
        popular_skills=[SkillRequestCount(skill=k, requests=v) for k, v in skill_counter.most_common(TOP_N)],
        swaps_by_status=[StatusCount(status=s, count=int(c)) for s, c in status_rows],
        average_rating=round(float(avg_rating or 0.0), 2),
        swaps_by_month=_by_month(created),
    )


def _write_csv(rows: list[list[Any]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerows(rows)
    return buffer.getvalue()


def user_activity_csv(report: UserActivityReport) -> str:
    rows: list[list[Any]] = [
        ["Metric", "Value"],
        ["Total Registrations", report.total_registrations],
        ["Registrations This Month", report.registrations_this_month],
        ["Active Users Last Week", report.active_users_last_week],
        [],
        ["Top Locations", "User Count"],
        *[[item.location, item.count] for item in report.top_locations],
        [],
        ["Month", "Registrations"],
        *[[item.month, item.count] for item in report.registrations_by_month],
    ]
    return _write_csv(rows)


def swap_statistics_csv(report: SwapStatisticsReport) -> str:
    rows: list[list[Any]] = [
        ["Metric", "Value"],
        ["Total Requests", report.total_requests],
        ["Completion Rate", f"{report.completion_rate}%"],
        ["Average Rating", f"{report.average_rating}/5"],
        [],
        ["Popular Skills", "Request Count"],
        *[[item.skill, item.requests] for item in report.popular_skills],
        [],
        ["Status", "Count"],
        *[[item.status, item.count] for item in report.swaps_by_status],
        [],
        ["Month", "Swap Requests"],
        *[[item.month, item.count] for item in report.swaps_by_month],
    ]
    return _write_csv(rows)
