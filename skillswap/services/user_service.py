from __future__ import annotations

import logging
import math

from fastapi import HTTPException, status
from sqlalchemy import String, and_, cast, func, or_
from sqlalchemy.orm import Query, Session, selectinload

from skillswap.models.skills import Skill
from skillswap.models.user import User
from skillswap.models.user_skill import UserSkill
from skillswap.schemas.public_user import (
    MatchedSkillRead,
    MatchResultRead,
    Pagination,
    PublicUser,
    UserMatch,
    UserSearchFilters,
    UsersPage,
)
from skillswap.services.matching import rank_candidates
from skillswap.services.metrics import MetricsCollector
from skillswap.services.profile_service import build_public_user, build_snapshot


logger = logging.getLogger(__name__)


def build_pagination(page: int, limit: int, total_count: int) -> Pagination:
    total_pages = math.ceil(total_count / limit) if limit else 0
    return Pagination(
        current_page=page,
        total_pages=total_pages,
        total_count=total_count,
        has_next=page < total_pages,
        has_prev=page > 1,
    )


def _with_public_relations(query: Query) -> Query:
    return query.options(
        selectinload(User.user_skills).selectinload(UserSkill.skill),
        selectinload(User.received_ratings),
    )


def visible_users_query(db: Session) -> Query:
    return db.query(User).filter(User.is_public.is_(True)).filter(User.is_banned.is_(False))


def _apply_filters(query: Query, filters: UserSearchFilters) -> Query:
    if filters.search:
        pattern = f"%{filters.search.strip()}%"
        query = query.filter(
            or_(
                User.name.ilike(pattern),
                User.location.ilike(pattern),
                User.user_skills.any(UserSkill.skill.has(Skill.name.ilike(pattern))),
            )
        )

    if filters.location:
        query = query.filter(User.location.ilike(f"%{filters.location.strip()}%"))

    if filters.availability:
        # availability is a JSON array; match the quoted token in its serialized form.
        query = query.filter(cast(User.availability, String).like(f'%"{filters.availability}"%'))

    skill_conditions = []
    if filters.skill_category:
        skill_conditions.append(
            UserSkill.skill.has(func.lower(Skill.category) == filters.skill_category.strip().lower())
        )
    if filters.skill_level:
        skill_conditions.append(UserSkill.level == filters.skill_level)
    if skill_conditions:
        query = query.filter(User.user_skills.any(and_(*skill_conditions)))

    return query


def search_users(db: Session, filters: UserSearchFilters, *, page: int, limit: int) -> UsersPage:
    query = _apply_filters(visible_users_query(db), filters)
    total_count = query.count()

    users = (
        _with_public_relations(query)
        .order_by(User.created_at.desc(), User.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    return UsersPage(
        users=[build_public_user(u) for u in users],
        pagination=build_pagination(page, limit, total_count),
        filters=filters,
    )


def get_public_user(db: Session, user_id: int, *, viewer: User | None = None) -> PublicUser:
    user = _with_public_relations(db.query(User).filter(User.id == user_id)).first()
    is_owner = viewer is not None and viewer.id == user_id
    if user is None or ((user.is_banned or not user.is_public) and not is_owner):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return build_public_user(user)


def find_matches(
    db: Session,
    current_user: User,
    *,
    limit: int,
    min_score: int = 0,
    max_workers: int = 0,
    metrics: MetricsCollector | None = None,
) -> list[UserMatch]:
    candidates = _with_public_relations(visible_users_query(db).filter(User.id != current_user.id)).all()
    by_id = {u.id: u for u in candidates}

    stop = metrics.start_timer("matching.rank") if metrics is not None else None
    ranked = rank_candidates(
        build_snapshot(current_user),
        [build_snapshot(u) for u in candidates],
        max_workers=max_workers,
    )
    if stop is not None:
        stop()

    results: list[UserMatch] = []
    for item in ranked:
        if item.match.score < min_score:
            continue
        results.append(
            UserMatch(
                user=build_public_user(by_id[item.profile.user_id]),
                match=MatchResultRead(
                    user_id=item.match.user_id,
                    score=item.match.score,
                    matched_skills=[
                        MatchedSkillRead(
                            user_offered=m.user_offered,
                            other_wanted=m.other_wanted,
                            level_difference=m.level_difference,
                        )
                        for m in item.match.matched_skills
                    ],
                ),
            )
        )
        if len(results) >= limit:
            break

    logger.info("matching.rank user_id=%s candidates=%s returned=%s", current_user.id, len(candidates), len(results))
    return results
