"""Compatibility scoring between two member profiles.

The score rewards mutual teach/learn opportunities, closeness of proficiency
levels, living in the same city and sharing availability slots. Everything in
this module is pure: snapshots are built once by the data provider
(``profile_service.build_snapshot``) and never mutated here.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Sequence


class ProficiencyLevel(str, Enum):
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"
    EXPERT = "EXPERT"


class ClaimType(str, Enum):
    OFFERED = "OFFERED"
    WANTED = "WANTED"


LEVEL_RANKS: dict[ProficiencyLevel, int] = {
    ProficiencyLevel.BEGINNER: 1,
    ProficiencyLevel.INTERMEDIATE: 2,
    ProficiencyLevel.ADVANCED: 3,
    ProficiencyLevel.EXPERT: 4,
}

SKILL_MATCH_POINTS = 25
LEVEL_STEP_PENALTY = 5
LOCATION_BONUS = 15
AVAILABILITY_SLOT_POINTS = 5
AVAILABILITY_BONUS_CAP = 15


@dataclass(frozen=True)
class SkillClaim:
    name: str
    level: ProficiencyLevel
    type: ClaimType
    category: str | None = None


@dataclass(frozen=True)
class ProfileSnapshot:
    user_id: int
    location: str | None = None
    availability: frozenset[str] = frozenset()
    offered: tuple[SkillClaim, ...] = ()
    wanted: tuple[SkillClaim, ...] = ()


@dataclass(frozen=True)
class MatchedSkill:
    user_offered: str
    other_wanted: str
    level_difference: int


@dataclass(frozen=True)
class MatchResult:
    user_id: int
    score: int
    matched_skills: tuple[MatchedSkill, ...] = ()


@dataclass(frozen=True)
class RankedCandidate:
    profile: ProfileSnapshot
    match: MatchResult


def level_distance(first: ProficiencyLevel, second: ProficiencyLevel) -> int:
    return abs(LEVEL_RANKS[first] - LEVEL_RANKS[second])


def skill_pair_points(distance: int) -> int:
    return max(0, SKILL_MATCH_POINTS - LEVEL_STEP_PENALTY * distance)


def _find_wanted(name: str, wanted: Iterable[SkillClaim]) -> SkillClaim | None:
    # Exact, case-sensitive name comparison; first claim in list order wins.
    for claim in wanted:
        if claim.name == name:
            return claim
    return None


def _exchange_pairs(offered: Sequence[SkillClaim], wanted: Sequence[SkillClaim]) -> list[MatchedSkill]:
    pairs: list[MatchedSkill] = []
    for offer in offered:
        match = _find_wanted(offer.name, wanted)
        if match is None:
            continue
        pairs.append(
            MatchedSkill(
                user_offered=offer.name,
                other_wanted=match.name,
                level_difference=level_distance(offer.level, match.level),
            )
        )
    return pairs


def city_key(location: str | None) -> str:
    if not location:
        return ""
    return location.split(",", 1)[0].strip().lower()


def location_bonus(first: str | None, second: str | None) -> int:
    first_city = city_key(first)
    if first_city and first_city == city_key(second):
        return LOCATION_BONUS
    return 0


def availability_bonus(first: Iterable[str], second: Iterable[str]) -> int:
    overlap = len(set(first) & set(second))
    return min(AVAILABILITY_BONUS_CAP, AVAILABILITY_SLOT_POINTS * overlap)


def score_match(current: ProfileSnapshot, other: ProfileSnapshot) -> MatchResult:
    """Score how well ``other`` fits ``current`` as a swap partner.

    Only pairs where ``current`` teaches what ``other`` wants are reported in
    ``matched_skills``; the reverse direction adds to the score without being
    listed.
    """
    forward = _exchange_pairs(current.offered, other.wanted)
    reverse = _exchange_pairs(other.offered, current.wanted)

    score = sum(skill_pair_points(p.level_difference) for p in forward)
    score += sum(skill_pair_points(p.level_difference) for p in reverse)
    score += location_bonus(current.location, other.location)
    score += availability_bonus(current.availability, other.availability)

    return MatchResult(user_id=other.user_id, score=int(score), matched_skills=tuple(forward))


def rank_candidates(
    current: ProfileSnapshot,
    candidates: Sequence[ProfileSnapshot],
    *,
    max_workers: int = 0,
) -> list[RankedCandidate]:
    """Score every candidate against ``current`` and sort best first.

    Ties keep their input order. With ``max_workers > 1`` scoring runs on a thread
    pool; ``Executor.map`` preserves input order so the result is unchanged.
    """
    if not candidates:
        return []

    if max_workers > 1 and len(candidates) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            results = list(pool.map(lambda other: score_match(current, other), candidates))
    else:
        results = [score_match(current, other) for other in candidates]

    ranked = [RankedCandidate(profile=profile, match=result) for profile, result in zip(candidates, results)]
    ranked.sort(key=lambda item: item.match.score, reverse=True)
    return ranked
