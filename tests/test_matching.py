from __future__ import annotations

from skillswap.services.matching import (
    ClaimType,
    MatchedSkill,
    ProficiencyLevel,
    ProfileSnapshot,
    SkillClaim,
    city_key,
    rank_candidates,
    score_match,
)


def _offer(name: str, level: str = "INTERMEDIATE") -> SkillClaim:
    return SkillClaim(name=name, level=ProficiencyLevel(level), type=ClaimType.OFFERED)


def _want(name: str, level: str = "INTERMEDIATE") -> SkillClaim:
    return SkillClaim(name=name, level=ProficiencyLevel(level), type=ClaimType.WANTED)


def _profile(user_id: int, *, offered=(), wanted=(), location=None, availability=()) -> ProfileSnapshot:
    return ProfileSnapshot(
        user_id=user_id,
        location=location,
        availability=frozenset(availability),
        offered=tuple(offered),
        wanted=tuple(wanted),
    )


def test_same_level_exchange_scores_full_points() -> None:
    current = _profile(1, offered=[_offer("Python")])
    other = _profile(2, wanted=[_want("Python")])

    result = score_match(current, other)

    assert result.user_id == 2
    assert result.score == 25
    assert result.matched_skills == (MatchedSkill(user_offered="Python", other_wanted="Python", level_difference=0),)


def test_same_city_adds_location_bonus_only() -> None:
    current = _profile(1, location="Paris, FR")
    other = _profile(2, location="paris")

    result = score_match(current, other)

    assert result.score == 15
    assert result.matched_skills == ()


def test_level_gap_reduces_points() -> None:
    current = _profile(1, offered=[_offer("Figma", "EXPERT")])
    other = _profile(2, wanted=[_want("Figma", "BEGINNER")])

    result = score_match(current, other)

    assert result.score == 10
    assert result.matched_skills[0].level_difference == 3


def test_skill_names_are_case_sensitive() -> None:
    current = _profile(1, offered=[_offer("python")])
    other = _profile(2, wanted=[_want("Python")])

    assert score_match(current, other).score == 0


def test_first_wanted_claim_with_same_name_wins() -> None:
    current = _profile(1, offered=[_offer("Python", "BEGINNER")])
    other = _profile(2, wanted=[_want("Python", "EXPERT"), _want("Python", "BEGINNER")])

    result = score_match(current, other)

    assert result.score == 10
    assert len(result.matched_skills) == 1


def test_availability_bonus_is_capped() -> None:
    slots = ["weekdays", "weekends", "evenings", "mornings"]
    current = _profile(1, availability=slots)
    other = _profile(2, availability=slots)

    assert score_match(current, other).score == 15


def test_availability_overlap_counts_shared_slots() -> None:
    current = _profile(1, availability=["weekends", "evenings"])
    other = _profile(2, availability=["evenings", "mornings"])

    assert score_match(current, other).score == 5


def test_empty_locations_never_match() -> None:
    assert score_match(_profile(1, location=""), _profile(2, location="")).score == 0
    assert score_match(_profile(1, location=None), _profile(2, location=None)).score == 0
    assert score_match(_profile(1, location=" , Lyon"), _profile(2, location=", Lyon")).score == 0


def test_city_key_uses_text_before_first_comma() -> None:
    assert city_key("  New York , NY, USA") == "new york"
    assert city_key("Berlin") == "berlin"
    assert city_key(None) == ""


def test_reverse_direction_scores_but_is_not_listed() -> None:
    current = _profile(1, wanted=[_want("Spanish")])
    other = _profile(2, offered=[_offer("Spanish")])

    result = score_match(current, other)

    assert result.score == 25
    assert result.matched_skills == ()


def test_listed_skills_depend_on_direction() -> None:
    a = _profile(1, offered=[_offer("Python", "EXPERT"), _offer("Figma")], wanted=[_want("Spanish")])
    b = _profile(2, offered=[_offer("Spanish", "BEGINNER")], wanted=[_want("Python", "BEGINNER")])

    a_to_b = score_match(a, b)
    b_to_a = score_match(b, a)

    assert a_to_b.score == b_to_a.score == 10 + 20
    assert [m.user_offered for m in a_to_b.matched_skills] == ["Python"]
    assert [m.user_offered for m in b_to_a.matched_skills] == ["Spanish"]


def test_no_overlap_scores_zero() -> None:
    current = _profile(1, offered=[_offer("Python")], location="Rome", availability=["weekends"])
    other = _profile(2, wanted=[_want("Figma")], location="Milan", availability=["mornings"])

    result = score_match(current, other)

    assert result.score == 0
    assert result.matched_skills == ()


def test_rank_orders_by_score_descending() -> None:
    current = _profile(1, offered=[_offer("Python")], location="Oslo", availability=["weekends", "evenings"])
    ten = _profile(10, availability=["weekends", "evenings"])
    thirty = _profile(30, wanted=[_want("Python", "BEGINNER")], location="Oslo")
    twenty = _profile(20, wanted=[_want("Python", "ADVANCED")])

    ranked = rank_candidates(current, [ten, thirty, twenty])

    assert [(r.profile.user_id, r.match.score) for r in ranked] == [(30, 35), (20, 20), (10, 10)]


def test_rank_keeps_input_order_for_ties() -> None:
    current = _profile(1, location="Madrid")
    candidates = [_profile(i, location="Madrid") for i in (5, 3, 9, 7)]

    ranked = rank_candidates(current, candidates)

    assert [r.profile.user_id for r in ranked] == [5, 3, 9, 7]
    assert all(r.match.score == 15 for r in ranked)


def test_rank_empty_candidates() -> None:
    assert rank_candidates(_profile(1), []) == []


def test_parallel_ranking_matches_sequential() -> None:
    current = _profile(
        1,
        offered=[_offer("Python", "EXPERT"), _offer("Figma")],
        wanted=[_want("Spanish", "BEGINNER")],
        location="Lisbon, PT",
        availability=["weekends", "evenings"],
    )
    levels = list(ProficiencyLevel)
    candidates = [
        _profile(
            100 + i,
            offered=[_offer("Spanish", levels[i % 4].value)] if i % 3 == 0 else [],
            wanted=[_want("Python", levels[(i + 1) % 4].value)] if i % 2 == 0 else [_want("Figma")],
            location="lisbon" if i % 5 == 0 else "Porto",
            availability=["weekends"] if i % 2 else ["evenings", "weekends", "mornings"],
        )
        for i in range(40)
    ]

    sequential = rank_candidates(current, candidates)
    parallel = rank_candidates(current, candidates, max_workers=4)

    assert [(r.profile.user_id, r.match) for r in parallel] == [(r.profile.user_id, r.match) for r in sequential]


def test_one_step_per_level_of_distance() -> None:
    current = _profile(1, offered=[_offer("Python", "ADVANCED")])

    same = score_match(current, _profile(2, wanted=[_want("Python", "ADVANCED")]))
    two_apart = score_match(current, _profile(3, wanted=[_want("Python", "BEGINNER")]))

    assert same.score == 25
    assert two_apart.score == 15


def test_different_cities_get_no_bonus() -> None:
    current = _profile(1, location="New York, NY")

    assert score_match(current, _profile(2, location="new york, ny")).score == 15
    assert score_match(current, _profile(3, location="Boston, MA")).score == 0


def test_scores_are_never_negative() -> None:
    levels = list(ProficiencyLevel)
    for offered in levels:
        for wanted in levels:
            current = _profile(1, offered=[_offer("Python", offered.value)])
            other = _profile(2, wanted=[_want("Python", wanted.value)])
            assert score_match(current, other).score >= 10


def test_match_results_are_hashable() -> None:
    current = _profile(1, offered=[_offer("Python")])
    other = _profile(2, wanted=[_want("Python")])

    first = score_match(current, other)
    second = score_match(current, other)

    assert {first, second} == {first}
