"""
Tests for the ranking service: hard filters, ordering and bad candidates.
"""

import pytest

from recommendation.logic import (
    AcademicProfile,
    UniversityRecord,
    MatchingEngine,
    InvalidInput,
    rank_universities,
)
from recommendation.logic.classifier import group_by_category, get_category_counts


def _university(uid, name, country="Canada", **overrides):
    data = {
        "id": uid,
        "name": name,
        "country": country,
        "cgpa_requirement": 3.0,
        "ielts_requirement": 6.5,
        "programs_offered": ["Computer Science"],
    }
    data.update(overrides)
    return UniversityRecord(**data)


PROFILE = AcademicProfile(student_id="s-1", cgpa=3.4, ielts_score=7.0)


def test_equal_scores_sort_by_overall_ranking():
    candidates = [
        _university("a", "Alpha University", ranking_overall=50),
        _university("b", "Beta University", ranking_overall=10),
    ]

    ranked = rank_universities(PROFILE, candidates)

    assert [u.id for u in ranked] == ["b", "a"]
    assert ranked[0].match.score == ranked[1].match.score


def test_unranked_sorts_last_then_by_name():
    candidates = [
        _university("z", "Zeta College"),
        _university("y", "Yale-ish College"),
        _university("r", "Ranked University", ranking_overall=300),
    ]

    ranked = rank_universities(PROFILE, candidates)

    assert [u.id for u in ranked] == ["r", "y", "z"]


def test_higher_score_beats_better_ranking():
    candidates = [
        _university("famous", "Famous University", ranking_overall=1, cgpa_requirement=4.0),
        _university("fit", "Good Fit University", ranking_overall=200),
    ]

    ranked = rank_universities(PROFILE, candidates)

    assert ranked[0].id == "fit"
    assert ranked[0].match.score > ranked[1].match.score


def test_country_preference_is_a_hard_filter():
    profile = AcademicProfile(cgpa=3.4, preferred_countries={"Canada", "Ireland"})
    candidates = [
        _university("ca", "Canadian University", country="Canada"),
        _university("us", "American University", country="USA"),
        _university("ie", "Irish University", country="Ireland"),
    ]

    ranked = rank_universities(profile, candidates)

    assert {u.id for u in ranked} == {"ca", "ie"}
    assert all(u.country in profile.preferred_countries for u in ranked)


def test_field_preference_matches_either_direction():
    profile = AcademicProfile(cgpa=3.4, preferred_fields={"computer", "Data Science and AI"})
    candidates = [
        # "computer" is contained in the program name
        _university("cs", "CS University", programs_offered=["Computer Science"]),
        # the program name "AI" is contained in a preferred field
        _university("ai", "AI Institute", programs_offered=["AI"]),
        _university("for", "Forestry College", programs_offered=["Forestry", "Agriculture"]),
    ]

    ranked = rank_universities(profile, candidates)

    assert {u.id for u in ranked} == {"cs", "ai"}


def test_empty_preferences_keep_everything():
    candidates = [
        _university("a", "A", country="USA", programs_offered=[]),
        _university("b", "B", country="Japan"),
    ]

    assert len(rank_universities(AcademicProfile(), candidates)) == 2


def test_malformed_candidates_are_skipped_not_fatal():
    candidates = [
        _university("ok", "Valid University"),
        {"id": "bad", "name": "Inverted Tuition", "country": "Canada",
         "tuition_min": 50000, "tuition_max": 10000},
        {"name": "No Id", "country": "Canada"},
        42,
        {"id": "dict-ok", "name": "Dict University", "country": "Canada", "cgpa_requirement": 3.0},
    ]

    ranked = rank_universities(PROFILE, candidates)

    assert {u.id for u in ranked} == {"ok", "dict-ok"}


def test_missing_profile_raises():
    with pytest.raises(InvalidInput):
        rank_universities(None, [_university("a", "A")])


def test_ranked_result_carries_record_and_match():
    ranked = rank_universities(PROFILE, [_university("a", "A", city="Toronto")])

    assert ranked[0].city == "Toronto"
    assert ranked[0].match.score == 100
    assert ranked[0].match.category == "safety"


def test_category_grouping_keeps_rank_order():
    candidates = [
        _university("safe", "Safe U", cgpa_requirement=3.0),
        _university("reach", "Reach U", cgpa_requirement=4.0, ielts_requirement=8.5),
    ]

    ranked = rank_universities(PROFILE, candidates)
    grouped = group_by_category(ranked)

    assert [u.id for u in grouped["safety"]] == ["safe"]
    assert [u.id for u in grouped["ambitious"]] == ["reach"]
    assert get_category_counts(ranked) == {"safety": 1, "target": 0, "ambitious": 1}


def test_engine_ranks_mock_catalog_without_db():
    profile = AcademicProfile(cgpa=3.6, ielts_score=7.0, budget_max=45000, preferred_countries={"Canada"})

    ranked = MatchingEngine().rank_catalog(profile)

    assert ranked
    assert all(u.country == "Canada" for u in ranked)
    scores = [u.match.score for u in ranked]
    assert scores == sorted(scores, reverse=True)


def test_engine_rejects_invalid_profile_dict():
    with pytest.raises(InvalidInput):
        MatchingEngine().rank_from_dict({"cgpa": 7.5}, [])


def test_score_single_ignores_preference_filters():
    profile = AcademicProfile(cgpa=3.4, preferred_countries={"Germany"})

    result = MatchingEngine().score_single_university(profile, _university("a", "A", country="Canada"))

    assert result.id == "a"
    assert result.match.score > 0


def test_numeric_ids_are_ranked_as_strings():
    candidates = [
        {"id": 1, "name": "A", "country": "Canada", "cgpa_requirement": 3.0},
        {"id": "2", "name": "B", "country": "Canada", "cgpa_requirement": 3.0},
    ]

    ranked = rank_universities(AcademicProfile(cgpa=3.8), candidates)

    assert [u.name for u in ranked] == ["A", "B"]
    assert ranked[0].id == "1"


def test_boolean_id_is_still_rejected():
    ranked = rank_universities(PROFILE, [{"id": True, "name": "X", "country": "Canada"}])

    assert ranked == []
