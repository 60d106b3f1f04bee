"""
Tests for the matching engine's per-university score.
"""

import pytest
from pydantic import ValidationError

from recommendation.logic import (
    AcademicProfile,
    UniversityRecord,
    MatchCategory,
    calculate_match,
)
from recommendation.logic.aggregator import aggregate_score, evaluate_dimensions
from recommendation.logic.classifier import classify_score


def _university(**overrides):
    data = {"id": "u1", "name": "Test University", "country": "Canada"}
    data.update(overrides)
    return UniversityRecord(**data)


def test_strong_profile_scores_full_marks():
    """CGPA, IELTS and budget all clear; GRE not evaluated."""
    profile = AcademicProfile(cgpa=3.8, ielts_score=7.0, budget_max=40000)
    university = _university(
        cgpa_requirement=3.5,
        ielts_requirement=6.5,
        tuition_min=20000,
        tuition_max=35000,
    )

    match = calculate_match(profile, university)

    assert match.score == 100
    assert match.category == MatchCategory.SAFETY.value
    assert match.details.cgpa_match is True
    assert match.details.english_match is True
    assert match.details.budget_match is True
    assert match.details.gre_match is None


def test_university_without_requirements_scores_zero():
    profile = AcademicProfile(cgpa=3.9, ielts_score=8.0, toefl_score=110, gre_score=330, budget_max=90000)

    match = calculate_match(profile, _university())

    assert match.score == 0
    assert match.category == MatchCategory.AMBITIOUS.value
    assert match.details.cgpa_match is None
    assert match.details.english_match is None
    assert match.details.budget_match is None
    assert match.details.gre_match is None


def test_mixed_profile_uses_every_band():
    profile = AcademicProfile(
        cgpa=3.2,          # 3.2 / 3.5 = 0.914 -> 30
        ielts_score=6.0,   # 6.0 / 6.5 = 0.923 -> 20
        toefl_score=100,   # 100 / 90 -> 30, better test wins
        budget_max=30000,  # between tuition bounds -> 10
        gre_score=300,     # 300 / 320 = 0.9375 -> 5
    )
    university = _university(
        cgpa_requirement=3.5,
        ielts_requirement=6.5,
        toefl_requirement=90,
        tuition_min=20000,
        tuition_max=35000,
        gre_requirement=320,
    )

    dims = evaluate_dimensions(profile, university)
    assert {name: d.earned for name, d in dims.items()} == {
        "cgpa": 30, "english": 30, "budget": 10, "gre": 5,
    }

    match = calculate_match(profile, university)
    assert match.score == 75
    assert match.category == MatchCategory.TARGET.value
    assert match.details.cgpa_match is False
    assert match.details.english_match is True
    assert match.details.budget_match is True
    assert match.details.gre_match is False


def test_english_needs_only_one_test():
    university = _university(ielts_requirement=7.0, toefl_requirement=100)

    ielts_only = calculate_match(AcademicProfile(ielts_score=7.5), university)
    toefl_only = calculate_match(AcademicProfile(toefl_score=85), university)

    assert ielts_only.score == 100
    assert ielts_only.details.english_match is True
    # 85 / 100 = 0.85 -> 10 of 30
    assert toefl_only.score == 33
    assert toefl_only.details.english_match is False


def test_budget_below_tuition_earns_nothing():
    profile = AcademicProfile(budget_max=10000)
    university = _university(tuition_min=20000, tuition_max=35000)

    match = calculate_match(profile, university)

    assert match.score == 0
    assert match.details.budget_match is False


def test_budget_with_single_tuition_bound():
    profile = AcademicProfile(budget_max=30000)

    only_min = calculate_match(profile, _university(tuition_min=25000))
    only_max = calculate_match(profile, _university(tuition_max=32000))

    assert only_min.score == 100
    assert only_max.score == 0


def test_zero_requirement_is_evaluated_not_absent():
    profile = AcademicProfile(gre_score=0)
    university = _university(gre_requirement=0)

    match = calculate_match(profile, university)

    assert match.score == 100
    assert match.details.gre_match is True


def test_score_rounds_half_up():
    # English: 90 / 100 = 0.9 -> 20 of 30; GRE: 306 / 340 = 0.9 -> 5 of 10
    profile = AcademicProfile(toefl_score=90, gre_score=306)
    university = _university(toefl_requirement=100, gre_requirement=340)

    match = calculate_match(profile, university)

    # 25 / 40 = 62.5%
    assert match.score == 63
    assert match.category == MatchCategory.TARGET.value


def test_score_is_always_within_bounds():
    profiles = [
        AcademicProfile(),
        AcademicProfile(cgpa=0.0, ielts_score=0.0, toefl_score=0, gre_score=0, budget_max=0),
        AcademicProfile(cgpa=4.0, ielts_score=9.0, toefl_score=120, gre_score=340, budget_max=10 ** 6),
        AcademicProfile(cgpa=2.1, toefl_score=60, budget_max=5000),
    ]
    universities = [
        _university(),
        _university(cgpa_requirement=4.0, ielts_requirement=9.0, toefl_requirement=120,
                    gre_requirement=340, tuition_min=90000, tuition_max=100000),
        _university(cgpa_requirement=0.0, ielts_requirement=0.0, tuition_min=0, tuition_max=0),
        _university(cgpa_requirement=3.0, gre_requirement=300),
    ]

    for profile in profiles:
        for university in universities:
            score = calculate_match(profile, university).score
            assert 0 <= score <= 100


def test_higher_cgpa_never_lowers_score():
    university = _university(
        cgpa_requirement=3.5, ielts_requirement=6.5, tuition_min=20000, tuition_max=35000,
    )

    previous = -1
    for step in range(0, 41):
        profile = AcademicProfile(cgpa=step / 10, ielts_score=6.0, budget_max=25000)
        score = calculate_match(profile, university).score
        assert score >= previous
        previous = score


def test_same_inputs_same_result():
    profile = AcademicProfile(cgpa=3.1, ielts_score=6.5, budget_max=30000)
    university = _university(cgpa_requirement=3.3, ielts_requirement=7.0, tuition_min=28000, tuition_max=31000)

    assert calculate_match(profile, university) == calculate_match(profile, university)


@pytest.mark.parametrize("score,expected", [
    (100, MatchCategory.SAFETY),
    (80, MatchCategory.SAFETY),
    (79, MatchCategory.TARGET),
    (60, MatchCategory.TARGET),
    (59, MatchCategory.AMBITIOUS),
    (0, MatchCategory.AMBITIOUS),
])
def test_category_thresholds(score, expected):
    assert classify_score(score) == expected


def test_aggregate_score_with_nothing_evaluated():
    assert aggregate_score([]) == 0


def test_out_of_range_profile_is_rejected():
    with pytest.raises(ValidationError):
        AcademicProfile(cgpa=4.5)
    with pytest.raises(ValidationError):
        AcademicProfile(ielts_score=9.5)


def test_inverted_tuition_is_rejected():
    with pytest.raises(ValidationError):
        _university(tuition_min=40000, tuition_max=30000)
