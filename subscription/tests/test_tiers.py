import pytest
from pydantic import ValidationError

from subscription.logic import FeatureKey, UNLIMITED, UnknownTier, get_limits, get_tier, list_tiers


def test_free_tier_limits():
    limits = get_limits("free")

    assert limits[FeatureKey.PATHWAYS_PER_MONTH] == 1
    assert limits[FeatureKey.COMPARISONS] == 3
    assert limits[FeatureKey.PDF_EXPORTS] == 0


def test_premium_tier_limits():
    limits = get_limits("premium")

    assert limits[FeatureKey.PATHWAYS_PER_MONTH] == UNLIMITED
    assert limits[FeatureKey.COMPARISONS] == 10
    assert limits[FeatureKey.PDF_EXPORTS] == UNLIMITED


def test_pro_tier_is_unlimited_everywhere():
    assert all(limit == UNLIMITED for limit in get_limits("pro").values())
    assert set(get_limits("pro")) == set(FeatureKey)


def test_unknown_tier():
    with pytest.raises(UnknownTier):
        get_limits("enterprise")
    with pytest.raises(UnknownTier):
        get_tier(None)


def test_limits_are_a_copy():
    limits = get_limits("free")
    limits[FeatureKey.PATHWAYS_PER_MONTH] = 99

    assert get_limits("free")[FeatureKey.PATHWAYS_PER_MONTH] == 1


def test_tiers_are_immutable():
    with pytest.raises(ValidationError):
        get_tier("free").price = 10


def test_registry_lists_all_plans():
    assert [t.id for t in list_tiers()] == ["free", "premium", "pro"]
    assert get_tier("free").billing_period_days is None
    assert get_tier("premium").billing_period_days == 30


def test_unlimited_is_not_no_access():
    premium = get_tier("premium")
    free = get_tier("free")

    assert premium.is_unlimited(FeatureKey.PDF_EXPORTS)
    assert not free.is_unlimited(FeatureKey.PDF_EXPORTS)
    assert free.limit_for(FeatureKey.PDF_EXPORTS) == 0
