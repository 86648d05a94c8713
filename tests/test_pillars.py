"""Tests for pillar evaluation and primary driver selection."""

import pytest

from aar_insights.domain.models import Pillar
from aar_insights.domain.pillars import (
    PILLAR_THRESHOLDS,
    evaluate_pillars,
    goal_issues,
    primary_driver,
)
from tests.factories import make_goal


# ── End-to-end scenarios ─────────────────────────────────────────────


def test_two_goals_all_pillars_passing():
    goal_a = make_goal(
        "a",
        total_impressions=1000,
        fraud_rate=1.0,
        viewability_rate=60.0,
        brand_suitability_rate=99.0,
        in_geo_rate=99.0,
    )
    goal_b = make_goal(
        "b",
        total_impressions=1000,
        fraud_rate=1.0,
        viewability_rate=90.0,
        brand_suitability_rate=99.0,
        in_geo_rate=99.0,
    )
    readings = {reading.pillar: reading for reading in evaluate_pillars([goal_a, goal_b])}
    assert readings[Pillar.VIEWABILITY].value == pytest.approx(75.0)
    assert readings[Pillar.FRAUD].value == pytest.approx(99.0)
    assert primary_driver([goal_a, goal_b]) is None


def test_largest_negative_margin_wins():
    goal = make_goal("g", viewability_rate=50.0, brand_suitability_rate=80.0)
    assert primary_driver([goal]) is Pillar.VIEWABILITY


def test_fraud_pillar_uses_fraud_free_rate():
    goal = make_goal("g", fraud_rate=5.0)
    readings = {reading.pillar: reading for reading in evaluate_pillars([goal])}
    assert readings[Pillar.FRAUD].value == pytest.approx(95.0)
    assert readings[Pillar.FRAUD].margin == pytest.approx(-3.0)
    assert primary_driver([goal]) is Pillar.FRAUD


def test_geography_alone_failing():
    goal = make_goal("g", in_geo_rate=90.0)
    assert primary_driver([goal]) is Pillar.GEOGRAPHY


# ── Tie-break and boundaries ─────────────────────────────────────────


def test_equal_margins_break_by_declaration_order():
    # fraud-free 88 (-10), viewability 60 (-10), suitability 85 (-10)
    goal = make_goal("g", fraud_rate=12.0, viewability_rate=60.0, brand_suitability_rate=85.0)
    assert primary_driver([goal]) is Pillar.FRAUD


def test_equal_margins_without_fraud_pick_viewability():
    goal = make_goal("g", viewability_rate=60.0, brand_suitability_rate=85.0, in_geo_rate=85.0)
    assert primary_driver([goal]) is Pillar.VIEWABILITY


def test_value_equal_to_threshold_passes():
    goal = make_goal(
        "g",
        fraud_rate=2.0,
        viewability_rate=70.0,
        brand_suitability_rate=95.0,
        in_geo_rate=95.0,
    )
    assert all(reading.passing for reading in evaluate_pillars([goal]))
    assert primary_driver([goal]) is None


def test_zero_impressions_yield_no_driver():
    goal = make_goal("g", total_impressions=0, viewability_rate=10.0)
    assert primary_driver([goal]) is None
    assert primary_driver([]) is None


def test_weighting_decides_driver_for_groups():
    big = make_goal("big", total_impressions=9000, brand_suitability_rate=90.0)
    small = make_goal("small", total_impressions=1000, viewability_rate=20.0)
    # viewability 0.9*80 + 0.1*20 = 74 passes; suitability 0.9*90 + 0.1*99 = 90.9 fails
    assert primary_driver([big, small]) is Pillar.SUITABILITY


def test_thresholds_are_fixed():
    assert PILLAR_THRESHOLDS == {
        Pillar.FRAUD: 98.0,
        Pillar.VIEWABILITY: 70.0,
        Pillar.SUITABILITY: 95.0,
        Pillar.GEOGRAPHY: 95.0,
    }


# ── Goal issues ──────────────────────────────────────────────────────


def test_goal_issues_lists_failing_pillars_worst_first():
    goal = make_goal("g", viewability_rate=65.0, brand_suitability_rate=80.0)
    assert goal_issues(goal) == [Pillar.SUITABILITY, Pillar.VIEWABILITY]


def test_goal_issues_empty_for_healthy_or_unserved_goal():
    assert goal_issues(make_goal("g")) == []
    assert goal_issues(make_goal("g", total_impressions=0, fraud_rate=50.0)) == []
