"""Application service for the cross-goal overview use case."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from aar_insights.application.reporting.rendering import overview_insight
from aar_insights.channel_mix import ChannelMix, ChannelMixEngine
from aar_insights.config import BLOCK_RATE_WARNING
from aar_insights.domain.models import EntityStatus, Goal, HealthStatus, Pillar, Platform
from aar_insights.domain.pillars import goal_issues
from aar_insights.weighting import weighted_mean_or_none


@dataclass(frozen=True)
class GoalRow:
    goal: Goal
    platform: Platform
    issues: list[Pillar]


@dataclass(frozen=True)
class OverviewResult:
    has_any_dsp: bool
    total_impressions: int
    total_spend: float
    weighted_block_rate: float | None
    block_rate_warning: bool
    needs_attention: int
    at_risk: int
    active: int
    platform_count: int
    channel_mix: ChannelMix
    goal_rows: list[GoalRow]
    insight: str


def build_overview(goals: Sequence[Goal], block_rate_warning: float | None = None) -> OverviewResult:
    """Headline numbers, channel mix and goal table rows for a goal set."""
    warning_threshold = BLOCK_RATE_WARNING if block_rate_warning is None else block_rate_warning
    weighted_block_rate = weighted_mean_or_none(goals, "blockRate")
    needs_attention = sum(1 for goal in goals if goal.health_status is HealthStatus.NEEDS_ATTENTION)
    at_risk = sum(1 for goal in goals if goal.health_status is HealthStatus.AT_RISK)
    active = sum(1 for goal in goals if goal.status is EntityStatus.ACTIVE)
    platform_count = len({platform for goal in goals for platform in goal.platforms})

    return OverviewResult(
        has_any_dsp=any(goal.connected_dsp for goal in goals),
        total_impressions=sum(goal.total_impressions for goal in goals),
        total_spend=sum(goal.total_spend for goal in goals),
        weighted_block_rate=weighted_block_rate,
        block_rate_warning=weighted_block_rate is not None and weighted_block_rate > warning_threshold,
        needs_attention=needs_attention,
        at_risk=at_risk,
        active=active,
        platform_count=platform_count,
        channel_mix=ChannelMixEngine().run(goals),
        goal_rows=[GoalRow(goal=goal, platform=goal.effective_platform, issues=goal_issues(goal)) for goal in goals],
        insight=overview_insight(needs_attention, at_risk, active, platform_count),
    )
