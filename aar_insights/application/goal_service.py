"""Application service for the goal list use case."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from aar_insights.application.campaign_service import clause_matches
from aar_insights.domain.models import Goal, GoalOverrides, HealthStatus, Platform


@dataclass(frozen=True)
class GoalFilter:
    health_status: HealthStatus | str | None = None
    platform: Platform | str | None = None

    @classmethod
    def from_mapping(cls, clauses: Mapping[str, Any]) -> "GoalFilter":
        return cls(health_status=clauses.get("status"), platform=clauses.get("platform"))


def build_goal_list(
    goals: Sequence[Goal],
    created_goal: Goal | None = None,
    overrides: GoalOverrides | None = None,
) -> list[Goal]:
    """Prepend a wizard-created goal, with overrides applied, to the base goals."""
    if created_goal is None:
        return list(goals)
    return [(overrides or GoalOverrides()).apply(created_goal), *goals]


def filter_goals(goals: Sequence[Goal], clauses: GoalFilter | Mapping[str, Any] | None = None) -> list[Goal]:
    if clauses is None:
        return list(goals)
    if not isinstance(clauses, GoalFilter):
        clauses = GoalFilter.from_mapping(clauses)
    return [
        goal
        for goal in goals
        if clause_matches(goal.health_status, clauses.health_status)
        and clause_matches(goal.effective_platform, clauses.platform)
    ]


def available_platforms(goals: Sequence[Goal]) -> list[Platform]:
    """Distinct effective platforms in first-seen order."""
    seen: dict[Platform, None] = {}
    for goal in goals:
        seen.setdefault(goal.effective_platform, None)
    return list(seen)


def health_status_counts(goals: Sequence[Goal]) -> dict[HealthStatus, int]:
    counts = {status: 0 for status in HealthStatus}
    for goal in goals:
        counts[goal.health_status] += 1
    return counts


def platform_counts(goals: Sequence[Goal]) -> dict[Platform, int]:
    counts: dict[Platform, int] = {}
    for goal in goals:
        counts[goal.effective_platform] = counts.get(goal.effective_platform, 0) + 1
    return counts


@dataclass(frozen=True)
class GoalListResult:
    rows: list[Goal]
    total: int
    available_platforms: list[Platform]
    status_counts: dict[HealthStatus, int]
    platform_counts: dict[Platform, int]


def build_goal_list_view(
    goals: Sequence[Goal],
    clauses: GoalFilter | Mapping[str, Any] | None = None,
) -> GoalListResult:
    """Filtered rows; chips and counts always describe the full goal set."""
    return GoalListResult(
        rows=filter_goals(goals, clauses),
        total=len(goals),
        available_platforms=available_platforms(goals),
        status_counts=health_status_counts(goals),
        platform_counts=platform_counts(goals),
    )
