"""Domain layer package."""

from .errors import InvalidSortKey, UndefinedAggregate, UnresolvedAssociation
from .models import (
    Campaign,
    ChannelAggregate,
    EntityStatus,
    FlatCampaign,
    Goal,
    GoalOverrides,
    HealthStatus,
    MediaType,
    Pillar,
    Platform,
    SortDirection,
    SortKey,
)
from .pillars import DRIVER_LABELS, PillarReading, evaluate_pillars, goal_issues, primary_driver

__all__ = [
    "Campaign",
    "ChannelAggregate",
    "EntityStatus",
    "FlatCampaign",
    "Goal",
    "GoalOverrides",
    "HealthStatus",
    "MediaType",
    "Pillar",
    "Platform",
    "SortDirection",
    "SortKey",
    "InvalidSortKey",
    "UndefinedAggregate",
    "UnresolvedAssociation",
    "DRIVER_LABELS",
    "PillarReading",
    "evaluate_pillars",
    "goal_issues",
    "primary_driver",
]
