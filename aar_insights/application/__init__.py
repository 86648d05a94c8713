"""Application layer package."""

from .campaign_service import (
    CampaignListResult,
    RowFilter,
    SortState,
    build_campaign_list,
    filter_rows,
    flatten,
    sort_rows,
)
from .goal_service import GoalFilter, GoalListResult, build_goal_list, build_goal_list_view, filter_goals
from .overview_service import OverviewResult, build_overview
from .report_service import run_reporting_pipeline
from .view_state import CampaignViewState, GoalViewState

__all__ = [
    "CampaignListResult",
    "RowFilter",
    "SortState",
    "build_campaign_list",
    "filter_rows",
    "flatten",
    "sort_rows",
    "GoalFilter",
    "GoalListResult",
    "build_goal_list",
    "build_goal_list_view",
    "filter_goals",
    "OverviewResult",
    "build_overview",
    "run_reporting_pipeline",
    "CampaignViewState",
    "GoalViewState",
]
