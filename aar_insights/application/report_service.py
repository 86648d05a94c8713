"""Dashboard export use case: overview, goal list and campaign list snapshots."""

from __future__ import annotations

from time import perf_counter
from typing import Any, Dict, List, Mapping

import polars as pl

from aar_insights.application.campaign_service import CampaignListResult, build_campaign_list
from aar_insights.application.goal_service import GoalListResult, build_goal_list, build_goal_list_view
from aar_insights.application.overview_service import OverviewResult, build_overview
from aar_insights.application.reporting.metrics import fmt_compact_currency, fmt_driver, fmt_number, fmt_percent
from aar_insights.application.reporting.rendering import campaign_count_label
from aar_insights.application.view_state import CampaignViewState, GoalViewState
from aar_insights.config import Settings
from aar_insights.domain.models import Goal, GoalOverrides
from aar_insights.domain.platforms import media_type_for_platform, platform_label
from aar_insights.infrastructure.json_repository import load_dataset
from aar_insights.infrastructure.summary_exporter import SheetSpec, save_summary_json, save_summary_workbook
from aar_insights.logger import get_logger

logger = get_logger(__name__)


def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)


def overview_summary(overview: OverviewResult) -> Dict[str, Any]:
    headline: Dict[str, Any] = {
        "impressions": overview.total_impressions,
        "impressions_text": fmt_number(overview.total_impressions),
        "block_rate": overview.weighted_block_rate,
        "block_rate_text": fmt_percent(overview.weighted_block_rate),
        "block_rate_warning": overview.block_rate_warning,
        "needs_attention": overview.needs_attention,
        "at_risk": overview.at_risk,
        "active": overview.active,
        "platform_count": overview.platform_count,
        "insight": overview.insight,
    }
    if overview.has_any_dsp:
        headline["spend"] = overview.total_spend
        headline["spend_text"] = fmt_compact_currency(overview.total_spend)
    return headline


def channel_rows(overview: OverviewResult) -> List[Dict[str, Any]]:
    rows: List[Dict[str, Any]] = []
    for channel in overview.channel_mix.channels:
        rows.append(
            {
                "platform": channel.platform.value,
                "platform_label": platform_label(channel.platform),
                "goals": channel.goal_count,
                "impressions": channel.impressions,
                "spend": channel.spend,
                "authentic_ad_rate": channel.authentic_ad_rate,
                "authentic_ad_rate_text": fmt_percent(channel.authentic_ad_rate),
                "block_rate": channel.block_rate,
                "block_rate_text": fmt_percent(channel.block_rate),
                "primary_driver": _enum_value(channel.primary_driver),
                "primary_driver_text": fmt_driver(channel.primary_driver),
            }
        )
    total = overview.channel_mix.total
    rows.append(
        {
            "platform": "total",
            "platform_label": "Initiative Total",
            "goals": total.goal_count,
            "impressions": total.impressions,
            "spend": total.spend,
            "authentic_ad_rate": total.authentic_ad_rate,
            "authentic_ad_rate_text": fmt_percent(total.authentic_ad_rate),
            "block_rate": total.block_rate,
            "block_rate_text": fmt_percent(total.block_rate),
            "primary_driver": _enum_value(total.primary_driver),
            "primary_driver_text": fmt_driver(total.primary_driver),
        }
    )
    return rows


def goal_rows(overview: OverviewResult) -> List[Dict[str, Any]]:
    rows: List[Dict[str, Any]] = []
    for item in overview.goal_rows:
        goal = item.goal
        row: Dict[str, Any] = {
            "id": goal.id,
            "name": goal.name,
            "platform": item.platform.value,
            "media_type": _enum_value(goal.media_type or media_type_for_platform(item.platform)),
            "authentic_ad_rate": goal.authentic_ad_rate,
            "block_rate": goal.block_rate,
            "issues": ", ".join(pillar.value for pillar in item.issues),
            "health_status": goal.health_status.value,
        }
        if overview.has_any_dsp:
            row["total_spend"] = goal.total_spend
        rows.append(row)
    return rows


def campaign_rows(result: CampaignListResult) -> List[Dict[str, Any]]:
    return [
        {
            "id": row.id,
            "name": row.name,
            "goal_id": row.goal_id,
            "goal_name": row.goal_name or "",
            "platform": row.platform.value,
            "status": row.status.value,
            "authentic_ad_rate": row.authentic_ad_rate,
            "impressions": row.impressions,
            "spend": row.spend,
            "viewability_rate": row.viewability_rate,
            "link": result.links[row.id],
            "assignable": row.id in result.assignable,
        }
        for row in result.rows
    ]


def _goal_list_row(goal: Goal) -> Dict[str, Any]:
    platform = goal.effective_platform
    return {
        "id": goal.id,
        "name": goal.name,
        "status": goal.status.value,
        "health_status": goal.health_status.value,
        "platform": platform.value,
        "platform_label": platform_label(platform),
        "connected_dsp": goal.connected_dsp or "",
        "campaigns": len(goal.campaigns),
        "impressions": goal.total_impressions,
        "authentic_ad_rate": goal.authentic_ad_rate,
        "block_rate": goal.block_rate,
        "link": f"/goals/{goal.id}",
    }


def goal_list_summary(result: GoalListResult, view_state: GoalViewState) -> Dict[str, Any]:
    return {
        "view_state": view_state.to_params(),
        "query": view_state.to_query_string(),
        "total": result.total,
        "available_platforms": [platform.value for platform in result.available_platforms],
        "status_counts": {status.value: count for status, count in result.status_counts.items()},
        "platform_counts": {platform.value: count for platform, count in result.platform_counts.items()},
        "rows": [_goal_list_row(goal) for goal in result.rows],
    }


def build_summary(
    overview: OverviewResult,
    goal_list: GoalListResult,
    campaigns: CampaignListResult,
    goal_view_state: GoalViewState,
    view_state: CampaignViewState,
) -> Dict[str, Any]:
    return {
        "overview": overview_summary(overview),
        "channel_mix": channel_rows(overview),
        "goals": goal_rows(overview),
        "goal_list": goal_list_summary(goal_list, goal_view_state),
        "campaigns": {
            "view_state": view_state.to_params(),
            "query": view_state.to_query_string(),
            "count_label": campaign_count_label(len(campaigns.rows)),
            "total": campaigns.total,
            "rows": campaign_rows(campaigns),
        },
    }


def summary_sheets(summary: Mapping[str, Any]) -> List[SheetSpec]:
    return [
        SheetSpec(
            name="channel_mix",
            frame=pl.DataFrame(summary["channel_mix"]),
            percent_columns=("authentic_ad_rate", "block_rate"),
            currency_columns=("spend",),
            count_columns=("goals", "impressions"),
        ),
        SheetSpec(
            name="goals",
            frame=pl.DataFrame(summary["goals"]),
            percent_columns=("authentic_ad_rate", "block_rate"),
            currency_columns=("total_spend",),
        ),
        SheetSpec(
            name="goal_list",
            frame=pl.DataFrame(summary["goal_list"]["rows"]),
            percent_columns=("authentic_ad_rate", "block_rate"),
            count_columns=("campaigns", "impressions"),
        ),
        SheetSpec(
            name="campaigns",
            frame=pl.DataFrame(summary["campaigns"]["rows"]),
            percent_columns=("authentic_ad_rate", "viewability_rate"),
            currency_columns=("spend",),
            count_columns=("impressions",),
        ),
    ]


def run_reporting_pipeline(
    settings: Settings,
    view_state: CampaignViewState | None = None,
    overrides: Mapping[str, str] | None = None,
    goal_view_state: GoalViewState | None = None,
    include_created_goal: bool = False,
    goal_overrides: GoalOverrides | None = None,
) -> Dict[str, Any]:
    pipeline_start = perf_counter()
    stage_start = pipeline_start
    stage_timings: list[tuple[str, float]] = []

    def _mark(stage_name: str) -> None:
        nonlocal stage_start
        now = perf_counter()
        stage_timings.append((stage_name, now - stage_start))
        stage_start = now

    view_state = view_state or CampaignViewState()
    goal_view_state = goal_view_state or GoalViewState()
    output_json_path = settings.output_dir / "summary.json"
    output_excel_path = settings.output_dir / "summary.xlsx"

    dataset = load_dataset(settings.input_path)
    if include_created_goal and dataset.created_goal is None:
        raise ValueError(f"Dataset has no 'createdGoal' record: {settings.input_path}")
    _mark("load_dataset")

    # the overview reports the existing portfolio only
    overview = build_overview(dataset.goals, block_rate_warning=settings.block_rate_warning)
    _mark("build_overview")
    all_goals = build_goal_list(
        dataset.goals,
        created_goal=dataset.created_goal if include_created_goal else None,
        overrides=goal_overrides,
    )
    goal_list = build_goal_list_view(all_goals, goal_view_state.to_filter())
    _mark("build_goal_list")
    campaigns = build_campaign_list(
        all_goals,
        dataset.unassigned,
        clauses=view_state.to_filter(),
        sort=view_state.sort,
        overrides=overrides,
    )
    _mark("build_campaign_list")

    summary = build_summary(overview, goal_list, campaigns, goal_view_state, view_state)
    save_summary_json(output_json_path, summary)
    _mark("save_json")
    excel_saved, excel_error_message = save_summary_workbook(output_excel_path, summary_sheets(summary))
    _mark("save_excel")
    total_elapsed = perf_counter() - pipeline_start

    logger.info(
        "Summary prepared: goals=%d/%d, channels=%d, campaigns=%d/%d",
        len(goal_list.rows),
        goal_list.total,
        len(overview.channel_mix.channels),
        len(campaigns.rows),
        campaigns.total,
    )
    stage_text = ", ".join([f"{name}={seconds:.3f}s" for name, seconds in stage_timings])
    print(f"Stage Timing: {stage_text}")
    print(f"Total Elapsed: {total_elapsed:.3f}s")
    print(f"Saved JSON: {output_json_path}")
    if excel_saved:
        print(f"Saved Excel: {output_excel_path}")
    else:
        print(f"Excel save skipped (file may be open/locked): {excel_error_message}")
    return summary
