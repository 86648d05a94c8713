"""AAR Insights entrypoint."""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import Dict, List

from aar_insights.application.report_service import run_reporting_pipeline
from aar_insights.application.view_state import CampaignViewState, GoalViewState
from aar_insights.config import Settings
from aar_insights.domain.models import GoalOverrides, MediaType, Platform
from aar_insights.logger import get_logger


def _parse_assignments(values: List[str]) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    for value in values:
        campaign_id, sep, goal_id = value.partition("=")
        if not sep or not campaign_id or not goal_id:
            raise ValueError(f"Invalid --assign value {value!r}; expected CAMPAIGN=GOAL")
        overrides[campaign_id] = goal_id
    return overrides


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Build the AAR overview, goal list and campaign list snapshots",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py
  python main.py --status active --platform meta --sort spend --direction desc
  python main.py --assign camp-u1=goal-2
  python main.py --goal-status at-risk --goal-platform open-web
  python main.py --created-goal --wizard-platform ctv --wizard-name "CTV Launch" --assign camp-u1=goal-6
""",
    )
    parser.add_argument("--input", type=Path, help="Dataset JSON (default: AAR_INPUT_PATH)")
    parser.add_argument("--output-dir", type=Path, help="Output directory (default: AAR_OUTPUT_DIR)")
    parser.add_argument("--status", type=str, help="Campaign status filter (draft, active, paused, all)")
    parser.add_argument("--platform", type=str, help="Campaign platform filter (meta, ctv, ..., all)")
    parser.add_argument("--sort", type=str, help="Sort key (name, goalName, authenticAdRate, impressions, spend, viewabilityRate)")
    parser.add_argument("--direction", type=str, choices=["asc", "desc"], help="Sort direction")
    parser.add_argument("--assign", action="append", default=[], help="Goal assignment override CAMPAIGN=GOAL")
    parser.add_argument("--goal-status", type=str, help="Goal health filter (on-track, at-risk, needs-attention, all)")
    parser.add_argument("--goal-platform", type=str, help="Goal platform filter (meta, ctv, ..., all)")
    parser.add_argument("--created-goal", action="store_true", help="Prepend the dataset's createdGoal to the goal list")
    parser.add_argument("--wizard-dsp", type=str, help="Connected DSP label for the created goal")
    parser.add_argument("--wizard-platform", type=str, choices=[p.value for p in Platform], help="Platform for the created goal")
    parser.add_argument("--wizard-media-type", type=str, choices=[m.value for m in MediaType], help="Media type for the created goal")
    parser.add_argument("--wizard-name", type=str, help="Name for the created goal")

    args = parser.parse_args()

    settings = Settings.from_env()
    if args.input:
        settings = replace(settings, input_path=args.input)
    if args.output_dir:
        settings = replace(settings, output_dir=args.output_dir)

    logger = get_logger("aar_insights", level=settings.log_level)

    params = {
        key: value
        for key, value in {
            "status": args.status,
            "platform": args.platform,
            "sort": args.sort,
            "dir": args.direction,
        }.items()
        if value
    }
    view_state = CampaignViewState.from_params(params)
    if args.sort and view_state.sort.key.value != args.sort:
        parser.error(f"unknown sort key: {args.sort}")
    try:
        overrides = _parse_assignments(args.assign)
    except ValueError as exc:
        parser.error(str(exc))

    goal_view_state = GoalViewState.from_params(
        {key: value for key, value in {"status": args.goal_status, "platform": args.goal_platform}.items() if value}
    )
    wizard_flags = (args.wizard_dsp, args.wizard_platform, args.wizard_media_type, args.wizard_name)
    if any(wizard_flags) and not args.created_goal:
        parser.error("--wizard-* options require --created-goal")
    goal_overrides = GoalOverrides(
        connected_dsp=args.wizard_dsp,
        platform=Platform(args.wizard_platform) if args.wizard_platform else None,
        media_type=MediaType(args.wizard_media_type) if args.wizard_media_type else None,
        name=args.wizard_name,
    )

    logger.info("Loading dataset from %s", settings.input_path)
    summary = run_reporting_pipeline(
        settings,
        view_state=view_state,
        overrides=overrides,
        goal_view_state=goal_view_state,
        include_created_goal=args.created_goal,
        goal_overrides=goal_overrides,
    )
    print(summary["overview"]["insight"])


if __name__ == "__main__":
    main()
