"""Infrastructure adapter for JSON dataset snapshots."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from aar_insights.domain.models import Campaign, Goal


@dataclass(frozen=True)
class Dataset:
    goals: list[Goal]
    unassigned: list[Campaign]
    created_goal: Goal | None = None


def parse_dataset(payload: Mapping[str, Any]) -> Dataset:
    goals_raw = payload.get("goals")
    if not isinstance(goals_raw, list):
        raise ValueError("Dataset must contain a 'goals' list")
    unassigned_raw = payload.get("unassignedCampaigns") or []
    if not isinstance(unassigned_raw, list):
        raise ValueError("'unassignedCampaigns' must be a list")
    created_raw = payload.get("createdGoal")
    if created_raw is not None and not isinstance(created_raw, dict):
        raise ValueError("'createdGoal' must be an object")

    goals = [Goal.from_row(row) for row in goals_raw]
    unassigned = [Campaign.from_row(row) for row in unassigned_raw]
    created_goal = Goal.from_row(created_raw) if created_raw is not None else None

    goal_ids = {goal.id for goal in goals}
    if len(goal_ids) != len(goals):
        raise ValueError("Duplicate goal id in 'goals'")
    if created_goal is not None and created_goal.id in goal_ids:
        raise ValueError(f"Created goal id {created_goal.id!r} collides with an existing goal")

    owned = [c for goal in goals for c in goal.campaigns]
    if created_goal is not None:
        owned.extend(created_goal.campaigns)
    seen: set[str] = set()
    for campaign in owned + unassigned:
        if campaign.id in seen:
            raise ValueError(f"Duplicate campaign id: {campaign.id!r}")
        seen.add(campaign.id)
    return Dataset(goals=goals, unassigned=unassigned, created_goal=created_goal)


def load_dataset(path: Path) -> Dataset:
    if not path.exists():
        raise FileNotFoundError(f"Dataset file not found: {path}")
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError(f"Dataset root must be an object: {path}")
    return parse_dataset(payload)
