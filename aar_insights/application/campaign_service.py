"""Application service for the campaign list: flatten/join, filter and sort."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Sequence

from aar_insights.domain.errors import InvalidSortKey, UnresolvedAssociation
from aar_insights.domain.models import (
    Campaign,
    EntityStatus,
    FlatCampaign,
    Goal,
    Platform,
    SortDirection,
    SortKey,
)
from aar_insights.logger import get_logger

ALL = "all"

logger = get_logger(__name__)


def goals_index(goals: Iterable[Goal]) -> dict[str, Goal]:
    return {goal.id: goal for goal in goals}


def lookup_goal(goal_id: str, goals_by_id: Mapping[str, Goal], campaign_id: str | None = None) -> Goal:
    goal = goals_by_id.get(goal_id)
    if goal is None:
        raise UnresolvedAssociation(goal_id, campaign_id=campaign_id)
    return goal


def _resolve_or_unassigned(goal_id: str, goals_by_id: Mapping[str, Goal], campaign_id: str) -> Goal | None:
    try:
        return lookup_goal(goal_id, goals_by_id, campaign_id=campaign_id)
    except UnresolvedAssociation as exc:
        logger.debug("Falling back to unassigned: %s", exc)
        return None


def resolve_association(
    campaign: Campaign,
    goals_by_id: Mapping[str, Goal],
    overrides: Mapping[str, str] | None = None,
    owner: Goal | None = None,
) -> Goal | None:
    """Effective goal of a campaign: override, then owner, then static goalId."""
    override_id = (overrides or {}).get(campaign.id)
    if override_id:
        return _resolve_or_unassigned(override_id, goals_by_id, campaign.id)
    if owner is not None:
        return owner
    if campaign.goal_id:
        return _resolve_or_unassigned(campaign.goal_id, goals_by_id, campaign.id)
    return None


def _tag(campaign: Campaign, goal: Goal | None) -> FlatCampaign:
    if goal is None:
        return FlatCampaign(campaign=campaign, goal_id=None, goal_name=None)
    return FlatCampaign(campaign=campaign, goal_id=goal.id, goal_name=goal.name)


def flatten(
    goals: Sequence[Goal],
    unassigned: Sequence[Campaign],
    overrides: Mapping[str, str] | None = None,
) -> list[FlatCampaign]:
    """Goal-owned campaigns in goal order, then the unassigned pool."""
    goals_by_id = goals_index(goals)
    rows: list[FlatCampaign] = []
    for goal in goals:
        for campaign in goal.campaigns:
            rows.append(_tag(campaign, resolve_association(campaign, goals_by_id, overrides, owner=goal)))
    for campaign in unassigned:
        rows.append(_tag(campaign, resolve_association(campaign, goals_by_id, overrides)))
    return rows


def is_unassigned(row: FlatCampaign) -> bool:
    return row.goal_id is None


def campaign_link(row: FlatCampaign) -> str:
    """Navigation target; rows must come from flatten() with the same overrides."""
    if row.goal_id:
        return f"/goals/{row.goal_id}/campaigns/{row.id}"
    return f"/campaigns/{row.id}"


@dataclass(frozen=True)
class RowFilter:
    """Conjunctive clauses; None or "all" leaves a field unconstrained."""

    status: EntityStatus | str | None = None
    platform: Platform | str | None = None

    @classmethod
    def from_mapping(cls, clauses: Mapping[str, Any]) -> "RowFilter":
        return cls(status=clauses.get("status"), platform=clauses.get("platform"))


def clause_matches(value: Any, wanted: Any) -> bool:
    if wanted is None or wanted == ALL:
        return True
    return str(getattr(value, "value", value)) == str(getattr(wanted, "value", wanted))


def filter_rows(rows: Sequence[FlatCampaign], clauses: RowFilter | Mapping[str, Any] | None = None) -> list[FlatCampaign]:
    if clauses is None:
        return list(rows)
    if not isinstance(clauses, RowFilter):
        clauses = RowFilter.from_mapping(clauses)
    return [
        row
        for row in rows
        if clause_matches(row.status, clauses.status) and clause_matches(row.platform, clauses.platform)
    ]


def coerce_sort_key(key: SortKey | str) -> SortKey:
    try:
        return SortKey(key)
    except ValueError as exc:
        raise InvalidSortKey(key, [member.value for member in SortKey]) from exc


def _goal_name_value(
    row: FlatCampaign,
    overrides: Mapping[str, str],
    goals_by_id: Mapping[str, Goal],
) -> str:
    override_id = overrides.get(row.id)
    if override_id:
        goal = goals_by_id.get(override_id)
        return goal.name.lower() if goal is not None else ""
    return (row.goal_name or row.campaign.goal_name or "").lower()


def _sort_value_getter(
    key: SortKey,
    overrides: Mapping[str, str],
    goals_by_id: Mapping[str, Goal],
) -> Callable[[FlatCampaign], Any]:
    if key is SortKey.NAME:
        return lambda row: row.name.lower()
    if key is SortKey.GOAL_NAME:
        return lambda row: _goal_name_value(row, overrides, goals_by_id)
    if key is SortKey.AUTHENTIC_AD_RATE:
        return lambda row: row.authentic_ad_rate
    if key is SortKey.IMPRESSIONS:
        return lambda row: row.impressions
    if key is SortKey.SPEND:
        return lambda row: row.spend
    if key is SortKey.VIEWABILITY_RATE:
        return lambda row: row.viewability_rate
    raise InvalidSortKey(key, [member.value for member in SortKey])


def sort_rows(
    rows: Sequence[FlatCampaign],
    key: SortKey | str,
    direction: SortDirection | str = SortDirection.ASC,
    overrides: Mapping[str, str] | None = None,
    goals_by_id: Mapping[str, Goal] | None = None,
) -> list[FlatCampaign]:
    """Sort a copy of rows; equal keys keep their input order."""
    sort_key = coerce_sort_key(key)
    descending = SortDirection(direction) is SortDirection.DESC
    getter = _sort_value_getter(sort_key, overrides or {}, goals_by_id or {})
    return sorted(rows, key=getter, reverse=descending)


@dataclass(frozen=True)
class SortState:
    key: SortKey = SortKey.NAME
    direction: SortDirection = SortDirection.ASC

    def toggled(self, key: SortKey | str) -> "SortState":
        """Flip direction on the active key; a new key starts ascending."""
        sort_key = coerce_sort_key(key)
        if sort_key is self.key:
            flipped = SortDirection.DESC if self.direction is SortDirection.ASC else SortDirection.ASC
            return SortState(key=sort_key, direction=flipped)
        return SortState(key=sort_key, direction=SortDirection.ASC)


@dataclass(frozen=True)
class CampaignListResult:
    rows: list[FlatCampaign]
    total: int
    links: dict[str, str]
    assignable: list[str]


def build_campaign_list(
    goals: Sequence[Goal],
    unassigned: Sequence[Campaign],
    clauses: RowFilter | Mapping[str, Any] | None = None,
    sort: SortState | None = None,
    overrides: Mapping[str, str] | None = None,
) -> CampaignListResult:
    """Run flatten -> filter -> sort for one campaign-list render."""
    sort = sort or SortState()
    goals_by_id = goals_index(goals)
    flat = flatten(goals, unassigned, overrides=overrides)
    visible = sort_rows(
        filter_rows(flat, clauses),
        sort.key,
        sort.direction,
        overrides=overrides,
        goals_by_id=goals_by_id,
    )
    logger.debug("Campaign list: %d of %d rows visible", len(visible), len(flat))
    return CampaignListResult(
        rows=visible,
        total=len(flat),
        links={row.id: campaign_link(row) for row in visible},
        assignable=[row.id for row in visible if is_unassigned(row)],
    )
