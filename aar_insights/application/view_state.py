"""Filter/sort selections encoded as URL query parameters."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, TypeVar
from urllib.parse import parse_qsl, urlencode

from aar_insights.application.campaign_service import ALL, RowFilter, SortState
from aar_insights.application.goal_service import GoalFilter
from aar_insights.domain.models import EntityStatus, HealthStatus, Platform, SortDirection, SortKey

E = TypeVar("E", bound=Enum)


def _parse_choice(raw: str | None, enum_cls: type[E]) -> E | None:
    if not raw or raw == ALL:
        return None
    try:
        return enum_cls(raw)
    except ValueError:
        return None


def _params_from_query(query: str) -> dict[str, str]:
    return dict(parse_qsl(query.lstrip("?"), keep_blank_values=False))


@dataclass(frozen=True)
class CampaignViewState:
    status: EntityStatus | None = None
    platform: Platform | None = None
    sort: SortState = SortState()

    def to_filter(self) -> RowFilter:
        return RowFilter(status=self.status, platform=self.platform)

    def to_params(self) -> dict[str, str]:
        """Non-default selections only."""
        params: dict[str, str] = {}
        if self.status is not None:
            params["status"] = self.status.value
        if self.platform is not None:
            params["platform"] = self.platform.value
        if self.sort.key is not SortKey.NAME:
            params["sort"] = self.sort.key.value
        if self.sort.direction is not SortDirection.ASC:
            params["dir"] = self.sort.direction.value
        return params

    def to_query_string(self) -> str:
        return urlencode(self.to_params())

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> "CampaignViewState":
        key = _parse_choice(params.get("sort"), SortKey) or SortKey.NAME
        direction = _parse_choice(params.get("dir"), SortDirection) or SortDirection.ASC
        return cls(
            status=_parse_choice(params.get("status"), EntityStatus),
            platform=_parse_choice(params.get("platform"), Platform),
            sort=SortState(key=key, direction=direction),
        )

    @classmethod
    def from_query_string(cls, query: str) -> "CampaignViewState":
        return cls.from_params(_params_from_query(query))


@dataclass(frozen=True)
class GoalViewState:
    status: HealthStatus | None = None
    platform: Platform | None = None

    def to_filter(self) -> GoalFilter:
        return GoalFilter(health_status=self.status, platform=self.platform)

    def to_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.status is not None:
            params["status"] = self.status.value
        if self.platform is not None:
            params["platform"] = self.platform.value
        return params

    def to_query_string(self) -> str:
        return urlencode(self.to_params())

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> "GoalViewState":
        return cls(
            status=_parse_choice(params.get("status"), HealthStatus),
            platform=_parse_choice(params.get("platform"), Platform),
        )

    @classmethod
    def from_query_string(cls, query: str) -> "GoalViewState":
        return cls.from_params(_params_from_query(query))
