"""Domain models for goals, campaigns and their flattened projections."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Mapping, Sequence, TypeVar


class EntityStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    PAUSED = "paused"


class HealthStatus(str, Enum):
    ON_TRACK = "on-track"
    AT_RISK = "at-risk"
    NEEDS_ATTENTION = "needs-attention"


class Platform(str, Enum):
    OPEN_WEB = "open-web"
    META = "meta"
    TIKTOK = "tiktok"
    YOUTUBE = "youtube"
    CTV = "ctv"
    SNAPCHAT = "snapchat"
    LINKEDIN = "linkedin"
    TWITCH = "twitch"


class MediaType(str, Enum):
    DISPLAY = "display"
    SOCIAL = "social"
    VIDEO = "video"
    CTV = "ctv"


class Pillar(str, Enum):
    """Quality pillars in tie-break order."""

    FRAUD = "Fraud"
    VIEWABILITY = "Viewability"
    SUITABILITY = "Suitability"
    GEOGRAPHY = "Geography"


class SortKey(str, Enum):
    NAME = "name"
    GOAL_NAME = "goalName"
    AUTHENTIC_AD_RATE = "authenticAdRate"
    IMPRESSIONS = "impressions"
    SPEND = "spend"
    VIEWABILITY_RATE = "viewabilityRate"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


# camelCase record keys -> dataclass attributes
METRIC_FIELDS: dict[str, str] = {
    "totalImpressions": "total_impressions",
    "totalSpend": "total_spend",
    "impressions": "impressions",
    "spend": "spend",
    "authenticAdRate": "authentic_ad_rate",
    "blockRate": "block_rate",
    "fraudRate": "fraud_rate",
    "viewabilityRate": "viewability_rate",
    "brandSuitabilityRate": "brand_suitability_rate",
    "inGeoRate": "in_geo_rate",
}

E = TypeVar("E", bound=Enum)


def _to_float(value: Any, default: float = 0.0) -> float:
    if value is None:
        return default
    return float(value)


def _to_optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _to_enum(enum_cls: type[E], value: Any, record_id: str, field_name: str) -> E:
    try:
        return enum_cls(str(value))
    except ValueError as exc:
        allowed = [member.value for member in enum_cls]
        raise ValueError(
            f"Invalid {field_name} {value!r} on record {record_id!r}; expected one of {allowed}"
        ) from exc


def _require(row: Mapping[str, Any], key: str, record_id: str) -> Any:
    value = row.get(key)
    if value is None:
        raise ValueError(f"Missing required field {key!r} on record {record_id!r}")
    return value


@dataclass(frozen=True)
class Campaign:
    id: str
    name: str
    platform: Platform
    status: EntityStatus
    health_status: HealthStatus
    impressions: int
    spend: float
    authentic_ad_rate: float
    viewability_rate: float
    goal_id: str | None = None
    goal_name: str | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Campaign":
        record_id = str(_require(row, "id", "<campaign>"))
        return cls(
            id=record_id,
            name=str(_require(row, "name", record_id)),
            platform=_to_enum(Platform, _require(row, "platform", record_id), record_id, "platform"),
            status=_to_enum(EntityStatus, _require(row, "status", record_id), record_id, "status"),
            health_status=_to_enum(HealthStatus, _require(row, "healthStatus", record_id), record_id, "healthStatus"),
            impressions=int(_to_float(row.get("impressions"))),
            spend=_to_float(row.get("spend")),
            authentic_ad_rate=_to_float(row.get("authenticAdRate")),
            viewability_rate=_to_float(row.get("viewabilityRate")),
            goal_id=_to_optional_str(row.get("goalId")),
            goal_name=_to_optional_str(row.get("goalName")),
        )


@dataclass(frozen=True)
class Goal:
    id: str
    name: str
    status: EntityStatus
    health_status: HealthStatus
    platforms: tuple[Platform, ...]
    total_impressions: int
    total_spend: float
    authentic_ad_rate: float
    block_rate: float
    fraud_rate: float
    viewability_rate: float
    brand_suitability_rate: float
    in_geo_rate: float
    platform: Platform | None = None
    media_type: MediaType | None = None
    connected_dsp: str | None = None
    campaigns: tuple[Campaign, ...] = field(default_factory=tuple)

    @property
    def effective_platform(self) -> Platform:
        if self.platform is not None:
            return self.platform
        return self.platforms[0]

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Goal":
        record_id = str(_require(row, "id", "<goal>"))
        raw_platforms: Sequence[Any] = row.get("platforms") or []
        platforms = tuple(_to_enum(Platform, p, record_id, "platforms") for p in raw_platforms)
        platform = row.get("platform")
        single = _to_enum(Platform, platform, record_id, "platform") if platform else None
        if single is None and not platforms:
            raise ValueError(f"Goal {record_id!r} has neither 'platform' nor 'platforms'")
        media_type = row.get("mediaType")
        return cls(
            id=record_id,
            name=str(_require(row, "name", record_id)),
            status=_to_enum(EntityStatus, _require(row, "status", record_id), record_id, "status"),
            health_status=_to_enum(HealthStatus, _require(row, "healthStatus", record_id), record_id, "healthStatus"),
            platforms=platforms or ((single,) if single is not None else ()),
            total_impressions=int(_to_float(row.get("totalImpressions"))),
            total_spend=_to_float(row.get("totalSpend")),
            authentic_ad_rate=_to_float(row.get("authenticAdRate")),
            block_rate=_to_float(row.get("blockRate")),
            fraud_rate=_to_float(row.get("fraudRate")),
            viewability_rate=_to_float(row.get("viewabilityRate")),
            brand_suitability_rate=_to_float(row.get("brandSuitabilityRate")),
            in_geo_rate=_to_float(row.get("inGeoRate")),
            platform=single,
            media_type=_to_enum(MediaType, media_type, record_id, "mediaType") if media_type else None,
            connected_dsp=_to_optional_str(row.get("connectedDsp")),
            campaigns=tuple(Campaign.from_row(item) for item in row.get("campaigns") or []),
        )


@dataclass(frozen=True)
class GoalOverrides:
    """Explicit wizard state applied on top of a created goal."""

    connected_dsp: str | None = None
    platform: Platform | None = None
    media_type: MediaType | None = None
    name: str | None = None

    def apply(self, goal: Goal) -> Goal:
        changes: dict[str, Any] = {"connected_dsp": self.connected_dsp or None}
        if self.platform is not None:
            changes["platform"] = self.platform
            changes["platforms"] = (self.platform,)
        if self.media_type is not None:
            changes["media_type"] = self.media_type
        if self.name:
            changes["name"] = self.name
        return replace(goal, **changes)


@dataclass(frozen=True)
class FlatCampaign:
    """A campaign tagged with its resolved goal association."""

    campaign: Campaign
    goal_id: str | None
    goal_name: str | None

    @property
    def id(self) -> str:
        return self.campaign.id

    @property
    def name(self) -> str:
        return self.campaign.name

    @property
    def platform(self) -> Platform:
        return self.campaign.platform

    @property
    def status(self) -> EntityStatus:
        return self.campaign.status

    @property
    def health_status(self) -> HealthStatus:
        return self.campaign.health_status

    @property
    def impressions(self) -> int:
        return self.campaign.impressions

    @property
    def spend(self) -> float:
        return self.campaign.spend

    @property
    def authentic_ad_rate(self) -> float:
        return self.campaign.authentic_ad_rate

    @property
    def viewability_rate(self) -> float:
        return self.campaign.viewability_rate

    @property
    def is_assigned(self) -> bool:
        return self.goal_id is not None


@dataclass(frozen=True)
class ChannelAggregate:
    platform: Platform
    goal_count: int
    impressions: int
    spend: float
    authentic_ad_rate: float | None
    block_rate: float | None
    primary_driver: Pillar | None
