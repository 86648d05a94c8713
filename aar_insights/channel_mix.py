"""Channel Mix Engine: per-platform impression-weighted quality aggregates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

import polars as pl

from aar_insights.domain.models import ChannelAggregate, Goal, Pillar, Platform
from aar_insights.domain.pillars import primary_driver
from aar_insights.weighting import weighted_mean_expr, weighted_sum_column, weighted_sum_expr


@dataclass(frozen=True)
class InitiativeTotal:
    goal_count: int
    impressions: int
    spend: float
    authentic_ad_rate: float | None
    block_rate: float | None
    primary_driver: Pillar | None


@dataclass(frozen=True)
class ChannelMix:
    channels: list[ChannelAggregate]
    total: InitiativeTotal


class ChannelMixEngine:
    """Group goals by effective platform and weight their rates by impressions."""

    GROUP_COLUMN = "platform"
    WEIGHT_COLUMN = "totalImpressions"
    RATE_METRICS: List[str] = [
        "authenticAdRate",
        "blockRate",
        "fraudRate",
        "viewabilityRate",
        "brandSuitabilityRate",
        "inGeoRate",
    ]
    SCHEMA: Dict[str, Any] = {
        "platform": pl.Utf8,
        "totalImpressions": pl.Int64,
        "totalSpend": pl.Float64,
        **{metric: pl.Float64 for metric in RATE_METRICS},
    }
    RESULT_COLUMNS: List[str] = ["goal_count", "impressions", "spend", *RATE_METRICS]

    def goals_frame(self, goals: Sequence[Goal]) -> pl.DataFrame:
        rows = [
            {
                "platform": goal.effective_platform.value,
                "totalImpressions": goal.total_impressions,
                "totalSpend": goal.total_spend,
                "authenticAdRate": goal.authentic_ad_rate,
                "blockRate": goal.block_rate,
                "fraudRate": goal.fraud_rate,
                "viewabilityRate": goal.viewability_rate,
                "brandSuitabilityRate": goal.brand_suitability_rate,
                "inGeoRate": goal.in_geo_rate,
            }
            for goal in goals
        ]
        return pl.DataFrame(rows, schema=self.SCHEMA)

    def _sum_aggregations(self) -> List[pl.Expr]:
        return [
            pl.len().alias("goal_count"),
            pl.col(self.WEIGHT_COLUMN).sum().alias("impressions"),
            pl.col("totalSpend").sum().alias("spend"),
            *[weighted_sum_expr(metric, self.WEIGHT_COLUMN) for metric in self.RATE_METRICS],
        ]

    def _with_weighted_rates(self, summed: pl.DataFrame) -> pl.DataFrame:
        return summed.with_columns(
            [weighted_mean_expr(metric, "impressions") for metric in self.RATE_METRICS]
        ).drop([weighted_sum_column(metric) for metric in self.RATE_METRICS])

    def aggregate_by_platform(self, frame: pl.DataFrame) -> pl.DataFrame:
        summed = frame.group_by(self.GROUP_COLUMN, maintain_order=True).agg(self._sum_aggregations())
        return (
            self._with_weighted_rates(summed)
            .select([self.GROUP_COLUMN, *self.RESULT_COLUMNS])
            .sort("impressions", descending=True, maintain_order=True)
        )

    def aggregate_total(self, frame: pl.DataFrame) -> Dict[str, Any]:
        summed = frame.select(self._sum_aggregations())
        return self._with_weighted_rates(summed).select(self.RESULT_COLUMNS).to_dicts()[0]

    def run(self, goals: Sequence[Goal]) -> ChannelMix:
        frame = self.goals_frame(goals)
        goals_by_platform: Dict[str, List[Goal]] = {}
        for goal in goals:
            goals_by_platform.setdefault(goal.effective_platform.value, []).append(goal)

        channels = [
            ChannelAggregate(
                platform=Platform(row["platform"]),
                goal_count=int(row["goal_count"]),
                impressions=int(row["impressions"] or 0),
                spend=float(row["spend"] or 0.0),
                authentic_ad_rate=row["authenticAdRate"],
                block_rate=row["blockRate"],
                primary_driver=primary_driver(goals_by_platform[row["platform"]]),
            )
            for row in self.aggregate_by_platform(frame).to_dicts()
        ]

        total_row = self.aggregate_total(frame)
        total = InitiativeTotal(
            goal_count=int(total_row["goal_count"]),
            impressions=int(total_row["impressions"] or 0),
            spend=float(total_row["spend"] or 0.0),
            authentic_ad_rate=total_row["authenticAdRate"],
            block_rate=total_row["blockRate"],
            primary_driver=primary_driver(goals),
        )
        return ChannelMix(channels=channels, total=total)
