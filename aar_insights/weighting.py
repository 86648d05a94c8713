"""Metric Weighting Engine: impression-weighted means over entity subsets."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

import polars as pl

from aar_insights.domain.errors import UndefinedAggregate
from aar_insights.domain.models import METRIC_FIELDS
from aar_insights.logger import get_logger

DEFAULT_WEIGHT = "totalImpressions"

logger = get_logger(__name__)


def metric_value(entity: Any, name: str) -> float:
    """Read a camelCase metric from a mapping or a domain object."""
    if isinstance(entity, Mapping):
        raw = entity[name]
    else:
        raw = getattr(entity, METRIC_FIELDS.get(name, name))
    if raw is None:
        return 0.0
    return float(raw)


def _unique(entities: Iterable[Any]) -> list[Any]:
    seen: set[int] = set()
    unique: list[Any] = []
    for entity in entities:
        marker = id(entity)
        if marker in seen:
            continue
        seen.add(marker)
        unique.append(entity)
    return unique


def weighted_mean(entities: Iterable[Any], metric: str, weight: str = DEFAULT_WEIGHT) -> float:
    """Return Σ(metric × weight) / Σ(weight).

    Each entity object counts once even if it is listed more than once.
    Raises UndefinedAggregate when the collection is empty or the total weight is 0.
    """
    numerator = 0.0
    denominator = 0.0
    for entity in _unique(entities):
        entity_weight = metric_value(entity, weight)
        numerator += metric_value(entity, metric) * entity_weight
        denominator += entity_weight
    if denominator == 0:
        raise UndefinedAggregate(metric, weight)
    return numerator / denominator


def weighted_mean_or_none(entities: Iterable[Any], metric: str, weight: str = DEFAULT_WEIGHT) -> float | None:
    try:
        return weighted_mean(entities, metric, weight=weight)
    except UndefinedAggregate as exc:
        logger.debug("%s", exc)
        return None


def safe_ratio_expr(num: pl.Expr, den: pl.Expr) -> pl.Expr:
    safe_den = pl.when(den > 0).then(den).otherwise(None)
    return num / safe_den


def weighted_sum_column(metric: str) -> str:
    return f"{metric}_weighted_sum"


def weighted_sum_expr(metric: str, weight: str = DEFAULT_WEIGHT) -> pl.Expr:
    return (pl.col(metric) * pl.col(weight)).sum().alias(weighted_sum_column(metric))


def weighted_mean_expr(metric: str, weight_total: str) -> pl.Expr:
    """Ratio over already aggregated sums; null where the total weight is 0."""
    return safe_ratio_expr(pl.col(weighted_sum_column(metric)), pl.col(weight_total)).alias(metric)
