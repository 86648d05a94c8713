"""Shared numeric/formatting utilities for rendering aggregates."""

from __future__ import annotations

from aar_insights.domain.models import Pillar
from aar_insights.domain.pillars import DRIVER_LABELS

PLACEHOLDER = "—"


def fmt_percent(value: float | None, digits: int = 1) -> str:
    if value is None:
        return PLACEHOLDER
    return f"{value:.{digits}f}%"


def fmt_compact_currency(value: float | None) -> str:
    if value is None:
        return PLACEHOLDER
    abs_value = abs(value)
    sign = "-" if value < 0 else ""
    if abs_value >= 1_000_000:
        return f"{sign}${abs_value / 1_000_000:.1f}M"
    if abs_value >= 1_000:
        return f"{sign}${abs_value / 1_000:.1f}K"
    return f"{sign}${abs_value:.0f}"


def fmt_number(value: float | None) -> str:
    if value is None:
        return PLACEHOLDER
    return f"{value:,.0f}"


def fmt_driver(pillar: Pillar | None) -> str:
    if pillar is None:
        return "All pillars passing"
    return DRIVER_LABELS[pillar]
