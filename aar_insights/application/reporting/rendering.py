"""Text rendering helpers for overview and list summaries."""

from __future__ import annotations

from typing import List


def _plural(count: int, singular: str, plural: str) -> str:
    return singular if count == 1 else plural


def overview_insight(needs_attention: int, at_risk: int, active: int, platform_count: int) -> str:
    parts: List[str] = []
    if needs_attention > 0:
        parts.append(
            f"{needs_attention} goal{_plural(needs_attention, '', 's')} "
            f"need{_plural(needs_attention, 's', '')} attention."
        )
    if at_risk > 0:
        parts.append(f"{at_risk} goal{_plural(at_risk, ' is', 's are')} at risk.")
    if active > 0:
        parts.append(
            f"You have {active} active goal{_plural(active, '', 's')} running across {platform_count} platforms."
        )
    if needs_attention == 0 and at_risk == 0:
        parts.append("All goals on track.")
    return " ".join(parts)


def campaign_count_label(count: int) -> str:
    return f"{count} campaign{_plural(count, '', 's')}"
