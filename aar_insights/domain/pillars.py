"""Primary Driver Classifier: pillar thresholds and worst-offender selection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from aar_insights.domain.errors import UndefinedAggregate
from aar_insights.domain.models import Goal, Pillar
from aar_insights.weighting import weighted_mean

PILLAR_ORDER: tuple[Pillar, ...] = (
    Pillar.FRAUD,
    Pillar.VIEWABILITY,
    Pillar.SUITABILITY,
    Pillar.GEOGRAPHY,
)
PILLAR_THRESHOLDS: dict[Pillar, float] = {
    Pillar.FRAUD: 98.0,
    Pillar.VIEWABILITY: 70.0,
    Pillar.SUITABILITY: 95.0,
    Pillar.GEOGRAPHY: 95.0,
}
DRIVER_LABELS: dict[Pillar, str] = {
    Pillar.FRAUD: "Fraud (Bot/SIVT traffic)",
    Pillar.VIEWABILITY: "Viewability (Below threshold)",
    Pillar.SUITABILITY: "Suitability (Unsafe content)",
    Pillar.GEOGRAPHY: "Geography (Out of market)",
}


@dataclass(frozen=True)
class PillarReading:
    pillar: Pillar
    value: float
    threshold: float

    @property
    def margin(self) -> float:
        return self.value - self.threshold

    @property
    def passing(self) -> bool:
        return self.value >= self.threshold


def pillar_value(pillar: Pillar, goals: Sequence[Goal]) -> float:
    """Weighted pillar value; fraud is expressed as the fraud-free rate."""
    if pillar is Pillar.FRAUD:
        return 100.0 - weighted_mean(goals, "fraudRate")
    if pillar is Pillar.VIEWABILITY:
        return weighted_mean(goals, "viewabilityRate")
    if pillar is Pillar.SUITABILITY:
        return weighted_mean(goals, "brandSuitabilityRate")
    if pillar is Pillar.GEOGRAPHY:
        return weighted_mean(goals, "inGeoRate")
    raise ValueError(f"Unhandled pillar: {pillar!r}")


def evaluate_pillars(goals: Sequence[Goal]) -> list[PillarReading]:
    """Read all four pillars. Raises UndefinedAggregate on zero impressions."""
    return [
        PillarReading(pillar=pillar, value=pillar_value(pillar, goals), threshold=PILLAR_THRESHOLDS[pillar])
        for pillar in PILLAR_ORDER
    ]


def _worst_first(readings: Sequence[PillarReading]) -> list[PillarReading]:
    failing = [reading for reading in readings if not reading.passing]
    return sorted(failing, key=lambda reading: (reading.margin, PILLAR_ORDER.index(reading.pillar)))


def primary_driver(goals: Sequence[Goal]) -> Pillar | None:
    """Return the failing pillar with the most negative margin, or None.

    None covers both "all pillars passing" and "no impressions to judge".
    """
    try:
        readings = evaluate_pillars(goals)
    except UndefinedAggregate:
        return None
    failing = _worst_first(readings)
    if not failing:
        return None
    return failing[0].pillar


def goal_issues(goal: Goal) -> list[Pillar]:
    """Failing pillars of a single goal, worst first."""
    try:
        readings = evaluate_pillars([goal])
    except UndefinedAggregate:
        return []
    return [reading.pillar for reading in _worst_first(readings)]
