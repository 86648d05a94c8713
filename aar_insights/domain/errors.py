"""Error taxonomy for aggregation, association and sorting."""

from __future__ import annotations


class UndefinedAggregate(ZeroDivisionError):
    """Weighted mean requested over a zero total weight."""

    def __init__(self, metric: str, weight: str) -> None:
        super().__init__(f"Weighted mean of {metric!r} is undefined: total {weight!r} is 0")
        self.metric = metric
        self.weight = weight


class UnresolvedAssociation(LookupError):
    """A goal id does not exist in the supplied goal set."""

    def __init__(self, goal_id: str, campaign_id: str | None = None) -> None:
        target = f" (campaign {campaign_id!r})" if campaign_id else ""
        super().__init__(f"Goal {goal_id!r} not found{target}")
        self.goal_id = goal_id
        self.campaign_id = campaign_id


class InvalidSortKey(ValueError):
    def __init__(self, key: object, allowed: list[str]) -> None:
        super().__init__(f"Invalid sort key {key!r}; expected one of {allowed}")
        self.key = key
        self.allowed = allowed
