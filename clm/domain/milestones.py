from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

REVIEW = "review"
RENEWAL = "renewal"
EXPIRATION = "expiration"


@dataclass(frozen=True, slots=True)
class MilestoneRule:
    """A milestone placed a fixed number of days before a contract expires."""

    milestone_type: str
    name: str
    days_before_expiration: int

    def due_date(self, expiration_date: date) -> date:
        return expiration_date - timedelta(days=self.days_before_expiration)


# Order matters: milestones are written in this order.
DEFAULT_MILESTONE_RULES: tuple[MilestoneRule, ...] = (
    MilestoneRule(REVIEW, "90-Day Review", 90),
    MilestoneRule(RENEWAL, "60-Day Renewal Notice", 60),
    MilestoneRule(EXPIRATION, "Contract Expiration", 0),
)


@dataclass(frozen=True, slots=True)
class PlannedMilestone:
    milestone_type: str
    name: str
    due_date: date


def plan_default_milestones(expiration_date: date | None) -> list[PlannedMilestone]:
    """Milestones generated for a new contract; empty without an expiration date."""
    if expiration_date is None:
        return []
    return [
        PlannedMilestone(rule.milestone_type, rule.name, rule.due_date(expiration_date))
        for rule in DEFAULT_MILESTONE_RULES
    ]
