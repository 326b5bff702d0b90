"""Dashboard contract — Pydantic v2 models."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, computed_field


class GoalField(str, Enum):
    monthly_revenue_goal = "monthly_revenue_goal"
    average_ticket_goal = "average_ticket_goal"
    appointments_goal = "appointments_goal"
    evaluations_goal = "evaluations_goal"
    sales_goal = "sales_goal"


# Count goals are whole numbers; money goals are decimals.
INTEGER_GOAL_FIELDS: frozenset[GoalField] = frozenset(
    {GoalField.appointments_goal, GoalField.evaluations_goal, GoalField.sales_goal}
)


class GoalRecord(BaseModel):
    """One calendar month's targets. `month` is zero-indexed (0 = January)."""

    month: int = Field(ge=0, le=11)
    year: int
    monthly_revenue_goal: float = Field(default=0.0, ge=0)
    average_ticket_goal: float = Field(default=0.0, ge=0)
    appointments_goal: int = Field(default=0, ge=0)
    evaluations_goal: int = Field(default=0, ge=0)
    sales_goal: int = Field(default=0, ge=0)


class ActualsSnapshot(BaseModel):
    sales_closed: int = 0
    revenue: float = 0.0
    appointments_made: int = 0
    evaluations_generated: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def average_ticket(self) -> float:
        if self.sales_closed > 0:
            return self.revenue / self.sales_closed
        return 0.0


class MetricProgress(BaseModel):
    metric: str
    label: str
    unit: str  # "BRL" | "count"
    actual: float | None = None  # None when the source was unavailable
    goal: float = 0.0
    progress_pct: float | None = None  # None when goal is unset, not the same as 0%


class Notification(BaseModel):
    source: str
    message: str
    level: str = "error"  # "error" | "warning"


class MonthRef(BaseModel):
    year: int
    month: int
    label: str


class GoalTable(BaseModel):
    year: int
    goals: list[GoalRecord] = Field(default_factory=list)
    notifications: list[Notification] = Field(default_factory=list)


class GoalEdit(BaseModel):
    """A single-field edit against a full table, as sent by the settings page."""

    goals: list[GoalRecord] = Field(default_factory=list)
    month: int = Field(ge=0, le=11)
    field: GoalField
    value: str | float | None = None


class DashboardCard(BaseModel):
    """Top-level dashboard response — always constructible."""

    year: int
    month: int = Field(ge=0, le=11)
    month_label: str
    previous: MonthRef
    next: MonthRef
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    remaining_business_days: int = 0
    actuals: ActualsSnapshot = Field(default_factory=ActualsSnapshot)
    goal: GoalRecord
    progress: list[MetricProgress] = Field(default_factory=list)
    notifications: list[Notification] = Field(default_factory=list)
