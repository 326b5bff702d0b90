"""Progress calculator — pure stateless math, never raises."""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass

from app.dashboard.models import ActualsSnapshot, GoalField, GoalRecord, MetricProgress


@dataclass(frozen=True, slots=True)
class MetricConfig:
    actual_field: str  # attribute on ActualsSnapshot
    goal_field: GoalField
    label: str
    unit: str  # "BRL" | "count"
    source: str  # webhook that feeds the actual value


# Display order on the dashboard
METRICS: dict[str, MetricConfig] = {
    "sales_closed": MetricConfig("sales_closed", GoalField.sales_goal, "Vendas Fechadas", "count", "sales"),
    "revenue": MetricConfig("revenue", GoalField.monthly_revenue_goal, "Faturamento Atual", "BRL", "sales"),
    "average_ticket": MetricConfig("average_ticket", GoalField.average_ticket_goal, "Ticket Médio", "BRL", "sales"),
    "appointments_made": MetricConfig(
        "appointments_made", GoalField.appointments_goal, "Agendamentos Realizados", "count", "appointments"
    ),
    "evaluations_generated": MetricConfig(
        "evaluations_generated", GoalField.evaluations_goal, "Avaliações Geradas", "count", "evaluations"
    ),
}


def get_metric(name: str) -> MetricConfig | None:
    return METRICS.get(name)


def list_metrics() -> list[str]:
    return list(METRICS.keys())


def metrics_for_source(source: str) -> list[str]:
    return [name for name, cfg in METRICS.items() if cfg.source == source]


def compute_progress(actual: float, goal: float | None) -> float | None:
    """Percentage of goal reached, unrounded. None when no goal is set."""
    if goal is None or goal <= 0:
        return None
    return (actual / goal) * 100.0


def compute_month_progress(
    actuals: ActualsSnapshot,
    goal: GoalRecord,
    unavailable: Collection[str] = (),
) -> list[MetricProgress]:
    """One MetricProgress per tracked metric.

    Metrics named in `unavailable` had their source fail: actual and
    progress are reported as None rather than a misleading 0.
    """
    results: list[MetricProgress] = []
    for name, cfg in METRICS.items():
        target = getattr(goal, cfg.goal_field.value)
        if name in unavailable:
            actual = None
            pct = None
        else:
            actual = getattr(actuals, cfg.actual_field)
            pct = compute_progress(actual, target)
        results.append(
            MetricProgress(
                metric=name,
                label=cfg.label,
                unit=cfg.unit,
                actual=actual,
                goal=target,
                progress_pct=pct,
            )
        )
    return results
