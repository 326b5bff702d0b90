"""Dashboard builders.

Fetches actuals and goals from the webhooks, reconciles the goal table,
picks the month's row and computes progress. Graceful degradation: a
failing webhook becomes a Notification, never an exception.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Any, Awaitable, Callable

import httpx

from app.dashboard import connector
from app.dashboard.goals import build_default_table, find_month, merge_remote
from app.dashboard.models import (
    DashboardCard,
    GoalRecord,
    GoalTable,
    MonthRef,
    Notification,
)
from app.dashboard.periods import month_label, remaining_business_days, shift_month
from app.dashboard.progress import compute_month_progress, metrics_for_source

logger = logging.getLogger("clinicdash.builders")


def _notification(exc: connector.WebhookError) -> Notification:
    level = "warning" if isinstance(exc, connector.WebhookNotConfiguredError) else "error"
    return Notification(source=exc.source, message=str(exc), level=level)


async def _guarded(source: str, call: Callable[[], Awaitable[Any]]) -> tuple[Any, Notification | None]:
    try:
        return await call(), None
    except connector.WebhookError as exc:
        logger.warning("Webhook %s failed: %s", source, exc)
        return None, _notification(exc)


def _month_ref(year: int, month: int, delta: int) -> MonthRef:
    y, m = shift_month(year, month, delta)
    return MonthRef(year=y, month=m, label=month_label(y, m))


async def load_goal_table(client: httpx.AsyncClient, year: int) -> GoalTable:
    """Goals for `year`, zero-filled. An unreachable source yields the zeroed table."""
    rows, note = await _guarded("goals", lambda: connector.fetch_goal_rows(client, year))
    if note is not None:
        return GoalTable(year=year, goals=build_default_table(year), notifications=[note])
    return GoalTable(year=year, goals=merge_remote(year, rows))


async def build_dashboard(
    client: httpx.AsyncClient,
    year: int,
    month: int,
    today: date,
) -> DashboardCard:
    fetchers = {
        "sales": connector.fetch_sales,
        "appointments": connector.fetch_appointments,
        "evaluations": connector.fetch_evaluations,
    }
    results = await asyncio.gather(
        load_goal_table(client, year),
        *(
            _guarded(source, lambda fetch=fetch: fetch(client, year, month))
            for source, fetch in fetchers.items()
        ),
    )
    goal_table: GoalTable = results[0]
    notifications: list[Notification] = list(goal_table.notifications)

    parts: list[dict[str, float | int]] = []
    unavailable: list[str] = []
    for source, (part, note) in zip(fetchers, results[1:]):
        if note is not None:
            notifications.append(note)
            unavailable.extend(metrics_for_source(source))
        else:
            parts.append(part)

    actuals = connector.snapshot_from_parts(parts)
    goal = find_month(goal_table.goals, month) or GoalRecord(month=month, year=year)

    return DashboardCard(
        year=year,
        month=month,
        month_label=month_label(year, month),
        previous=_month_ref(year, month, -1),
        next=_month_ref(year, month, 1),
        remaining_business_days=remaining_business_days(year, month, today),
        actuals=actuals,
        goal=goal,
        progress=compute_month_progress(actuals, goal, unavailable),
        notifications=notifications,
    )
