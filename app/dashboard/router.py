"""Dashboard HTTP router — monthly card & metric catalog."""

from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

import httpx
from fastapi import APIRouter, Depends, Query

from app.config import settings
from app.dashboard import builders
from app.dashboard.models import DashboardCard
from app.dashboard.progress import METRICS
from app.webhooks import get_client

router = APIRouter(prefix="/api", tags=["dashboard"])


def local_today() -> date:
    return datetime.now(ZoneInfo(settings.default_tz)).date()


@router.get("/dashboard", response_model=DashboardCard)
async def get_dashboard(
    client: httpx.AsyncClient = Depends(get_client),
    year: int | None = Query(default=None, ge=2000, le=2100, description="Year (default: current)"),
    month: int | None = Query(default=None, ge=0, le=11, description="Month 0-11 (default: current)"),
) -> DashboardCard:
    today = local_today()
    return await builders.build_dashboard(
        client,
        year if year is not None else today.year,
        month if month is not None else today.month - 1,
        today,
    )


@router.get("/metrics")
async def metrics_catalog() -> list[dict]:
    return [
        {
            "metric": name,
            "label": cfg.label,
            "unit": cfg.unit,
            "goal_field": cfg.goal_field.value,
            "source": cfg.source,
        }
        for name, cfg in METRICS.items()
    ]
