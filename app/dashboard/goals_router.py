"""Goal settings endpoints — read, edit and save the yearly table."""

from __future__ import annotations

from collections import Counter

import httpx
from fastapi import APIRouter, Depends, HTTPException, Path

from app.auth import verify_api_key
from app.dashboard import builders, connector
from app.dashboard.goals import apply_edit, merge_remote
from app.dashboard.models import GoalEdit, GoalRecord, GoalTable
from app.webhooks import get_client

router = APIRouter(prefix="/api/goals", tags=["goals"])


def _check_rows(year: int, goals: list[GoalRecord]) -> None:
    """Submitted rows must belong to `year` and name each month at most once."""
    stray = sorted({g.year for g in goals if g.year != year})
    if stray:
        raise HTTPException(
            status_code=422,
            detail=f"Goals for year(s) {stray} submitted to /api/goals/{year}",
        )
    repeated = sorted(m for m, n in Counter(g.month for g in goals).items() if n > 1)
    if repeated:
        raise HTTPException(status_code=422, detail=f"Duplicate rows for month(s) {repeated}")


@router.get("/{year}", response_model=GoalTable)
async def read_goals(
    year: int = Path(..., ge=2000, le=2100),
    client: httpx.AsyncClient = Depends(get_client),
) -> GoalTable:
    return await builders.load_goal_table(client, year)


@router.put("/{year}", response_model=GoalTable)
async def save_goals(
    goals: list[GoalRecord],
    year: int = Path(..., ge=2000, le=2100),
    client: httpx.AsyncClient = Depends(get_client),
    _: str = Depends(verify_api_key),
) -> GoalTable:
    """Replace the whole year. Months left out are saved as zeroed goals."""
    _check_rows(year, goals)
    table = merge_remote(year, goals)
    try:
        await connector.save_goal_table(client, year, table)
    except connector.WebhookError as exc:
        raise HTTPException(status_code=502, detail=str(exc))
    return GoalTable(year=year, goals=table)


@router.post("/{year}/edit", response_model=GoalTable)
async def edit_goal(
    edit: GoalEdit,
    year: int = Path(..., ge=2000, le=2100),
) -> GoalTable:
    _check_rows(year, edit.goals)
    table = merge_remote(year, edit.goals)
    return GoalTable(year=year, goals=apply_edit(table, edit.month, edit.field, edit.value))
