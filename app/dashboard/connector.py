"""Webhook connector — async access to the clinic's n8n automations.

Each actuals webhook answers GET with a JSON list whose first row holds the
pre-aggregated numbers for the requested month (query: mes, ano,
data_inicio, data_fim). The goals webhooks read/write the yearly table.

Every failure is raised as a WebhookError subclass; callers decide whether
it becomes a notification (reads) or a 502 (writes).
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.config import settings
from app.dashboard.goals import coerce_number, goal_to_remote
from app.dashboard.models import ActualsSnapshot, GoalRecord
from app.dashboard.periods import month_bounds

logger = logging.getLogger("clinicdash.webhooks")


class WebhookError(Exception):
    def __init__(self, source: str, message: str) -> None:
        super().__init__(f"{source}: {message}")
        self.source = source
        self.message = message


class WebhookNotConfiguredError(WebhookError):
    def __init__(self, source: str) -> None:
        super().__init__(source, "webhook URL is not configured")


class WebhookTransportError(WebhookError):
    pass


class WebhookStatusError(WebhookError):
    def __init__(self, source: str, status_code: int) -> None:
        super().__init__(source, f"webhook answered HTTP {status_code}")
        self.status_code = status_code


class WebhookBodyError(WebhookError):
    pass


def _require_url(source: str, url: str | None) -> str:
    if not url:
        raise WebhookNotConfiguredError(source)
    return url


def _check_status(source: str, response: httpx.Response) -> None:
    if response.is_error:
        raise WebhookStatusError(source, response.status_code)


def _decode(source: str, response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise WebhookBodyError(source, "response body is not valid JSON") from exc


async def _get_json(client: httpx.AsyncClient, source: str, url: str | None, params: dict[str, Any]) -> Any:
    target = _require_url(source, url)
    try:
        response = await client.get(target, params=params)
    except httpx.HTTPError as exc:
        raise WebhookTransportError(source, f"request failed: {exc}") from exc
    _check_status(source, response)
    return _decode(source, response)


def _rows(source: str, payload: Any) -> list[dict[str, Any]]:
    """Normalize a webhook body to a list of dict rows."""
    if isinstance(payload, dict):
        return [payload]
    if isinstance(payload, list):
        return [row for row in payload if isinstance(row, dict)]
    raise WebhookBodyError(source, f"expected a JSON list or object, got {type(payload).__name__}")


def _first_row(source: str, payload: Any) -> dict[str, Any]:
    rows = _rows(source, payload)
    return rows[0] if rows else {}


def _month_params(year: int, month: int) -> dict[str, Any]:
    first, end_exclusive = month_bounds(year, month)
    return {
        "mes": month,
        "ano": year,
        "data_inicio": first.isoformat(),
        "data_fim": end_exclusive.isoformat(),
    }


# ---------------------------------------------------------------------------
# Actuals
# ---------------------------------------------------------------------------


async def fetch_sales(client: httpx.AsyncClient, year: int, month: int) -> dict[str, float | int]:
    """Sales closed and revenue for a month."""
    payload = await _get_json(client, "sales", settings.sales_webhook_url, _month_params(year, month))
    row = _first_row("sales", payload)
    return {
        "sales_closed": coerce_number(row.get("count_id_north"), integer=True),
        "revenue": coerce_number(row.get("sum_valor_venda")),
    }


async def fetch_appointments(client: httpx.AsyncClient, year: int, month: int) -> dict[str, float | int]:
    payload = await _get_json(
        client, "appointments", settings.appointments_webhook_url, _month_params(year, month)
    )
    row = _first_row("appointments", payload)
    return {"appointments_made": coerce_number(row.get("count_id_agendamento"), integer=True)}


async def fetch_evaluations(client: httpx.AsyncClient, year: int, month: int) -> dict[str, float | int]:
    payload = await _get_json(
        client, "evaluations", settings.evaluations_webhook_url, _month_params(year, month)
    )
    row = _first_row("evaluations", payload)
    return {"evaluations_generated": coerce_number(row.get("count_id_avaliacao"), integer=True)}


def snapshot_from_parts(parts: list[dict[str, float | int]]) -> ActualsSnapshot:
    merged: dict[str, float | int] = {}
    for part in parts:
        merged.update(part)
    return ActualsSnapshot(**merged)


# ---------------------------------------------------------------------------
# Goals
# ---------------------------------------------------------------------------


async def fetch_goal_rows(client: httpx.AsyncClient, year: int) -> list[dict[str, Any]]:
    """Raw remote goal rows for a year (remote field names, unvalidated)."""
    payload = await _get_json(client, "goals", settings.goals_read_webhook_url, {"ano": year})
    return _rows("goals", payload)


async def save_goal_table(client: httpx.AsyncClient, year: int, table: list[GoalRecord]) -> None:
    """Send the full table for `year` in one call. No partial updates."""
    url = _require_url("goals", settings.goals_write_webhook_url)
    body = [goal_to_remote(record) for record in table]
    try:
        response = await client.post(url, json=body)
    except httpx.HTTPError as exc:
        raise WebhookTransportError("goals", f"request failed: {exc}") from exc
    _check_status("goals", response)
    logger.info("Saved %d goal rows for %d", len(body), year)
