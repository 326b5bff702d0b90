"""Goal store reconciler — pure functions, never raises on data.

Turns whatever the goals webhook returned for a year (nothing, a partial
list, duplicates, junk) into a complete 12-row table ordered by month,
and applies single-field edits from the settings page.

Remote rows use the webhook's Portuguese field names (REMOTE_FIELDS);
GoalRecord uses ours. Persistence is the caller's job.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from typing import Any

from app.dashboard.models import INTEGER_GOAL_FIELDS, GoalField, GoalRecord

logger = logging.getLogger("clinicdash.goals")

MONTHS_PER_YEAR = 12

# GoalRecord attribute -> remote webhook key
REMOTE_FIELDS: dict[str, str] = {
    "month": "mes",
    "year": "ano",
    GoalField.monthly_revenue_goal.value: "meta_mensal",
    GoalField.average_ticket_goal.value: "meta_ticket",
    GoalField.appointments_goal.value: "meta_agendamentos",
    GoalField.evaluations_goal.value: "meta_avaliacoes",
    GoalField.sales_goal.value: "meta_quantidade_vendas",
}


def parse_number(raw: Any) -> float | None:
    """Parse a numeric-looking value. None when it isn't a finite number."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip()
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            return None
    if not math.isfinite(value):
        return None
    return value


def coerce_number(raw: Any, integer: bool = False) -> float | int:
    """Forgiving input rule: empty, non-numeric or negative input becomes 0."""
    value = parse_number(raw)
    if value is None or value < 0:
        value = 0.0
    if integer:
        return int(value)
    return value


def _numeric_fields(source: Mapping[str, Any], keys: Mapping[GoalField, str]) -> dict[str, float | int]:
    return {
        field.value: coerce_number(source.get(key), integer=field in INTEGER_GOAL_FIELDS)
        for field, key in keys.items()
    }


def goal_from_remote(raw: Mapping[str, Any]) -> GoalRecord | None:
    """Map one remote row onto a GoalRecord. None if month/year are unusable."""
    month = parse_number(raw.get(REMOTE_FIELDS["month"]))
    year = parse_number(raw.get(REMOTE_FIELDS["year"]))
    if month is None or year is None:
        return None
    if month != int(month) or year != int(year) or not 0 <= month < MONTHS_PER_YEAR:
        return None

    keys = {field: REMOTE_FIELDS[field.value] for field in GoalField}
    return GoalRecord(month=int(month), year=int(year), **_numeric_fields(raw, keys))


def goal_to_remote(record: GoalRecord) -> dict[str, Any]:
    return {remote: getattr(record, local) for local, remote in REMOTE_FIELDS.items()}


def build_default_table(year: int) -> list[GoalRecord]:
    return [GoalRecord(month=m, year=year) for m in range(MONTHS_PER_YEAR)]


def _as_record(item: GoalRecord | Mapping[str, Any]) -> GoalRecord | None:
    if isinstance(item, GoalRecord):
        return item
    if isinstance(item, Mapping):
        return goal_from_remote(item)
    return None


def merge_remote(
    year: int,
    remote_records: Iterable[GoalRecord | Mapping[str, Any]] | None,
) -> list[GoalRecord]:
    """Overlay remote rows on the zeroed table for `year`.

    A month takes the remote values only when exactly one remote row
    matches (year, month); duplicates are ambiguous and keep the zeroed row.
    """
    matches: dict[int, list[GoalRecord]] = {}
    for item in remote_records or []:
        record = _as_record(item)
        if record is None:
            logger.debug("Skipping unmappable goal row: %r", item)
            continue
        if record.year != year:
            continue
        matches.setdefault(record.month, []).append(record)

    table = build_default_table(year)
    for month, found in matches.items():
        if len(found) == 1:
            table[month] = found[0].model_copy(update={"year": year})
        else:
            logger.warning(
                "Ignoring %d duplicate goal rows for %d-%02d; using zeroed goals",
                len(found), year, month + 1,
            )
    return table


def apply_edit(
    table: list[GoalRecord],
    month_index: int,
    field: GoalField | str,
    raw_input: Any,
) -> list[GoalRecord]:
    """Return a new table with one field of one month replaced.

    `raw_input` is whatever the operator typed; anything that doesn't parse
    as a non-negative finite number is stored as 0.
    """
    goal_field = GoalField(field)
    value = coerce_number(raw_input, integer=goal_field in INTEGER_GOAL_FIELDS)
    return [
        record.model_copy(update={goal_field.value: value}) if record.month == month_index else record
        for record in table
    ]


def find_month(table: list[GoalRecord], month_index: int) -> GoalRecord | None:
    return next((r for r in table if r.month == month_index), None)
