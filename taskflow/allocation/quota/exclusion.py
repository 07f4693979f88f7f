"""Trailing exclusion window.

An account allocated to an agent stays off that agent's lists for
``window_days`` days.  The window is half-open, ``[reference - window,
reference)``: the reference day itself never counts, and a row exactly
``window_days`` old still excludes.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, timedelta
from typing import TYPE_CHECKING

from taskflow.allocation.managers.allocations import list_allocations

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from taskflow.allocation.db.tables import DailyAllocation

DEFAULT_WINDOW_DAYS = 30


def window_bounds(reference_date: date, window_days: int = DEFAULT_WINDOW_DAYS) -> tuple[date, date]:
    """Return ``(start, end)`` of the half-open window before *reference_date*."""
    return reference_date - timedelta(days=window_days), reference_date


def collect_excluded_ids(allocations: Iterable[DailyAllocation]) -> set[str]:
    """Union of account ids across the given allocation rows.

    Snapshots without an ``id`` are skipped; ids compare by string form.
    """
    excluded: set[str] = set()
    for allocation in allocations:
        for company in allocation.companies or []:
            if isinstance(company, dict) and company.get("id") is not None:
                excluded.add(str(company["id"]))
    return excluded


async def load_exclusion_set(
    db: AsyncSession,
    agent_id: str,
    reference_date: date,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> set[str]:
    """Account ids allocated to *agent_id* within the window.  Read-only."""
    start, end = window_bounds(reference_date, window_days)
    rows = await list_allocations(db, agent_id, start=start, end=end)
    return collect_excluded_ids(rows)
