from __future__ import annotations

from datetime import UTC, date, datetime


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


def utc_today() -> date:
    return utc_now().date()


def add_years(d: date, years: int) -> date:
    """Shift `d` by whole calendar years; Feb 29 clamps to Feb 28."""

    try:
        return d.replace(year=d.year + years)
    except ValueError:
        return d.replace(year=d.year + years, day=28)
