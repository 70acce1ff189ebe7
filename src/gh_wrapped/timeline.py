"""Temporal bucketing of the daily contribution series."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, timedelta

from .models import ContributionDay, ContributionYear

MONTH_NAMES = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]
WEEKDAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
NO_DATA = "N/A"


def _parse_date(value: str) -> date:
    return date.fromisoformat(value[:10])


def _busiest(tally: dict[str, int]) -> str:
    # Strict comparison keeps the first-inserted bucket on ties
    best_label = NO_DATA
    best_count = 0
    for label, count in tally.items():
        if count > best_count:
            best_label, best_count = label, count
    return best_label


def busiest_periods(days: Iterable[ContributionDay]) -> tuple[str, str]:
    """Return ``(busiest_month, busiest_weekday)`` labels.

    Only days with a positive count are bucketed. Both labels are ``"N/A"``
    when there is no activity at all.
    """
    by_month: dict[str, int] = {}
    by_weekday: dict[str, int] = {}
    for day in days:
        if day.count <= 0:
            continue
        parsed = _parse_date(day.date)
        month = MONTH_NAMES[parsed.month - 1]
        weekday = WEEKDAY_NAMES[parsed.weekday()]
        by_month[month] = by_month.get(month, 0) + day.count
        by_weekday[weekday] = by_weekday.get(weekday, 0) + day.count
    return _busiest(by_month), _busiest(by_weekday)


def monthly_rhythm(days: Iterable[ContributionDay]) -> list[int]:
    """Contribution totals for Jan..Dec."""
    counts = [0] * 12
    for day in days:
        counts[_parse_date(day.date).month - 1] += day.count
    return counts


def recent_activity(
    contributions: ContributionYear, today: date, days: int = 20
) -> list[ContributionDay]:
    """The last ``days`` calendar days up to ``today``, oldest first.

    Days the calendar did not report (or that fall outside the contribution
    year) are filled in with a zero count.
    """
    by_date = {
        _parse_date(d.date): d
        for d in contributions.contributions
        if _parse_date(d.date).year == contributions.year
    }
    strip: list[ContributionDay] = []
    for offset in range(days - 1, -1, -1):
        current = today - timedelta(days=offset)
        day = by_date.get(current)
        strip.append(day if day is not None else ContributionDay(current.isoformat(), 0, 0))
    return strip
