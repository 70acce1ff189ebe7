"""Client for the third-party contribution calendar API."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

import httpx

from ..models import ContributionDay, ContributionYear
from .errors import ErrorKind, GitHubAPIError
from .retry import with_retry

logger = logging.getLogger(__name__)

DEFAULT_CALENDAR_URL = "https://github-contributions-api.jogruber.de/v4"


def _year_total(raw_total: Any, year: int) -> int:
    if isinstance(raw_total, dict):
        value = raw_total.get(str(year), raw_total.get(year))
    else:
        value = raw_total
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return max(0, int(value))


def _parse_day(raw: Any) -> ContributionDay | None:
    if not isinstance(raw, dict):
        return None
    raw_date = raw.get("date")
    if not isinstance(raw_date, str):
        return None
    try:
        date.fromisoformat(raw_date[:10])
        count = max(0, int(raw.get("count") or 0))
        level = int(raw.get("level") or 0)
    except (TypeError, ValueError):
        return None
    return ContributionDay(date=raw_date[:10], count=count, level=level)


def normalize_contributions(data: Any, year: int) -> ContributionYear:
    """Build a ContributionYear out of a loosely shaped calendar payload.

    ``total`` may be keyed by year or missing (0). ``contributions`` may be
    missing or malformed (empty). ``range`` is kept only when upstream sends
    it. Unusable day entries are dropped.
    """
    if not isinstance(data, dict):
        data = {}

    raw_range = data.get("range")
    if isinstance(raw_range, dict):
        range_start = str(raw_range.get("start") or "")
        range_end = str(raw_range.get("end") or "")
    else:
        range_start = range_end = ""

    raw_days = data.get("contributions")
    # One entry per date, the last one reported wins
    by_date: dict[str, ContributionDay] = {}
    if isinstance(raw_days, list):
        for raw in raw_days:
            day = _parse_day(raw)
            if day is None:
                logger.debug("Skipping malformed contribution entry: %r", raw)
                continue
            by_date[day.date] = day
    days = sorted(by_date.values(), key=lambda d: d.date)

    return ContributionYear(
        year=year,
        total=_year_total(data.get("total"), year),
        range_start=range_start,
        range_end=range_end,
        contributions=days,
    )


class ContributionsClient:
    """Async client for the contribution calendar service."""

    def __init__(self, base_url: str | None = None, verify_ssl: bool = True) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url or DEFAULT_CALENDAR_URL,
            headers={"Accept": "application/json"},
            timeout=30.0,
            verify=verify_ssl,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> ContributionsClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def fetch_contributions(
        self, username: str, year: int | None = None
    ) -> ContributionYear:
        """Fetch the calendar of ``username`` for ``year`` (default: last year)."""
        target_year = year or date.today().year

        async def operation() -> ContributionYear:
            response = await self._client.get(
                f"/{username}", params={"y": year or "last"}
            )
            if response.status_code == 404:
                raise GitHubAPIError(
                    f"Contributions data not found for user {username}",
                    404,
                    ErrorKind.NOT_FOUND,
                )
            response.raise_for_status()
            return normalize_contributions(response.json(), target_year)

        # The calendar sends no GitHub rate limit headers
        return await with_retry(
            operation, f"fetch contributions for {username}", use_headers=False
        )
