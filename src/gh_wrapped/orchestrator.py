"""Orchestrator: wires together clients, aggregator, and renderer."""

from __future__ import annotations

from .aggregator import DEFAULT_YEAR, build_wrap
from .github.client import GitHubClient
from .github.contributions import ContributionsClient
from .renderer import render_json, render_report


async def run(
    username: str,
    year: int = DEFAULT_YEAR,
    token: str | None = None,
    output_format: str = "table",
    output_file: str | None = None,
    api_url: str | None = None,
    calendar_url: str | None = None,
    verify_ssl: bool = True,
) -> None:
    """Main pipeline: fetch data, aggregate, render."""
    async with GitHubClient(
        token=token, base_url=api_url, verify_ssl=verify_ssl
    ) as client, ContributionsClient(
        base_url=calendar_url, verify_ssl=verify_ssl
    ) as calendar:
        result = await build_wrap(client, calendar, username, year=year)

    if output_format == "json":
        render_json(result, output_file=output_file)
    else:
        render_report(result, output_file=output_file)
