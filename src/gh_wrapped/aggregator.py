"""Data aggregation: fetch every source for a user and produce a WrapResult."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace

from .github.client import GitHubClient
from .github.contributions import ContributionsClient
from .github.errors import ErrorKind, GitHubAPIError
from .languages import aggregate_languages
from .models import AggregateStats, Repository, WrapResult
from .timeline import busiest_periods, monthly_rhythm

logger = logging.getLogger(__name__)

DEFAULT_YEAR = 2025
TOP_REPOS_TO_ENRICH = 3
TOP_LANGUAGES = 5


def rank_repositories(repos: list[Repository]) -> list[Repository]:
    """Non-fork repositories, most starred first (stable for equal stars)."""
    return sorted((r for r in repos if not r.fork), key=lambda r: r.stars, reverse=True)


async def _enrich(client: GitHubClient, username: str, repo: Repository) -> Repository:
    """Attach the detailed language breakdown, or keep the repo as is."""
    try:
        languages = await client.fetch_repository_languages(username, repo.name)
    except Exception as exc:
        logger.warning(
            "Could not fetch languages for %s/%s, using primary language: %s",
            username,
            repo.name,
            exc,
        )
        return repo
    return replace(repo, languages=languages)


async def enrich_top_repositories(
    client: GitHubClient,
    username: str,
    ranked: list[Repository],
    top_n: int = TOP_REPOS_TO_ENRICH,
) -> list[Repository]:
    """Return ``[enriched top_n] + [the rest, untouched]`` as a new list."""
    enriched = await asyncio.gather(
        *(_enrich(client, username, repo) for repo in ranked[:top_n])
    )
    return [*enriched, *ranked[top_n:]]


async def build_wrap(
    client: GitHubClient,
    calendar: ContributionsClient,
    username: str,
    year: int = DEFAULT_YEAR,
) -> WrapResult:
    """Fetch, enrich and aggregate everything needed for a user's wrap.

    Profile, repositories and contributions are fetched concurrently and any
    of them failing fails the whole wrap. Language enrichment of the top
    repositories never fails: a repository whose languages cannot be fetched
    keeps its primary language only.
    """
    try:
        profile, fetched, contributions = await asyncio.gather(
            client.fetch_profile(username),
            client.fetch_repositories(username),
            calendar.fetch_contributions(username, year),
        )
    except GitHubAPIError:
        raise
    except Exception as exc:
        raise GitHubAPIError(
            f"Failed to fetch data for {username}: {exc}", None, ErrorKind.UNKNOWN
        ) from exc

    ranked = rank_repositories(fetched)
    repos = await enrich_top_repositories(client, username, ranked)
    logger.info(
        "Fetched %d repositories for %s (%d forks hidden)",
        len(fetched),
        username,
        len(fetched) - len(ranked),
    )

    # Forks sit after the displayed repos so they only feed the fork fallback
    forks = [r for r in fetched if r.fork]
    languages = aggregate_languages([*repos, *forks])
    busiest_month, busiest_day = busiest_periods(contributions.contributions)

    stats = AggregateStats(
        total_contributions=contributions.total,
        top_languages=languages[:TOP_LANGUAGES],
        busiest_month=busiest_month,
        busiest_day=busiest_day,
        monthly_rhythm=monthly_rhythm(contributions.contributions),
    )
    return WrapResult(
        profile=profile,
        repos=repos,
        contributions=contributions,
        languages=languages,
        stats=stats,
    )
