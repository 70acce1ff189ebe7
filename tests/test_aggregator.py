"""Tests for the aggregator module."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from gh_wrapped.aggregator import build_wrap, enrich_top_repositories, rank_repositories
from gh_wrapped.github.client import GitHubClient
from gh_wrapped.github.contributions import ContributionsClient
from gh_wrapped.github.errors import ErrorKind, GitHubAPIError
from gh_wrapped.languages import languages_from_bytes
from gh_wrapped.models import ContributionDay, ContributionYear, Profile, Repository


def _repo(id: int, stars: int = 0, fork: bool = False, language: str = "Go", size_kb: int = 100):
    return Repository(
        id=id,
        name=f"repo{id}",
        full_name=f"alice/repo{id}",
        stars=stars,
        fork=fork,
        language=language,
        size_kb=size_kb,
    )


@pytest.fixture
def contributions():
    return ContributionYear(
        year=2025,
        total=99,
        contributions=[
            ContributionDay("2025-03-14", 0, 0),
            ContributionDay("2025-03-15", 5, 3),
            ContributionDay("2025-03-16", 0, 0),
        ],
    )


@pytest.fixture
def mock_client():
    client = AsyncMock(spec=GitHubClient)
    client.fetch_profile.return_value = Profile(login="alice", name="Alice", public_repos=6)
    client.fetch_repositories.return_value = [
        _repo(1, stars=1),
        _repo(2, stars=50, language="Python"),
        _repo(3, stars=0, fork=True, language="Rust"),
        _repo(4, stars=10),
        _repo(5, stars=30, language="TypeScript"),
        _repo(6, stars=1),
    ]

    def languages(username, repo):
        return languages_from_bytes({"Python": 3000, "Shell": 1000})

    client.fetch_repository_languages.side_effect = languages
    return client


@pytest.fixture
def mock_calendar(contributions):
    calendar = AsyncMock(spec=ContributionsClient)
    calendar.fetch_contributions.return_value = contributions
    return calendar


def test_rank_repositories_drops_forks_and_sorts_by_stars():
    repos = [_repo(1, stars=1), _repo(2, stars=5, fork=True), _repo(3, stars=3), _repo(4, stars=1)]
    assert [r.id for r in rank_repositories(repos)] == [3, 1, 4]


@pytest.mark.asyncio
async def test_build_wrap(mock_client, mock_calendar, contributions):
    result = await build_wrap(mock_client, mock_calendar, "alice", year=2025)

    assert result.profile.login == "alice"
    assert result.contributions is contributions
    # Top 3 by stars, then the rest in ranked order; the fork is gone
    assert [r.id for r in result.repos] == [2, 5, 4, 1, 6]
    assert all(r.languages for r in result.repos[:3])
    assert not any(r.languages for r in result.repos[3:])

    mock_calendar.fetch_contributions.assert_awaited_once_with("alice", 2025)
    enriched_names = sorted(
        c.args[1] for c in mock_client.fetch_repository_languages.await_args_list
    )
    assert enriched_names == ["repo2", "repo4", "repo5"]

    assert result.stats.total_contributions == 99
    assert result.stats.busiest_month == "Mar"
    assert result.stats.busiest_day == "Sat"
    assert result.stats.monthly_rhythm[2] == 5
    assert result.languages[0].name == "Python"
    assert result.stats.top_languages == result.languages[:5]


@pytest.mark.asyncio
async def test_build_wrap_does_not_mutate_fetched_repos(mock_client, mock_calendar):
    fetched = mock_client.fetch_repositories.return_value
    await build_wrap(mock_client, mock_calendar, "alice")
    assert all(r.languages == [] for r in fetched)


@pytest.mark.asyncio
async def test_enrichment_failure_keeps_primary_language(mock_client, mock_calendar):
    mock_client.fetch_repositories.return_value = [
        _repo(1, stars=50),
        _repo(2, stars=40, language="Python"),
        _repo(3, stars=30),
        _repo(4, stars=20),
        _repo(5, stars=10),
    ]

    def languages(username, repo):
        if repo == "repo2":
            raise GitHubAPIError("boom", 502, ErrorKind.SERVER_ERROR)
        return languages_from_bytes({"Go": 10})

    mock_client.fetch_repository_languages.side_effect = languages

    result = await build_wrap(mock_client, mock_calendar, "alice")
    assert len(result.repos) == 5
    second = result.repos[1]
    assert second.id == 2
    assert second.languages == []
    assert second.language == "Python"
    assert result.repos[0].languages and result.repos[2].languages


@pytest.mark.asyncio
async def test_enrichment_swallows_unexpected_errors():
    client = AsyncMock(spec=GitHubClient)
    client.fetch_repository_languages.side_effect = RuntimeError("connection reset")
    ranked = [_repo(1, stars=2), _repo(2, stars=1)]

    repos = await enrich_top_repositories(client, "alice", ranked)
    assert repos == ranked


@pytest.mark.asyncio
async def test_enrichment_with_fewer_than_three_repos(mock_client):
    ranked = [_repo(1, stars=2)]
    repos = await enrich_top_repositories(mock_client, "alice", ranked)
    assert len(repos) == 1
    assert mock_client.fetch_repository_languages.await_count == 1


@pytest.mark.asyncio
async def test_profile_failure_fails_whole_wrap(mock_client, mock_calendar):
    mock_client.fetch_profile.side_effect = GitHubAPIError(
        "not found", 404, ErrorKind.NOT_FOUND
    )
    with pytest.raises(GitHubAPIError) as excinfo:
        await build_wrap(mock_client, mock_calendar, "ghost")
    assert excinfo.value.kind is ErrorKind.NOT_FOUND


@pytest.mark.asyncio
async def test_contribution_failure_fails_whole_wrap(mock_client, mock_calendar):
    mock_calendar.fetch_contributions.side_effect = GitHubAPIError(
        "Contributions data not found for user alice", 404, ErrorKind.NOT_FOUND
    )
    with pytest.raises(GitHubAPIError) as excinfo:
        await build_wrap(mock_client, mock_calendar, "alice")
    assert "Contributions" in excinfo.value.message


@pytest.mark.asyncio
async def test_raw_error_is_wrapped_as_unknown(mock_client, mock_calendar):
    mock_client.fetch_repositories.side_effect = RuntimeError("socket closed")
    with pytest.raises(GitHubAPIError) as excinfo:
        await build_wrap(mock_client, mock_calendar, "alice")
    assert excinfo.value.kind is ErrorKind.UNKNOWN
    assert "alice" in excinfo.value.message
    assert "socket closed" in excinfo.value.message


@pytest.mark.asyncio
async def test_only_forks_still_yields_languages(mock_client, mock_calendar):
    mock_client.fetch_repositories.return_value = [
        _repo(1, fork=True, language="Rust", size_kb=100),
        _repo(2, fork=True, language="C", size_kb=50),
    ]
    result = await build_wrap(mock_client, mock_calendar, "alice")

    assert result.repos == []
    assert [lang.name for lang in result.languages] == ["Rust", "C"]
    assert [lang.percentage for lang in result.languages] == [67, 33]
    mock_client.fetch_repository_languages.assert_not_awaited()


@pytest.mark.asyncio
async def test_empty_account(mock_client, mock_calendar):
    mock_client.fetch_repositories.return_value = []
    mock_calendar.fetch_contributions.return_value = ContributionYear(year=2025)

    result = await build_wrap(mock_client, mock_calendar, "alice")
    assert result.repos == []
    assert result.languages == []
    assert result.stats.busiest_month == "N/A"
    assert result.stats.busiest_day == "N/A"
    assert result.stats.total_contributions == 0


@pytest.mark.asyncio
async def test_alice_scenario(mock_client, mock_calendar):
    sizes = [500, 300, 200, 100, 80, 60, 40, 30, 20, 10]
    mock_client.fetch_repositories.return_value = [
        _repo(i, language="Go", size_kb=size) for i, size in enumerate(sizes, 1)
    ]
    mock_client.fetch_repository_languages.side_effect = GitHubAPIError(
        "boom", 500, ErrorKind.SERVER_ERROR
    )

    result = await build_wrap(mock_client, mock_calendar, "alice")
    assert len(result.repos) == 10
    assert len(result.languages) == 1
    assert result.languages[0].name == "Go"
    assert result.languages[0].percentage == 100
