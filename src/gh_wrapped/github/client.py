"""GitHub REST API client (via the credential-injecting proxy)."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from ..languages import languages_from_bytes
from ..models import LanguageEntry, Profile, Repository
from .retry import with_retry

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:3001/api"


def parse_profile(data: dict[str, Any]) -> Profile:
    return Profile(
        login=data["login"],
        name=data.get("name"),
        avatar_url=data.get("avatar_url"),
        bio=data.get("bio"),
        public_repos=data.get("public_repos") or 0,
        followers=data.get("followers") or 0,
        following=data.get("following") or 0,
        created_at=data.get("created_at"),
        html_url=data.get("html_url"),
    )


def parse_repository(data: dict[str, Any]) -> Repository:
    return Repository(
        id=data["id"],
        name=data["name"],
        full_name=data.get("full_name") or data["name"],
        private=bool(data.get("private", False)),
        html_url=data.get("html_url"),
        description=data.get("description"),
        fork=bool(data.get("fork", False)),
        stars=data.get("stargazers_count") or 0,
        language=data.get("language"),
        languages_url=data.get("languages_url"),
        created_at=data.get("created_at"),
        updated_at=data.get("updated_at"),
        pushed_at=data.get("pushed_at"),
        homepage=data.get("homepage"),
        size_kb=data.get("size") or 0,
    )


class GitHubClient:
    """Async client for the profile, repository and language endpoints.

    Every public fetch goes through :func:`with_retry`, so callers only ever
    see :class:`GitHubAPIError`. An optional ``token`` is passed through to
    the proxy as a Bearer header; the proxy may ignore it in favour of its
    own credential.
    """

    def __init__(
        self,
        token: str | None = None,
        concurrency: int = 5,
        base_url: str | None = None,
        verify_ssl: bool = True,
    ) -> None:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=base_url or DEFAULT_API_URL,
            headers=headers,
            timeout=30.0,
            verify=verify_ssl,
        )
        self._semaphore = asyncio.Semaphore(concurrency)

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def _get(
        self, url: str, params: dict[str, Any] | None = None
    ) -> httpx.Response:
        async with self._semaphore:
            response = await self._client.get(url, params=params)
            response.raise_for_status()
            return response

    async def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        response = await self._get(url, params)
        return response.json()

    async def fetch_profile(self, username: str) -> Profile:
        """Get the public profile of ``username``."""

        async def operation() -> Profile:
            return parse_profile(await self._get_json(f"/user/{username}"))

        return await with_retry(operation, f"fetch profile for {username}")

    async def fetch_repositories(self, username: str) -> list[Repository]:
        """Up to 100 repositories (forks included), most recently pushed first."""

        async def operation() -> list[Repository]:
            data = await self._get_json(
                f"/user/{username}/repos",
                params={"sort": "pushed", "per_page": 100, "type": "all"},
            )
            if not isinstance(data, list):
                logger.warning("Unexpected repos payload for %s, ignoring", username)
                return []
            return [parse_repository(item) for item in data]

        return await with_retry(operation, f"fetch repos for {username}")

    async def fetch_repository_languages(
        self, username: str, repo: str
    ) -> list[LanguageEntry]:
        """Language breakdown of one repository, ranked by bytes."""

        async def operation() -> list[LanguageEntry]:
            data = await self._get_json(f"/repos/{username}/{repo}/languages")
            return languages_from_bytes(data if isinstance(data, dict) else {})

        return await with_retry(operation, f"fetch languages for {username}/{repo}")
