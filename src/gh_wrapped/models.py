"""Data models for gh-wrapped."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Profile:
    login: str
    name: str | None = None
    avatar_url: str | None = None
    bio: str | None = None
    public_repos: int = 0
    followers: int = 0
    following: int = 0
    created_at: str | None = None
    html_url: str | None = None


@dataclass
class LanguageEntry:
    name: str
    weight: float
    color: str
    percentage: int


@dataclass
class Repository:
    id: int
    name: str
    full_name: str
    private: bool = False
    html_url: str | None = None
    description: str | None = None
    fork: bool = False
    stars: int = 0
    language: str | None = None
    languages_url: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    pushed_at: str | None = None
    homepage: str | None = None
    size_kb: int = 0
    # Detailed breakdown, only set for enriched repositories
    languages: list[LanguageEntry] = field(default_factory=list)


@dataclass(frozen=True)
class ContributionDay:
    date: str
    count: int
    level: int = 0


@dataclass
class ContributionYear:
    """Normalized contribution calendar for one year."""

    year: int
    total: int = 0
    range_start: str = ""
    range_end: str = ""
    contributions: list[ContributionDay] = field(default_factory=list)


@dataclass
class AggregateStats:
    total_contributions: int
    top_languages: list[LanguageEntry] = field(default_factory=list)
    busiest_month: str = "N/A"
    busiest_day: str = "N/A"
    monthly_rhythm: list[int] = field(default_factory=lambda: [0] * 12)


@dataclass(frozen=True)
class WrapResult:
    profile: Profile
    repos: list[Repository]
    contributions: ContributionYear
    languages: list[LanguageEntry]
    stats: AggregateStats
