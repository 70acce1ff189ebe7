"""Language distribution: per-repo byte breakdowns and account-wide ranking."""

from __future__ import annotations

import math
from collections import defaultdict
from collections.abc import Iterable, Mapping

from .models import LanguageEntry, Repository

DEFAULT_LANGUAGE_COLOR = "#7C7CFF"
FORK_WEIGHT = 0.3

LANGUAGE_COLORS: Mapping[str, str] = {
    "TypeScript": "#3178C6",
    "JavaScript": "#F7DF1E",
    "Python": "#3776AB",
    "Rust": "#DEA584",
    "Go": "#00ADD8",
    "Java": "#007396",
    "C++": "#00599C",
    "C": "#555555",
    "HTML": "#E34C26",
    "CSS": "#563D7C",
    "Vue": "#4FC08D",
    "React": "#61DAFB",
    "Svelte": "#FF3E00",
    "Swift": "#F05138",
}


def language_color(name: str) -> str:
    return LANGUAGE_COLORS.get(name, DEFAULT_LANGUAGE_COLOR)


def percentage(weight: float, total: float) -> int:
    """Share of ``total`` as a whole percent, halves rounded up."""
    if total <= 0:
        return 0
    return math.floor(weight / total * 100 + 0.5)


def popularity_multiplier(stars: int) -> float:
    return 1 + math.log10(stars + 1)


def rank_languages(weights: Mapping[str, float]) -> list[LanguageEntry]:
    """Sort by weight (descending) and attach colors and percentages.

    Every percentage is taken against the same grand total and rounded on its
    own, so the sum may be off 100 by a point or two.
    """
    total = sum(weights.values())
    ranked = sorted(weights.items(), key=lambda x: x[1], reverse=True)
    return [
        LanguageEntry(
            name=name,
            weight=weight,
            color=language_color(name),
            percentage=percentage(weight, total),
        )
        for name, weight in ranked
    ]


def languages_from_bytes(lang_bytes: Mapping[str, int]) -> list[LanguageEntry]:
    """Convert a ``/languages`` response into ranked entries."""
    return rank_languages(lang_bytes)


def _weigh(repos: Iterable[Repository], include_forks: bool) -> dict[str, float]:
    weights: dict[str, float] = defaultdict(float)
    for repo in repos:
        if repo.fork and not include_forks:
            continue
        # Fork fallback scales raw weights flat, without the star multiplier
        factor = FORK_WEIGHT if include_forks else popularity_multiplier(repo.stars)
        if repo.languages:
            for entry in repo.languages:
                weights[entry.name] += entry.weight * factor
        elif repo.language:
            weights[repo.language] += repo.size_kb * factor
    return weights


def aggregate_languages(repos: Iterable[Repository]) -> list[LanguageEntry]:
    """Rank languages across an account.

    Non-fork repositories count first, weighted by ``1 + log10(stars + 1)``:
    detailed byte counts when a repo was enriched, otherwise its size in KB
    under its primary language. Accounts with nothing but forks fall back to
    every repository at 0.3x.
    """
    repos = list(repos)
    weights = _weigh(repos, include_forks=False)
    if sum(weights.values()) == 0:
        weights = _weigh(repos, include_forks=True)
    return rank_languages(weights)
