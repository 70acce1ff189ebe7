"""Rich-based terminal wrap renderer with JSON support."""

from __future__ import annotations

import io
import json
from dataclasses import asdict
from datetime import date

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import WrapResult
from .timeline import MONTH_NAMES, recent_activity

_LEVEL_GLYPHS = ["·", "░", "▒", "▓", "█"]
TOP_REPOS_SHOWN = 3


def _format_number(n: int) -> str:
    return f"{n:,}"


def _format_date(iso: str | None) -> str:
    """Format an ISO 8601 date string to YYYY-MM-DD for display."""
    if not iso:
        return "-"
    return iso[:10] if len(iso) >= 10 else iso


def _make_bar(percentage: float, width: int = 20) -> str:
    filled = round(percentage / 100 * width)
    return "█" * filled + "░" * (width - filled)


def _make_inline_bar(count: int, max_count: int, width: int = 15) -> str:
    if max_count == 0:
        return ""
    filled = round(count / max_count * width)
    return "█" * filled


def _level_glyph(level: int) -> str:
    return _LEVEL_GLYPHS[max(0, min(level, len(_LEVEL_GLYPHS) - 1))]


def _write_to_file(content: str, output_file: str) -> None:
    """Write content to a file and print confirmation."""
    with open(output_file, "w", encoding="utf-8") as f:
        f.write(content)
    Console().print(f"Saved to {output_file}")


def render_report(
    result: WrapResult,
    output_file: str | None = None,
    today: date | None = None,
) -> None:
    """Render a WrapResult to the terminal using rich."""
    if output_file:
        string_io = io.StringIO()
        console = Console(file=string_io, force_terminal=False, width=120)
    else:
        console = Console()

    profile = result.profile
    stats = result.stats
    year = result.contributions.year

    title = f"@{profile.login}"
    if profile.name:
        title = f"{profile.name} ({title})"
    console.print(Panel(
        Text(f"GitHub Wrapped {year}\n{title}", justify="center"),
        style="bold cyan",
    ))
    if profile.bio:
        console.print(Text(profile.bio, style="dim", justify="center"))
    console.print()

    console.print("[bold]Summary[/bold]")
    summary = Table(show_header=False, box=None, padding=(0, 2))
    summary.add_column("label", style="dim")
    summary.add_column("value", style="bold")
    summary.add_row("Contributions", _format_number(stats.total_contributions))
    summary.add_row("Public Repos", _format_number(profile.public_repos))
    summary.add_row("Followers", _format_number(profile.followers))
    summary.add_row("Busiest Month", stats.busiest_month)
    summary.add_row("Busiest Day", stats.busiest_day)
    if stats.top_languages:
        summary.add_row("Top Language", stats.top_languages[0].name)
    console.print(summary)
    console.print()

    if stats.top_languages:
        console.print("[bold]Top Languages[/bold]")
        lang_table = Table(show_header=True, header_style="bold")
        lang_table.add_column("Language")
        lang_table.add_column("Bar")
        lang_table.add_column("Percentage", justify="right")
        for lang in stats.top_languages:
            lang_table.add_row(
                Text(lang.name, style=lang.color),
                _make_bar(lang.percentage),
                f"{lang.percentage}%",
            )
        console.print(lang_table)
        console.print()

    if result.repos:
        console.print("[bold]Top Repositories[/bold]")
        repo_table = Table(show_header=True, header_style="bold")
        repo_table.add_column("Repo", no_wrap=True)
        repo_table.add_column("Stars", justify="right", no_wrap=True)
        repo_table.add_column("Language", no_wrap=True)
        repo_table.add_column("Last Push", no_wrap=True)
        repo_table.add_column("Description")
        for r in result.repos[:TOP_REPOS_SHOWN]:
            top_lang = r.languages[0].name if r.languages else (r.language or "-")
            repo_table.add_row(
                r.name,
                _format_number(r.stars),
                top_lang,
                _format_date(r.pushed_at),
                r.description or "",
            )
        console.print(repo_table)
        console.print()

    rhythm = stats.monthly_rhythm
    if any(rhythm):
        console.print(f"[bold]Your {year} Rhythm[/bold]")
        rhythm_table = Table(show_header=True, header_style="bold")
        rhythm_table.add_column("Month")
        rhythm_table.add_column("Contributions", justify="right")
        rhythm_table.add_column("Bar")
        max_count = max(rhythm)
        for name, count in zip(MONTH_NAMES, rhythm):
            rhythm_table.add_row(
                name, _format_number(count), _make_inline_bar(count, max_count)
            )
        console.print(rhythm_table)
        console.print()

    strip = recent_activity(result.contributions, today or date.today())
    console.print("[bold]Last 20 Days[/bold]")
    console.print("  " + "".join(_level_glyph(d.level) for d in strip))
    console.print(
        f"  [dim]{_format_date(strip[0].date)} ~ {_format_date(strip[-1].date)}[/dim]"
    )
    console.print()

    if output_file:
        _write_to_file(string_io.getvalue(), output_file)


def render_json(result: WrapResult, output_file: str | None = None) -> None:
    """Render a WrapResult as JSON."""
    content = json.dumps(asdict(result), indent=2, ensure_ascii=False)
    if output_file:
        _write_to_file(content, output_file)
    else:
        print(content)
