"""CLI entrypoint for gh-wrapped."""

from __future__ import annotations

import asyncio
import logging
import math
import sys

import click
from rich.logging import RichHandler

from . import __version__
from .aggregator import DEFAULT_YEAR
from .github.errors import ErrorKind, GitHubAPIError


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False)],
    )


def describe_error(error: GitHubAPIError, username: str) -> str:
    """User-facing message for a failed wrap, by error kind."""
    if error.kind is ErrorKind.RATE_LIMIT:
        if error.retry_after_ms == 0:
            return "Error: GitHub API rate limit exceeded. The limit has reset, run again now."
        if error.retry_after_ms is not None:
            wait = math.ceil(error.retry_after_ms / 1000)
            return (
                f"Error: GitHub API rate limit exceeded. "
                f"Run again in {wait} seconds."
            )
        return "Error: GitHub API rate limit exceeded. Run again in a few minutes."
    if error.kind is ErrorKind.NOT_FOUND:
        return f"Error: '{username}' not found. Check the username and try again."
    if error.kind is ErrorKind.SERVER_ERROR:
        return "Error: GitHub API server error. Run again in a moment."
    return f"Error: {error.message}"


@click.command()
@click.argument("username")
@click.option(
    "--year",
    default=DEFAULT_YEAR,
    show_default=True,
    type=int,
    help="Year to wrap",
)
@click.option(
    "--token",
    envvar="GITHUB_TOKEN",
    default=None,
    show_envvar=True,
    help="Optional bearer token forwarded to the API proxy",
)
@click.option(
    "--api-url",
    envvar="GH_WRAPPED_API_URL",
    default=None,
    show_envvar=True,
    help="Base URL of the GitHub API proxy",
)
@click.option(
    "--calendar-url",
    envvar="GH_WRAPPED_CALENDAR_URL",
    default=None,
    show_envvar=True,
    help="Base URL of the contribution calendar API",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    show_default=True,
    help="Output format",
)
@click.option(
    "--output",
    "output_file",
    default=None,
    type=click.Path(),
    help="Save output to file instead of stdout",
)
@click.option(
    "--no-ssl-verify",
    is_flag=True,
    default=False,
    help="Disable SSL verification (self-signed certs)",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Debug logging")
@click.version_option(version=__version__)
def main(
    username: str,
    year: int,
    token: str | None,
    api_url: str | None,
    calendar_url: str | None,
    output_format: str,
    output_file: str | None,
    no_ssl_verify: bool,
    verbose: bool,
) -> None:
    """Show a GitHub year in review for USERNAME.

    \b
    Examples:
      gh-wrapped octocat
      gh-wrapped octocat --year 2024 --format json --output wrap.json
      gh-wrapped octocat --api-url https://my-proxy.example.com/api
    """
    _configure_logging(verbose)

    from .orchestrator import run

    try:
        asyncio.run(
            run(
                username=username,
                year=year,
                token=token,
                output_format=output_format.lower(),
                output_file=output_file,
                api_url=api_url,
                calendar_url=calendar_url,
                verify_ssl=not no_ssl_verify,
            )
        )
    except GitHubAPIError as exc:
        click.echo(describe_error(exc, username), err=True)
        sys.exit(1)
    except Exception as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


if __name__ == "__main__":  # pragma: no cover
    main()
