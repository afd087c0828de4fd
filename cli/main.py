"""metalrates CLI — inspect live bullion rates from the terminal.

Usage:
    metalrates --help

Commands:
    rates        → cached-or-fresh rates (``--refresh`` to bypass the cache)
    live         → scrape now without touching the cache
    report       → page-structure diagnostics for a changed layout
    clear-cache  → drop the cached result
"""

from __future__ import annotations

import json

import typer

from metalrates.config import settings
from metalrates.logging_config import setup_logging
from metalrates.scraper.aggregator import build_result
from metalrates.scraper.diagnostics import analyze_structure, render_report
from metalrates.scraper.fetcher import FetchExhausted, fetch_html
from metalrates.scraper.models import ScrapeResult
from metalrates.scraper.parser import parse_tables
from metalrates.service import get_rates_service

from cli.rendering import render_result

app = typer.Typer(
    name="metalrates",
    help="Live metal rates scraper.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level."),
) -> None:
    setup_logging("DEBUG" if verbose else settings.log_level)


def _emit(result: ScrapeResult, as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        typer.echo(render_result(result))
    if not result.is_success:
        raise typer.Exit(code=1)


@app.command("rates")
def rates(
    refresh: bool = typer.Option(False, "--refresh", help="Ignore the cache and scrape now."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw result as JSON."),
) -> None:
    """Show rates, served from cache when it is still fresh."""
    service = get_rates_service()
    result = service.force_refresh() if refresh else service.get_rates_with_cache()
    _emit(result, as_json)


@app.command("live")
def live(
    as_json: bool = typer.Option(False, "--json", help="Print the raw result as JSON."),
) -> None:
    """Scrape the rates page now; the cache is neither read nor written."""
    _emit(get_rates_service().fetch_live_rates(), as_json)


@app.command("report")
def report(
    url: str = typer.Option(None, "--url", help="Page to analyse (defaults to the target site)."),
) -> None:
    """Print a Markdown diagnostics report of the page structure."""
    target = url or settings.target_url
    try:
        page = fetch_html(target)
    except FetchExhausted as exc:
        typer.echo(f"❌ {exc}")
        raise typer.Exit(code=1)

    structure = analyze_structure(page.html)
    result = build_result(
        parse_tables(page.html), source_url=target, intermediary=page.intermediary
    )
    typer.echo(render_report(structure, result))


@app.command("clear-cache")
def clear_cache() -> None:
    """Remove the cached rates entry."""
    get_rates_service().cache.clear()
    typer.echo("🗑️  Cache cleared.")


if __name__ == "__main__":
    app()
