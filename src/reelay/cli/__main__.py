from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Awaitable, Callable, TypeVar

import httpx
import typer

from reelay import __version__
from reelay.clients import DiaryClient, DiaryError, LocalDiarySource
from reelay.config import Settings, SettingsError, SettingsLoadResult, load_settings
from reelay.models import MovieFilterSet, MoviePage, MovieSearchPageQuery, MovieSortField
from reelay.services import MoviesRepository
from reelay.services import statistics

T = TypeVar("T")

app = typer.Typer(
    add_completion=False,
    help="Browse, filter and chart your movie diary.",
)


@app.callback()
def _cli_entry(ctx: typer.Context) -> None:
    """Entrypoint for the reelay CLI."""
    ctx.obj = {} if ctx.obj is None else ctx.obj


@app.command()
def version() -> None:
    """Print the installed version."""
    typer.echo(__version__)


@app.command()
def config(show_sources: bool = typer.Option(False, help="Display where settings came from.")) -> None:
    """Describe configuration expectations."""
    load_result = _safe_load_settings(load_even_if_missing=True)
    if load_result is None:
        raise typer.Exit(code=1)

    settings = load_result.settings
    values: dict[str, Any] = {
        "supabase_url": settings.supabase_url or "<unset>",
        "supabase_api_key": "<set>" if settings.supabase_api_key else "<unset>",
        "access_token": "<set>" if settings.access_token else "<unset>",
        "user_id": settings.user_id or "<unset>",
        "movies_file": settings.movies_file or "<unset>",
        "page_size": settings.page_size,
        "fetch_batch_size": settings.fetch_batch_size,
        "request_timeout": settings.request_timeout,
    }

    for key, value in values.items():
        typer.echo(f"{key}: {value}")

    if show_sources:
        source_hint = load_result.source_path or "<env/.env>"
        typer.echo(f"resolved_from: {source_hint}")
        typer.echo(
            "Backend keys: SUPABASE_URL, SUPABASE_API_KEY, SUPABASE_ACCESS_TOKEN."
            " Configure ~/.config/reelay/config.toml for persistent settings.",
        )


@app.command()
def browse(
    file: Path | None = typer.Option(None, help="Read movies from a JSON export instead of the backend."),
    search: str | None = typer.Option(None, help="Match title, director or overview."),
    tag: list[str] | None = typer.Option(None, "--tag", help="Tag to include (repeatable)."),
    genre: list[str] | None = typer.Option(None, "--genre", help="Genre to include (repeatable)."),
    decade: list[str] | None = typer.Option(None, "--decade", help="Decade such as 1990s (repeatable)."),
    year: list[int] | None = typer.Option(None, "--year", help="Release year (repeatable)."),
    min_rating: float | None = typer.Option(None, min=0.0, max=5.0, help="Minimum star rating."),
    max_rating: float | None = typer.Option(None, min=0.0, max=5.0, help="Maximum star rating."),
    min_detailed: float | None = typer.Option(None, min=0.0, max=100.0, help="Minimum 0-100 rating."),
    max_detailed: float | None = typer.Option(None, min=0.0, max=100.0, help="Maximum 0-100 rating."),
    start_date: datetime | None = typer.Option(None, formats=["%Y-%m-%d"], help="Watched on or after."),
    end_date: datetime | None = typer.Option(None, formats=["%Y-%m-%d"], help="Watched on or before."),
    rewatches_only: bool = typer.Option(False, help="Only show rewatches."),
    hide_rewatches: bool = typer.Option(False, help="Hide rewatches."),
    min_runtime: int | None = typer.Option(None, min=0, help="Minimum runtime in minutes."),
    max_runtime: int | None = typer.Option(None, min=0, help="Maximum runtime in minutes."),
    has_review: bool | None = typer.Option(
        None, "--has-review/--no-review", help="Only entries with (or without) a written review."
    ),
    favorites_only: bool = typer.Option(False, help="Only show favorited entries."),
    sort: MovieSortField = typer.Option(MovieSortField.WATCH_DATE, help="Sort field."),
    ascending: bool = typer.Option(False, "--ascending/--descending", help="Sort direction."),
    page: int = typer.Option(1, min=1, help="1-based page number."),
    page_size: int | None = typer.Option(None, min=1, help="Entries per page."),
    json_output: bool = typer.Option(False, "--json/--no-json", help="Output as JSON."),
    debug: bool = typer.Option(False, help="Enable debug logging."),
) -> None:
    """List diary entries matching the given filters."""
    if debug:
        _setup_logging(logging.DEBUG)

    load_result = _safe_load_settings()
    if load_result is None:
        raise typer.Exit(code=1)
    settings = load_result.settings

    filters = MovieFilterSet(
        tags=tag or [],
        genres=genre or [],
        decades=decade or [],
        release_years=year or [],
        min_rating=min_rating,
        max_rating=max_rating,
        min_detailed_rating=min_detailed,
        max_detailed_rating=max_detailed,
        start_date=start_date.date() if start_date else None,
        end_date=end_date.date() if end_date else None,
        show_rewatches_only=rewatches_only,
        hide_rewatches=hide_rewatches,
        min_runtime=min_runtime,
        max_runtime=max_runtime,
        has_review=has_review,
        favorites_only=favorites_only,
    )
    query = MovieSearchPageQuery(
        search_text=search or "",
        sort_by=sort,
        ascending=ascending,
        filters=filters,
        page=page,
        page_size=page_size or settings.page_size,
    )

    result = _run_with_repository(settings, file, lambda repo: repo.search_page(query))
    if json_output:
        typer.echo(json.dumps(result.model_dump(mode="json"), indent=2))
    else:
        _render_page(result, filters=filters)


@app.command()
def facets(
    file: Path | None = typer.Option(None, help="Read movies from a JSON export instead of the backend."),
    json_output: bool = typer.Option(False, "--json/--no-json", help="Output as JSON."),
    debug: bool = typer.Option(False, help="Enable debug logging."),
) -> None:
    """Show the tags, genres, decades and value ranges available for filtering."""
    if debug:
        _setup_logging(logging.DEBUG)

    load_result = _safe_load_settings()
    if load_result is None:
        raise typer.Exit(code=1)

    result = _run_with_repository(load_result.settings, file, lambda repo: repo.filter_facets())
    if json_output:
        typer.echo(json.dumps(result.model_dump(mode="json"), indent=2))
        return

    typer.echo(f"tags: {', '.join(result.available_tags) or '<none>'}")
    typer.echo(f"genres: {', '.join(result.available_genres) or '<none>'}")
    typer.echo(f"decades: {', '.join(result.available_decades) or '<none>'}")
    typer.echo(f"rating: {result.rating_min:g} - {result.rating_max:g}")
    typer.echo(f"detailed rating: {result.detailed_rating_min:g} - {result.detailed_rating_max:g}")
    typer.echo(f"runtime: {result.runtime_min} - {result.runtime_max} min")
    earliest = result.earliest_watch_date or "<none>"
    latest = result.latest_watch_date or "<none>"
    typer.echo(f"watched: {earliest} - {latest}")


@app.command()
def stats(
    file: Path | None = typer.Option(None, help="Read movies from a JSON export instead of the backend."),
    debug: bool = typer.Option(False, help="Enable debug logging."),
) -> None:
    """Print rating and release-decade distributions."""
    if debug:
        _setup_logging(logging.DEBUG)

    load_result = _safe_load_settings()
    if load_result is None:
        raise typer.Exit(code=1)

    movies = _run_with_repository(load_result.settings, file, lambda repo: repo.movies())

    typer.secho("Star ratings", fg=typer.colors.CYAN)
    ratings = statistics.complete_rating_distribution(statistics.rating_distribution(movies))
    for item in ratings:
        typer.echo(f"  {item.label:>4}  {item.count_films:>5}  {item.percentage:5.1f}%")

    typer.secho("Detailed ratings", fg=typer.colors.CYAN)
    buckets = statistics.condensed_detailed_buckets(statistics.detailed_rating_distribution(movies))
    for bucket in buckets:
        typer.echo(f"  {bucket.label:>6}  {bucket.count:>5}")

    typer.secho("Release decades", fg=typer.colors.CYAN)
    for row in statistics.films_by_decade(movies):
        typer.echo(f"  {row.label:>6}  {row.film_count:>5}  {row.percentage:5.1f}%")


def main() -> None:
    """Expose Typer app for the console script."""
    app()


def _safe_load_settings(load_even_if_missing: bool = False) -> SettingsLoadResult | None:
    try:
        return load_settings()
    except SettingsError as exc:
        if load_even_if_missing:
            typer.secho(
                f"Warning: configuration incomplete – {exc}",
                fg=typer.colors.YELLOW,
            )
            return SettingsLoadResult(settings=Settings(), source_path=None)
        typer.secho(str(exc), fg=typer.colors.RED)
        return None


def _setup_logging(level: int = logging.INFO) -> None:
    """Configure logging for debug mode."""
    logging.basicConfig(
        format="%(message)s",
        level=level,
        force=True,
    )


def _run_with_repository(
    settings: Settings,
    file: Path | None,
    action: Callable[[MoviesRepository], Awaitable[T]],
) -> T:
    try:
        return asyncio.run(_with_repository(settings, file, action))
    except (SettingsError, DiaryError) as exc:
        typer.secho(str(exc), fg=typer.colors.RED)
        raise typer.Exit(code=1) from exc
    except httpx.HTTPError as exc:
        typer.secho(f"Diary backend error: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=1) from exc


async def _with_repository(
    settings: Settings,
    file: Path | None,
    action: Callable[[MoviesRepository], Awaitable[T]],
) -> T:
    movies_file = file or settings.movies_file
    if movies_file is not None:
        return await action(MoviesRepository(LocalDiarySource(movies_file)))

    settings.require_backend()
    assert settings.supabase_url is not None
    assert settings.supabase_api_key is not None

    async with DiaryClient(
        base_url=settings.supabase_url,
        api_key=settings.supabase_api_key,
        access_token=settings.access_token,
        user_id=settings.user_id,
        batch_size=settings.fetch_batch_size,
        timeout=settings.request_timeout,
    ) as client:
        return await action(MoviesRepository(client))


def _render_page(page: MoviePage, *, filters: MovieFilterSet) -> None:
    if not page.items:
        typer.secho("No diary entries match.", fg=typer.colors.YELLOW)
        return

    header = f"{page.total_count} entries"
    if filters.has_active_filters:
        header += f" • {filters.active_filter_count} active filters"
    header += f" • page {page.page}"
    typer.secho(header, fg=typer.colors.CYAN)

    offset = (page.page - 1) * page.page_size
    for idx, movie in enumerate(page.items, start=offset + 1):
        year = movie.release_year or "TBA"
        rating = f"{movie.rating:g}★" if movie.rating is not None else "unrated"
        line = f"{idx}. {movie.title} ({year}) • {rating}"
        if movie.watch_date:
            line += f" • watched {movie.watch_date}"
        if movie.is_rewatch_movie:
            line += " • rewatch"
        typer.echo(line)
        if movie.tag_list:
            typer.echo(f"   tags: {', '.join(movie.tag_list)}")

    if page.has_next_page:
        typer.echo(f"More entries on page {page.page + 1}.")


if __name__ == "__main__":
    main()
