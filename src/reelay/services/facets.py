"""Derive selectable filter values (facets) from a movie collection."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Sequence

from reelay.models import Movie, MovieFilterFacets

DEFAULT_RATING_RANGE = (0.0, 5.0)
DEFAULT_DETAILED_RATING_RANGE = (0.0, 100.0)
DEFAULT_RUNTIME_RANGE = (0, 300)

# Returned when no watch date in the collection parses.
DISTANT_PAST = date.min


def available_tags(movies: Iterable[Movie]) -> list[str]:
    tags: set[str] = set()
    for movie in movies:
        tags.update(movie.tag_list)
    return sorted(tags)


def available_genres(movies: Iterable[Movie]) -> list[str]:
    genres: set[str] = set()
    for movie in movies:
        genres.update(genre.strip() for genre in movie.genres or [] if genre.strip())
    return sorted(genres)


def available_decades(movies: Iterable[Movie]) -> list[str]:
    """Decade buckets present in the collection, most recent first."""
    decades = {movie.release_year // 10 * 10 for movie in movies if movie.release_year is not None}
    return [f"{decade}s" for decade in sorted(decades, reverse=True)]


def rating_range(movies: Iterable[Movie]) -> tuple[float, float]:
    return _value_range([movie.rating for movie in movies], DEFAULT_RATING_RANGE)


def detailed_rating_range(movies: Iterable[Movie]) -> tuple[float, float]:
    return _value_range(
        [movie.detailed_rating for movie in movies], DEFAULT_DETAILED_RATING_RANGE
    )


def runtime_range(movies: Iterable[Movie]) -> tuple[int, int]:
    return _value_range([movie.runtime for movie in movies], DEFAULT_RUNTIME_RANGE)


def earliest_watch_date(movies: Iterable[Movie]) -> date:
    dates = _watch_dates(movies)
    return min(dates) if dates else DISTANT_PAST


def latest_watch_date(movies: Iterable[Movie]) -> date | None:
    dates = _watch_dates(movies)
    return max(dates) if dates else None


def build_facets(movies: Sequence[Movie]) -> MovieFilterFacets:
    """Bundle every facet for a collection; an empty collection yields the defaults."""
    if not movies:
        return MovieFilterFacets.empty()

    rating_min, rating_max = rating_range(movies)
    detailed_min, detailed_max = detailed_rating_range(movies)
    runtime_min, runtime_max = runtime_range(movies)
    dates = _watch_dates(movies)
    return MovieFilterFacets(
        available_tags=available_tags(movies),
        available_genres=available_genres(movies),
        available_decades=available_decades(movies),
        rating_min=rating_min,
        rating_max=rating_max,
        detailed_rating_min=detailed_min,
        detailed_rating_max=detailed_max,
        runtime_min=runtime_min,
        runtime_max=runtime_max,
        earliest_watch_date=min(dates) if dates else None,
        latest_watch_date=max(dates) if dates else None,
    )


def _value_range(values, default):
    present = [value for value in values if value is not None]
    if not present:
        return default
    return min(present), max(present)


def _watch_dates(movies: Iterable[Movie]) -> list[date]:
    return [watched for watched in (movie.watched_on for movie in movies) if watched]


__all__ = [
    "DISTANT_PAST",
    "available_decades",
    "available_genres",
    "available_tags",
    "build_facets",
    "detailed_rating_range",
    "earliest_watch_date",
    "latest_watch_date",
    "rating_range",
    "runtime_range",
]
