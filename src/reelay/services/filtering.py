"""Stable conjunctive filtering of diary entries."""

from __future__ import annotations

import logging
from typing import Iterable

from reelay.models import Movie, MovieFilterSet

logger = logging.getLogger(__name__)


def filter_movies(movies: Iterable[Movie], filters: MovieFilterSet) -> list[Movie]:
    """Return the movies passing every active predicate, in input order.

    Missing per-movie data (no rating, no watch date, ...) never raises; the
    movie simply fails any predicate that needs it.
    """
    movies = list(movies)
    if filters.is_empty:
        return movies

    result = [movie for movie in movies if matches(movie, filters)]
    logger.debug(
        "[filters] %d active categories -> %d/%d",
        filters.active_filter_count,
        len(result),
        len(movies),
    )
    return result


def matches(movie: Movie, filters: MovieFilterSet) -> bool:
    if filters.tags:
        movie_tags = {tag.casefold() for tag in movie.tag_list}
        if not movie_tags & filters.tags:
            return False

    if not _within(movie.rating, filters.min_rating, filters.max_rating):
        return False
    if not _within(
        movie.detailed_rating, filters.min_detailed_rating, filters.max_detailed_rating
    ):
        return False

    if filters.genres:
        movie_genres = {genre.strip().casefold() for genre in movie.genres or []}
        if not movie_genres & filters.genres:
            return False

    if not _within(movie.watched_on, filters.start_date, filters.end_date):
        return False

    # Both flags together exclude everything.
    if filters.show_rewatches_only and not movie.is_rewatch_movie:
        return False
    if filters.hide_rewatches and movie.is_rewatch_movie:
        return False

    if not _within(movie.runtime, filters.min_runtime, filters.max_runtime):
        return False

    if filters.decades and movie.decade not in filters.decades:
        return False
    if filters.release_years and movie.release_year not in filters.release_years:
        return False

    if filters.has_review is not None and movie.has_review != filters.has_review:
        return False

    if filters.favorites_only and not movie.is_favorited:
        return False

    return True


def _within(value, lower, upper) -> bool:
    """Inclusive bounds check; an absent value fails any bound that is set."""
    if lower is None and upper is None:
        return True
    if value is None:
        return False
    if lower is not None and value < lower:
        return False
    if upper is not None and value > upper:
        return False
    return True


__all__ = ["filter_movies", "matches"]
