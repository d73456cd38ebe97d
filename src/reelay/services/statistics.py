"""Chart bucketing for diary statistics."""

from __future__ import annotations

import math
from collections import Counter
from datetime import date
from typing import Iterable, Sequence

from reelay.models import (
    DetailedRatingBucket,
    DetailedRatingDistribution,
    FilmsByDecade,
    FilmsByReleaseYear,
    Movie,
    RatingDistribution,
)

STAR_RATING_STEPS = [step / 2 for step in range(1, 11)]
DETAILED_BUCKET_WIDTH = 10


def unique_movie_key(movie: Movie) -> str:
    """Identity of a film across rewatches."""
    if movie.tmdb_id is not None:
        return f"tmdb:{movie.tmdb_id}"
    title = movie.title.strip().lower()
    if not title:
        return f"id:{movie.id}"
    year = movie.release_year if movie.release_year is not None else -1
    return f"title:{title}|year:{year}"


def rating_distribution(movies: Iterable[Movie]) -> list[RatingDistribution]:
    """Entry counts per star-rating value present in the collection, ascending."""
    counts = Counter(movie.rating for movie in movies if movie.rating is not None)
    total = sum(counts.values())
    return [
        RatingDistribution(
            rating_value=value,
            count_films=count,
            percentage=_percentage(count, total),
        )
        for value, count in sorted(counts.items())
    ]


def complete_rating_distribution(
    distribution: Sequence[RatingDistribution],
) -> list[RatingDistribution]:
    """Spread a distribution over the full 0.5-5.0 half-star grid, filling gaps with zero."""
    result = []
    for step in STAR_RATING_STEPS:
        existing = next(
            (item for item in distribution if abs(item.rating_value - step) < 0.0001), None
        )
        result.append(existing or RatingDistribution(rating_value=step, count_films=0))
    return result


def detailed_rating_distribution(movies: Iterable[Movie]) -> list[DetailedRatingDistribution]:
    """Counts for each 0-100 rating, one vote per film from its most recent entry."""
    entries = sorted(
        movies,
        key=lambda movie: (movie.watched_on or date.min, movie.id),
        reverse=True,
    )
    counts = [0] * 101
    seen: set[str] = set()
    for movie in entries:
        if movie.detailed_rating is None:
            continue
        key = unique_movie_key(movie)
        if key in seen:
            continue
        seen.add(key)
        # Half-up rounding, so 84.5 lands on 85.
        index = min(100, max(0, math.floor(movie.detailed_rating + 0.5)))
        counts[index] += 1
    return [
        DetailedRatingDistribution(rating_value=value, count_films=count)
        for value, count in enumerate(counts)
    ]


def condensed_detailed_buckets(
    distribution: Sequence[DetailedRatingDistribution],
) -> list[DetailedRatingBucket]:
    buckets = []
    for start in range(0, 101, DETAILED_BUCKET_WIDTH):
        end = min(start + DETAILED_BUCKET_WIDTH - 1, 100)
        count = sum(
            item.count_films for item in distribution if start <= item.rating_value <= end
        )
        buckets.append(DetailedRatingBucket(lower_bound=start, upper_bound=end, count=count))
    return buckets


def films_by_decade(movies: Iterable[Movie]) -> list[FilmsByDecade]:
    counts = Counter(
        movie.release_year // 10 * 10 for movie in movies if movie.release_year is not None
    )
    total = sum(counts.values())
    return [
        FilmsByDecade(decade=decade, film_count=count, percentage=_percentage(count, total))
        for decade, count in sorted(counts.items())
    ]


def films_by_release_year(movies: Iterable[Movie]) -> list[FilmsByReleaseYear]:
    counts = Counter(movie.release_year for movie in movies if movie.release_year is not None)
    total = sum(counts.values())
    return [
        FilmsByReleaseYear(release_year=year, film_count=count, percentage=_percentage(count, total))
        for year, count in sorted(counts.items())
    ]


def _percentage(count: int, total: int) -> float:
    return count / max(total, 1) * 100.0


__all__ = [
    "complete_rating_distribution",
    "condensed_detailed_buckets",
    "detailed_rating_distribution",
    "films_by_decade",
    "films_by_release_year",
    "rating_distribution",
    "unique_movie_key",
]
