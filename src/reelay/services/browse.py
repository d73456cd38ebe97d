"""Sorting, free-text search and pagination over an in-memory diary snapshot."""

from __future__ import annotations

from typing import Any, Callable, Iterable, Sequence

from reelay.models import (
    Movie,
    MovieBrowseQuery,
    MoviePage,
    MovieSearchPageQuery,
    MovieSortField,
)
from reelay.services.filtering import filter_movies


def title_for_sorting(title: str) -> str:
    """Case-folded title with a leading "The " dropped."""
    trimmed = title.strip()
    if trimmed.lower().startswith("the ") and len(trimmed) > 4:
        trimmed = trimmed[4:]
    return trimmed.casefold()


_SORT_KEYS: dict[MovieSortField, Callable[[Movie], Any]] = {
    MovieSortField.TITLE: lambda movie: title_for_sorting(movie.title),
    MovieSortField.WATCH_DATE: lambda movie: movie.watched_on,
    MovieSortField.RELEASE_DATE: lambda movie: movie.release_year,
    MovieSortField.RATING: lambda movie: movie.rating,
    MovieSortField.DETAILED_RATING: lambda movie: movie.detailed_rating,
    MovieSortField.DATE_ADDED: lambda movie: movie.created_at,
}


def sort_movies(
    movies: Iterable[Movie],
    sort_by: MovieSortField = MovieSortField.WATCH_DATE,
    *,
    ascending: bool = False,
) -> list[Movie]:
    """Stable sort; movies without a value for the field go last in either direction."""
    key = _SORT_KEYS[sort_by]
    present: list[Movie] = []
    missing: list[Movie] = []
    for movie in movies:
        (missing if key(movie) is None else present).append(movie)
    present.sort(key=key, reverse=not ascending)
    return present + missing


def search_movies(movies: Iterable[Movie], text: str | None) -> list[Movie]:
    """Case-insensitive substring match on title, director and overview."""
    needle = (text or "").strip().casefold()
    if not needle:
        return list(movies)
    return [
        movie
        for movie in movies
        if any(needle in (value or "").casefold() for value in (movie.title, movie.director, movie.overview))
    ]


def paginate(movies: Sequence[Movie], *, page: int, page_size: int) -> MoviePage:
    page = max(1, page)
    page_size = max(1, page_size)
    start = (page - 1) * page_size
    items = tuple(movies[start : start + page_size])
    return MoviePage(
        items=items,
        total_count=len(movies),
        page=page,
        page_size=page_size,
        has_next_page=start + page_size < len(movies),
    )


def browse(movies: Iterable[Movie], query: MovieBrowseQuery) -> MoviePage:
    if isinstance(query, MovieSearchPageQuery):
        movies = search_movies(movies, query.search_text)
    filtered = filter_movies(movies, query.filters)
    ordered = sort_movies(filtered, query.sort_by, ascending=query.ascending)
    return paginate(ordered, page=query.page, page_size=query.page_size)


__all__ = ["browse", "paginate", "search_movies", "sort_movies", "title_for_sorting"]
