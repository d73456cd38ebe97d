from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any, Iterable

from pydantic import BaseModel, Field, field_validator

from .movie import Movie


def _canonical_terms(values: Iterable[Any]) -> frozenset[str]:
    terms = (str(value).strip().casefold() for value in values)
    return frozenset(term for term in terms if term)


def _toggled(current: frozenset, value: Any) -> frozenset:
    return current - {value} if value in current else current | {value}


class MovieFilterSet(BaseModel):
    """Immutable set of filter predicates; every field at its default means "not applied".

    Tags, genres and decades are canonicalized (trimmed, case-folded) on
    construction so matching never has to try case permutations.
    """

    tags: frozenset[str] = frozenset()
    genres: frozenset[str] = frozenset()
    release_years: frozenset[int] = frozenset()
    decades: frozenset[str] = frozenset()
    start_date: date | None = None
    end_date: date | None = None
    show_rewatches_only: bool = False
    hide_rewatches: bool = False
    min_rating: float | None = None
    max_rating: float | None = None
    min_detailed_rating: float | None = None
    max_detailed_rating: float | None = None
    min_runtime: int | None = None
    max_runtime: int | None = None
    has_review: bool | None = None
    favorites_only: bool = False

    model_config = {
        "frozen": True,
        "extra": "forbid",
    }

    @field_validator("tags", "genres", "decades", mode="before")
    @classmethod
    def _canonicalize(cls, value: Any) -> Any:
        if value is None:
            return frozenset()
        if isinstance(value, str):
            value = [value]
        return _canonical_terms(value)

    @property
    def is_empty(self) -> bool:
        return self.active_filter_count == 0

    @property
    def has_active_filters(self) -> bool:
        return not self.is_empty

    @property
    def active_filter_count(self) -> int:
        """Number of active filter categories; a min/max pair counts once."""
        categories = [
            bool(self.tags),
            self.min_rating is not None or self.max_rating is not None,
            self.min_detailed_rating is not None or self.max_detailed_rating is not None,
            bool(self.genres),
            self.start_date is not None or self.end_date is not None,
            self.show_rewatches_only or self.hide_rewatches,
            self.min_runtime is not None or self.max_runtime is not None,
            bool(self.decades),
            bool(self.release_years),
            self.has_review is not None,
            self.favorites_only,
        ]
        return sum(1 for active in categories if active)

    def with_changes(self, **changes: Any) -> MovieFilterSet:
        """Return a validated copy with the given fields replaced."""
        payload = {name: getattr(self, name) for name in type(self).model_fields}
        payload.update(changes)
        return type(self).model_validate(payload)

    def cleared(self) -> MovieFilterSet:
        return MovieFilterSet()

    def toggle_tag(self, tag: str) -> MovieFilterSet:
        key = tag.strip().casefold()
        if not key:
            return self
        return self.with_changes(tags=_toggled(self.tags, key))

    def toggle_genre(self, genre: str) -> MovieFilterSet:
        key = genre.strip().casefold()
        if not key:
            return self
        return self.with_changes(genres=_toggled(self.genres, key))

    def toggle_decade(self, decade: str) -> MovieFilterSet:
        key = decade.strip().casefold()
        if not key:
            return self
        return self.with_changes(decades=_toggled(self.decades, key))

    def toggle_release_year(self, year: int) -> MovieFilterSet:
        return self.with_changes(release_years=_toggled(self.release_years, int(year)))


class MovieSortField(str, Enum):
    TITLE = "title"
    WATCH_DATE = "watched_date"
    RELEASE_DATE = "release_year"
    RATING = "rating"
    DETAILED_RATING = "ratings100"
    DATE_ADDED = "created_at"

    @property
    def display_name(self) -> str:
        return _SORT_DISPLAY_NAMES[self]


_SORT_DISPLAY_NAMES = {
    MovieSortField.TITLE: "Title",
    MovieSortField.WATCH_DATE: "Date Watched",
    MovieSortField.RELEASE_DATE: "Release Year",
    MovieSortField.RATING: "Your Rating",
    MovieSortField.DETAILED_RATING: "Detailed Rating",
    MovieSortField.DATE_ADDED: "Date Added",
}


class MovieBrowseQuery(BaseModel):
    """Sorted, filtered, paginated view over the diary. Pages are 1-based."""

    sort_by: MovieSortField = MovieSortField.WATCH_DATE
    ascending: bool = False
    filters: MovieFilterSet = Field(default_factory=MovieFilterSet)
    page: int = 1
    page_size: int = 100

    model_config = {"frozen": True}

    @field_validator("page", "page_size")
    @classmethod
    def _at_least_one(cls, value: int) -> int:
        return max(1, value)


class MovieSearchPageQuery(MovieBrowseQuery):
    search_text: str = ""


class MoviePage(BaseModel):
    """One page of browse or search results."""

    items: tuple[Movie, ...] = ()
    total_count: int = 0
    page: int = 1
    page_size: int = 100
    has_next_page: bool = False

    model_config = {"frozen": True}


class MovieFilterFacets(BaseModel):
    """Selectable filter values derived from a movie collection."""

    available_tags: tuple[str, ...] = ()
    available_genres: tuple[str, ...] = ()
    available_decades: tuple[str, ...] = ()
    rating_min: float = 0.0
    rating_max: float = 5.0
    detailed_rating_min: float = 0.0
    detailed_rating_max: float = 100.0
    runtime_min: int = 0
    runtime_max: int = 300
    earliest_watch_date: date | None = None
    latest_watch_date: date | None = None

    model_config = {"frozen": True}

    @classmethod
    def empty(cls) -> MovieFilterFacets:
        return cls()


__all__ = [
    "MovieBrowseQuery",
    "MovieFilterFacets",
    "MovieFilterSet",
    "MoviePage",
    "MovieSearchPageQuery",
    "MovieSortField",
]
