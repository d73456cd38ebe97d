"""Applied vs. staging filter state for a browsing session."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from reelay.models import Movie, MovieFilterSet
from reelay.services.filtering import filter_movies

logger = logging.getLogger(__name__)


class FilterState:
    """Holds the filters driving visible results and the draft being edited.

    Both values are immutable ``MovieFilterSet`` instances; edits replace the
    staging value and only ``commit_staging`` moves it into ``applied``.
    Mutators return True when something changed.
    """

    def __init__(self, applied: MovieFilterSet | None = None) -> None:
        self._applied = applied if applied is not None else MovieFilterSet()
        self._staging = self._applied

    @property
    def applied(self) -> MovieFilterSet:
        return self._applied

    @property
    def staging(self) -> MovieFilterSet:
        return self._staging

    @property
    def has_pending_changes(self) -> bool:
        return self._staging != self._applied

    def begin_editing(self) -> None:
        """Load the applied filters into the staging draft."""
        self._staging = self._applied

    def stage(self, filters: MovieFilterSet) -> bool:
        if filters == self._staging:
            return False
        self._staging = filters
        return True

    def update_staging(self, **changes: Any) -> bool:
        return self.stage(self._staging.with_changes(**changes))

    def toggle_tag(self, tag: str) -> bool:
        return self.stage(self._staging.toggle_tag(tag))

    def toggle_genre(self, genre: str) -> bool:
        return self.stage(self._staging.toggle_genre(genre))

    def toggle_decade(self, decade: str) -> bool:
        return self.stage(self._staging.toggle_decade(decade))

    def commit_staging(self) -> bool:
        if self._staging == self._applied:
            return False
        self._applied = self._staging
        logger.debug("[filters] committed %d categories", self._applied.active_filter_count)
        return True

    def discard_staging(self) -> bool:
        if self._staging == self._applied:
            return False
        self._staging = self._applied
        return True

    def clear_staging(self) -> bool:
        return self.stage(MovieFilterSet())

    def clear(self) -> bool:
        """Reset both applied and staging filters."""
        if self._applied.is_empty and self._staging.is_empty:
            return False
        self._applied = MovieFilterSet()
        self._staging = self._applied
        return True

    def apply(self, movies: Iterable[Movie]) -> list[Movie]:
        return filter_movies(movies, self._applied)


__all__ = ["FilterState"]
