from __future__ import annotations

import asyncio
import logging

from reelay.clients.base import MovieSource
from reelay.models import Movie, MovieBrowseQuery, MovieFilterFacets, MoviePage, MovieSearchPageQuery
from reelay.services.browse import browse
from reelay.services.facets import build_facets

logger = logging.getLogger(__name__)


class MoviesRepository:
    """Caches the diary snapshot and the pages computed from it.

    Queries are immutable and hashable, so equal queries share a cache entry
    until ``invalidate_caches`` or ``force_refresh`` drops it.
    """

    def __init__(self, source: MovieSource) -> None:
        self._source = source
        self._snapshot: list[Movie] | None = None
        self._page_cache: dict[MovieBrowseQuery, MoviePage] = {}
        self._search_cache: dict[MovieSearchPageQuery, MoviePage] = {}
        self._facets: MovieFilterFacets | None = None
        self._refresh_lock = asyncio.Lock()

    async def movies(self, *, force_refresh: bool = False) -> list[Movie]:
        """Return a copy of the diary snapshot, fetching it on first use."""
        return list(await self._load_snapshot(force_refresh))

    async def _load_snapshot(self, force_refresh: bool) -> list[Movie]:
        async with self._refresh_lock:
            if force_refresh or self._snapshot is None:
                self._snapshot = await self._source.list_movies()
                self._page_cache.clear()
                self._search_cache.clear()
                self._facets = None
                logger.debug(f"Diary snapshot refreshed: {len(self._snapshot)} entries")
            return self._snapshot

    async def movies_page(self, query: MovieBrowseQuery, *, force_refresh: bool = False) -> MoviePage:
        movies = await self._load_snapshot(force_refresh)
        cached = self._page_cache.get(query)
        if cached is not None:
            logger.debug(f"Page cache hit: page {query.page} sorted by {query.sort_by.value}")
            return cached
        page = browse(movies, query)
        self._page_cache[query] = page
        return page

    async def search_page(
        self, query: MovieSearchPageQuery, *, force_refresh: bool = False
    ) -> MoviePage:
        movies = await self._load_snapshot(force_refresh)
        cached = self._search_cache.get(query)
        if cached is not None:
            return cached
        page = browse(movies, query)
        self._search_cache[query] = page
        return page

    async def filter_facets(self, *, force_refresh: bool = False) -> MovieFilterFacets:
        movies = await self._load_snapshot(force_refresh)
        if self._facets is None:
            self._facets = build_facets(movies)
        return self._facets

    async def movie_details(self, movie_id: int, *, force_refresh: bool = False) -> Movie | None:
        movies = await self._load_snapshot(force_refresh)
        return next((movie for movie in movies if movie.id == movie_id), None)

    def invalidate_caches(self) -> None:
        self._snapshot = None
        self._page_cache.clear()
        self._search_cache.clear()
        self._facets = None

    def invalidate_movie(self, movie_id: int) -> None:
        """Drop cached pages after a single entry changed upstream."""
        logger.debug(f"Invalidating caches for movie {movie_id}")
        self.invalidate_caches()


__all__ = ["MoviesRepository"]
