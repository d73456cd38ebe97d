from __future__ import annotations

import logging
from typing import Any, Protocol

from pydantic import ValidationError

from reelay.models import Movie

logger = logging.getLogger(__name__)


class DiaryError(RuntimeError):
    """Raised when a movie source returns a payload that cannot be used."""


class MovieSource(Protocol):
    """Anything able to supply the full diary snapshot."""

    async def list_movies(self) -> list[Movie]: ...


def parse_movie_rows(payload: Any) -> list[Movie]:
    """Validate diary rows, skipping (and logging) rows that do not validate."""
    if isinstance(payload, dict) and "movies" in payload:
        payload = payload["movies"]
    if not isinstance(payload, list):
        raise DiaryError(f"Expected a list of diary rows, got {type(payload).__name__}")

    movies: list[Movie] = []
    for index, row in enumerate(payload):
        try:
            movies.append(Movie.model_validate(row))
        except ValidationError as exc:
            logger.warning(f"Skipping malformed diary row #{index}: {exc.error_count()} errors")
    return movies


__all__ = ["DiaryError", "MovieSource", "parse_movie_rows"]
