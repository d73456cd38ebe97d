from __future__ import annotations

import json
import logging
from pathlib import Path

from reelay.clients.base import DiaryError, parse_movie_rows
from reelay.models import Movie

logger = logging.getLogger(__name__)


class LocalDiarySource:
    """Reads a JSON export of the diary table from disk."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    async def list_movies(self) -> list[Movie]:
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except FileNotFoundError as exc:
            raise DiaryError(f"Diary export not found: {self._path}") from exc
        except json.JSONDecodeError as exc:
            raise DiaryError(f"Diary export is not valid JSON: {self._path} ({exc})") from exc

        movies = parse_movie_rows(payload)
        logger.debug(f"Loaded {len(movies)} diary entries from {self._path}")
        return movies


__all__ = ["LocalDiarySource"]
