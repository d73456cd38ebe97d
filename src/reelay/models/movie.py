from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

WATCH_DATE_FORMAT = "%Y-%m-%d"

_TAG_SEPARATORS = re.compile(r"[,\s]+")


def split_tags(raw: str | None) -> list[str]:
    """Split a free-text tag string on commas and whitespace, dropping empty tokens."""
    if not raw:
        return []
    return [token.strip() for token in _TAG_SEPARATORS.split(raw) if token.strip()]


def parse_watch_date(value: str | None) -> date | None:
    """Parse a ``yyyy-MM-dd`` diary date, returning None when absent or malformed."""
    if not value:
        return None
    try:
        return datetime.strptime(value.strip(), WATCH_DATE_FORMAT).date()
    except ValueError:
        return None


def decade_label(year: int) -> str:
    return f"{year // 10 * 10}s"


class Movie(BaseModel):
    """A single diary entry as stored by the backend."""

    id: int
    title: str
    release_year: int | None = None
    release_date: str | None = None
    rating: float | None = None
    detailed_rating: float | None = Field(default=None, alias="ratings100")
    review: str | None = None
    tags: str | None = None
    watch_date: str | None = Field(default=None, alias="watched_date")
    is_rewatch: bool | None = Field(default=None, alias="rewatch")
    tmdb_id: int | None = None
    poster_url: str | None = None
    backdrop_path: str | None = None
    director: str | None = None
    runtime: int | None = None
    overview: str | None = None
    genres: list[str] | None = None
    favorited: bool | None = None
    location_id: int | None = None
    user_id: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
    }

    @field_validator("is_rewatch", mode="before")
    @classmethod
    def _coerce_rewatch(cls, value: Any) -> Any:
        # Older diary imports store the flag as "yes"/"no".
        if isinstance(value, str):
            return value.strip().lower() == "yes"
        return value

    @property
    def is_rewatch_movie(self) -> bool:
        return self.is_rewatch is True

    @property
    def is_favorited(self) -> bool:
        return self.favorited is True

    @property
    def has_review(self) -> bool:
        return self.review is not None and bool(self.review.strip())

    @property
    def tag_list(self) -> list[str]:
        return split_tags(self.tags)

    @property
    def watched_on(self) -> date | None:
        return parse_watch_date(self.watch_date)

    @property
    def decade(self) -> str | None:
        """Release decade bucket such as ``"1990s"``."""
        return decade_label(self.release_year) if self.release_year is not None else None


__all__ = ["Movie", "WATCH_DATE_FORMAT", "decade_label", "parse_watch_date", "split_tags"]
