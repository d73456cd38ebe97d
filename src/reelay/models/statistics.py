from __future__ import annotations

from pydantic import BaseModel


class RatingDistribution(BaseModel):
    """Number of films logged at one star-rating value."""

    rating_value: float
    count_films: int
    percentage: float = 0.0

    @property
    def label(self) -> str:
        return f"{self.rating_value:g}"


class DetailedRatingDistribution(BaseModel):
    rating_value: int
    count_films: int


class DetailedRatingBucket(BaseModel):
    """Inclusive range of 0-100 ratings collapsed into one chart bar."""

    lower_bound: int
    upper_bound: int
    count: int

    @property
    def label(self) -> str:
        if self.lower_bound == self.upper_bound:
            return str(self.lower_bound)
        return f"{self.lower_bound}-{self.upper_bound}"


class FilmsByDecade(BaseModel):
    decade: int
    film_count: int
    percentage: float

    @property
    def label(self) -> str:
        return f"{self.decade}s"


class FilmsByReleaseYear(BaseModel):
    release_year: int
    film_count: int
    percentage: float


__all__ = [
    "DetailedRatingBucket",
    "DetailedRatingDistribution",
    "FilmsByDecade",
    "FilmsByReleaseYear",
    "RatingDistribution",
]
