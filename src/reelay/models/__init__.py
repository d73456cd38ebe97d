from .movie import Movie, decade_label, parse_watch_date, split_tags
from .query import (
    MovieBrowseQuery,
    MovieFilterFacets,
    MovieFilterSet,
    MoviePage,
    MovieSearchPageQuery,
    MovieSortField,
)
from .statistics import (
    DetailedRatingBucket,
    DetailedRatingDistribution,
    FilmsByDecade,
    FilmsByReleaseYear,
    RatingDistribution,
)

__all__ = [
    "Movie",
    "decade_label",
    "parse_watch_date",
    "split_tags",
    "MovieBrowseQuery",
    "MovieFilterFacets",
    "MovieFilterSet",
    "MoviePage",
    "MovieSearchPageQuery",
    "MovieSortField",
    "DetailedRatingBucket",
    "DetailedRatingDistribution",
    "FilmsByDecade",
    "FilmsByReleaseYear",
    "RatingDistribution",
]
