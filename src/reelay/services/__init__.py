from .browse import browse, paginate, search_movies, sort_movies
from .facets import build_facets
from .filter_state import FilterState
from .filtering import filter_movies
from .repository import MoviesRepository

__all__ = [
    "FilterState",
    "MoviesRepository",
    "browse",
    "build_facets",
    "filter_movies",
    "paginate",
    "search_movies",
    "sort_movies",
]
