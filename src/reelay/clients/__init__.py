from .base import DiaryError, MovieSource, parse_movie_rows
from .diary import DiaryClient
from .local import LocalDiarySource

__all__ = ["DiaryClient", "DiaryError", "LocalDiarySource", "MovieSource", "parse_movie_rows"]
