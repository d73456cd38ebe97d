"""Tests for the filter evaluator."""

from datetime import date

import pytest

from reelay.models import Movie, MovieFilterSet
from reelay.services.filtering import filter_movies, matches
from tests.fixtures.diary_responses import DIARY_ROWS


@pytest.fixture
def diary():
    """Parsed fixture diary."""
    return [Movie.model_validate(row) for row in DIARY_ROWS]


def ids(movies):
    return [movie.id for movie in movies]


class TestFilterMovies:
    """Test conjunctive filtering semantics."""

    def test_empty_filter_returns_input_in_order(self, diary):
        shuffled = [diary[2], diary[0], diary[1]]
        assert filter_movies(shuffled, MovieFilterSet()) == shuffled

    def test_min_rating_example(self):
        movies = [
            Movie(id=1, title="A", rating=4.5, tags="IMAX, theater"),
            Movie(id=2, title="B", rating=3.0, tags="family"),
        ]

        assert ids(filter_movies(movies, MovieFilterSet(min_rating=4.0))) == [1]

    def test_rating_bounds_are_inclusive(self, diary):
        filters = MovieFilterSet(min_rating=4.0, max_rating=4.5)
        assert ids(filter_movies(diary, filters)) == [102, 103]

    def test_unrated_movie_fails_rating_bound(self):
        movie = Movie(id=1, title="Unrated")
        assert not matches(movie, MovieFilterSet(max_rating=5.0))
        assert not matches(movie, MovieFilterSet(min_detailed_rating=0))

    def test_detailed_rating_bounds(self, diary):
        assert ids(filter_movies(diary, MovieFilterSet(min_detailed_rating=91))) == [101, 102]
        assert ids(filter_movies(diary, MovieFilterSet(max_detailed_rating=84.5))) == [103]

    def test_tag_match_is_case_insensitive(self):
        movie = Movie(id=1, title="A", tags="IMAX,theater")
        assert matches(movie, MovieFilterSet(tags=["imax"]))
        assert matches(movie, MovieFilterSet(tags=["Theater", "nope"]))
        assert not matches(movie, MovieFilterSet(tags=["dolby"]))

    def test_tag_tokens_split_on_spaces(self):
        movie = Movie(id=1, title="A", tags="date-night  dolby")
        assert matches(movie, MovieFilterSet(tags=["dolby"]))

    def test_movie_without_tags_fails_tag_filter(self, diary):
        assert ids(filter_movies(diary, MovieFilterSet(tags=["imax", "family"]))) == [101, 102]

    def test_genre_intersection(self, diary):
        filters = MovieFilterSet(genres=["science fiction"])
        assert ids(filter_movies(diary, filters)) == [101, 103]
        assert not matches(Movie(id=9, title="No genres"), filters)

    def test_date_bounds_inclusive(self, diary):
        filters = MovieFilterSet(start_date=date(2024, 1, 15), end_date=date(2024, 3, 1))
        assert ids(filter_movies(diary, filters)) == [101, 102]

    def test_unparsable_date_fails_date_filter(self, diary):
        filters = MovieFilterSet(start_date=date(1900, 1, 1))
        assert 103 not in ids(filter_movies(diary, filters))

    def test_rewatch_flags(self, diary):
        assert ids(filter_movies(diary, MovieFilterSet(show_rewatches_only=True))) == [101]
        assert ids(filter_movies(diary, MovieFilterSet(hide_rewatches=True))) == [102, 103]

    def test_contradictory_rewatch_flags_yield_nothing(self, diary):
        filters = MovieFilterSet(show_rewatches_only=True, hide_rewatches=True)
        assert filter_movies(diary, filters) == []

    def test_runtime_bounds(self, diary):
        assert ids(filter_movies(diary, MovieFilterSet(min_runtime=136, max_runtime=150))) == [101]
        assert ids(filter_movies(diary, MovieFilterSet(max_runtime=500))) == [101, 102]

    def test_decades(self, diary):
        assert ids(filter_movies(diary, MovieFilterSet(decades=["1990s"]))) == [101, 102]
        assert not matches(Movie(id=9, title="Unknown year"), MovieFilterSet(decades=["1990s"]))

    def test_release_years(self, diary):
        assert ids(filter_movies(diary, MovieFilterSet(release_years=[1994, 2024]))) == [102, 103]

    def test_review_presence(self, diary):
        assert ids(filter_movies(diary, MovieFilterSet(has_review=True))) == [101]
        assert ids(filter_movies(diary, MovieFilterSet(has_review=False))) == [102, 103]

    def test_favorites_only(self, diary):
        assert ids(filter_movies(diary, MovieFilterSet(favorites_only=True))) == [101]

    def test_all_predicates_must_pass(self, diary):
        filters = MovieFilterSet(genres=["science fiction"], min_rating=4.5)
        assert ids(filter_movies(diary, filters)) == [101]

    def test_filter_is_idempotent(self, diary):
        filters = MovieFilterSet(hide_rewatches=True, min_rating=3.0)
        once = filter_movies(diary, filters)
        assert filter_movies(once, filters) == once

    def test_accepts_any_iterable(self, diary):
        result = filter_movies(iter(diary), MovieFilterSet(favorites_only=True))
        assert ids(result) == [101]
