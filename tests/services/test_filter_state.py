"""Tests for applied vs. staging filter state."""

import pytest

from reelay.models import Movie, MovieFilterSet
from reelay.services.filter_state import FilterState


@pytest.fixture
def state():
    return FilterState()


def test_starts_empty(state):
    assert state.applied.is_empty
    assert state.staging.is_empty
    assert not state.has_pending_changes


def test_staging_edits_do_not_touch_applied(state):
    assert state.toggle_tag("IMAX") is True
    assert state.update_staging(min_rating=4.0) is True

    assert state.applied.is_empty
    assert state.staging.tags == frozenset({"imax"})
    assert state.staging.min_rating == 4.0
    assert state.has_pending_changes


def test_commit_moves_staging_into_applied(state):
    state.toggle_genre("Drama")

    assert state.commit_staging() is True
    assert state.applied.genres == frozenset({"drama"})
    assert not state.has_pending_changes
    assert state.commit_staging() is False


def test_discard_restores_applied(state):
    state.toggle_decade("1990s")
    state.commit_staging()
    state.toggle_decade("2000s")

    assert state.discard_staging() is True
    assert state.staging == state.applied
    assert state.staging.decades == frozenset({"1990s"})


def test_begin_editing_loads_applied():
    applied = MovieFilterSet(tags=["family"], hide_rewatches=True)
    state = FilterState(applied)
    state.stage(MovieFilterSet())

    state.begin_editing()

    assert state.staging == applied


def test_stage_reports_no_change_for_equal_value(state):
    assert state.stage(MovieFilterSet()) is False


def test_clear_resets_both(state):
    state.update_staging(favorites_only=True)
    state.commit_staging()
    state.toggle_tag("imax")

    assert state.clear() is True
    assert state.applied.is_empty
    assert state.staging.is_empty
    assert state.clear() is False


def test_clear_staging_keeps_applied(state):
    state.update_staging(max_runtime=120)
    state.commit_staging()

    assert state.clear_staging() is True
    assert state.staging.is_empty
    assert state.applied.max_runtime == 120


def test_apply_uses_applied_filters_only(state):
    movies = [
        Movie(id=1, title="A", rating=4.5),
        Movie(id=2, title="B", rating=2.0),
    ]
    state.update_staging(min_rating=4.0)

    assert state.apply(movies) == movies

    state.commit_staging()
    assert [movie.id for movie in state.apply(movies)] == [1]
