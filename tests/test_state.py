"""Reducer transitions for the search state machine."""

from __future__ import annotations

import pytest

from photo_search.domain.models import Photo
from photo_search.domain.state import (
    FetchFailed,
    InputChanged,
    PageLoaded,
    PageRequested,
    PhotoClosed,
    PhotoOpened,
    SearchStarted,
    SearchState,
    reduce,
)


def _photo(photo_id: str) -> Photo:
    return Photo(id=photo_id, server="1", secret="abc", title=photo_id)


def test_search_started_resets_pagination_and_bumps_generation():
    state = SearchState(query="old", photos=(_photo("1"),), page=4, has_more=False, generation=3)

    new_state = reduce(state, SearchStarted(query="fox"))

    assert new_state.query == "fox"
    assert new_state.active_query == "fox"
    assert new_state.page == 1
    assert new_state.has_more is True
    assert new_state.loading is True
    assert new_state.generation == 4
    # Previous results stay visible until the new page arrives.
    assert new_state.photos == (_photo("1"),)


def test_top_level_page_replaces_results():
    state = reduce(SearchState(photos=(_photo("old"),)), SearchStarted(query="fox"))

    new_state = reduce(
        state,
        PageLoaded(generation=state.generation, page=1, photos=(_photo("1"),), top_level=True),
    )

    assert new_state.photos == (_photo("1"),)
    assert new_state.loading is False
    assert new_state.page == 1


def test_empty_top_level_page_keeps_more_available():
    state = reduce(SearchState(), SearchStarted(query="nothing"))

    new_state = reduce(state, PageLoaded(generation=state.generation, page=1, top_level=True))

    assert new_state.photos == ()
    assert new_state.has_more is True


def test_page_requested_is_ignored_while_loading_or_exhausted():
    loading = SearchState(loading=True)
    exhausted = SearchState(has_more=False)

    assert reduce(loading, PageRequested()) is loading
    assert reduce(exhausted, PageRequested()) is exhausted


def test_empty_next_page_exhausts_without_advancing():
    state = reduce(SearchState(page=3), PageRequested())

    new_state = reduce(state, PageLoaded(generation=state.generation, page=4))

    assert new_state.has_more is False
    assert new_state.page == 3
    assert new_state.loading is False


def test_next_page_appends_and_advances():
    state = reduce(SearchState(photos=(_photo("1"),), page=1), PageRequested())

    new_state = reduce(
        state,
        PageLoaded(generation=state.generation, page=2, photos=(_photo("2"), _photo("3"))),
    )

    assert [photo.id for photo in new_state.photos] == ["1", "2", "3"]
    assert new_state.page == 2


def test_stale_generation_is_discarded():
    state = reduce(SearchState(), PageRequested())
    stale_generation = state.generation
    state = reduce(state, SearchStarted(query="owl"))

    after_page = reduce(state, PageLoaded(generation=stale_generation, page=2, photos=(_photo("x"),)))
    after_failure = reduce(state, FetchFailed(generation=stale_generation))

    assert after_page is state
    assert after_failure is state
    assert state.loading is True


def test_fetch_failed_clears_loading_only():
    state = reduce(SearchState(photos=(_photo("1"),), page=2), PageRequested())

    new_state = reduce(state, FetchFailed(generation=state.generation))

    assert new_state.loading is False
    assert new_state.failed is True
    assert new_state.page == 2
    assert new_state.has_more is True
    assert new_state.photos == (_photo("1"),)


def test_input_changed_keeps_active_query():
    state = reduce(SearchState(), SearchStarted(query="fox"))

    new_state = reduce(state, InputChanged(text="ca", suggestions=("cat", "car")))

    assert new_state.query == "ca"
    assert new_state.active_query == "fox"
    assert new_state.suggestions == ("cat", "car")
    assert new_state.show_suggestions is True


def test_photo_open_and_close():
    photo = _photo("7")
    state = reduce(SearchState(photos=(photo,)), PhotoOpened(photo=photo))
    assert state.selected == photo

    assert reduce(state, PhotoClosed()).selected is None


def test_unknown_event_is_rejected():
    with pytest.raises(TypeError):
        reduce(SearchState(), object())  # type: ignore[arg-type]
