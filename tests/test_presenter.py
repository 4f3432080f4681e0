"""Tests for the PlayerViewModel projection."""

import asyncio

import pytest

from music_player.errors import NetworkError
from music_player.services.player import PlayerSession
from music_player.services.presenter import PlayerViewModel

from conftest import StubSource, make_song, wait_until


@pytest.fixture
def view(session) -> PlayerViewModel:
    view_model = PlayerViewModel(session)
    view_model.attach()
    yield view_model
    view_model.detach()


class TestProjection:
    def test_initial_values(self, view):
        assert view.current_song_title == "No song selected"
        assert view.current_source_name == "No source"
        assert view.current_time == "0:00"
        assert view.total_time == "0:00"
        assert view.is_playing is False
        assert view.show_error is False

    @pytest.mark.asyncio
    async def test_song_and_source_fields(self, session, view, three_songs):
        await session.set_source(StubSource(three_songs))

        assert view.current_song_title == "Song 1"
        assert view.current_artist == "Test Artist"
        assert view.current_album == "Test Album"
        assert view.total_time == "3:00"
        assert view.current_source_name == "Local Files"
        assert len(view.queue_items) == 3
        assert len(view.available_songs) == 3

    @pytest.mark.asyncio
    async def test_missing_album_shows_placeholder(self, session, view):
        await session.set_source(StubSource([make_song("No Album", album=None)]))
        assert view.current_album == "Unknown Album"

    @pytest.mark.asyncio
    async def test_playback_flags(self, session, view, three_songs):
        await session.set_source(StubSource(three_songs))

        await session.play()
        assert (view.is_playing, view.is_paused, view.is_loading) == (True, False, False)

        await session.pause()
        assert (view.is_playing, view.is_paused, view.is_loading) == (False, True, False)

        await session.stop()
        assert (view.is_playing, view.is_paused, view.is_loading) == (False, False, False)

    @pytest.mark.asyncio
    async def test_loading_keeps_previous_flags(self, session, view, three_songs):
        gate = asyncio.Event()
        await session.set_source(StubSource(three_songs, gates={"pause": gate}))
        await session.play()

        task = asyncio.create_task(session.pause())
        await wait_until(lambda: view.is_loading)
        assert view.is_loading is True
        assert view.is_playing is True

        gate.set()
        await task
        assert view.is_loading is False
        assert view.is_paused is True

    @pytest.mark.asyncio
    async def test_error_clears_flags(self, session, view, three_songs):
        await session.set_source(StubSource(three_songs, fail={"pause": NetworkError()}))
        await session.play()
        await session.pause()

        assert (view.is_playing, view.is_paused, view.is_loading) == (False, False, False)
        assert view.error_message == "Network error occurred"
        assert view.show_error is True

        await session.clear_error()
        assert view.show_error is False

    @pytest.mark.asyncio
    async def test_progress_formatting(self, session, view, three_songs):
        await session.set_source(StubSource(three_songs))
        await session.seek(65)

        assert view.current_time == "1:05"
        assert view.progress == pytest.approx(65 / 180)

    @pytest.mark.asyncio
    async def test_cleared_song_keeps_last_title(self, session, view, three_songs):
        await session.set_source(StubSource(three_songs))
        await session.clear_queue()

        assert view.current_song_title == "Song 1"
        assert view.queue_items == []
        assert view.total_time == "0:00"

    @pytest.mark.asyncio
    async def test_detach_stops_updates(self, session, three_songs):
        view_model = PlayerViewModel(session)
        view_model.attach()
        view_model.detach()

        await session.set_source(StubSource(three_songs))
        assert view_model.current_song_title == "No song selected"

    @pytest.mark.asyncio
    async def test_attach_picks_up_existing_state(self, three_songs):
        session = PlayerSession(tick_interval=1.0)
        await session.set_source(StubSource(three_songs))

        view_model = PlayerViewModel(session)
        view_model.attach()

        assert view_model.current_song_title == "Song 1"
        assert view_model.current_source_name == "Local Files"


class TestActions:
    @pytest.mark.asyncio
    async def test_play_pause_toggle(self, session, view, three_songs):
        await session.set_source(StubSource(three_songs))

        await view.play_pause_toggle()
        assert view.is_playing is True

        await view.play_pause_toggle()
        assert view.is_paused is True

    @pytest.mark.asyncio
    async def test_seek_fraction(self, session, view, three_songs):
        await session.set_source(StubSource(three_songs))
        await view.seek_fraction(0.5)

        assert session.state.playback_progress.current_time == 90

    @pytest.mark.asyncio
    async def test_seek_fraction_without_song(self, session, view):
        await view.seek_fraction(0.5)
        assert session.state.playback_progress.current_time == 0

    @pytest.mark.asyncio
    async def test_to_dict(self, session, view, three_songs):
        await session.set_source(StubSource(three_songs))
        data = view.to_dict()

        assert data["current_song_title"] == "Song 1"
        assert data["current_queue_index"] == 0
        assert len(data["queue_items"]) == 3
        assert data["queue_items"][0]["song"]["title"] == "Song 1"
