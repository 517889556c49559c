"""Tests for the in-memory queue and history stores."""

from dataclasses import replace
from datetime import datetime, timedelta

import pytest

from autodj.domain.radio.memory import InMemoryHistory, InMemoryQueueStore
from autodj.domain.radio.models import Station

from conftest import FixedClock, make_entry


class TestInMemoryQueueStore:
    """Tests for InMemoryQueueStore."""

    def test_keeps_cued_order(
        self, station: Station, wall_now: datetime, queue: InMemoryQueueStore
    ) -> None:
        """Entries come back ordered by cue time regardless of insert order."""
        late = make_entry(station, "late", wall_now + timedelta(minutes=5))
        early = make_entry(station, "early", wall_now)
        queue.append(late)
        queue.append(early)

        assert queue.get_next_in_queue(station) == early
        assert queue.get_upcoming(station) == [early, late]

    def test_stations_are_isolated(
        self, station: Station, wall_now: datetime, queue: InMemoryQueueStore
    ) -> None:
        """One station's queue never shows up in another's."""
        other = Station(id=2, name="Other")
        queue.append(make_entry(station, "A", wall_now))

        assert queue.get_next_in_queue(other) is None
        assert queue.get_upcoming(other) == []

    def test_update_recues_entry(
        self, station: Station, wall_now: datetime, queue: InMemoryQueueStore
    ) -> None:
        """Updating an entry's cue time re-sorts the queue."""
        a = make_entry(station, "A", wall_now)
        b = make_entry(station, "B", wall_now + timedelta(minutes=1))
        queue.append(a)
        queue.append(b)

        queue.update(a.with_timestamp_cued(wall_now + timedelta(minutes=2)))

        assert [e.song_id for e in queue.get_upcoming(station)] == ["B", "A"]

    def test_update_rejects_duration_change(
        self, station: Station, wall_now: datetime, queue: InMemoryQueueStore
    ) -> None:
        """Duration is fixed once an entry is queued."""
        entry = make_entry(station, "A", wall_now, duration=100)
        queue.append(entry)

        with pytest.raises(ValueError):
            queue.update(replace(entry, duration=200))

    def test_update_unknown_entry(
        self, station: Station, wall_now: datetime, queue: InMemoryQueueStore
    ) -> None:
        """Updating an entry that was never queued is an error."""
        with pytest.raises(KeyError):
            queue.update(make_entry(station, "ghost", wall_now))

    def test_remove(
        self, station: Station, wall_now: datetime, queue: InMemoryQueueStore
    ) -> None:
        """Removed entries are gone; removing twice is harmless."""
        entry = make_entry(station, "A", wall_now)
        queue.append(entry)

        queue.remove(entry)
        queue.remove(entry)

        assert queue.get_upcoming(station) == []

    def test_clear(
        self, station: Station, wall_now: datetime, queue: InMemoryQueueStore
    ) -> None:
        """Clearing empties only the given station."""
        queue.append(make_entry(station, "A", wall_now))
        queue.clear(station)
        assert queue.get_next_in_queue(station) is None


class TestInMemoryHistory:
    """Tests for InMemoryHistory."""

    def test_nothing_played(self, station: Station, history: InMemoryHistory) -> None:
        """No plays means nothing is current."""
        assert history.get_current(station) is None

    def test_track_within_window_is_current(
        self, station: Station, wall_now: datetime, history: InMemoryHistory
    ) -> None:
        """A track whose window covers now is current."""
        entry = make_entry(station, "A", wall_now - timedelta(seconds=30), duration=180)
        history.record_play(station, entry)

        current = history.get_current(station)

        assert current is not None
        assert current.song_id == "A"
        assert current.timestamp_start == wall_now - timedelta(seconds=30)
        assert current.text == "Artist - Title A"

    def test_finished_track_is_not_current(
        self, station: Station, wall_now: datetime, history: InMemoryHistory
    ) -> None:
        """Once a track's duration has elapsed it is no longer current."""
        entry = make_entry(station, "A", wall_now - timedelta(seconds=200), duration=180)
        history.record_play(station, entry)

        assert history.get_current(station) is None

    def test_unknown_duration_stays_current(
        self, station: Station, wall_now: datetime, history: InMemoryHistory
    ) -> None:
        """A play with unknown length counts as current until replaced."""
        entry = make_entry(station, "A", wall_now - timedelta(hours=1), duration=None)
        history.record_play(station, entry)

        assert history.get_current(station).song_id == "A"

    def test_latest_play_wins(
        self, station: Station, wall_now: datetime, history: InMemoryHistory
    ) -> None:
        """During a crossfade the newer track is current."""
        history.record_play(station, make_entry(station, "A", wall_now - timedelta(seconds=170)))
        history.record_play(station, make_entry(station, "B", wall_now - timedelta(seconds=1)))

        assert history.get_current(station).song_id == "B"

    def test_future_play_is_not_current(
        self, station: Station, wall_now: datetime, clock: FixedClock
    ) -> None:
        """A play recorded ahead of the clock has not started yet."""
        history = InMemoryHistory(clock=clock)
        history.record_play(station, make_entry(station, "A", wall_now + timedelta(seconds=10)))

        assert history.get_current(station) is None

    def test_get_history_oldest_first(
        self, station: Station, wall_now: datetime, history: InMemoryHistory
    ) -> None:
        """History lists plays in start order."""
        history.record_play(station, make_entry(station, "B", wall_now))
        history.record_play(station, make_entry(station, "A", wall_now - timedelta(minutes=3)))

        assert [p.song_id for p in history.get_history(station)] == ["A", "B"]
