"""Shared pytest fixtures and test doubles for AutoDJ tests."""

from datetime import datetime, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

import pytest
from loguru import logger

from autodj.domain.radio.memory import InMemoryHistory, InMemoryQueueStore
from autodj.domain.radio.models import (
    PlayingTrack,
    QueueEntry,
    SelectedTrack,
    SelectionTrace,
    Station,
)


class FixedClock:
    """Wall clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self, tz: tzinfo) -> datetime:
        return self.now.astimezone(tz)


class StubHistory:
    """HistoryReader returning a fixed current track."""

    def __init__(self, current: Optional[PlayingTrack] = None) -> None:
        self.current = current
        self.calls = 0

    def get_current(self, station: Station) -> Optional[PlayingTrack]:
        self.calls += 1
        return self.current


class ScriptedSelector:
    """TrackSelector that returns scripted song ids, then None.

    Pass None in the script to simulate exhaustion at that call.
    """

    def __init__(self, song_ids: list[Optional[str]], duration: Optional[float] = 180.0):
        self.song_ids = list(song_ids)
        self.duration = duration
        self.calls: list[tuple[Station, datetime]] = []

    def select(self, station: Station, now: datetime) -> Optional[SelectedTrack]:
        self.calls.append((station, now))
        if not self.song_ids:
            return None
        song_id = self.song_ids.pop(0)
        if song_id is None:
            return None
        trace = SelectionTrace()
        trace.info(f"Picked {song_id}")
        return SelectedTrack(
            song_id=song_id,
            duration=self.duration,
            trace=trace,
            media_path=f"/music/{song_id}.mp3",
            title=f"Title {song_id}",
            artist="Artist",
        )


class AlwaysSelector(ScriptedSelector):
    """TrackSelector that never runs out, numbering songs as it goes."""

    def __init__(self, duration: Optional[float] = 180.0) -> None:
        super().__init__([], duration)
        self.counter = 0

    def select(self, station: Station, now: datetime) -> Optional[SelectedTrack]:
        self.counter += 1
        self.song_ids = [f"song-{self.counter}"]
        return super().select(station, now)


class RecordingAnnotator:
    """Annotator that returns a predictable string and remembers its calls."""

    def __init__(self) -> None:
        self.calls: list[tuple[QueueEntry, bool]] = []

    def annotate(self, entry: QueueEntry, as_autodj: bool) -> str:
        self.calls.append((entry, as_autodj))
        return f"annotated:{entry.song_id}"


@pytest.fixture
def log_records():
    """Capture loguru records emitted during a test."""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


@pytest.fixture
def tz() -> ZoneInfo:
    return ZoneInfo("America/Chicago")


@pytest.fixture
def station() -> Station:
    """A station with a 5 second crossfade and a 5-deep queue."""
    return Station(
        id=1,
        name="Test Station",
        timezone="America/Chicago",
        crossfade_duration=5.0,
        queue_length=5,
    )


@pytest.fixture
def wall_now(tz: ZoneInfo) -> datetime:
    return datetime(2024, 6, 1, 12, 0, 0, tzinfo=tz)


@pytest.fixture
def clock(wall_now: datetime) -> FixedClock:
    return FixedClock(wall_now)


@pytest.fixture
def queue() -> InMemoryQueueStore:
    return InMemoryQueueStore()


@pytest.fixture
def history(clock: FixedClock) -> InMemoryHistory:
    return InMemoryHistory(clock=clock)


@pytest.fixture
def annotator() -> RecordingAnnotator:
    return RecordingAnnotator()


def make_entry(
    station: Station,
    song_id: str,
    cued: datetime,
    duration: Optional[float] = 180.0,
) -> QueueEntry:
    """Build a queue entry for tests."""
    return QueueEntry(
        station_id=station.id,
        song_id=song_id,
        timestamp_cued=cued,
        duration=duration,
        media_path=f"/music/{song_id}.mp3",
        title=f"Title {song_id}",
        artist="Artist",
    )
