"""
AutoDJ domain models.

Contains data structures for stations, the upcoming queue, the currently
playing track, and the per-slot selection trace.
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from loguru import logger

from .exceptions import InvalidStationError


@dataclass(frozen=True)
class Station:
    """Represents a radio station as seen by the AutoDJ.

    Immutable for the duration of one scheduling pass; owned by whoever
    manages station settings.
    """

    id: int
    name: str
    timezone: str = "UTC"  # IANA zone name
    crossfade_duration: float = 2.0  # seconds
    queue_length: int = 3  # target number of upcoming entries

    def __post_init__(self) -> None:
        if self.queue_length < 0:
            raise InvalidStationError(
                f"Station '{self.name}' queue_length must be >= 0, got {self.queue_length}"
            )
        if self.crossfade_duration < 0:
            raise InvalidStationError(
                f"Station '{self.name}' crossfade_duration must be >= 0, "
                f"got {self.crossfade_duration}"
            )
        # Fail at construction rather than mid-pass
        self.tzinfo

    @property
    def tzinfo(self) -> ZoneInfo:
        """Resolve the station's IANA timezone."""
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise InvalidStationError(
                f"Station '{self.name}' has unknown timezone '{self.timezone}'"
            ) from e

    def log_context(self) -> dict[str, Any]:
        """Station identity attached to every log line of a pass."""
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True)
class PlayingTrack:
    """Read-only snapshot of the track currently on air."""

    song_id: str
    timestamp_start: datetime  # timezone-aware
    duration: Optional[float] = None  # seconds, None when unknown
    text: str = ""  # "Artist - Title" for logs


class SelectionTrace:
    """Diagnostic record of how one queue slot was chosen.

    Lines are kept on the trace and forwarded to loguru, so the reasoning ends
    up both in the application log and on the queue entry it produced.
    """

    def __init__(self) -> None:
        self._lines: list[str] = []

    def _record(self, level: str, message: str) -> None:
        self._lines.append(f"{level}: {message}")
        logger.opt(depth=2).log(level, message)

    def debug(self, message: str) -> None:
        self._record("DEBUG", message)

    def info(self, message: str) -> None:
        self._record("INFO", message)

    def warning(self, message: str) -> None:
        self._record("WARNING", message)

    @property
    def lines(self) -> tuple[str, ...]:
        return tuple(self._lines)

    def __len__(self) -> int:
        return len(self._lines)


@dataclass(frozen=True)
class SelectedTrack:
    """A track chosen by a TrackSelector for one queue slot."""

    song_id: str
    duration: Optional[float] = None
    trace: SelectionTrace = field(default_factory=SelectionTrace, compare=False)
    media_path: Optional[str] = None
    title: Optional[str] = None
    artist: Optional[str] = None


@dataclass(frozen=True)
class QueueEntry:
    """A scheduled future playback slot in a station's queue."""

    station_id: int
    song_id: str
    timestamp_cued: datetime  # timezone-aware, station-local
    duration: Optional[float] = None  # seconds, None when unknown
    log: tuple[str, ...] = ()  # selection trace lines
    media_path: Optional[str] = None
    title: Optional[str] = None
    artist: Optional[str] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @classmethod
    def from_selection(
        cls, station: Station, selected: SelectedTrack, cued_at: datetime
    ) -> "QueueEntry":
        """Create the entry for a freshly selected track cued at `cued_at`."""
        return cls(
            station_id=station.id,
            song_id=selected.song_id,
            timestamp_cued=cued_at,
            duration=selected.duration,
            log=selected.trace.lines,
            media_path=selected.media_path,
            title=selected.title,
            artist=selected.artist,
        )

    def with_timestamp_cued(self, cued_at: datetime) -> "QueueEntry":
        """Return the same entry re-cued at a new instant."""
        return replace(self, timestamp_cued=cued_at)

    @property
    def text(self) -> str:
        if self.artist and self.title:
            return f"{self.artist} - {self.title}"
        return self.title or self.song_id


@dataclass(frozen=True)
class BuildResult:
    """Outcome of one queue rebuild pass."""

    added: int
    removed_duplicates: int
    next_cue: datetime  # cue instant for the slot after the last entry
    exhausted: bool  # selector ran out before the target depth was reached
