"""
Collaborator contracts for the AutoDJ.

The scheduling core only talks to history, the queue, track selection and
annotation through these protocols. Implementations are plain classes; the
in-memory ones in `memory.py` are the reference.
"""

from datetime import datetime
from typing import Optional, Protocol

from .models import PlayingTrack, QueueEntry, SelectedTrack, Station


class HistoryReader(Protocol):
    """Read-only view of what a station is playing."""

    def get_current(self, station: Station) -> Optional[PlayingTrack]:
        """Most recent track whose play window includes now, or None."""
        ...


class QueueStore(Protocol):
    """Owner of each station's not-yet-played queue entries."""

    def get_next_in_queue(self, station: Station) -> Optional[QueueEntry]:
        """Head of the queue (earliest cued), or None when empty."""
        ...

    def get_upcoming(self, station: Station) -> list[QueueEntry]:
        """All upcoming entries ordered by cued timestamp."""
        ...

    def append(self, entry: QueueEntry) -> None: ...

    def update(self, entry: QueueEntry) -> None:
        """Replace the stored entry with the same id."""
        ...

    def remove(self, entry: QueueEntry) -> None: ...

    def remove_duplicates(self, station: Station) -> int:
        """Drop redundant entries; returns how many were removed."""
        ...


class TrackSelector(Protocol):
    """Chooses the track for one queue slot."""

    def select(self, station: Station, now: datetime) -> Optional[SelectedTrack]:
        """Pick a track to cue at `now`, or None when nothing is available."""
        ...


class Annotator(Protocol):
    """Turns a queue entry into the string handed to the playout engine."""

    def annotate(self, entry: QueueEntry, as_autodj: bool) -> str: ...
