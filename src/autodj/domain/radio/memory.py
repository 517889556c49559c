"""
In-memory queue and history stores.

Reference implementations of the QueueStore and HistoryReader protocols.
Safe to share between threads; each store guards its data with a lock.
"""

import threading
from datetime import datetime, timedelta
from typing import Optional

from loguru import logger

from .models import PlayingTrack, QueueEntry, Station
from .queue_builder import find_duplicates
from .timing import Clock, system_clock


class InMemoryQueueStore:
    """Per-station upcoming queues kept in cued-timestamp order."""

    def __init__(self) -> None:
        self._queues: dict[int, list[QueueEntry]] = {}
        self._lock = threading.Lock()

    def _sort(self, station_id: int) -> None:
        # Stable sort keeps insertion order for equal cue times
        self._queues[station_id].sort(key=lambda e: e.timestamp_cued)

    def get_next_in_queue(self, station: Station) -> Optional[QueueEntry]:
        with self._lock:
            entries = self._queues.get(station.id)
            return entries[0] if entries else None

    def get_upcoming(self, station: Station) -> list[QueueEntry]:
        with self._lock:
            return list(self._queues.get(station.id, []))

    def append(self, entry: QueueEntry) -> None:
        with self._lock:
            self._queues.setdefault(entry.station_id, []).append(entry)
            self._sort(entry.station_id)

    def update(self, entry: QueueEntry) -> None:
        with self._lock:
            entries = self._queues.get(entry.station_id, [])
            for index, existing in enumerate(entries):
                if existing.id == entry.id:
                    if existing.duration != entry.duration:
                        raise ValueError(
                            f"Queue entry {entry.id} duration cannot change once set"
                        )
                    entries[index] = entry
                    self._sort(entry.station_id)
                    return
            raise KeyError(f"Queue entry {entry.id} not found")

    def remove(self, entry: QueueEntry) -> None:
        with self._lock:
            entries = self._queues.get(entry.station_id, [])
            remaining = [e for e in entries if e.id != entry.id]
            if len(remaining) == len(entries):
                logger.debug(f"Queue entry {entry.id} already removed")
            self._queues[entry.station_id] = remaining

    def remove_duplicates(self, station: Station) -> int:
        with self._lock:
            entries = self._queues.get(station.id, [])
            duplicate_ids = {e.id for e in find_duplicates(entries)}
            if duplicate_ids:
                self._queues[station.id] = [
                    e for e in entries if e.id not in duplicate_ids
                ]
            return len(duplicate_ids)

    def clear(self, station: Station) -> None:
        with self._lock:
            self._queues.pop(station.id, None)


class InMemoryHistory:
    """Play history per station; answers what is currently on air."""

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._plays: dict[int, list[PlayingTrack]] = {}
        self._lock = threading.Lock()
        self._clock = clock or system_clock

    def record_play(
        self,
        station: Station,
        entry: QueueEntry,
        started_at: Optional[datetime] = None,
    ) -> PlayingTrack:
        """Promote a consumed queue entry to history.

        Args:
            station: Station the entry played on
            entry: Queue entry that started playing
            started_at: Actual start (defaults to the entry's cued timestamp)

        Returns:
            The recorded PlayingTrack
        """
        played = PlayingTrack(
            song_id=entry.song_id,
            timestamp_start=started_at or entry.timestamp_cued,
            duration=entry.duration,
            text=entry.text,
        )
        with self._lock:
            self._plays.setdefault(station.id, []).append(played)
        logger.debug(f"Recorded play of '{played.text}' on station {station.id}")
        return played

    def get_current(self, station: Station) -> Optional[PlayingTrack]:
        with self._lock:
            plays = self._plays.get(station.id)
            if not plays:
                return None
            latest = max(plays, key=lambda p: p.timestamp_start)

        now = self._clock(station.tzinfo)
        if latest.timestamp_start > now:
            return None
        if latest.duration is None:
            return latest
        if now < latest.timestamp_start + timedelta(seconds=latest.duration):
            return latest
        return None

    def get_history(self, station: Station) -> list[PlayingTrack]:
        """All plays for a station, oldest first."""
        with self._lock:
            return sorted(
                self._plays.get(station.id, []), key=lambda p: p.timestamp_start
            )
