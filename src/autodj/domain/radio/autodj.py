"""
AutoDJ service.

Bundles a station's collaborators with per-station locking so that queue
rebuilds and next-song resolution for one station never run concurrently.
Different stations never share a lock.
"""

import threading
from datetime import datetime
from typing import Optional

from loguru import logger

from .interfaces import Annotator, HistoryReader, QueueStore, TrackSelector
from .models import BuildResult, Station
from .queue_builder import build_queue
from .resolver import annotate_next_song
from .timing import Clock, compute_now


class AutoDJ:
    """Entry point for scheduling work on behalf of the playout engine."""

    def __init__(
        self,
        history: HistoryReader,
        queue: QueueStore,
        selector: TrackSelector,
        annotator: Annotator,
        clock: Optional[Clock] = None,
    ) -> None:
        self.history = history
        self.queue = queue
        self.selector = selector
        self.annotator = annotator
        self.clock = clock
        self._station_locks: dict[int, threading.RLock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, station: Station) -> threading.RLock:
        with self._registry_lock:
            lock = self._station_locks.get(station.id)
            if lock is None:
                lock = threading.RLock()
                self._station_locks[station.id] = lock
            return lock

    def get_now(self, station: Station) -> datetime:
        """Instant the next rebuild would schedule from."""
        return compute_now(station, self.history, self.clock)

    def build_queue(
        self, station: Station, reset_timestamp_cued: bool = False
    ) -> Optional[BuildResult]:
        """Run a rebuild pass unless one is already running for the station.

        Returns:
            BuildResult, or None when another pass holds the station
        """
        lock = self._lock_for(station)
        if not lock.acquire(blocking=False):
            logger.info(
                f"Queue build already in progress for station '{station.name}'; skipping"
            )
            return None
        try:
            return build_queue(
                station,
                self.history,
                self.queue,
                self.selector,
                clock=self.clock,
                reset_timestamp_cued=reset_timestamp_cued,
            )
        finally:
            lock.release()

    def annotate_next_song(self, station: Station, as_autodj: bool = False) -> str:
        """Resolve and annotate the next song, waiting for any running rebuild.

        A rebuild needed along the way goes through build_queue, re-entering
        the station lock already held here.
        """
        with self._lock_for(station):
            return annotate_next_song(
                station,
                self.history,
                self.queue,
                self.selector,
                self.annotator,
                as_autodj=as_autodj,
                clock=self.clock,
                rebuild=self.build_queue,
            )
