"""
Playlist-based track selection.

The default TrackSelector: rotates through each station's playlist in a
shuffled order that is stable for a given station and day, skipping songs
that are already queued or on air.
"""

import hashlib
import random
import threading
from datetime import datetime
from typing import Optional

from autodj.domain.library.models import Track

from .interfaces import HistoryReader, QueueStore
from .models import SelectedTrack, SelectionTrace, Station


def deterministic_shuffle(tracks: list[Track], seed: str) -> list[Track]:
    """Shuffle tracks using a deterministic seed.

    Given the same seed, the same order will always be produced.

    Args:
        tracks: List of tracks to shuffle
        seed: Seed string (typically "{station_id}-{date}")

    Returns:
        New list with tracks in shuffled order
    """
    if not tracks:
        return []

    seed_hash = int(hashlib.sha256(seed.encode()).hexdigest(), 16) % (2**32)
    rng = random.Random(seed_hash)

    shuffled = list(tracks)
    rng.shuffle(shuffled)
    return shuffled


class PlaylistTrackSelector:
    """Selects the next track from a per-station playlist rotation."""

    def __init__(
        self,
        playlists: dict[int, list[Track]],
        queue: QueueStore,
        history: HistoryReader,
    ) -> None:
        self._playlists = playlists
        self._queue = queue
        self._history = history
        # (station_id, seed) -> next position in that day's rotation
        self._positions: dict[tuple[int, str], int] = {}
        self._lock = threading.Lock()

    def set_playlist(self, station: Station, tracks: list[Track]) -> None:
        with self._lock:
            self._playlists[station.id] = list(tracks)
            for key in [k for k in self._positions if k[0] == station.id]:
                del self._positions[key]

    def select(self, station: Station, now: datetime) -> Optional[SelectedTrack]:
        trace = SelectionTrace()
        tracks = self._playlists.get(station.id, [])
        if not tracks:
            trace.warning(f"Station '{station.name}' has no playlist tracks")
            return None

        seed = f"{station.id}-{now.date().isoformat()}"
        rotation = deterministic_shuffle(tracks, seed)

        excluded = {entry.song_id for entry in self._queue.get_upcoming(station)}
        current = self._history.get_current(station)
        if current is not None:
            excluded.add(current.song_id)
        trace.debug(
            f"Selecting for {now.isoformat()} from {len(rotation)} tracks "
            f"(rotation {seed}, {len(excluded)} excluded)"
        )

        with self._lock:
            start = self._positions.get((station.id, seed), 0)
            for offset in range(len(rotation)):
                position = (start + offset) % len(rotation)
                track = rotation[position]
                if track.id in excluded:
                    trace.debug(f"Skipping '{track.display_text}': already queued or playing")
                    continue
                self._positions[(station.id, seed)] = position + 1
                break
            else:
                trace.warning("Every playlist track is already queued or playing")
                return None

        trace.info(f"Selected '{track.display_text}' at rotation position {position}")
        return SelectedTrack(
            song_id=track.id,
            duration=track.duration,
            trace=trace,
            media_path=track.file_path,
            title=track.title,
            artist=track.artist,
        )
