"""
Radio domain module.

Keeps each station's upcoming queue filled with crossfade-aware cue times
and resolves what the playout engine should play next.
"""

from .annotation import LiquidsoapAnnotator, format_annotation
from .autodj import AutoDJ
from .exceptions import AutoDJError, InvalidStationError
from .interfaces import Annotator, HistoryReader, QueueStore, TrackSelector
from .memory import InMemoryHistory, InMemoryQueueStore
from .models import (
    BuildResult,
    PlayingTrack,
    QueueEntry,
    SelectedTrack,
    SelectionTrace,
    Station,
)
from .queue_builder import (
    build_queue,
    build_queue_from_now,
    cue_next_song,
    find_duplicates,
)
from .resolver import MAX_ATTEMPTS, annotate_next_song
from .selection import PlaylistTrackSelector, deterministic_shuffle
from .timing import advance, compute_now, system_clock

__all__ = [
    # Models
    "Station",
    "PlayingTrack",
    "QueueEntry",
    "SelectedTrack",
    "SelectionTrace",
    "BuildResult",
    # Errors
    "AutoDJError",
    "InvalidStationError",
    # Collaborator contracts
    "HistoryReader",
    "QueueStore",
    "TrackSelector",
    "Annotator",
    # Timing
    "advance",
    "compute_now",
    "system_clock",
    # Queue building
    "build_queue",
    "build_queue_from_now",
    "cue_next_song",
    "find_duplicates",
    # Resolution
    "MAX_ATTEMPTS",
    "annotate_next_song",
    # Implementations
    "AutoDJ",
    "InMemoryHistory",
    "InMemoryQueueStore",
    "LiquidsoapAnnotator",
    "PlaylistTrackSelector",
    "deterministic_shuffle",
    "format_annotation",
]
