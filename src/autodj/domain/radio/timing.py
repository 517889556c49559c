"""
Cue time arithmetic for the AutoDJ.

Works out when the next track should start given when the previous one
started, how long it runs, and the station's crossfade overlap.
"""

from datetime import datetime, timedelta, tzinfo
from typing import Callable, Optional

from loguru import logger

from .interfaces import HistoryReader
from .models import Station

# Duration assumed for tracks with unknown or zero length
DEFAULT_DURATION = 1

Clock = Callable[[tzinfo], datetime]


def system_clock(tz: tzinfo) -> datetime:
    """Current wall-clock time in the given timezone."""
    return datetime.now(tz)


def advance(
    now: datetime,
    duration: Optional[float],
    crossfade_duration: float,
) -> datetime:
    """Get the instant at which the track after this one should be cued.

    The next track starts inside the crossfade tail of the current one. Tracks
    shorter than the crossfade are not overlapped.

    Args:
        now: Start instant of the current track
        duration: Track length in seconds (None or <= 0 is treated as 1)
        crossfade_duration: Station crossfade in seconds

    Returns:
        Cue instant for the following track
    """
    if not duration or duration <= 0:
        duration = DEFAULT_DURATION

    next_cue = now + timedelta(seconds=duration)
    if duration >= crossfade_duration:
        next_cue -= timedelta(milliseconds=int(crossfade_duration * 1000))
    return next_cue


def compute_now(
    station: Station,
    history: HistoryReader,
    clock: Optional[Clock] = None,
) -> datetime:
    """Get the instant the queue should be scheduled from.

    Uses the scheduled end of the currently playing track when it is still
    airing, otherwise the wall clock. This keeps a rebuild from cueing tracks
    in the past relative to what is already on air.

    Args:
        station: Station being scheduled
        history: Source of the currently playing track
        clock: Wall clock override (defaults to the system clock)

    Returns:
        Timezone-aware instant in the station's timezone
    """
    tz = station.tzinfo
    wall_now = (clock or system_clock)(tz)

    current = history.get_current(station)
    if current is None:
        return wall_now

    started = current.timestamp_start.astimezone(tz)
    duration = current.duration or DEFAULT_DURATION
    adjusted_now = advance(started, duration, station.crossfade_duration)

    logger.debug(
        f"Got currently playing song '{current.text or current.song_id}'. "
        f"Using start time {started.isoformat()} and duration {duration}s "
        "for initial value of now."
    )

    # Either the current timestamp (if it's later) or the scheduled end time
    return max(wall_now, adjusted_now)
