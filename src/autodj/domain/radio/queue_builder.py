"""
Queue refill for the AutoDJ.

Walks a station's upcoming queue to find where it ends, then asks the track
selector for one track per missing slot until the target depth is reached.
"""

from datetime import datetime
from typing import Iterable, Optional

from loguru import logger

from .interfaces import HistoryReader, QueueStore, TrackSelector
from .models import BuildResult, QueueEntry, Station
from .timing import Clock, advance, compute_now


def find_duplicates(entries: Iterable[QueueEntry]) -> list[QueueEntry]:
    """Find queue entries that would play the same song twice in a row.

    Entries must be in cued order. Of each run of consecutive entries with the
    same song_id, the first is kept and the rest are returned. Removing the
    returned entries leaves no adjacent repeats, so running this again on the
    result returns nothing.

    Args:
        entries: Upcoming queue entries ordered by cued timestamp

    Returns:
        Entries to remove, in queue order
    """
    duplicates = []
    previous_song_id = None
    for entry in entries:
        if entry.song_id == previous_song_id:
            duplicates.append(entry)
            continue
        previous_song_id = entry.song_id
    return duplicates


def cue_next_song(
    station: Station,
    now: datetime,
    selector: TrackSelector,
    queue: QueueStore,
) -> Optional[datetime]:
    """Fill one queue slot at `now`.

    Args:
        station: Station being scheduled
        now: Cue instant for the new slot
        selector: Track selection strategy (called exactly once)
        queue: Queue the new entry is appended to

    Returns:
        Cue instant for the following slot, or None if nothing was selected
    """
    logger.debug(f"Adding to station queue at {now.isoformat()}")

    selected = selector.select(station, now)
    if selected is None:
        return None

    entry = QueueEntry.from_selection(station, selected, now)
    queue.append(entry)

    logger.debug(
        f"Queued '{entry.text}' at {now.isoformat()} "
        f"(duration={entry.duration}, trace_lines={len(entry.log)})"
    )
    return advance(now, entry.duration, station.crossfade_duration)


def build_queue_from_now(
    station: Station,
    now: datetime,
    queue: QueueStore,
    selector: TrackSelector,
    reset_timestamp_cued: bool = False,
) -> BuildResult:
    """Top the queue up to the station's target depth starting from `now`.

    Args:
        station: Station being scheduled
        now: Earliest instant a new slot may be cued at
        queue: Station queue store
        selector: Track selection strategy
        reset_timestamp_cued: Re-cue existing entries back to back from `now`
            (used when the whole queue has to be time-shifted)

    Returns:
        BuildResult describing the pass
    """
    upcoming = queue.get_upcoming(station)
    queue_length = len(upcoming)

    # Calculate now from the end of the queue if it has items; otherwise the
    # caller's value is the best available.
    for entry in upcoming:
        if reset_timestamp_cued:
            entry = entry.with_timestamp_cued(now)
            queue.update(entry)
        now = advance(entry.timestamp_cued, entry.duration, station.crossfade_duration)

    added = 0
    exhausted = False
    while queue_length < station.queue_length:
        next_now = cue_next_song(station, now, queue=queue, selector=selector)
        if next_now is None:
            exhausted = True
            logger.info(
                f"No track available for slot {queue_length + 1} of "
                f"{station.queue_length}; queue left short until next rebuild"
            )
            break
        now = next_now
        queue_length += 1
        added += 1

    removed = queue.remove_duplicates(station)
    if removed:
        logger.info(f"Removed {removed} duplicate queue entries")

    return BuildResult(
        added=added,
        removed_duplicates=removed,
        next_cue=now,
        exhausted=exhausted,
    )


def build_queue(
    station: Station,
    history: HistoryReader,
    queue: QueueStore,
    selector: TrackSelector,
    clock: Optional[Clock] = None,
    reset_timestamp_cued: bool = False,
) -> BuildResult:
    """Run one rebuild pass for a station.

    Args:
        station: Station being scheduled
        history: Source of the currently playing track
        queue: Station queue store
        selector: Track selection strategy
        clock: Wall clock override (defaults to the system clock)
        reset_timestamp_cued: Re-cue existing entries back to back

    Returns:
        BuildResult describing the pass
    """
    with logger.contextualize(station=station.log_context()):
        now = compute_now(station, history, clock)
        result = build_queue_from_now(
            station,
            now,
            queue=queue,
            selector=selector,
            reset_timestamp_cued=reset_timestamp_cued,
        )
        logger.debug(
            f"Queue build complete: added={result.added}, "
            f"duplicates_removed={result.removed_duplicates}, "
            f"exhausted={result.exhausted}"
        )
        return result
