"""
Next-song resolution for the AutoDJ.

Decides what the playout engine should play next: takes the head of the
queue, rebuilding the queue when it is empty and discarding an entry that
would repeat the song already on air.
"""

from typing import Callable, Optional

from loguru import logger

from .interfaces import Annotator, HistoryReader, QueueStore, TrackSelector
from .models import Station
from .queue_builder import build_queue
from .timing import Clock

# One attempt to rebuild, one to skip a repeat, one to succeed
MAX_ATTEMPTS = 3


def annotate_next_song(
    station: Station,
    history: HistoryReader,
    queue: QueueStore,
    selector: TrackSelector,
    annotator: Annotator,
    as_autodj: bool = False,
    clock: Optional[Clock] = None,
    rebuild: Optional[Callable[[Station], object]] = None,
) -> str:
    """Pull the next song from the queue and return its annotation.

    Empty queues and immediate repeats are corrected locally and retried, up to
    MAX_ATTEMPTS iterations in total. Running out of attempts is logged and
    yields an empty string rather than an exception, so the playout pipeline
    keeps running.

    Args:
        station: Station to resolve for
        history: Source of the currently playing track
        queue: Station queue store
        selector: Track selection strategy used for rebuilds
        annotator: Builds the playout annotation for the chosen entry
        as_autodj: Request comes from the playout engine itself; the chosen
            entry is consumed from the queue
        clock: Wall clock override (defaults to the system clock)
        rebuild: Runs the rebuild pass for an empty queue (defaults to
            build_queue with the collaborators above)

    Returns:
        Annotation string, or "" when no song could be resolved
    """
    with logger.contextualize(station=station.log_context()):
        for iteration in range(1, MAX_ATTEMPTS + 1):
            entry = queue.get_next_in_queue(station)

            if entry is None:
                logger.info(
                    "Queue is empty; rebuilding before attempting to get next song "
                    f"(attempt {iteration}/{MAX_ATTEMPTS})."
                )
                if rebuild is not None:
                    rebuild(station)
                else:
                    build_queue(station, history, queue, selector, clock=clock)
                continue

            current = history.get_current(station)
            if current is not None and entry.song_id == current.song_id:
                queue.remove(entry)
                logger.info(
                    "Queue would play the same song again; removing and attempting "
                    f"to get next song (attempt {iteration}/{MAX_ATTEMPTS})."
                )
                continue

            annotation = annotator.annotate(entry, as_autodj)
            if as_autodj:
                queue.remove(entry)
            logger.debug(f"Next song resolved: '{entry.text}' (attempt {iteration})")
            return annotation

        logger.error(
            f"Too many attempts to get next song; giving up after {MAX_ATTEMPTS}."
        )
        return ""
