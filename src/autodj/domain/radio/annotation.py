"""
Liquidsoap annotation of queue entries.

Produces the `annotate:key="value",...:path` request string that the
playout engine reads metadata and cue settings from.
"""

from typing import Optional

from loguru import logger

from .models import QueueEntry, Station


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def format_annotation(annotations: dict[str, str], media_path: str) -> str:
    """Build a Liquidsoap annotate request.

    Args:
        annotations: Ordered key/value metadata
        media_path: File or URL to play

    Returns:
        `annotate:k1="v1",k2="v2":media_path`
    """
    pairs = ",".join(f'{key}="{_escape(value)}"' for key, value in annotations.items())
    return f"annotate:{pairs}:{media_path}"


class LiquidsoapAnnotator:
    """Annotator for Liquidsoap-driven playout."""

    def __init__(self, stations: Optional[dict[int, Station]] = None) -> None:
        self._stations = stations or {}

    def annotate(self, entry: QueueEntry, as_autodj: bool) -> str:
        if not entry.media_path:
            logger.warning(f"Queue entry '{entry.text}' has no media path; nothing to annotate")
            return ""

        annotations: dict[str, str] = {}
        if entry.title:
            annotations["title"] = entry.title
        if entry.artist:
            annotations["artist"] = entry.artist
        if entry.duration:
            annotations["duration"] = f"{entry.duration:.2f}"
        annotations["song_id"] = entry.song_id
        annotations["queue_id"] = entry.id
        annotations["jingle_mode"] = "false"

        station = self._stations.get(entry.station_id)
        if station is not None:
            annotations["liq_cross_duration"] = f"{station.crossfade_duration:.2f}"

        if as_autodj:
            annotations["autodj"] = "true"

        return format_annotation(annotations, entry.media_path)
