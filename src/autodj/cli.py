"""
AutoDJ CLI - Entry point

Runs a simulated station against the in-memory stores and exposes the
central service checks.
"""

import argparse
import random
import sys
from datetime import datetime, tzinfo

from loguru import logger

from autodj.core.config import ensure_directories, load_config
from autodj.core.output import setup_from_config
from autodj.domain.central import check_for_updates, get_ip
from autodj.domain.library.models import Track
from autodj.domain.radio import (
    AutoDJ,
    InMemoryHistory,
    InMemoryQueueStore,
    InvalidStationError,
    LiquidsoapAnnotator,
    PlaylistTrackSelector,
    QueueEntry,
    Station,
)


class RecordingAnnotator:
    """Annotator that promotes entries sent to the AutoDJ into history."""

    def __init__(self, inner: LiquidsoapAnnotator, history: InMemoryHistory, station: Station):
        self.inner = inner
        self.history = history
        self.station = station
        self.last_entry = None

    def annotate(self, entry: QueueEntry, as_autodj: bool) -> str:
        annotation = self.inner.annotate(entry, as_autodj)
        if as_autodj:
            self.history.record_play(self.station, entry)
            self.last_entry = entry
        return annotation


def _demo_playlist(count: int, seed: int = 42) -> list[Track]:
    rng = random.Random(seed)
    return [
        Track(
            id=f"song-{i:03d}",
            file_path=f"/music/demo/track_{i:03d}.mp3",
            title=f"Track {i}",
            artist=f"Artist {i % 7}",
            duration=float(rng.randint(120, 300)),
        )
        for i in range(1, count + 1)
    ]


def run_simulation(
    tracks: int,
    cycles: int,
    queue_length: int,
    crossfade: float,
    timezone: str,
) -> int:
    """Play `cycles` songs on a demo station and print each annotation.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    station = Station(
        id=1,
        name="Simulated Station",
        timezone=timezone,
        crossfade_duration=crossfade,
        queue_length=queue_length,
    )

    sim_now = [datetime.now(station.tzinfo)]

    def clock(tz: tzinfo) -> datetime:
        return sim_now[0].astimezone(tz)

    history = InMemoryHistory(clock=clock)
    queue = InMemoryQueueStore()
    selector = PlaylistTrackSelector({station.id: _demo_playlist(tracks)}, queue, history)
    annotator = RecordingAnnotator(
        LiquidsoapAnnotator({station.id: station}), history, station
    )
    autodj = AutoDJ(history, queue, selector, annotator, clock=clock)

    print(f"Simulating {cycles} songs on '{station.name}' ({timezone}, crossfade {crossfade}s)")
    print()

    for cycle in range(1, cycles + 1):
        annotation = autodj.annotate_next_song(station, as_autodj=True)
        if not annotation:
            print(f"  [{cycle}] No song could be resolved")
            return 1

        entry = annotator.last_entry
        print(f"  [{cycle}] {entry.timestamp_cued:%H:%M:%S} {entry.text}")
        print(f"        {annotation}")

        # Move the simulated clock to the song start so it counts as on air
        sim_now[0] = entry.timestamp_cued
        autodj.build_queue(station)

    print()
    print(f"Queue depth after simulation: {len(queue.get_upcoming(station))}")
    return 0


def main() -> None:
    """Main entry point for the autodj command."""
    parser = argparse.ArgumentParser(
        description="AutoDJ - queue scheduling for radio automation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="subcommand", help="Available commands")

    simulate_parser = subparsers.add_parser(
        "simulate", help="Run a demo station with an in-memory queue"
    )
    simulate_parser.add_argument("--tracks", type=int, default=20, help="Playlist size")
    simulate_parser.add_argument("--cycles", type=int, default=10, help="Songs to play")
    simulate_parser.add_argument(
        "--queue-length", type=int, default=None, help="Target queue depth"
    )
    simulate_parser.add_argument(
        "--crossfade", type=float, default=None, help="Crossfade seconds"
    )
    simulate_parser.add_argument("--timezone", default=None, help="IANA timezone")

    subparsers.add_parser("check-updates", help="Ask the central server for updates")

    ip_parser = subparsers.add_parser("ip", help="Show this installation's public IP")
    ip_parser.add_argument(
        "--refresh", action="store_true", help="Ignore the cached IP and ask again"
    )

    args = parser.parse_args()
    if not args.subcommand:
        parser.print_help()
        sys.exit(1)

    config = load_config()
    ensure_directories()
    setup_from_config(config.logging)

    if args.subcommand == "simulate":
        try:
            sys.exit(
                run_simulation(
                    tracks=args.tracks,
                    cycles=args.cycles,
                    queue_length=(
                        args.queue_length
                        if args.queue_length is not None
                        else config.autodj.default_queue_length
                    ),
                    crossfade=(
                        args.crossfade
                        if args.crossfade is not None
                        else config.autodj.default_crossfade_duration
                    ),
                    timezone=args.timezone or config.autodj.default_timezone,
                )
            )
        except InvalidStationError as e:
            logger.exception("Simulation failed")
            print(f"Error: {e}")
            sys.exit(1)

    elif args.subcommand == "check-updates":
        updates = check_for_updates(config.central)
        if updates:
            print(f"Updates available: {updates}")
        else:
            print("No updates available")
        sys.exit(0)

    elif args.subcommand == "ip":
        ip = get_ip(config.central, cached=not args.refresh)
        if not ip:
            print("Could not determine external IP")
            sys.exit(1)
        print(ip)
        sys.exit(0)


if __name__ == "__main__":
    main()
