#!/usr/bin/env python3
"""
RandomWalk - Simulated wandering positions around a real starting point

Usage:
    python -m randomwalk [options]

Options:
    --lat LAT              Anchor latitude (for running without GPS)
    --lon LON              Anchor longitude (for running without GPS)
    --db FILE              SQLite file holding the saved walk
    --log FILE             Log file path (default: randomwalk_TIMESTAMP.log)
    --interval SECONDS     Seconds between generated points (default: 30)
    --replay-interval SEC  Seconds between replayed points (default: 1)
    --count N              Stop after generating N points
    --seed N               Seed the random source (repeatable walks)
    --speak                Announce points with text-to-speech
    --replay               Replay the saved walk and exit
    --reset                Erase the saved walk and exit
    --export-gpx FILE      Write the saved walk to a GPX file and exit
"""

import argparse
from datetime import datetime
from typing import Optional

from .app import RandomWalkApp
from .config import make_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="RandomWalk - Simulated wandering positions around a real starting point"
    )
    parser.add_argument("--lat", type=float, metavar="LAT",
                        help="Anchor latitude (for running without GPS)")
    parser.add_argument("--lon", type=float, metavar="LON",
                        help="Anchor longitude (for running without GPS)")
    parser.add_argument("--db", metavar="FILE",
                        help="SQLite file holding the saved walk")
    parser.add_argument("--log", metavar="FILE",
                        help="Log file path (default: randomwalk_TIMESTAMP.log)")
    parser.add_argument("--interval", type=float, metavar="SECONDS",
                        help="Seconds between generated points (default: 30)")
    parser.add_argument("--replay-interval", type=float, metavar="SECONDS",
                        help="Seconds between replayed points (default: 1)")
    parser.add_argument("--count", type=int, metavar="N",
                        help="Stop after generating N points")
    parser.add_argument("--seed", type=int, metavar="N",
                        help="Seed the random source")
    parser.add_argument("--speak", action="store_true",
                        help="Announce points with text-to-speech")
    parser.add_argument("--replay", action="store_true",
                        help="Replay the saved walk and exit")
    parser.add_argument("--reset", action="store_true",
                        help="Erase the saved walk and exit")
    parser.add_argument("--export-gpx", metavar="FILE",
                        help="Write the saved walk to a GPX file and exit")
    return parser


def main(argv: Optional[list[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    # Validate lat/lon - must provide both or neither
    if (args.lat is None) != (args.lon is None):
        parser.error("--lat and --lon must be used together")
    if args.lat is not None and not -90 <= args.lat <= 90:
        parser.error("--lat must be between -90 and 90")
    if args.lon is not None and not -180 <= args.lon <= 180:
        parser.error("--lon must be between -180 and 180")
    if args.interval is not None and args.interval <= 0:
        parser.error("--interval must be positive")
    if args.replay_interval is not None and args.replay_interval <= 0:
        parser.error("--replay-interval must be positive")
    if args.count is not None and args.count < 1:
        parser.error("--count must be at least 1")
    if sum([args.replay, args.reset, bool(args.export_gpx)]) > 1:
        parser.error("--replay, --reset and --export-gpx are mutually exclusive")

    overrides = {}
    if args.db:
        overrides["db_path"] = args.db
    if args.interval is not None:
        overrides["update_time_interval"] = args.interval
    if args.replay_interval is not None:
        overrides["replay_time_interval"] = args.replay_interval
    config = make_config(**overrides)

    # One-shot commands don't need a log file
    one_shot = args.replay or args.reset or args.export_gpx
    log_path = args.log
    if not log_path and not one_shot:
        log_path = f"randomwalk_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"

    start_location = (args.lat, args.lon) if args.lat is not None else None
    app = RandomWalkApp(config, log_path=log_path, start_location=start_location,
                        speak=args.speak, seed=args.seed)

    if args.reset:
        erased = app.reset()
        print(f"Cleared {erased} saved walk points.")
        return

    if args.export_gpx:
        written = app.export(args.export_gpx)
        print(f"Exported {written} points to {args.export_gpx}")
        return

    if args.replay:
        app.replay()
        return

    if log_path:
        print(f"Logging to: {log_path}")
    app.run(count=args.count)

    summary = app.summary()
    print("\nWalk summary:")
    print(f"  Points saved: {summary['points']}")
    print(f"  Latest point: #{summary['latest']}" if summary["latest"] else "  Latest point: none")
    print(f"  Duration: {summary['duration']/60:.1f} minutes")


if __name__ == "__main__":
    main()
