import argparse
import logging
import sys

from elevation_profile.charts import clamp_aspect_ratio, generate_elevation_profile
from elevation_profile.config import load_config
from elevation_profile.formatters import format_stats
from elevation_profile.loader import load_tracks_sync
from elevation_profile.models import Track


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Summarize the elevation profile of one or more GPX tracks."
    )
    parser.add_argument(
        "sources",
        nargs="+",
        help="GPX file paths or http(s) URLs, loaded in the order given",
    )
    parser.add_argument(
        "--track",
        type=int,
        default=None,
        help="Only summarize the track at this index in the loaded collection",
    )
    parser.add_argument(
        "--png",
        type=str,
        default=None,
        help="Write a PNG chart of the selected track (default: first track) to this path",
    )
    parser.add_argument(
        "--aspect",
        type=float,
        default=3.5,
        help="Width/height ratio of the PNG chart, clamped to 0.5-4.0 (default: 3.5)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log each source as it loads",
    )
    return parser


def format_track_summary(track: Track) -> str:
    stats = format_stats(track.total_distance, track.elevation_gain, track.min_elevation, track.max_elevation)
    lines = [
        f"--- {track.name} ---",
        f"Points:         {len(track.points)}",
        stats["distance"],
        stats["elevation_gain"],
        stats["range"],
    ]
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    config = load_config()
    tracks = load_tracks_sync(args.sources, config=config)

    if not tracks:
        print("Error: No tracks could be loaded.", file=sys.stderr)
        sys.exit(1)

    if args.track is not None and not 0 <= args.track < len(tracks):
        print(f"Error: Track index {args.track} out of range (loaded {len(tracks)}).", file=sys.stderr)
        sys.exit(1)

    print("=== Elevation Profile ===")
    print(f"Loaded {len(tracks)} of {len(args.sources)} tracks")
    selected = tracks if args.track is None else [tracks[args.track]]
    for track in selected:
        print("")
        print(format_track_summary(track))

    if args.png:
        track = tracks[args.track or 0]
        with open(args.png, "wb") as f:
            f.write(generate_elevation_profile(track, aspect_ratio=clamp_aspect_ratio(args.aspect)))
        print("")
        print(f"Chart written to {args.png}")
