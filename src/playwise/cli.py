"""
Playwise CLI - run the catalog algorithms over a JSON snapshot.

The snapshot stands in for the catalog and schedule stores: it is loaded,
validated, handed to the pure domain functions, and the results are printed.
Nothing is written back.
"""

import argparse
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Sequence

from loguru import logger
from rich.markup import escape
from rich.table import Table

from . import __version__
from .core.config import Config, load_config
from .core.console import get_console, print_error, safe_print
from .core.logging import setup_logging_from_config
from .domain.exceptions import InvalidInputError, PlaywiseError, SnapshotError
from .domain.library.models import Mood
from .domain.mood.classifier import (
    assign_moods,
    classify_by_features,
    classify_by_genre,
    detect_mood,
    filter_by_mood,
)
from .domain.mood.features import estimate_features
from .domain.playback.shuffle import shuffled
from .domain.recommend.scorer import derive_top_genre, rank_tracks
from .domain.schedule.rules import select_active, weekday_number
from .domain.schedule.windows import validate_time_format
from .domain.search.query import search_catalog
from .schemas import Snapshot, load_snapshot

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


def _load(args: argparse.Namespace, config: Config) -> Snapshot:
    path = args.snapshot or config.catalog.snapshot_path
    if not path:
        raise SnapshotError(
            "", "No snapshot given: pass --snapshot or set [catalog] snapshot_path"
        )
    return load_snapshot(path)


def _track_table(
    tracks: Sequence[Any], title: str, scores: Optional[Sequence[float]] = None
) -> Table:
    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("ID")
    table.add_column("Title")
    table.add_column("Artist")
    table.add_column("Genre")
    table.add_column("Plays", justify="right")
    table.add_column("Mood")
    if scores is not None:
        table.add_column("Score", justify="right")

    for index, track in enumerate(tracks, start=1):
        row = [
            str(index),
            escape(str(track.id)),
            escape(track.title),
            escape(track.artist),
            escape(track.genre),
            str(track.play_count),
            str(detect_mood(track)),
        ]
        if scores is not None:
            score = scores[index - 1]
            row.append(str(score) if isinstance(score, int) else f"{score:.3f}")
        table.add_row(*row)

    return table


def cmd_search(args: argparse.Namespace, config: Config) -> int:
    snapshot = _load(args, config)
    page = search_catalog(
        snapshot.tracks,
        query=args.query,
        genre=args.genre,
        limit=args.limit if args.limit is not None else config.catalog.page_size,
        offset=args.offset,
    )
    console = get_console()
    console.print(
        _track_table(page.items, f"Search: {args.query} ({page.total} matches)", page.scores)
    )
    return 0


def cmd_sort(args: argparse.Namespace, config: Config) -> int:
    snapshot = _load(args, config)
    sort_by = args.by or config.catalog.default_sort_key
    order = args.order or config.catalog.default_order
    page = search_catalog(
        snapshot.tracks,
        genre=args.genre,
        sort_by=sort_by,
        order=order,
        limit=args.limit if args.limit is not None else config.catalog.page_size,
        offset=args.offset,
    )
    get_console().print(
        _track_table(page.items, f"Tracks by {sort_by} ({order}), {page.total} total")
    )
    return 0


def cmd_features(args: argparse.Namespace, config: Config) -> int:
    features = estimate_features(args.genre)
    safe_print(
        f"{args.genre}: tempo={features.tempo:g} BPM, "
        f"energy={features.energy:g}, valence={features.valence:g}"
    )
    safe_print(f"Mood from features: {classify_by_features(*features)}")
    safe_print(f"Mood from genre:    {classify_by_genre(args.genre)}")
    return 0


def cmd_mood(args: argparse.Namespace, config: Config) -> int:
    given = (args.tempo, args.energy, args.valence)
    if any(value is not None for value in given) or args.genre is None:
        try:
            mood = classify_by_features(*given)
        except InvalidInputError as e:
            if args.genre is None:
                raise
            logger.warning(f"Classifying by genre {args.genre!r} instead: {e}")
            mood = classify_by_genre(args.genre)
    else:
        mood = classify_by_genre(args.genre)
    safe_print(str(mood), style="bold")
    return 0


def cmd_moods(args: argparse.Namespace, config: Config) -> int:
    snapshot = _load(args, config)

    if args.filter:
        limit = args.limit if args.limit is not None else config.moods.filter_limit
        auto_detect = config.moods.auto_detect and not args.no_auto_detect
        tracks = filter_by_mood(snapshot.tracks, args.filter, limit, auto_detect)
        get_console().print(_track_table(tracks, f"{args.filter} tracks"))
        return 0

    result = assign_moods(
        snapshot.tracks, overwrite=not args.keep_existing, estimate=not args.no_estimate
    )
    table = Table(title="Mood assignments")
    table.add_column("ID")
    table.add_column("Mood")
    table.add_column("Tempo", justify="right")
    table.add_column("Energy", justify="right")
    table.add_column("Valence", justify="right")
    for assignment in result.assignments:
        features = assignment.features
        table.add_row(
            str(assignment.track_id),
            str(assignment.mood),
            f"{features.tempo:g}" if features else "-",
            f"{features.energy:g}" if features else "-",
            f"{features.valence:g}" if features else "-",
        )
    console = get_console()
    console.print(table)
    console.print(
        f"Assigned {len(result.assignments)} moods "
        f"({result.features_estimated} with estimated features, {result.skipped} skipped)"
    )
    for error in result.errors[:10]:
        console.print(f"  ✗ {error}", style="yellow")
    return 0


def cmd_recommend(args: argparse.Namespace, config: Config) -> int:
    snapshot = _load(args, config)
    liked = set(args.liked or [])
    exclude = set(args.exclude or [])

    genre = args.genre
    if genre is None and liked:
        genre = derive_top_genre([t for t in snapshot.tracks if t.id in liked])
        if genre:
            logger.info(f"Inferred preferred genre from liked tracks: {genre}")

    limit = args.limit if args.limit is not None else config.recommendations.default_limit
    ranked = rank_tracks(
        snapshot.tracks,
        preferred_genre=genre,
        exclude=exclude,
        liked=liked or None,
        weights=config.recommendations.weights(),
    )[: max(limit, 0)]

    title = f"Recommended ({genre})" if genre else "Recommended (most played)"
    get_console().print(
        _track_table([r.track for r in ranked], title, [r.score for r in ranked])
    )
    return 0


def cmd_schedule(args: argparse.Namespace, config: Config) -> int:
    if args.at:
        validate_time_format(args.at)
    snapshot = _load(args, config)
    moment = datetime.now()
    now = args.at or moment.strftime("%H:%M")
    today = args.day if args.day is not None else weekday_number(moment)

    rule = select_active(snapshot.schedules, now, today)
    if rule is None:
        safe_print(f"No active schedule at {now} on {DAY_NAMES[today]}")
        return 0

    target = f"playlist {rule.playlist_id}" if rule.kind == "playlist" else f"mood {rule.mood}"
    safe_print(
        f"{escape(rule.name)} ({rule.start}-{rule.end}, priority {rule.priority}) -> {target}",
        style="bold green",
    )
    return 0


def cmd_shuffle(args: argparse.Namespace, config: Config) -> int:
    snapshot = _load(args, config)
    queue = shuffled(snapshot.tracks)
    if args.limit is not None:
        queue = queue[: max(args.limit, 0)]
    get_console().print(_track_table(queue, "Shuffled queue"))
    return 0


def _day(value: str) -> int:
    day = int(value)
    if not 0 <= day <= 6:
        raise argparse.ArgumentTypeError("day must be 0 (Sunday) to 6 (Saturday)")
    return day


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the playwise command."""
    parser = argparse.ArgumentParser(
        prog="playwise",
        description="Playwise - search, mood, recommendation and scheduling over a catalog snapshot",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", type=Path, help="Path to config.toml")
    parser.add_argument("--snapshot", help="Catalog snapshot JSON file")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log debug output to stderr"
    )

    subparsers = parser.add_subparsers(dest="subcommand", required=True)

    search_parser = subparsers.add_parser("search", help="Search titles and artists")
    search_parser.add_argument("query", help="Text to search for")
    search_parser.add_argument("--genre", help="Only search this genre")
    search_parser.add_argument("--limit", type=int, help="Page size")
    search_parser.add_argument("--offset", type=int, default=0, help="Results to skip")
    search_parser.set_defaults(handler=cmd_search)

    sort_parser = subparsers.add_parser("sort", help="List tracks sorted by a field")
    sort_parser.add_argument(
        "--by", help="Field to sort by (title, artist, duration, play_count, created_at)"
    )
    sort_parser.add_argument("--order", choices=("asc", "desc"), help="Sort order")
    sort_parser.add_argument("--genre", help="Only list this genre")
    sort_parser.add_argument("--limit", type=int, help="Page size")
    sort_parser.add_argument("--offset", type=int, default=0, help="Results to skip")
    sort_parser.set_defaults(handler=cmd_sort)

    features_parser = subparsers.add_parser(
        "features", help="Show estimated audio features for a genre"
    )
    features_parser.add_argument("genre", help="Genre label (e.g., 'Hip Hop')")
    features_parser.set_defaults(handler=cmd_features)

    mood_parser = subparsers.add_parser(
        "mood", help="Classify a mood from features or a genre"
    )
    mood_parser.add_argument("--tempo", type=float, help="Tempo in BPM")
    mood_parser.add_argument("--energy", type=float, help="Energy, 0-1")
    mood_parser.add_argument("--valence", type=float, help="Valence, 0-1")
    mood_parser.add_argument("--genre", help="Genre label (used when no features are given)")
    mood_parser.set_defaults(handler=cmd_mood)

    moods_parser = subparsers.add_parser(
        "moods", help="Backfill moods or list tracks for a mood"
    )
    moods_group = moods_parser.add_mutually_exclusive_group(required=True)
    moods_group.add_argument(
        "--assign", action="store_true", help="Compute moods for every track"
    )
    moods_group.add_argument(
        "--filter", choices=[m.value for m in Mood], help="List tracks with this mood"
    )
    moods_parser.add_argument(
        "--keep-existing", action="store_true", help="Skip tracks that already have a mood"
    )
    moods_parser.add_argument(
        "--no-estimate",
        action="store_true",
        help="Classify from existing features instead of estimating from genre",
    )
    moods_parser.add_argument(
        "--no-auto-detect",
        action="store_true",
        help="Only list tracks already labelled with the mood",
    )
    moods_parser.add_argument("--limit", type=int, help="Maximum tracks to list")
    moods_parser.set_defaults(handler=cmd_moods)

    recommend_parser = subparsers.add_parser("recommend", help="Recommend tracks")
    recommend_parser.add_argument("--genre", help="Preferred genre")
    recommend_parser.add_argument("--limit", type=int, help="Number of tracks")
    recommend_parser.add_argument(
        "--exclude", nargs="+", metavar="ID", help="Track IDs to leave out"
    )
    recommend_parser.add_argument(
        "--liked", nargs="+", metavar="ID", help="Liked track IDs (bonus + genre inference)"
    )
    recommend_parser.set_defaults(handler=cmd_recommend)

    schedule_parser = subparsers.add_parser(
        "schedule", help="Show the schedule rule active now"
    )
    schedule_parser.add_argument("--at", help="Local time as HH:MM (default: now)")
    schedule_parser.add_argument(
        "--day", type=_day, help="Day of week, 0 = Sunday (default: today)"
    )
    schedule_parser.set_defaults(handler=cmd_schedule)

    shuffle_parser = subparsers.add_parser("shuffle", help="Print a shuffled queue")
    shuffle_parser.add_argument("--limit", type=int, help="Number of tracks")
    shuffle_parser.set_defaults(handler=cmd_shuffle)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the playwise command.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config)
    setup_logging_from_config(config.logging, verbose=args.verbose)

    try:
        return args.handler(args, config)
    except PlaywiseError as e:
        logger.error(f"{args.subcommand} failed: {e}")
        print_error(str(e))
        return 1


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
