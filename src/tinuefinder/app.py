"""Command-line entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from tinuefinder.config import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_PLIES_TO_UNDO,
    RunConfig,
    default_workers,
)
from tinuefinder.errors import ConfigurationError, StorageUnavailable
from tinuefinder.pipeline import TinuePipeline
from tinuefinder.storage.database import ensure_schema, open_database

_LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_STORAGE_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tinue-finder",
        description="Find forced wins (tinues) near the end of archived Tak games.",
    )
    parser.add_argument("--db", required=True, type=Path, help="Path to the games database")
    parser.add_argument(
        "-n", "--board-size", required=True, type=int, help="Board size of the games to search"
    )
    parser.add_argument(
        "-u",
        "--undo",
        type=int,
        default=DEFAULT_PLIES_TO_UNDO,
        help="Plies to undo from the end of each game (default: %(default)s)",
    )
    parser.add_argument(
        "-d",
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help="Longest tinue to look for, in plies (default: %(default)s)",
    )
    parser.add_argument(
        "--threads",
        type=int,
        default=None,
        help="Worker count (default: $TINUE_FINDER_WORKERS or the CPU count)",
    )
    parser.add_argument(
        "-s",
        "--start-id",
        type=int,
        default=0,
        help="Skip games with a lower id (default: %(default)s)",
    )
    parser.add_argument(
        "--unique",
        action="store_true",
        help="Only keep tinues whose first move is the only winning one",
    )
    parser.add_argument(
        "-t", "--test", action="store_true", help="Dry run: log tinues without storing them"
    )
    parser.add_argument(
        "--no-skip-existing",
        dest="skip_existing",
        action="store_false",
        help="Search games again even when a tinue is already stored",
    )
    parser.add_argument(
        "--use-threads",
        action="store_true",
        help="Use a thread pool instead of worker processes",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging verbosity (default: %(default)s)",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> RunConfig:
    workers = args.threads if args.threads is not None else default_workers()
    return RunConfig(
        database=args.db,
        board_size=args.board_size,
        plies_to_undo=args.undo,
        max_depth=args.max_depth,
        workers=workers,
        start_id=args.start_id,
        unique_only=args.unique,
        dry_run=args.test,
        skip_existing=args.skip_existing,
        use_processes=not args.use_threads,
    ).validate()


def configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level), format=_LOG_FORMAT)


def run(argv: Sequence[str] | None = None) -> int:
    """Parse *argv*, run the search and return the process exit code."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        config = config_from_args(args)
    except ConfigurationError as exc:
        _LOGGER.error("Invalid configuration: %s", exc.message)
        return EXIT_CONFIG_ERROR

    try:
        conn = open_database(config.database)
    except StorageUnavailable as exc:
        _LOGGER.error("%s", exc.message)
        return EXIT_STORAGE_ERROR

    pipeline: TinuePipeline | None = None
    try:
        ensure_schema(conn)
        pipeline = TinuePipeline(config, conn)
        report = pipeline.run()
    except StorageUnavailable as exc:
        _LOGGER.error("Storage failure, run aborted: %s", exc.message)
        return EXIT_STORAGE_ERROR
    except KeyboardInterrupt:
        if pipeline is not None:
            pipeline.cancel()
        _LOGGER.warning("Interrupted")
        return EXIT_INTERRUPTED
    finally:
        conn.close()

    _LOGGER.info("Done: %s", report.summary())
    for skipped in report.skipped:
        _LOGGER.info(
            "Skipped game %d (%s): %s", skipped.game_id, skipped.status.value, skipped.reason
        )
    return EXIT_OK


def main() -> None:
    """Launch the tinue finder."""
    sys.exit(run())


if __name__ == "__main__":
    main()
