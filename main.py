"""
TransferIQ player duplicate cleanup

Usage:
    # Report what would be removed (no deletes)
    python main.py

    # Remove duplicates from Supabase
    python main.py --execute

    # Rehearse against a JSON export and write the cleaned rows
    python main.py --source json --input players.json --output cleaned.json --execute

    # Only the abbreviated-name and invalid-name phases
    python main.py --phases 1,4

    # Record counts
    python main.py --mode stats
"""
import argparse
import asyncio
import sys
from typing import Callable, List, Optional

from loguru import logger

from database.memory_store import InMemoryPlayerStore
from database.store import PlayerQuery, PlayerStore
from database.supabase_client import SupabasePlayerStore
from player_cleanup.cleaner import run_cleanup
from player_cleanup.config import CleanupConfig, SupabaseConfig, parse_phases
from player_cleanup.errors import CleanupError, StoreConnectionError
from player_cleanup.normalizer import ABBREVIATED_PATTERN


def setup_logging(level: str = "INFO", log_dir: Optional[str] = "logs") -> None:
    """Console sink plus a daily rotated debug log"""
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=level
    )
    if log_dir:
        logger.add(
            f"{log_dir}/cleanup_{{time:YYYY-MM-DD}}.log",
            rotation="1 day",
            retention="30 days",
            level="DEBUG"
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Remove duplicate player records")
    parser.add_argument(
        "--mode",
        choices=["cleanup", "stats"],
        default="cleanup",
        help="Run mode"
    )
    parser.add_argument(
        "--execute",
        action="store_true",
        help="Actually delete records (default is a dry run)"
    )
    parser.add_argument(
        "--source",
        choices=["supabase", "json"],
        default="supabase",
        help="Player store backend"
    )
    parser.add_argument("--input", type=str, help="JSON export to read (--source json)")
    parser.add_argument("--output", type=str, help="Write remaining rows here (--source json)")
    parser.add_argument("--phases", type=str, help="Phases to run, e.g. 1,2,4")
    parser.add_argument("--log-level", type=str, default="INFO", help="Console log level")
    parser.add_argument("--no-log-file", action="store_true", help="Do not write logs/ files")
    return parser


def build_config(args: argparse.Namespace) -> CleanupConfig:
    """Environment settings overridden by command-line flags"""
    overrides = {}
    if args.execute:
        overrides["dry_run"] = False
    if args.phases:
        overrides["enabled_phases"] = parse_phases(args.phases)
    return CleanupConfig(**overrides)


def build_store_factory(args: argparse.Namespace) -> Callable[[], PlayerStore]:
    if args.source == "json":
        if not args.input:
            raise StoreConnectionError("--input is required with --source json")

        def load_json() -> PlayerStore:
            try:
                return InMemoryPlayerStore.from_json_file(args.input)
            except (OSError, ValueError) as e:
                raise StoreConnectionError(f"cannot read {args.input}: {e}") from e

        return load_json

    return lambda: SupabasePlayerStore(SupabaseConfig())


async def print_stats(store: PlayerStore) -> None:
    """Record counts"""
    try:
        total = await store.count()
        abbreviated = await store.count(PlayerQuery(name_pattern=ABBREVIATED_PATTERN))
        invalid = len(await store.find_invalid_names())
    finally:
        await store.close()

    print("\n=== Player store stats ===")
    print(f"  players: {total:,}")
    print(f"  abbreviated names: {abbreviated:,}")
    print(f"  invalid names: {invalid:,}")


async def main(argv: Optional[List[str]] = None) -> int:
    """Entry point; returns the process exit code"""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, None if args.no_log_file else "logs")

    try:
        config = build_config(args)
        store_factory = build_store_factory(args)
    except (CleanupError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    if args.mode == "stats":
        try:
            await print_stats(store_factory())
        except CleanupError as e:
            logger.error(f"Stats error: {e}")
            return 1
        return 0

    if not config.dry_run:
        logger.warning("This run will permanently remove duplicate players from the database!")
        logger.warning("Make sure you have a backup before running this cleanup.")

    store_holder: List[PlayerStore] = []

    def open_store() -> PlayerStore:
        store = store_factory()
        store_holder.append(store)
        return store

    report = await run_cleanup(open_store, config)
    if not report.success:
        return 1

    if args.output:
        if args.source != "json":
            logger.warning("--output is only supported with --source json")
        elif config.dry_run:
            logger.info("Dry run: --output not written")
        else:
            store_holder[0].dump_json_file(args.output)

    return 0


def run() -> None:
    """Console script entry point"""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
