"""Main entry point with CLI."""
import argparse
import asyncio
import logging
import sys
from pathlib import Path

from favarchive import config as config_module
from favarchive.config import config
from favarchive.jobs.runner import ArchiveRunner
from favarchive.logging_conf import setup_logging

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Archive status metadata and publish it as paged JSON")
    parser.add_argument(
        "paths",
        nargs="*",
        type=Path,
        help="Favolog .csv exports or text files with one status URL/id per line",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help=f"Maximum downloads in flight (default: {config.CONCURRENCY})",
    )
    parser.add_argument(
        "--rate",
        type=float,
        default=None,
        help=f"Requests per second before backoff (default: {config.RATE_PER_SECOND})",
    )
    parser.add_argument(
        "--max-retries",
        type=int,
        default=None,
        help=f"Attempts per status while rate limited (default: {config.MAX_RETRIES})",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help=f"Data directory (default: {config_module.DATA_DIR})",
    )
    parser.add_argument(
        "--no-export",
        action="store_true",
        help="Only download, do not rebuild the public directory",
    )
    parser.add_argument(
        "--dev",
        action="store_true",
        help="Verbose logs",
    )
    return parser.parse_args(argv)


def main(argv=None) -> None:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging("DEBUG" if args.dev else None)

    if args.concurrency is not None:
        config.CONCURRENCY = args.concurrency
    if args.rate is not None:
        config.RATE_PER_SECOND = args.rate
    if args.max_retries is not None:
        config.MAX_RETRIES = args.max_retries

    try:
        config.validate()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    data_dir = args.data_dir or config_module.DATA_DIR
    statuses_dir = data_dir / "private" / "statuses"
    public_dir = data_dir / "public"

    logger.info("=" * 60)
    logger.info("Status archiver starting")
    logger.info(f"Inputs: {', '.join(str(p) for p in args.paths) or '(none, export only)'}")
    logger.info(f"Data dir: {data_dir}")
    logger.info(f"Concurrency: {config.CONCURRENCY}")
    logger.info(f"Rate: {config.RATE_PER_SECOND}/s")
    logger.info(f"Max retries: {config.MAX_RETRIES}")
    logger.info(f"Export: {not args.no_export}")
    logger.info("=" * 60)

    runner = ArchiveRunner(
        paths=args.paths,
        statuses_dir=statuses_dir,
        public_dir=public_dir,
        concurrency=config.CONCURRENCY,
        rate_per_second=config.RATE_PER_SECOND,
        max_retries=config.MAX_RETRIES,
        export=not args.no_export,
    )
    try:
        asyncio.run(runner.run())
    except (KeyboardInterrupt, asyncio.CancelledError):
        logger.info("Interrupted by user")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
