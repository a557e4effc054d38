"""
S3 Prefix Purge - Command Line Interface

Permanently deletes every version and delete marker under a prefix of a
versioned bucket.

Usage:
    python -m s3rmdir -bucket my-bucket -prefix logs/2023
    python -m s3rmdir -bucket my-bucket -prefix logs -batch 500 -workers 8
    python -m s3rmdir -bucket my-bucket -prefix logs --dry-run

Single-dash long flags (-bucket) and double-dash flags (--bucket) are
equivalent.
"""

import argparse
import os
import sys
from typing import List, Optional

from .config import PURGE, S3
from .errors import PurgeError
from .purger import PrefixPurger, validate_settings
from .s3_utils import get_s3_client
from .utils import setup_logger

logger = setup_logger("s3rmdir")


def unsigned_int(value: str) -> int:
    """argparse type for non-negative integers."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid unsigned integer: {value!r}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"invalid unsigned integer: {value!r}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="s3rmdir",
        description="Delete all object versions and delete markers under a prefix.",
    )
    parser.add_argument(
        "-bucket", "--bucket",
        default=S3["BUCKET"],
        metavar="bucket",
        help="bucket to delete from (required)",
    )
    parser.add_argument(
        "-prefix", "--prefix",
        default="",
        metavar="prefix",
        help="prefix/folder to delete",
    )
    parser.add_argument(
        "-batch", "--batch",
        type=unsigned_int,
        default=PURGE["BATCH_SIZE"],
        help=f"batch size (default: {PURGE['BATCH_SIZE']}, max {S3['MAX_DELETE_BATCH']})",
    )
    parser.add_argument(
        "-region", "--region",
        default=S3["REGION"],
        metavar="region",
        help=f"AWS region (default: {S3['REGION']})",
    )
    parser.add_argument(
        "-workers", "--workers",
        type=unsigned_int,
        default=PURGE["MAX_WORKERS"],
        help=f"maximum concurrent delete requests (default: {PURGE['MAX_WORKERS']})",
    )
    parser.add_argument(
        "-dry-run", "--dry-run",
        action="store_true",
        dest="dry_run",
        help="list and count objects without deleting anything",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the purge and return the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.bucket:
        parser.print_usage(sys.stderr)
        return 1

    try:
        validate_settings(args.batch, args.workers)
        client = get_s3_client(region=args.region, max_workers=args.workers)
        purger = PrefixPurger(
            client,
            args.bucket,
            prefix=args.prefix,
            batch_size=args.batch,
            max_workers=args.workers,
            dry_run=args.dry_run,
        )
        summary = purger.run()
    except PurgeError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted, exiting...")
        return 130

    if summary.dry_run:
        print(f"dry run: {summary.batches} batch(es) would be deleted")
    print(f"total number of objects: {summary.observed}")
    return 0


def run(argv: Optional[List[str]] = None):
    """
    Console entry point.

    A failed run exits without joining delete workers that are still in
    flight; interpreter shutdown would otherwise wait for every pending
    DeleteObjects request.
    """
    exit_code = main(argv)
    if exit_code != 0:
        sys.stdout.flush()
        sys.stderr.flush()
        os._exit(exit_code)
    sys.exit(exit_code)
