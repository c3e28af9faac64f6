"""PlateIndex CLI entry point.

Runs one extraction: with no argument the newest archive is downloaded
from the configured FTP directory, otherwise the argument names a local
archive or an ``s3://`` object.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from typing import Sequence

from cli.report import ConsoleReporter, render_summary
from core.config import PlateIndexConfig
from core.errors import PlateIndexError
from ingest.pipeline import ingest_plates
from store.record_store import RecordStore


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="plateindex",
        description="Extract license plates from a vehicle registration archive",
    )
    parser.add_argument(
        "archive",
        nargs="?",
        help="Local .zip path or s3://bucket/key; omit to download from FTP",
    )
    parser.add_argument(
        "--preview-limit",
        type=int,
        help="Override PLATEINDEX_PREVIEW_LIMIT for this run",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the PlateIndex CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code: 1 for fatal errors, 0 otherwise.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = PlateIndexConfig.from_env()
    except PlateIndexError as error:
        print(f"error={error}", file=sys.stderr)
        return 1
    if args.preview_limit is not None:
        if args.preview_limit < 0:
            parser.error("--preview-limit must be zero or greater")
        config = replace(config, preview_limit=args.preview_limit)
    if args.archive:
        print(f"Using archive: {args.archive}")
    else:
        print("Connecting to FTP server...")
    store = RecordStore()
    try:
        summary = ingest_plates(args.archive, config, store, ConsoleReporter())
    except PlateIndexError as error:
        print(f"error={error}", file=sys.stderr)
        return 1
    print(render_summary(summary, store, config.preview_limit))
    return 0
