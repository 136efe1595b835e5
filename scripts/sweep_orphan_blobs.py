"""Cron entry point for removing blobs no document references."""

from __future__ import annotations

import argparse
import asyncio
import sys
from datetime import timedelta

from delights_cms.config import AppConfig
from delights_cms.logging import configure_logging
from delights_cms.media.orphan_sweep import DEFAULT_MIN_AGE, SweepSummary, sweep_orphan_blobs
from delights_cms.repositories.collections import upload_folders
from delights_cms.services import ContentServices, build_services


async def perform_sweep(
    *,
    dry_run: bool,
    folders: list[str] | None = None,
    min_age: timedelta = DEFAULT_MIN_AGE,
    services: ContentServices | None = None,
) -> SweepSummary:
    """Execute the sweep and return summary counters."""
    content = services or build_services(AppConfig.build_default())
    await content.startup()
    try:
        return await sweep_orphan_blobs(
            content,
            folders=folders or upload_folders(),
            dry_run=dry_run,
            min_age=min_age,
        )
    finally:
        if services is None:
            await content.shutdown()


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Remove unreferenced blobs.")
    parser.add_argument("--dry-run", action="store_true", help="Only report counts without deleting blobs.")
    parser.add_argument(
        "--folder",
        action="append",
        dest="folders",
        help="Upload folder to scan; repeatable. Defaults to every known folder.",
    )
    parser.add_argument(
        "--min-age-hours",
        type=float,
        default=DEFAULT_MIN_AGE.total_seconds() / 3600,
        help="Keep unreferenced blobs modified more recently than this many hours.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv or [])
    configure_logging(AppConfig.build_default().log_level)
    try:
        summary = asyncio.run(
            perform_sweep(
                dry_run=args.dry_run,
                folders=args.folders,
                min_age=timedelta(hours=args.min_age_hours),
            )
        )
    except Exception as exc:
        print(f"sweep failed: {exc}", file=sys.stderr)
        return 2

    if summary.dry_run:
        print(
            f"sweep dry-run, scanned={summary.scanned}, orphaned={summary.orphaned}, recent={summary.recent}",
            file=sys.stdout,
        )
    else:
        print(
            f"sweep done, scanned={summary.scanned}, orphaned={summary.orphaned}, "
            f"recent={summary.recent}, removed={summary.removed}",
            file=sys.stdout,
        )
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
