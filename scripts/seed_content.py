"""Populate default catalog data into the configured document store."""

from __future__ import annotations

import asyncio
import sys

from delights_cms.config import AppConfig
from delights_cms.logging import configure_logging
from delights_cms.services import SeedReport, build_services, seed_all


async def run_seed(config: AppConfig | None = None) -> list[SeedReport]:
    services = build_services(config)
    await services.startup()
    try:
        return await seed_all(services)
    finally:
        await services.shutdown()


def main() -> int:
    config = AppConfig.build_default()
    configure_logging(config.log_level)
    try:
        reports = asyncio.run(run_seed(config))
    except Exception as exc:
        print(f"seed failed: {exc}", file=sys.stderr)
        return 2
    for report in reports:
        print(
            f"{report.collection}: inserted={report.inserted}, upgraded={report.upgraded}",
            file=sys.stdout,
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
