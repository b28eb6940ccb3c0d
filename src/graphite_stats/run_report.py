import asyncio
import os
import sys

import structlog

from graphite_stats.config import Settings
from graphite_stats.exceptions import ConfigurationError, GraphiteStatsError
from graphite_stats.logging_config import configure_logging
from graphite_stats.services.client import TimeSeriesClient
from graphite_stats.services.report import build_report, to_json
from graphite_stats.services.walker import HierarchyWalker

logger = structlog.get_logger(__name__)


async def run(settings: Settings) -> str:
    """Walk the store described by settings and return the JSON report"""
    async with TimeSeriesClient(
        settings.graphite_url,
        metrics_dir=settings.metrics_dir,
        timeout=settings.timeout,
        max_concurrency=settings.max_concurrency,
    ) as client:
        walker = HierarchyWalker(
            client,
            root_prefix=settings.root_prefix,
            lookback=settings.lookback,
            name_format=settings.name_format,
        )
        report = await build_report(walker)
    return to_json(report)


def main() -> int:
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))
    try:
        settings = Settings.from_env()
    except ConfigurationError as e:
        logger.error(f"Error: {e}")
        return 1

    configure_logging(settings.log_level)
    try:
        output = asyncio.run(run(settings))
    except GraphiteStatsError as e:
        logger.error(f"Error: {e}")
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
