import math
from typing import Optional

import structlog
from pydantic_core import PydanticSerializationError

from graphite_stats.exceptions import SerializationError
from graphite_stats.models.report import Report, WalkResult
from graphite_stats.services.walker import HierarchyWalker

logger = structlog.get_logger(__name__)


def assemble(result: WalkResult) -> Report:
    """Turn walked servers into the ordered report, one entry per server"""
    return Report([{server: dict(stats)} for server, stats in result.servers])


async def build_report(walker: HierarchyWalker) -> Report:
    result = await walker.walk()
    report = assemble(result)
    metric_count = sum(len(stats) for _, stats in result.servers)
    logger.info(
        f"Collected statistics for {metric_count} metrics on {len(result.servers)} servers",
        failures=len(result.failures),
    )
    return report


def to_json(report: Report, indent: Optional[int] = 2) -> str:
    """Indented JSON for the report; non-finite statistics have no JSON form and are rejected"""
    for entry in report.root:
        for server, server_stats in entry.items():
            for metric, stats in server_stats.items():
                bad = [name for name, value in stats.model_dump().items() if not math.isfinite(value)]
                if bad:
                    raise SerializationError(
                        f"Failed to serialize report: non-finite {', '.join(bad)} for {metric} on {server}"
                    )
    try:
        return report.model_dump_json(indent=indent)
    except PydanticSerializationError as e:
        raise SerializationError(f"Failed to serialize report: {e}") from e
