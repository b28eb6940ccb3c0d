import asyncio
from datetime import timedelta
from typing import Callable, Iterable, List, Optional

import structlog

from graphite_stats.exceptions import DecodeError, EmptyInputError, TransportError
from graphite_stats.models.metrics import MetricStatistics, Sample, ServerStatistics
from graphite_stats.models.report import BranchFailure, WalkResult
from graphite_stats.services.client import TimeSeriesClient
from graphite_stats.services.statistics import reduce_samples
from graphite_stats.utils.formatters import MetricNameFormat, metric_key
from graphite_stats.utils.metric_path import MetricPath
from graphite_stats.utils.time import DEFAULT_LOOKBACK

logger = structlog.get_logger(__name__)

Reducer = Callable[[Iterable[Sample]], MetricStatistics]


class HierarchyWalker:
    """Walks servers -> metrics -> samples and reduces every series.

    Server discovery failures propagate. A failure while listing one server's
    metrics drops that server; a failure while fetching or reducing one metric
    drops that metric. Sibling branches always run to completion and results
    keep discovery order.
    """

    def __init__(
        self,
        client: TimeSeriesClient,
        root_prefix: str,
        lookback: timedelta = DEFAULT_LOOKBACK,
        name_format: MetricNameFormat = MetricNameFormat.RAW,
        reducer: Reducer = reduce_samples,
    ):
        self.client = client
        self.root_prefix = root_prefix
        self.lookback = lookback
        self.name_format = name_format
        self.reducer = reducer
        self.failures: List[BranchFailure] = []

    async def walk(self) -> WalkResult:
        self.failures = []
        servers = await self.client.list_servers(self.root_prefix)

        results = await asyncio.gather(*(self._walk_server(server) for server in servers))

        walked = [(server, stats) for server, stats in zip(servers, results) if stats is not None]
        return WalkResult(servers=walked, failures=list(self.failures))

    async def _walk_server(self, server: str) -> Optional[ServerStatistics]:
        try:
            metric_paths = await self.client.list_metrics(self.root_prefix, server)
        except (TransportError, DecodeError) as e:
            self._record(BranchFailure(server=server, stage="list_metrics", error=str(e)))
            return None

        results = await asyncio.gather(*(self._walk_metric(server, path) for path in metric_paths))

        # written in discovery order so a repeated key keeps the later path
        server_stats: ServerStatistics = {}
        for path, stats in zip(metric_paths, results):
            if stats is not None:
                server_stats[metric_key(path, self.name_format)] = stats
        return server_stats

    async def _walk_metric(self, server: str, path: MetricPath) -> Optional[MetricStatistics]:
        try:
            samples = await self.client.fetch_series(path, self.lookback)
        except (TransportError, DecodeError) as e:
            self._record(BranchFailure(server=server, metric=str(path), stage="fetch_series", error=str(e)))
            return None

        try:
            return self.reducer(samples)
        except EmptyInputError as e:
            self._record(BranchFailure(server=server, metric=str(path), stage="reduce", error=str(e)))
            return None

    def _record(self, failure: BranchFailure):
        self.failures.append(failure)
        logger.error(
            f"Skipping {failure.metric or failure.server}: {failure.error}",
            server=failure.server,
            metric=failure.metric,
            stage=failure.stage,
        )
