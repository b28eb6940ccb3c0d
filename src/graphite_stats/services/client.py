import asyncio
from datetime import timedelta
from typing import Any, Dict, List, Optional

import aiohttp
import structlog

from graphite_stats.exceptions import DecodeError, TransportError
from graphite_stats.extractors.base import BaseExtractor
from graphite_stats.extractors.render import RenderExtractor
from graphite_stats.models.metrics import Sample
from graphite_stats.models.series import PathEntryList, SeriesRecordList
from graphite_stats.utils.metric_path import MetricPath
from graphite_stats.utils.time import DEFAULT_LOOKBACK, format_lookback
from graphite_stats.utils.utils import decode_json

logger = structlog.get_logger(__name__)


class TimeSeriesClient:
    """Queries a Graphite-compatible store over HTTP.

    A semaphore caps the number of requests in flight; with
    ``max_concurrency=1`` every call is issued strictly one after another.
    Failed calls are never retried.
    """

    def __init__(
        self,
        base_url: str,
        metrics_dir: str = "snmp",
        timeout: Optional[float] = 30.0,
        max_concurrency: int = 4,
        session: Optional[aiohttp.ClientSession] = None,
        extractor: Optional[BaseExtractor] = None,
    ):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.base_url = base_url.rstrip("/")
        self.metrics_dir = metrics_dir
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.extractor = extractor or RenderExtractor()
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "TimeSeriesClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
            self._owns_session = True
        return self._session

    async def _get(self, endpoint: str, params: Dict[str, Any]) -> str:
        url = f"{self.base_url}/{endpoint}"
        async with self._semaphore:
            logger.debug(f"GET {url}", params=params)
            try:
                async with self._get_session().get(url, params=params, timeout=self.timeout) as response:
                    if not 200 <= response.status < 300:
                        raise TransportError(
                            f"unexpected status code {response.status} from {endpoint} ({params})",
                            status=response.status,
                        )
                    return await response.text()
            except UnicodeDecodeError as e:
                raise DecodeError(f"undecodable body from {endpoint}: {e}") from e
            except asyncio.TimeoutError as e:
                raise TransportError(f"request to {endpoint} timed out ({params})", cause=e) from e
            except aiohttp.ClientError as e:
                raise TransportError(f"request to {endpoint} failed: {e}", cause=e) from e

    async def _find(self, query: str) -> List[MetricPath]:
        body = await self._get("metrics/find", {"query": query, "format": "json"})
        entries = decode_json(body, adapter=PathEntryList, source=f"find response for {query}")
        try:
            return [MetricPath.parse(entry.path) for entry in entries]
        except ValueError as e:
            raise DecodeError(f"Invalid path in find response for {query}: {e}") from e

    async def list_servers(self, root_prefix: str) -> List[str]:
        """Names of the servers directly under ``root_prefix``, in discovery order"""
        paths = await self._find(MetricPath.parse(root_prefix).glob())
        servers = [path.last_segment() for path in paths]
        logger.info(f"Discovered {len(servers)} servers under {root_prefix}")
        return servers

    async def list_metrics(self, root_prefix: str, server: str) -> List[MetricPath]:
        """Fully-qualified metric paths for one server, in discovery order"""
        parent = MetricPath.parse(root_prefix).child(server, self.metrics_dir)
        metrics = await self._find(parent.glob())
        logger.debug(f"Discovered {len(metrics)} metrics for {server}")
        return metrics

    async def fetch_series(self, metric_path: MetricPath, lookback: timedelta = DEFAULT_LOOKBACK) -> List[Sample]:
        params = {
            "target": str(metric_path),
            "from": f"-{format_lookback(lookback)}",
            "format": "json",
        }
        body = await self._get("render", params)
        records = decode_json(body, adapter=SeriesRecordList, source=f"render response for {metric_path}")
        return self.extractor.extract(records)
