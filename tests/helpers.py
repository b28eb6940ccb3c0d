"""Fakes shared by the test suites: an aiohttp Graphite stand-in and an in-memory client."""

import asyncio
import random
from typing import Any, Dict, List

from aiohttp import web

from graphite_stats.models.metrics import Sample
from graphite_stats.utils.metric_path import MetricPath

ROOT = "telegraf.vsphere_metrics.oob.qa.dell"



class FakeGraphite:
    """Canned responses keyed by find query / render target.

    A value may be a list (served as JSON), an int (served as that status
    with an empty body) or a str (served verbatim as the body).
    """

    def __init__(self):
        self.finds: Dict[str, Any] = {}
        self.renders: Dict[str, Any] = {}
        self.delays: Dict[str, float] = {}
        self.requests: List[Dict[str, str]] = []
        self.in_flight = 0
        self.peak_in_flight = 0

    def add_server(self, server: str, metrics: Dict[str, List[List[Any]]], metrics_dir: str = "snmp"):
        servers = self.finds.setdefault(f"{ROOT}.*", [])
        servers.append({"path": f"{ROOT}.{server}"})
        prefix = ".".join(part for part in (ROOT, server, metrics_dir) if part)
        self.finds[f"{prefix}.*"] = [{"path": f"{prefix}.{name}"} for name in metrics]
        for name, datapoints in metrics.items():
            self.renders[f"{prefix}.{name}"] = [
                {"target": f"{prefix}.{name}", "tags": {"name": name}, "datapoints": datapoints}
            ]

    async def _respond(self, key: str, canned: Dict[str, Any]) -> web.Response:
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            if key in self.delays:
                await asyncio.sleep(self.delays[key])
        finally:
            self.in_flight -= 1
        if key not in canned:
            return web.json_response([])
        value = canned[key]
        if isinstance(value, int):
            return web.Response(status=value, text="")
        if isinstance(value, str):
            return web.Response(text=value, content_type="application/json")
        return web.json_response(value)

    async def find(self, request: web.Request) -> web.Response:
        self.requests.append(dict(request.query, endpoint="find"))
        return await self._respond(request.query["query"], self.finds)

    async def render(self, request: web.Request) -> web.Response:
        self.requests.append(dict(request.query, endpoint="render"))
        return await self._respond(request.query["target"], self.renders)

    def app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/metrics/find", self.find)
        app.router.add_get("/render", self.render)
        return app



class StubClient:
    """In-memory client; values that are exceptions are raised when reached."""

    def __init__(self, servers, metrics: Dict[str, object], series: Dict[str, object], jitter: float = 0.0):
        self.servers = servers
        self.metrics = metrics
        self.series = series
        self.jitter = jitter
        self.fetched: List[str] = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return None

    async def _pause(self):
        if self.jitter:
            await asyncio.sleep(random.uniform(0, self.jitter))

    async def list_servers(self, root_prefix):
        if isinstance(self.servers, Exception):
            raise self.servers
        return list(self.servers)

    async def list_metrics(self, root_prefix, server):
        await self._pause()
        value = self.metrics[server]
        if isinstance(value, Exception):
            raise value
        return [MetricPath.parse(p) for p in value]

    async def fetch_series(self, metric_path, lookback):
        await self._pause()
        self.fetched.append(str(metric_path))
        value = self.series[str(metric_path)]
        if isinstance(value, Exception):
            raise value
        return [Sample(timestamp=i, value=v) for i, v in enumerate(value)]
