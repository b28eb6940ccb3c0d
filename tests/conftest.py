"""Shared fixtures: an in-process Graphite stand-in served by aiohttp."""

import logging

import pytest
import pytest_asyncio
import structlog
from aiohttp.test_utils import TestServer

from graphite_stats.services.client import TimeSeriesClient

from tests.helpers import FakeGraphite


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo configure_logging so no handler outlives a captured stream."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    structlog.reset_defaults()
    for handler in root.handlers:
        if handler not in handlers:
            root.removeHandler(handler)
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def fake_graphite():
    return FakeGraphite()


@pytest_asyncio.fixture
async def graphite_url(fake_graphite):
    server = TestServer(fake_graphite.app())
    await server.start_server()
    yield f"http://{server.host}:{server.port}"
    await server.close()


@pytest_asyncio.fixture
async def client(graphite_url):
    async with TimeSeriesClient(graphite_url, timeout=5.0) as client:
        yield client
