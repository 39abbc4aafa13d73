"""
Shared fixtures: in-process Redis (fakeredis), a recording upstream behind
httpx.MockTransport, a tenant registry wired to both, and an async client
wrapping the FastAPI app via ASGITransport.
"""

import json
from typing import Dict, List, Optional, Set

import httpx
import pytest
import pytest_asyncio
from fakeredis import FakeAsyncRedis
from httpx import ASGITransport

from core.registry import build_registry
from util.enums import EntryType


class Upstream:
    """Fake destination server; records every request it receives."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.fail_hosts: Set[str] = set()
        self.status_by_host: Dict[str, int] = {}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = request.url.host
        if host in self.fail_hosts:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(
            self.status_by_host.get(host, 200),
            content=b"[" + host.encode() + b":" + request.content + b"]",
        )

    @property
    def urls(self) -> List[str]:
        return [str(r.url) for r in self.requests]


@pytest.fixture
def upstream():
    return Upstream()


@pytest.fixture
def transport(upstream):
    return httpx.MockTransport(upstream)


@pytest_asyncio.fixture
async def redis():
    client = FakeAsyncRedis()
    await client.flushall()
    yield client
    await client.flushall()
    await client.aclose()


@pytest_asyncio.fixture
async def registry(redis, transport):
    reg = build_registry(["default", "acme"], redis, transport=transport)
    yield reg
    await reg.aclose()


@pytest.fixture
def store(registry):
    return registry.require("default").store


@pytest_asyncio.fixture
async def test_client(registry, redis, transport):
    """Async HTTP client over the app, with startup state injected directly."""
    from main import app

    app.state.registry = registry
    app.state.redis = redis
    app.state.relay_transport = transport

    async with httpx.AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        yield client


async def seed(
    store,
    *,
    binds: Optional[Dict[str, dict]] = None,
    templates: Optional[Dict[str, str]] = None,
    auths: Optional[Dict[str, dict]] = None,
) -> None:
    """Write fixture entries straight into a store."""
    for name, bind in (binds or {}).items():
        await store.put(EntryType.BINDS, name, json.dumps(bind).encode())
    for name, source in (templates or {}).items():
        await store.put(EntryType.TEMPLATES, name, source.encode())
    for name, auth in (auths or {}).items():
        await store.put(EntryType.AUTHS, name, json.dumps(auth).encode())
