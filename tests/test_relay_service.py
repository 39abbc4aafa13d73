"""Tests for service.relay_service: tenant lookup and the per-send deadline."""

import asyncio

import httpx
import pytest
import pytest_asyncio

from conftest import seed
from core.entities import RelayRequest
from core.registry import build_registry
from service.relay_service import RelayService
from util.errors import TenantNotFoundError, UpstreamError


class SlowUpstream:
    """Records each request, then stalls before answering."""

    def __init__(self, delay: float) -> None:
        self.delay = delay
        self.requests = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        await asyncio.sleep(self.delay)
        return httpx.Response(200, content=b"late")


@pytest.fixture
def slow():
    return SlowUpstream(delay=0.5)


@pytest_asyncio.fixture
async def slow_registry(redis, slow):
    reg = build_registry(["default"], redis, transport=httpx.MockTransport(slow))
    yield reg
    await reg.aclose()


TWO_AUTHS = {
    "binds": {"orders": {"template": "invoice", "authentication": "billing/"}},
    "templates": {"invoice": "hi"},
    "auths": {
        "billing/a": {"URL": "https://a.example", "method": "POST"},
        "billing/b": {"URL": "https://b.example", "method": "POST"},
    },
}


@pytest.mark.asyncio
async def test_deadline_stops_fanout(slow_registry, slow):
    await seed(slow_registry.require("default").store, **TWO_AUTHS)
    service = RelayService(slow_registry, deadline_seconds=0.05)

    with pytest.raises(UpstreamError) as err:
        await service.send("default", RelayRequest(key="orders", payload=b"{}"))

    assert "deadline" in err.value.detail
    # The second destination is never contacted once the first is cancelled.
    assert [r.url.host for r in slow.requests] == ["a.example"]


@pytest.mark.asyncio
async def test_send_concatenates_in_dispatch_order(registry, upstream):
    await seed(registry.require("default").store, **TWO_AUTHS)
    service = RelayService(registry, deadline_seconds=5)

    out = await service.send("default", RelayRequest(key="orders", payload=b"{}"))

    assert out == b"[a.example:hi][b.example:hi]"


@pytest.mark.asyncio
async def test_unknown_tenant(registry):
    service = RelayService(registry)
    with pytest.raises(TenantNotFoundError):
        await service.send("ghost", RelayRequest(key="orders", payload=b"{}"))
