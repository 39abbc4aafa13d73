# controller/controller_dependencies.py
from typing import List
from fastapi import Depends, Header, HTTPException, Request
from fastapi.params import Depends as DependsParam
from fastapi_limiter.depends import RateLimiter
from config.settings import settings
from core.entities import Tenant
from core.registry import TenantRegistry
from service.entry_service import EntryService
from service.relay_service import RelayService
from service.tenant_service import TenantService
from util.constants import Headers


def rate_limits() -> List[DependsParam]:
    """Router-level limiter, only when enabled (it needs FastAPILimiter.init)."""
    if not settings.RATE_LIMIT_ENABLED:
        return []
    return [
        Depends(
            RateLimiter(
                times=settings.RATE_LIMIT_TIMES, seconds=settings.RATE_LIMIT_SECONDS
            )
        )
    ]


def get_registry(request: Request) -> TenantRegistry:
    return request.app.state.registry


def get_tenant(
    registry: TenantRegistry = Depends(get_registry),
    tenant_id: str = Header(default=settings.DEFAULT_TENANT, alias=Headers.TENANT_ID),
) -> Tenant:
    return registry.require(tenant_id)


def get_relay_service(
    registry: TenantRegistry = Depends(get_registry),
) -> RelayService:
    return RelayService(registry)


def get_entry_service(tenant: Tenant = Depends(get_tenant)) -> EntryService:
    return EntryService(tenant.store)


def get_tenant_service(
    request: Request, registry: TenantRegistry = Depends(get_registry)
) -> TenantService:
    return TenantService(
        registry,
        request.app.state.redis,
        transport=getattr(request.app.state, "relay_transport", None),
    )


async def read_limited_body(request: Request) -> bytes:
    # Fast pre-check via Content-Length if present
    max_bytes = settings.MAX_PAYLOAD_KB * 1024
    cl = request.headers.get("content-length")
    if cl and cl.isdigit() and int(cl) > max_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"payload too large, max {settings.MAX_PAYLOAD_KB} KB",
        )

    # Hard cap while reading (works even without Content-Length)
    body = b""
    async for chunk in request.stream():
        body += chunk
        if len(body) > max_bytes:
            raise HTTPException(
                status_code=413,
                detail=f"payload too large, max {settings.MAX_PAYLOAD_KB} KB",
            )
    return body
