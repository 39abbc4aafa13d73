# service/tenant_service.py
import logging
import re
from typing import List, Optional
import httpx
from redis.asyncio import Redis
from core.registry import TenantRegistry, new_tenant
from util.errors import BadRequestError, TenantNotFoundError

logger = logging.getLogger(__name__)

# Tenant names become part of Redis keys; ":" would break the namespace.
_TENANT_NAME = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]{0,63}$")


class TenantService:
    def __init__(
        self,
        registry: TenantRegistry,
        redis: Redis,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._registry = registry
        self._redis = redis
        self._transport = transport

    def list(self) -> List[str]:
        return self._registry.names()

    async def register(self, name: str) -> str:
        if not _TENANT_NAME.match(name or ""):
            raise BadRequestError(f"invalid tenant name {name!r}")
        previous = self._registry.set(
            new_tenant(name, self._redis, transport=self._transport)
        )
        if previous is not None:
            await previous.aclose()
        return name

    async def unregister(self, name: str) -> None:
        previous = self._registry.remove(name)
        if previous is None:
            raise TenantNotFoundError(name)
        # Stored data stays in Redis; re-registering the name picks it up again.
        await previous.aclose()
