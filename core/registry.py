# core/registry.py
import logging
from typing import Dict, Iterator, List, Optional
import httpx
from redis.asyncio import Redis
from core.entities import RelayContext, Tenant
from core.relay_client import RelayClient
from core.renderer import TemplateRenderer
from repository.redis_store import RedisStore
from util.errors import TenantNotFoundError
from util.rwlock import ReadWriteLock

logger = logging.getLogger(__name__)


class TenantRegistry:
    """
    Tenant name -> Tenant, safe for many concurrent readers.

    Lookups happen on every request; registration and removal are rare and
    serialized behind the write side of the lock. Construct one at startup and
    pass it around (app.state.registry), there is no module-level instance.
    """

    def __init__(self) -> None:
        self._tenants: Dict[str, Tenant] = {}
        self._lock = ReadWriteLock()

    def get(self, name: str) -> Optional[Tenant]:
        with self._lock.read():
            return self._tenants.get(name)

    def require(self, name: str) -> Tenant:
        tenant = self.get(name)
        if tenant is None:
            logger.warning("registry.miss tenant=%s", name)
            raise TenantNotFoundError(name)
        return tenant

    def set(self, tenant: Tenant) -> Optional[Tenant]:
        """Register or replace; returns the replaced tenant so it can be closed."""
        with self._lock.write():
            previous = self._tenants.get(tenant.name)
            self._tenants[tenant.name] = tenant
        logger.info("registry.set tenant=%s replaced=%s", tenant.name, previous is not None)
        return previous

    def remove(self, name: str) -> Optional[Tenant]:
        with self._lock.write():
            previous = self._tenants.pop(name, None)
        if previous is not None:
            logger.info("registry.remove tenant=%s", name)
        return previous

    def names(self) -> List[str]:
        with self._lock.read():
            return sorted(self._tenants)

    def __iter__(self) -> Iterator[Tenant]:
        # Snapshot: callers may await per tenant without holding the lock.
        with self._lock.read():
            tenants = list(self._tenants.values())
        return iter(tenants)

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._tenants)

    def __contains__(self, name: object) -> bool:
        with self._lock.read():
            return name in self._tenants

    async def aclose(self) -> None:
        for tenant in self:
            await tenant.aclose()
        logger.info("registry.closed tenants=%d", len(self))


def new_tenant(
    name: str,
    redis: Redis,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Tenant:
    """A tenant backed by its own Redis namespace on the shared pool."""
    return Tenant(
        name=name,
        context=RelayContext(
            store=RedisStore(redis, name),
            renderer=TemplateRenderer(),
            client=RelayClient(transport=transport),
        ),
    )


def build_registry(
    names: List[str],
    redis: Redis,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> TenantRegistry:
    registry = TenantRegistry()
    for name in names:
        registry.set(new_tenant(name, redis, transport=transport))
    return registry
