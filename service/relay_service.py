# service/relay_service.py
import asyncio
import logging
from typing import List
from config.settings import settings
from core.entities import RelayRequest
from core.registry import TenantRegistry
from core.relay_engine import iter_relay
from util.errors import UpstreamError

logger = logging.getLogger(__name__)


class RelayService:
    def __init__(
        self,
        registry: TenantRegistry,
        deadline_seconds: float = settings.RELAY_DEADLINE_SECONDS,
    ) -> None:
        self._registry = registry
        self._deadline = deadline_seconds

    async def send(self, tenant_name: str, request: RelayRequest) -> bytes:
        """
        Run one relay for `tenant_name` and return the destinations' bodies,
        concatenated in dispatch order.
        Any failure propagates as an AppError; nothing is returned partially.
        """
        tenant = self._registry.require(tenant_name)
        chunks: List[bytes] = []

        async def _collect() -> None:
            async for chunk in iter_relay(tenant.context, request):
                chunks.append(chunk)

        try:
            await asyncio.wait_for(_collect(), timeout=self._deadline)
        except asyncio.TimeoutError as e:
            logger.error(
                "relay.deadline tenant=%s key=%s sent=%d",
                tenant_name,
                request.key,
                len(chunks),
            )
            raise UpstreamError(
                f"relay exceeded deadline of {self._deadline:g}s"
            ) from e

        logger.info(
            "relay.ok tenant=%s key=%s calls=%d bytes=%d",
            tenant_name,
            request.key,
            len(chunks),
            sum(len(c) for c in chunks),
        )
        return b"".join(chunks)
