# core/entities.py
from dataclasses import dataclass
from core.relay_client import RelayClient
from core.renderer import TemplateRenderer
from repository.store import HierarchicalStore


@dataclass(frozen=True)
class RelayContext:
    """
    Everything one relay needs, typed. Built per tenant, shared by its requests.
    """

    store: HierarchicalStore
    renderer: TemplateRenderer
    client: RelayClient


@dataclass(frozen=True)
class RelayRequest:
    key: str
    suffix: str = ""  # appended to every destination URL after "/"
    query: str = ""  # forwarded verbatim, without the leading "?"
    payload: bytes = b""  # YAML or JSON mapping of template values


@dataclass(frozen=True)
class Tenant:
    name: str
    context: RelayContext

    @property
    def store(self) -> HierarchicalStore:
        return self.context.store

    async def aclose(self) -> None:
        await self.context.client.aclose()
        await self.context.store.close()
