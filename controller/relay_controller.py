# controller/relay_controller.py
from fastapi import APIRouter, Depends, Header, Request, Response, status
from config.settings import settings
from core.entities import RelayRequest
from service.relay_service import RelayService
from util.constants import Headers, InternalURIs
from controller.controller_dependencies import (
    get_relay_service,
    rate_limits,
    read_limited_body,
)

relay_router = APIRouter(tags=["relay"], dependencies=rate_limits())


async def _relay(
    service: RelayService, tenant: str, request: Request, key: str, suffix: str, body: bytes
) -> Response:
    data = await service.send(
        tenant,
        RelayRequest(key=key, suffix=suffix, query=request.url.query, payload=body),
    )
    return Response(content=data, status_code=status.HTTP_200_OK)


@relay_router.post(InternalURIs.SEND)
async def send(
    request: Request,
    key: str,
    body: bytes = Depends(read_limited_body),
    tenant: str = Header(default=settings.DEFAULT_TENANT, alias=Headers.TENANT_ID),
    service: RelayService = Depends(get_relay_service),
) -> Response:
    """
    Relay `body` (YAML/JSON template values) to every destination bound to `key`.
    The query string is forwarded verbatim; the response is the destinations'
    bodies concatenated.
    """
    return await _relay(service, tenant, request, key, "", body)


@relay_router.post(InternalURIs.SEND_WITH_SUFFIX)
async def send_with_suffix(
    request: Request,
    key: str,
    suffix: str,
    body: bytes = Depends(read_limited_body),
    tenant: str = Header(default=settings.DEFAULT_TENANT, alias=Headers.TENANT_ID),
    service: RelayService = Depends(get_relay_service),
) -> Response:
    """Same as send; `suffix` is appended to each destination URL."""
    return await _relay(service, tenant, request, key, suffix, body)
