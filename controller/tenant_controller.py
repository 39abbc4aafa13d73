# controller/tenant_controller.py
from fastapi import APIRouter, Depends, Response, status
from model.api import NameResponse, TenantListResponse
from service.tenant_service import TenantService
from util.constants import InternalURIs
from controller.controller_dependencies import get_tenant_service, rate_limits

tenant_router = APIRouter(tags=["tenants"], dependencies=rate_limits())


@tenant_router.get(InternalURIs.TENANTS, response_model=TenantListResponse)
async def list_tenants(
    service: TenantService = Depends(get_tenant_service),
) -> TenantListResponse:
    return TenantListResponse(tenants=service.list())


@tenant_router.put(InternalURIs.TENANT, response_model=NameResponse)
async def register_tenant(
    name: str, service: TenantService = Depends(get_tenant_service)
) -> NameResponse:
    return NameResponse(name=await service.register(name))


@tenant_router.delete(InternalURIs.TENANT, status_code=status.HTTP_204_NO_CONTENT)
async def unregister_tenant(
    name: str, service: TenantService = Depends(get_tenant_service)
) -> Response:
    await service.unregister(name)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
