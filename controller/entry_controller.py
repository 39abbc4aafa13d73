# controller/entry_controller.py
from typing import Optional
from fastapi import APIRouter, Depends, Query, Response, status
from model.api import EntryResponse, FolderListResponse, Meta, NameResponse
from service.entry_service import EntryService
from util.constants import LIST_LIMIT, InternalURIs
from util.enums import EntryType
from controller.controller_dependencies import (
    get_entry_service,
    rate_limits,
    read_limited_body,
)

entry_router = APIRouter(tags=["store"], dependencies=rate_limits())


@entry_router.get(InternalURIs.ENTRY_FOLDER, response_model=FolderListResponse)
async def list_entries(
    entry_type: EntryType,
    folder: str = Query(default=""),
    limit: int = Query(default=LIST_LIMIT, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    service: EntryService = Depends(get_entry_service),
) -> FolderListResponse:
    return await service.list_folder(
        entry_type, Meta(folder=folder, limit=limit, offset=offset)
    )


@entry_router.get(InternalURIs.ENTRY, response_model=EntryResponse)
async def get_entry(
    entry_type: EntryType,
    name: Optional[str] = Query(default=None),
    service: EntryService = Depends(get_entry_service),
) -> EntryResponse:
    return await service.get(entry_type, name)


@entry_router.post(
    InternalURIs.ENTRY,
    response_model=NameResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_entry(
    entry_type: EntryType,
    name: Optional[str] = Query(default=None),
    body: bytes = Depends(read_limited_body),
    service: EntryService = Depends(get_entry_service),
) -> NameResponse:
    return NameResponse(name=await service.create(entry_type, name, body))


@entry_router.put(InternalURIs.ENTRY, response_model=NameResponse)
async def replace_entry(
    entry_type: EntryType,
    name: Optional[str] = Query(default=None),
    body: bytes = Depends(read_limited_body),
    service: EntryService = Depends(get_entry_service),
) -> NameResponse:
    return NameResponse(name=await service.replace(entry_type, name, body))


@entry_router.delete(InternalURIs.ENTRY, status_code=status.HTTP_204_NO_CONTENT)
async def delete_entry(
    entry_type: EntryType,
    name: Optional[str] = Query(default=None),
    service: EntryService = Depends(get_entry_service),
) -> Response:
    await service.delete(entry_type, name)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
