# model/api.py
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    error: str


class Meta(BaseModel):
    folder: str = ""
    limit: int = Field(default=20, ge=1, le=1000)
    offset: int = Field(default=0, ge=0)


class ItemName(BaseModel):
    item: str
    name: str


class FolderListResponse(BaseModel):
    data: list[ItemName]
    meta: Meta


class EntryResponse(BaseModel):
    name: str
    content: str


class NameResponse(BaseModel):
    name: str


class TenantListResponse(BaseModel):
    tenants: list[str]
