# service/entry_service.py
import json
import logging
from typing import List, Optional
from pydantic import ValidationError
import yaml
from model.api import EntryResponse, FolderListResponse, ItemName, Meta
from model.relay import AuthenticationDef, BindDef
from repository.store import HierarchicalStore
from util.enums import EntryType, ErrorMessage
from util.errors import AppError, BadRequestError, StoreNotFoundError
from util.functions import load_mapping, normalize_name

logger = logging.getLogger(__name__)

_SCHEMAS = {EntryType.AUTHS: AuthenticationDef, EntryType.BINDS: BindDef}


class EntryService:
    """
    Management operations over one tenant's store: templates are kept as raw
    text, auths and binds are validated and stored as JSON.
    """

    def __init__(self, store: HierarchicalStore) -> None:
        self._store = store

    @staticmethod
    def _name(name: Optional[str]) -> str:
        clean = normalize_name(name)
        if not clean:
            raise AppError(
                ErrorMessage.NAME_REQUIRED.value.message,
                ErrorMessage.NAME_REQUIRED.value.http_status,
            )
        return clean

    @staticmethod
    def _encode(entry_type: EntryType, body: bytes) -> bytes:
        schema = _SCHEMAS.get(entry_type)
        if schema is None:
            return body
        try:
            data = load_mapping(body)
        except (yaml.YAMLError, UnicodeDecodeError) as e:
            raise BadRequestError(f"{entry_type} body is not valid YAML/JSON: {e}") from e
        if data is None:
            raise BadRequestError(f"{entry_type} body must be a mapping")
        try:
            schema.model_validate(data)
        except ValidationError as e:
            raise BadRequestError(f"invalid {entry_type} entry: {e}") from e
        # Keep passthrough fields exactly as sent.
        return json.dumps(data, separators=(",", ":")).encode("utf-8")

    async def list_folder(self, entry_type: EntryType, meta: Meta) -> FolderListResponse:
        folder = meta.folder.lstrip("/")
        if folder and not folder.endswith("/"):
            folder += "/"
        children = await self._store.list(entry_type, folder)
        page = children[meta.offset : meta.offset + meta.limit]
        items: List[ItemName] = [ItemName(item=c, name=folder + c) for c in page]
        return FolderListResponse(data=items, meta=meta.model_copy(update={"folder": folder}))

    async def get(self, entry_type: EntryType, name: Optional[str]) -> EntryResponse:
        key = self._name(name)
        raw = await self._store.fetch(entry_type, key)
        if raw is None:
            raise StoreNotFoundError(f"{entry_type} {key!r} not found")
        return EntryResponse(name=key, content=raw.decode("utf-8", errors="replace"))

    async def create(self, entry_type: EntryType, name: Optional[str], body: bytes) -> str:
        key = self._name(name)
        await self._store.put(entry_type, key, self._encode(entry_type, body), overwrite=False)
        logger.info("entry.create type=%s name=%s bytes=%d", entry_type, key, len(body))
        return key

    async def replace(self, entry_type: EntryType, name: Optional[str], body: bytes) -> str:
        key = self._name(name)
        await self._store.put(entry_type, key, self._encode(entry_type, body))
        logger.info("entry.replace type=%s name=%s bytes=%d", entry_type, key, len(body))
        return key

    async def delete(self, entry_type: EntryType, name: Optional[str]) -> int:
        """A name ending in "/" removes the whole folder."""
        folder = (name or "").endswith("/")
        key = self._name(name)
        return await self._store.delete(entry_type, key + "/" if folder else key)
