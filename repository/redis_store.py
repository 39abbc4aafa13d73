# repository/redis_store.py
import logging
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Set, Tuple
from redis.asyncio import Redis
from redis.asyncio.client import Pipeline
from redis.exceptions import RedisError
from repository.namespaces import (
    ROOT,
    folder_key,
    index_key,
    tenant_root,
    values_key,
)
from repository.store import HierarchicalStore
from util.enums import EntryType, ErrorMessage
from util.errors import (
    AppError,
    StorageUnavailableError,
    StoreConflictError,
    StoreNotFoundError,
)
from util.functions import derive_folders

logger = logging.getLogger(__name__)


@contextmanager
def _storage_errors(op: str) -> Iterator[None]:
    try:
        yield
    except RedisError as e:
        logger.error("store.%s.error err=%s", op, type(e).__name__)
        raise StorageUnavailableError(f"storage unavailable: {e}") from e


def _split(key: str) -> Tuple[str, str]:
    # "a/b/c" -> ("a/b/", "c"); "c" -> ("", "c")
    head, sep, tail = key.rpartition("/")
    return head + sep, tail


def _lex_range(prefix: str) -> Tuple[bytes, bytes]:
    if not prefix:
        return b"-", b"+"
    raw = prefix.encode("utf-8")
    # 0xff never occurs in UTF-8, so it bounds every key sharing the prefix.
    return b"[" + raw, b"[" + raw + b"\xff"


class RedisStore(HierarchicalStore):
    """
    Redis-backed hierarchical store for one tenant.

    Layout under "<root>:<tenant>:<type>":
      :values          hash   key -> value bytes
      :index           zset   every key, score 0 (prefix range via ZRANGEBYLEX)
      :folder:<parent> set    child segments of <parent> ("x/" for sub-folders)

    Writes run in MULTI/EXEC so a key is never visible without its folder chain.
    Deletes prune folder markers that lose their last child, under WATCH.
    """

    def __init__(self, client: Redis, tenant: str, root: str = ROOT) -> None:
        self._r = client
        self.tenant = tenant
        self._base = tenant_root(tenant, root)

    # ---------------- Reads ----------------

    async def keys(self, entry_type: EntryType, prefix: str) -> List[str]:
        lo, hi = _lex_range(prefix)
        with _storage_errors("keys"):
            raw = await self._r.zrangebylex(index_key(self._base, entry_type), lo, hi)
        return [k.decode("utf-8") for k in raw]

    async def get(self, entry_type: EntryType, prefix: str) -> List[bytes]:
        names = await self.keys(entry_type, prefix)
        if not names:
            return []
        with _storage_errors("get"):
            values = await self._r.hmget(values_key(self._base, entry_type), names)
        # A concurrent delete may land between the index read and HMGET.
        return [v for v in values if v is not None]

    async def fetch(self, entry_type: EntryType, key: str) -> Optional[bytes]:
        with _storage_errors("fetch"):
            return await self._r.hget(values_key(self._base, entry_type), key)

    async def list(self, entry_type: EntryType, folder: str) -> List[str]:
        with _storage_errors("list"):
            raw = await self._r.smembers(folder_key(self._base, entry_type, folder))
        return sorted(m.decode("utf-8") for m in raw)

    # ---------------- Writes ----------------

    async def put(
        self, entry_type: EntryType, key: str, value: bytes, *, overwrite: bool = True
    ) -> None:
        if not key:
            raise AppError(
                ErrorMessage.NAME_REQUIRED.value.message,
                ErrorMessage.NAME_REQUIRED.value.http_status,
            )
        vkey = values_key(self._base, entry_type)
        folders = derive_folders(key)

        async def _apply(pipe: Pipeline) -> None:
            # Watching vkey puts the pipeline in immediate mode for the check.
            if not overwrite and await pipe.hexists(vkey, key):
                raise StoreConflictError(f"{entry_type} {key!r} already exists")
            pipe.multi()
            pipe.hset(vkey, key, value)
            pipe.zadd(index_key(self._base, entry_type), {key: 0})
            for parent, child in folders.items():
                pipe.sadd(folder_key(self._base, entry_type, parent), child)

        watches = () if overwrite else (vkey,)
        with _storage_errors("put"):
            await self._r.transaction(_apply, *watches)
        logger.debug("store.put tenant=%s type=%s key=%s", self.tenant, entry_type, key)

    async def delete(self, entry_type: EntryType, name: str) -> int:
        if not name:
            raise AppError(
                ErrorMessage.NAME_REQUIRED.value.message,
                ErrorMessage.NAME_REQUIRED.value.http_status,
            )
        vkey = values_key(self._base, entry_type)
        ikey = index_key(self._base, entry_type)
        deleted: List[str] = []

        async def _apply(pipe: Pipeline) -> None:
            deleted.clear()
            if name.endswith("/"):
                lo, hi = _lex_range(name)
                targets = [k.decode("utf-8") for k in await pipe.zrangebylex(ikey, lo, hi)]
            else:
                targets = [name] if await pipe.hexists(vkey, name) else []
            if not targets:
                raise StoreNotFoundError()

            parents: Set[str] = set()
            for t in targets:
                parents.update(derive_folders(t))
            fkeys = {p: folder_key(self._base, entry_type, p) for p in parents}
            await pipe.watch(*fkeys.values())

            members: Dict[str, Set[str]] = {}
            for p, fk in fkeys.items():
                members[p] = {m.decode("utf-8") for m in await pipe.smembers(fk)}
            remaining = {p: set(m) for p, m in members.items()}
            for t in targets:
                parent, child = _split(t)
                remaining[parent].discard(child)
            # Deepest folders first so emptiness propagates upwards.
            for p in sorted(parents, key=lambda x: x.count("/"), reverse=True):
                if p and not remaining[p]:
                    grand, seg = _split(p[:-1])
                    remaining[grand].discard(seg + "/")

            pipe.multi()
            pipe.hdel(vkey, *targets)
            pipe.zrem(ikey, *targets)
            for p in parents:
                gone = members[p] - remaining[p]
                if gone:
                    pipe.srem(fkeys[p], *gone)
            deleted.extend(targets)

        with _storage_errors("delete"):
            await self._r.transaction(_apply, vkey, ikey)
        logger.info(
            "store.delete tenant=%s type=%s name=%s count=%d",
            self.tenant,
            entry_type,
            name,
            len(deleted),
        )
        return len(deleted)
