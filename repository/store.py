# repository/store.py
from abc import ABC, abstractmethod
from typing import List, Optional
from util.enums import EntryType


class HierarchicalStore(ABC):
    """
    Prefix-addressable key/value storage partitioned by EntryType.

    Keys are slash-delimited paths. Every write also materializes the chain of
    parent-folder markers so folders can be listed without scanning keys.

    Prefix semantics: a lookup by `p` matches every key that starts with `p`,
    the exact key `p` included. A prefix ending in "/" matches descendants only.
    """

    @abstractmethod
    async def get(self, entry_type: EntryType, prefix: str) -> List[bytes]:
        """Return values of all keys matching `prefix`; empty list when none do."""
        ...

    @abstractmethod
    async def fetch(self, entry_type: EntryType, key: str) -> Optional[bytes]:
        """Return the value stored at exactly `key`, or None."""
        ...

    @abstractmethod
    async def keys(self, entry_type: EntryType, prefix: str) -> List[str]:
        """Return the full keys matching `prefix`, lexicographically ordered."""
        ...

    @abstractmethod
    async def list(self, entry_type: EntryType, folder: str) -> List[str]:
        """Return the immediate child segments of `folder` ("" for the root)."""
        ...

    @abstractmethod
    async def put(
        self, entry_type: EntryType, key: str, value: bytes, *, overwrite: bool = True
    ) -> None:
        """
        Upsert `value` at `key` together with its folder chain, atomically.
        With overwrite=False an existing key raises StoreConflictError.
        """
        ...

    @abstractmethod
    async def delete(self, entry_type: EntryType, name: str) -> int:
        """
        Delete `name` exactly, or every key under it when it ends with "/".
        Returns the count deleted; raises StoreNotFoundError when zero.
        """
        ...

    async def close(self) -> None:
        return None
