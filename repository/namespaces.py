# repository/namespaces.py
from typing import Final
from config.settings import settings
from util.enums import EntryType

ROOT: Final[str] = settings.STORE_NAMESPACE


def tenant_root(tenant: str, root: str = ROOT) -> str:
    return f"{root}:{tenant}"


def values_key(base: str, entry_type: EntryType) -> str:
    # hash: key -> value bytes
    return f"{base}:{entry_type}:values"


def index_key(base: str, entry_type: EntryType) -> str:
    # sorted set, all scores 0, so ZRANGEBYLEX walks keys by prefix
    return f"{base}:{entry_type}:index"


def folder_key(base: str, entry_type: EntryType, parent: str) -> str:
    # set of child segments directly under `parent` ("" is the root folder)
    return f"{base}:{entry_type}:folder:{parent}"
