# util/functions.py
from typing import Any, Dict, Optional
import yaml


def derive_folders(key: str) -> Dict[str, str]:
    """
    Map every parent folder of `key` to the child segment it must contain.

      "folder1/folder2/file" -> {"": "folder1/", "folder1/": "folder2/", "folder1/folder2/": "file"}
      "file"                 -> {"": "file"}
    """
    folders: Dict[str, str] = {}
    parent = ""
    parts = key.split("/")
    for part in parts[:-1]:
        folders[parent] = part + "/"
        parent += part + "/"
    folders[parent] = parts[-1]
    return folders


def normalize_name(name: Optional[str]) -> str:
    """Strip surrounding slashes; keeps inner structure as-is."""
    return (name or "").strip("/")


def compose_target(base_url: str, suffix: str, query: str) -> str:
    target = f"{base_url}/{suffix}"
    if query:
        target += "?" + query
    return target


def load_mapping(raw: Any) -> Optional[Dict[str, Any]]:
    """
    Parse YAML (and therefore JSON) into a mapping.
    - Empty input yields {}.
    - Returns None when the document is valid but not a mapping.
    - Raises yaml.YAMLError on malformed input.
    """
    if isinstance(raw, dict):
        return raw
    if isinstance(raw, (bytes, bytearray)):
        raw = bytes(raw).decode("utf-8")
    if raw is None or not str(raw).strip():
        return {}
    data = yaml.safe_load(raw)
    if data is None:
        return {}
    if not isinstance(data, dict):
        return None
    return data
