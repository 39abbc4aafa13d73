# util/enums.py
from enum import Enum
from typing import NamedTuple
from fastapi import status


class Color(str, Enum):
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    BOLD = "\033[1m"

    def __str__(self):
        return self.value


class Environment(str, Enum):
    DEV = "dev"
    PROD = "prod"


class EntryType(str, Enum):
    """Partitions of the store keyspace."""

    TEMPLATES = "templates"
    AUTHS = "auths"
    BINDS = "binds"

    def __str__(self):
        return self.value


class ErrorInfo(NamedTuple):
    message: str
    http_status: int


class ErrorMessage(Enum):
    BIND_KEY_REQUIRED = ErrorInfo("bind key not found", status.HTTP_400_BAD_REQUEST)
    NAME_REQUIRED = ErrorInfo(
        "name is required and cannot be empty", status.HTTP_400_BAD_REQUEST
    )
