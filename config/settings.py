# config/settings.py
import os
import sys
from typing import List
from dotenv import load_dotenv
from pydantic import ValidationError, Field
from pydantic_settings import BaseSettings
from util.enums import Environment


if os.getenv("APP_ENV", Environment.DEV) == Environment.DEV:
    load_dotenv()


class Settings(BaseSettings):
    # App
    APP_ENV: str = Field(default=Environment.DEV.value, validation_alias="APP_ENV")
    APP_NAME: str = "chore-relay"
    APP_VERSION: str = "0.1.0"
    HOST: str = Field(default="127.0.0.1", validation_alias="HOST")
    PORT: int = Field(default=8080, validation_alias="PORT")

    # Storage
    REDIS_URL: str = Field(
        default="redis://localhost:6379/0", validation_alias="REDIS_URL"
    )
    STORE_NAMESPACE: str = Field(default="chore", validation_alias="STORE_NAMESPACE")

    # Tenants registered at startup, comma separated.
    TENANTS: str = Field(default="default", validation_alias="TENANTS")
    DEFAULT_TENANT: str = Field(default="default", validation_alias="DEFAULT_TENANT")

    # CORS & Limits
    ALLOWED_ORIGIN: str = Field(default="*", validation_alias="ALLOWED_ORIGIN")
    TRUST_PROXY: bool = Field(default=False, validation_alias="TRUST_PROXY")
    RATE_LIMIT_ENABLED: bool = Field(default=False, validation_alias="RATE_LIMIT_ENABLED")
    RATE_LIMIT_TIMES: int = Field(default=60, validation_alias="RATE_LIMIT_TIMES")
    RATE_LIMIT_SECONDS: int = Field(default=60, validation_alias="RATE_LIMIT_SECONDS")
    MAX_PAYLOAD_KB: int = Field(default=1024, validation_alias="MAX_PAYLOAD_KB")

    # Outbound relay
    RELAY_TIMEOUT_SECONDS: float = Field(
        default=30.0, validation_alias="RELAY_TIMEOUT_SECONDS"
    )
    RELAY_CONNECT_TIMEOUT_SECONDS: float = Field(
        default=5.0, validation_alias="RELAY_CONNECT_TIMEOUT_SECONDS"
    )
    # Upper bound for one whole inbound send, across all fan-out calls.
    RELAY_DEADLINE_SECONDS: float = Field(
        default=120.0, validation_alias="RELAY_DEADLINE_SECONDS"
    )

    # Logging knobs
    LOGGER_NAME: str = "chore-relay"
    LOG_LEVEL: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    LOG_PRETTY: bool = Field(default=False, validation_alias="LOG_PRETTY")
    LOG_TO_FILE: bool = Field(default=False, validation_alias="LOG_TO_FILE")
    LOG_DIR: str = Field(default="logs", validation_alias="LOG_DIR")
    LOG_FILE_NAME: str = Field(default="app.log", validation_alias="LOG_FILE_NAME")
    LOG_MAX_BYTES: int = Field(
        default=50 * 1024 * 1024, validation_alias="LOG_MAX_BYTES"
    )
    LOG_BACKUP_COUNT: int = Field(default=5, validation_alias="LOG_BACKUP_COUNT")

    @property
    def tenant_names(self) -> List[str]:
        names = [n.strip() for n in self.TENANTS.split(",") if n.strip()]
        if self.DEFAULT_TENANT not in names:
            names.insert(0, self.DEFAULT_TENANT)
        return names


try:
    settings = Settings()
except ValidationError as e:
    print("❌ Missing/invalid environment variables:", file=sys.stderr)
    for err in e.errors():
        loc = ".".join(str(x) for x in err.get("loc", []))
        msg = err.get("msg", "")
        print(f" - {loc}: {msg}", file=sys.stderr)
    sys.exit(1)
except Exception as e:
    print(f"❌ Settings initialization failed: {e}", file=sys.stderr)
    sys.exit(1)
