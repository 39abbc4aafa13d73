# model/relay.py
from typing import Dict
from pydantic import BaseModel, ConfigDict, Field, field_validator


class BindDef(BaseModel):
    """
    Links a relay key to a template-name prefix and an authentication-name prefix.
    Unknown fields are kept as passthrough.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    template: str = Field(min_length=1)
    authentication: str = Field(min_length=1)


class AuthenticationDef(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    url: str = Field(alias="URL", min_length=1)
    method: str = Field(min_length=1)
    # Serialized YAML/JSON sub-document; a plain mapping is accepted too.
    headers: str | Dict[str, object] = ""

    @field_validator("method")
    @classmethod
    def _upper_method(cls, v: str) -> str:
        return v.strip().upper()
