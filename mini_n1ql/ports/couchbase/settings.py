"""Connection settings for the Couchbase adapters."""

from __future__ import annotations

from typing import Optional

from pydantic import Field, ValidationInfo, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CouchbaseSettings(BaseSettings):
    """Cluster address, credentials, and target keyspace.

    Values come from keyword arguments or `MINI_N1QL_*` environment variables
    (`MINI_N1QL_CONNECTION_STRING`, `MINI_N1QL_BUCKET`, ...). Credentials have
    no defaults. `scope` and `collection` are optional but must be set
    together; without them queries address the bucket's default collection.
    """

    connection_string: str = "couchbase://localhost"
    username: str
    password: str = Field(repr=False)
    bucket: str = "default"
    scope: Optional[str] = None
    collection: Optional[str] = None
    connect_timeout: float = Field(default=10.0, gt=0)

    model_config = SettingsConfigDict(env_prefix="MINI_N1QL_", frozen=True, extra="ignore")

    @field_validator("username", "password", "bucket")
    @classmethod
    def require_non_empty(cls, value: str, info: ValidationInfo) -> str:
        if not value:
            raise ValueError(f"{info.field_name} must be a non-empty string")
        return value

    @field_validator("scope", "collection", mode="before")
    @classmethod
    def blank_is_unset(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    @model_validator(mode="after")
    def scope_with_collection(self) -> CouchbaseSettings:
        if (self.scope is None) != (self.collection is None):
            raise ValueError("scope and collection must be given together")
        return self
