from __future__ import annotations

import re
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_ENV_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


def _validate_env_var_name(value: str) -> str:
    name = (value or "").strip()
    if not _ENV_NAME_RE.fullmatch(name):
        raise ValueError("must be a valid environment variable name")
    return name


def _validate_http_url(value: str) -> str:
    url = (value or "").strip().rstrip("/")
    if not url.startswith(("https://", "http://")):
        raise ValueError("must be an http(s) URL")
    return url


PositiveInt = Annotated[int, Field(ge=1)]
NonNegativeFloat = Annotated[float, Field(ge=0.0)]


class ClientConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    bearer_token_env: str = "X_BEARER_TOKEN"
    guest_activate_url: str = "https://api.x.com/1.1/guest/activate.json"
    graphql_url: str = "https://api.x.com/graphql"
    post_query_id: str = "Vg2Akr5FzUmF0sTplA5k6g"
    user_agent: str = _DEFAULT_USER_AGENT
    timeout_seconds: float = Field(20.0, gt=0.0)

    @field_validator("bearer_token_env")
    @classmethod
    def _bearer_token_env_must_be_valid(cls, v: str) -> str:
        return _validate_env_var_name(v)

    @field_validator("guest_activate_url", "graphql_url")
    @classmethod
    def _urls_must_be_http(cls, v: str) -> str:
        return _validate_http_url(v)

    @field_validator("post_query_id")
    @classmethod
    def _query_id_must_be_set(cls, v: str) -> str:
        qid = (v or "").strip()
        if not qid or "/" in qid:
            raise ValueError("must be a non-empty query id without slashes")
        return qid


class RetrySettings(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    max_attempts: PositiveInt = 4
    base_delay_seconds: NonNegativeFloat = 0.5
    max_delay_seconds: NonNegativeFloat = 10.0

    @model_validator(mode="after")
    def _max_must_cover_base(self) -> "RetrySettings":
        if self.max_delay_seconds < self.base_delay_seconds:
            raise ValueError("max_delay_seconds must be >= base_delay_seconds")
        return self


class QuotesConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    max_depth: int = Field(5, ge=0)  # <= 1 disables refetching


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    client: ClientConfig = Field(default_factory=ClientConfig)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    quotes: QuotesConfig = Field(default_factory=QuotesConfig)
