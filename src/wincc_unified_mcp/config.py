"""Configuration models for the WinCC Unified tool server."""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, Field

_FALSE_VALUES = ("0", "false", "no", "off")


class BackendConfig(BaseModel):
    """Configures the GraphQL endpoint and the service account session."""

    graphql_url: str = Field(default="http://localhost:4000/graphql", min_length=1)
    username: str = ""
    password: str = ""
    relaxed_tls: bool = True
    refresh_interval_seconds: float = Field(default=60.0, gt=0.0)

    @property
    def has_service_account(self) -> bool:
        return bool(self.username and self.password)

    @property
    def verify_tls(self) -> bool:
        """Certificate checks are skipped only for relaxed https endpoints."""
        is_https = self.graphql_url.lower().startswith("https:")
        return not (self.relaxed_tls and is_https)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "BackendConfig":
        env = os.environ if environ is None else environ
        return cls(
            graphql_url=env.get("GRAPHQL_URL", "http://localhost:4000/graphql"),
            username=env.get("GRAPHQL_USR", ""),
            password=env.get("GRAPHQL_PWD", ""),
            relaxed_tls=env.get("GRAPHQL_RELAXED_TLS", "true").strip().lower()
            not in _FALSE_VALUES,
        )


class ServerConfig(BaseModel):
    """Configures the HTTP host that exposes the tools."""

    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ServerConfig":
        env = os.environ if environ is None else environ
        return cls(
            host=env.get("MCP_HOST", "0.0.0.0"),
            port=int(env.get("MCP_PORT", "3000")),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )
