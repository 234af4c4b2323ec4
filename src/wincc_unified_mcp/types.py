"""Shared domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(slots=True)
class Session:
    """Service account credentials and the token currently held."""

    username: str
    password: str
    token: str | None = None
    token_obtained_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class BackendRequest:
    """A GraphQL document with the variables sent alongside it."""

    document: str
    variables: dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        return {"query": self.document, "variables": self.variables}


@dataclass(slots=True)
class BackendResult:
    """Decoded GraphQL response body."""

    data: dict[str, Any] | None = None
    errors: list[dict[str, Any]] | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> "BackendResult":
        if not isinstance(payload, dict):
            return cls()
        return cls(data=payload.get("data"), errors=payload.get("errors"))

    def error_messages(self) -> list[str]:
        return [
            str(error.get("message", error) if isinstance(error, dict) else error)
            for error in self.errors or []
        ]


@dataclass(slots=True)
class LoggedOnUser:
    id: Any
    name: str
    full_name: str | None = None
    language: str | None = None


@dataclass(slots=True)
class LoginResult:
    """Token and user metadata returned by a successful logon."""

    token: str
    user: LoggedOnUser
    expires: str | None = None


@dataclass(slots=True)
class ToolTrace:
    """Trace record for an executed tool call."""

    name: str
    input_payload: dict[str, Any]
    output_preview: str
    latency_ms: float
    error: str | None = None
