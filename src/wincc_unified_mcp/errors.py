"""Error taxonomy shared by the session, client and dispatch layers."""

from __future__ import annotations

from typing import Any


class WinccToolError(Exception):
    """Base class for every failure reported to a tool caller."""


class UnknownToolError(WinccToolError, KeyError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name

    def __str__(self) -> str:
        return str(self.args[0])


class ToolValidationError(WinccToolError):
    """Parameters rejected before any backend call was made."""

    def __init__(self, tool_name: str, errors: list[dict[str, Any]]) -> None:
        self.tool_name = tool_name
        self.errors = errors
        details = "; ".join(_describe(error) for error in errors)
        super().__init__(f"Invalid parameters for '{tool_name}': {details}")


class AuthError(WinccToolError):
    """A logon exchange was rejected or could not be completed."""


class TransportError(WinccToolError):
    """The backend could not be reached or answered with a non-2xx status."""

    def __init__(
        self, message: str, *, status_code: int | None = None, body: str | None = None
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class BackendError(WinccToolError):
    """The backend answered, but with errors or an unexpected payload."""

    def __init__(self, message: str, *, messages: list[str] | None = None) -> None:
        super().__init__(message)
        self.messages = messages or []


def _describe(error: dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()))
    message = str(error.get("msg", "invalid value"))
    return f"{location}: {message}" if location else message
