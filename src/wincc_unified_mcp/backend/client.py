"""Async GraphQL client for the WinCC Unified runtime."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable

import httpx

from wincc_unified_mcp.config import BackendConfig
from wincc_unified_mcp.errors import BackendError, TransportError
from wincc_unified_mcp.types import BackendRequest, BackendResult

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], str | None]


class BackendClient:
    """Posts GraphQL documents to the configured endpoint.

    The bearer token is read from the token provider at send time, so a
    refresh that lands between two calls is picked up by the second one
    without the client holding any session state itself.
    """

    def __init__(
        self,
        config: BackendConfig,
        *,
        token_provider: TokenProvider | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._token_provider = token_provider
        self._transport = transport
        if not config.verify_tls:
            logger.warning(
                "TLS certificate verification is disabled for %s", config.graphql_url
            )

    @property
    def url(self) -> str:
        return self.config.graphql_url

    def set_token_provider(self, token_provider: TokenProvider | None) -> None:
        self._token_provider = token_provider

    def build_headers(self, *, authenticate: bool = True) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self._token_provider() if authenticate and self._token_provider else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def send(
        self, request: BackendRequest, *, authenticate: bool = True
    ) -> BackendResult:
        headers = self.build_headers(authenticate=authenticate)
        try:
            async with httpx.AsyncClient(
                verify=self.config.verify_tls, transport=self._transport
            ) as http:
                response = await http.post(
                    self.url, headers=headers, json=request.to_payload()
                )
        except httpx.HTTPError as exc:
            logger.error("GraphQL request to %s failed: %s", self.url, exc)
            raise TransportError(f"Request to {self.url} failed: {exc}") from exc

        if not response.is_success:
            body = response.text
            logger.error(
                "GraphQL request failed with status %s: %s", response.status_code, body
            )
            raise TransportError(
                f"Request failed: {response.status_code} - {response.reason_phrase}: {body}",
                status_code=response.status_code,
                body=body,
            )

        try:
            payload = response.json()
        except json.JSONDecodeError as exc:
            raise TransportError(
                f"Backend returned a non-JSON body (status {response.status_code})",
                status_code=response.status_code,
                body=response.text,
            ) from exc

        result = BackendResult.from_payload(payload)
        if result.errors:
            messages = result.error_messages()
            logger.error("GraphQL errors: %s", json.dumps(result.errors, indent=2))
            raise BackendError(
                f"GraphQL errors: {', '.join(messages)}", messages=messages
            )
        return result
