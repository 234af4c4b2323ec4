"""Service account session and the periodic logon cycle."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from wincc_unified_mcp.agent.builders import build_login
from wincc_unified_mcp.agent.schemas import LoginInput
from wincc_unified_mcp.backend.client import BackendClient
from wincc_unified_mcp.errors import AuthError, BackendError, TransportError
from wincc_unified_mcp.types import LoggedOnUser, LoginResult, Session

logger = logging.getLogger(__name__)


class SessionManager:
    """Owns the process-wide session and keeps its token fresh.

    Only a successful `logon` writes to the session; readers go through
    `current_token`, which the backend client calls for every request.
    """

    def __init__(
        self,
        client: BackendClient,
        *,
        username: str = "",
        password: str = "",
        refresh_interval_seconds: float = 60.0,
    ) -> None:
        self._client = client
        self._session = Session(username=username, password=password)
        self._refresh_interval = refresh_interval_seconds
        self._refresh_task: asyncio.Task[None] | None = None
        client.set_token_provider(self.current_token)

    @classmethod
    def from_client(cls, client: BackendClient) -> "SessionManager":
        config = client.config
        return cls(
            client,
            username=config.username,
            password=config.password,
            refresh_interval_seconds=config.refresh_interval_seconds,
        )

    @property
    def session(self) -> Session:
        return replace(self._session)

    @property
    def refresh_active(self) -> bool:
        return self._refresh_task is not None and not self._refresh_task.done()

    def current_token(self) -> str | None:
        return self._session.token

    async def logon(self, username: str, password: str) -> LoginResult:
        logger.info("Attempting logon via %s for user: %s", self._client.url, username)
        try:
            params = LoginInput(username=username, password=password)
        except PydanticValidationError as exc:
            raise AuthError("Login failed: username and password are required.") from exc
        request = build_login(params)
        try:
            result = await self._client.send(request, authenticate=False)
        except (TransportError, BackendError) as exc:
            raise AuthError(f"Login failed: {exc}") from exc

        login = _login_payload(result.data)
        token = login.get("token") if login else None
        if not token:
            error = (login or {}).get("error")
            if error:
                message = f"Login failed: {error.get('description')} (Code: {error.get('code')})"
            else:
                message = "Login failed: Token not received in response."
            logger.error(message)
            raise AuthError(message)

        user = login.get("user") or {}
        self._session = Session(
            username=username,
            password=password,
            token=token,
            token_obtained_at=datetime.now(timezone.utc),
        )
        return LoginResult(
            token=token,
            expires=login.get("expires"),
            user=LoggedOnUser(
                id=user.get("id"),
                name=user.get("name") or username,
                full_name=user.get("fullName"),
                language=user.get("language"),
            ),
        )

    def start_auto_refresh(
        self, interval_seconds: float | None = None
    ) -> asyncio.Task[None] | None:
        """Log on now and then every interval with the configured account."""
        if not (self._session.username and self._session.password):
            logger.info("No service account configured; automatic logon disabled")
            return None
        if self.refresh_active:
            return self._refresh_task
        interval = interval_seconds or self._refresh_interval
        self._refresh_task = asyncio.create_task(
            self._refresh_forever(interval), name="service-account-logon"
        )
        return self._refresh_task

    async def stop_auto_refresh(self) -> None:
        task, self._refresh_task = self._refresh_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def refresh_once(self) -> LoginResult | None:
        """Run one service account logon, keeping the old token on failure."""
        try:
            login = await self.logon(self._session.username, self._session.password)
        except AuthError as exc:
            logger.warning("Service account logon failed: %s", exc)
            return None
        logger.info("Periodic service account logon for '%s' completed.", login.user.name)
        return login

    async def _refresh_forever(self, interval: float) -> None:
        while True:
            try:
                await self.refresh_once()
            except Exception:
                logger.exception("Unexpected error during service account logon")
            await asyncio.sleep(interval)


def _login_payload(data: dict[str, Any] | None) -> dict[str, Any] | None:
    if not isinstance(data, dict):
        return None
    login = data.get("login")
    return login if isinstance(login, dict) else None
