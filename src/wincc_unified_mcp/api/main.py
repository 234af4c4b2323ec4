"""FastAPI entrypoint exposing the WinCC Unified tools over HTTP and MCP."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from typing import Any

import httpx
from fastapi import Body, FastAPI, HTTPException

from wincc_unified_mcp import __version__
from wincc_unified_mcp.agent.registry import ToolRegistry
from wincc_unified_mcp.agent.tools import register_builtin_tools
from wincc_unified_mcp.api.mcp_server import StreamableHTTPEndpoint
from wincc_unified_mcp.backend.client import BackendClient
from wincc_unified_mcp.backend.session import SessionManager
from wincc_unified_mcp.config import BackendConfig, ServerConfig
from wincc_unified_mcp.errors import (
    AuthError,
    BackendError,
    ToolValidationError,
    TransportError,
    UnknownToolError,
)
from wincc_unified_mcp.obs.tracing import TraceStore

logger = logging.getLogger(__name__)


def create_app(
    config: BackendConfig | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Wire client, session, registry and tracing into one application.

    `transport` replaces the network layer of the backend client, which lets
    tests run the whole stack against an in-process GraphQL stub.
    """
    config = config or BackendConfig.from_env()
    client = BackendClient(config, transport=transport)
    sessions = SessionManager.from_client(client)
    registry = ToolRegistry(client)
    register_builtin_tools(registry, sessions)
    trace_store = TraceStore()
    registry.set_observer(trace_store.record)
    mcp_endpoint = StreamableHTTPEndpoint(registry)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        logger.info("WinCC Unified GraphQL URL: %s", config.graphql_url)
        sessions.start_auto_refresh()
        async with mcp_endpoint.session_manager.run():
            try:
                yield
            finally:
                await sessions.stop_auto_refresh()

    app = FastAPI(title="WinCC Unified MCP", version=__version__, lifespan=lifespan)
    app.state.registry = registry
    app.state.sessions = sessions
    app.state.trace_store = trace_store
    app.add_route("/mcp", mcp_endpoint, methods=["POST"], include_in_schema=False)

    @app.get("/health")
    def health() -> dict[str, Any]:
        return {
            "status": "ok",
            "graphql_url": config.graphql_url,
            "authenticated": sessions.current_token() is not None,
            "auto_refresh": sessions.refresh_active,
            "tool_count": len(registry.specs()),
        }

    @app.get("/tools")
    def list_tools() -> dict[str, Any]:
        return {
            "items": [
                {
                    "name": spec.name,
                    "description": spec.description,
                    "tags": spec.tags,
                    "input_schema": spec.input_schema(),
                }
                for spec in registry.specs()
            ]
        }

    @app.post("/tools/{name}")
    async def invoke_tool(
        name: str, payload: dict[str, Any] | None = Body(default=None)
    ) -> dict[str, Any]:
        try:
            content = await registry.invoke(name, payload or {})
        except UnknownToolError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except ToolValidationError as exc:
            raise HTTPException(
                status_code=422, detail={"message": str(exc), "errors": exc.errors}
            ) from exc
        except AuthError as exc:
            raise HTTPException(status_code=401, detail=str(exc)) from exc
        except (TransportError, BackendError) as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        return {"content": content}

    @app.get("/traces")
    def traces(limit: int = 20) -> dict[str, Any]:
        records = [asdict(record) for record in trace_store.list_recent(limit=limit)]
        return {"items": records}

    @app.get("/traces/{trace_id}")
    def trace_detail(trace_id: str) -> dict[str, Any]:
        try:
            record = trace_store.get(trace_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return asdict(record)

    @app.get("/metrics")
    def metrics() -> dict[str, Any]:
        return trace_store.summary()

    return app


def run() -> None:
    import uvicorn

    server_config = ServerConfig.from_env()
    logging.basicConfig(
        level=server_config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    uvicorn.run(create_app(), host=server_config.host, port=server_config.port)


if __name__ == "__main__":
    run()
