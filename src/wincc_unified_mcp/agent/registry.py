"""Tool registry and dispatcher built on Pydantic v2 models."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from langchain_core.tools import StructuredTool
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

from wincc_unified_mcp.agent.mapping import ResultMapper
from wincc_unified_mcp.backend.client import BackendClient
from wincc_unified_mcp.errors import BackendError, ToolValidationError, UnknownToolError
from wincc_unified_mcp.obs.tracing import Timer
from wincc_unified_mcp.types import BackendRequest, ToolTrace

logger = logging.getLogger(__name__)

_REDACTED_KEYS = frozenset({"password"})


class ToolSpec(BaseModel):
    """Declarative tool specification for registration and validation.

    A spec either pairs a `build` with a `map` step, which the registry runs
    through the backend client, or supplies a `handler` coroutine that does
    the whole job itself.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    description: str
    args_schema: type[BaseModel]
    build: Callable[[Any], BackendRequest] | None = None
    map: ResultMapper | None = None
    handler: Callable[[Any], Awaitable[str]] | None = None
    tags: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_steps(self) -> "ToolSpec":
        if self.handler is None and (self.build is None or self.map is None):
            raise ValueError(f"Tool {self.name} needs a handler or a build/map pair")
        return self

    def validate_payload(self, payload: dict[str, Any]) -> BaseModel:
        try:
            return self.args_schema.model_validate(payload)
        except PydanticValidationError as exc:
            errors = exc.errors(include_url=False, include_context=False, include_input=False)
            raise ToolValidationError(self.name, errors) from exc

    def input_schema(self) -> dict[str, Any]:
        return self.args_schema.model_json_schema()


class ToolRegistry:
    """Stores tool specs and dispatches invocations to the backend."""

    def __init__(self, client: BackendClient) -> None:
        self.client = client
        self._tools: dict[str, ToolSpec] = {}
        self._observer: Callable[[ToolTrace], None] | None = None

    def register(self, spec: ToolSpec) -> None:
        if spec.name in self._tools:
            raise ValueError(f"Tool already registered: {spec.name}")
        self._tools[spec.name] = spec

    def set_observer(self, observer: Callable[[ToolTrace], None] | None) -> None:
        """Set an optional callback invoked after each tool execution."""
        self._observer = observer

    def get(self, name: str) -> ToolSpec:
        spec = self._tools.get(name)
        if spec is None:
            raise UnknownToolError(name)
        return spec

    def specs(self) -> list[ToolSpec]:
        return list(self._tools.values())

    async def invoke(self, name: str, payload: dict[str, Any] | None = None) -> str:
        spec = self.get(name)
        return await self._execute_spec(spec, payload or {})

    def as_langchain_tools(self) -> list[StructuredTool]:
        tools: list[StructuredTool] = []
        for spec in self._tools.values():
            tools.append(
                StructuredTool.from_function(
                    name=spec.name,
                    description=spec.description,
                    args_schema=spec.args_schema,
                    coroutine=self._build_coroutine(spec),
                )
            )
        return tools

    def _build_coroutine(self, spec: ToolSpec) -> Callable[..., Awaitable[str]]:
        async def _callable(**kwargs: Any) -> str:
            return await self._execute_spec(spec, kwargs)

        return _callable

    async def _execute_spec(self, spec: ToolSpec, payload: dict[str, Any]) -> str:
        logger.info("Tool '%s' called with: %s", spec.name, _redact(payload))
        timer = Timer()
        output = ""
        error: str | None = None
        try:
            with timer:
                output = await self._run(spec, payload)
            return output
        except Exception as exc:
            error = f"{type(exc).__name__}: {exc}"
            logger.error("Error in '%s' tool: %s", spec.name, exc)
            raise
        finally:
            if self._observer is not None:
                self._observer(
                    ToolTrace(
                        name=spec.name,
                        input_payload=_redact(payload),
                        output_preview=output[:320],
                        latency_ms=timer.elapsed_ms,
                        error=error,
                    )
                )

    async def _run(self, spec: ToolSpec, payload: dict[str, Any]) -> str:
        params = spec.validate_payload(payload)
        if spec.handler is not None:
            return await spec.handler(params)
        request = spec.build(params)
        result = await self.client.send(request)
        try:
            return spec.map(result)
        except BackendError:
            raise
        except Exception as exc:
            raise BackendError(f"Unexpected response structure: {exc}") from exc


def _redact(payload: dict[str, Any]) -> dict[str, Any]:
    return {
        key: "***" if key in _REDACTED_KEYS else value for key, value in payload.items()
    }
