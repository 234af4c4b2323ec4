import pytest
from pydantic import BaseModel

from wincc_unified_mcp.agent.registry import ToolRegistry, ToolSpec
from wincc_unified_mcp.errors import ToolValidationError


class EchoInput(BaseModel):
    text: str
    password: str = ""


async def _handler(data: EchoInput) -> str:
    return data.text.upper()


def _registry(client) -> ToolRegistry:
    registry = ToolRegistry(client)
    registry.register(
        ToolSpec(
            name="echo",
            description="uppercase",
            args_schema=EchoInput,
            handler=_handler,
        )
    )
    return registry


@pytest.mark.asyncio
async def test_tool_observer_captures_latency_and_payload(client) -> None:
    registry = _registry(client)

    observed = []
    registry.set_observer(observed.append)
    result = await registry.invoke("echo", {"text": "hello"})
    registry.set_observer(None)

    assert result == "HELLO"
    assert len(observed) == 1
    assert observed[0].name == "echo"
    assert observed[0].input_payload == {"text": "hello"}
    assert observed[0].latency_ms >= 0.0
    assert observed[0].error is None


@pytest.mark.asyncio
async def test_tool_observer_records_failures_and_hides_passwords(client) -> None:
    registry = _registry(client)

    observed = []
    registry.set_observer(observed.append)
    with pytest.raises(ToolValidationError):
        await registry.invoke("echo", {"password": "secret"})

    assert len(observed) == 1
    assert observed[0].input_payload == {"password": "***"}
    assert observed[0].output_preview == ""
    assert observed[0].error.startswith("ToolValidationError")
