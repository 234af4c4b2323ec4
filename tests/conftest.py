import json
import re
from dataclasses import dataclass
from typing import Any, Callable

import httpx
import pytest

from wincc_unified_mcp.backend.client import BackendClient
from wincc_unified_mcp.config import BackendConfig

_OPERATION = re.compile(r"(?:query|mutation)\s+(\w+)")

Reply = dict[str, Any] | httpx.Response | Callable[[httpx.Request], httpx.Response]


@dataclass(slots=True)
class RecordedRequest:
    operation: str
    variables: dict[str, Any]
    authorization: str | None


class GraphQLStub:
    """Answers GraphQL requests by operation name and records what was sent."""

    def __init__(self) -> None:
        self.requests: list[RecordedRequest] = []
        self._replies: dict[str, list[Reply]] = {}

    def reply(self, operation: str, *replies: Reply) -> None:
        """Queue replies; the last one keeps being served once the queue drains."""
        self._replies[operation] = list(replies)

    def operations(self) -> list[str]:
        return [request.operation for request in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        match = _OPERATION.search(body["query"])
        operation = match.group(1) if match else "anonymous"
        self.requests.append(
            RecordedRequest(
                operation=operation,
                variables=body["variables"],
                authorization=request.headers.get("authorization"),
            )
        )
        queue = self._replies.get(operation)
        if not queue:
            return httpx.Response(200, json={"errors": [{"message": f"no stub for {operation}"}]})
        reply = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(reply, httpx.Response):
            return reply
        if callable(reply):
            return reply(request)
        return httpx.Response(200, json=reply)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def _login_reply(token: str, name: str = "operator") -> dict[str, Any]:
    return {
        "data": {
            "login": {
                "token": token,
                "expires": "2026-10-18T12:00:00.000Z",
                "user": {"id": 7, "name": name, "fullName": "Plant Operator", "language": "en-US"},
                "error": None,
            }
        }
    }


@pytest.fixture
def login_reply() -> Callable[..., dict[str, Any]]:
    return _login_reply


@pytest.fixture
def stub() -> GraphQLStub:
    return GraphQLStub()


@pytest.fixture
def backend_config() -> BackendConfig:
    return BackendConfig(graphql_url="http://scada.test/graphql")


@pytest.fixture
def client(stub: GraphQLStub, backend_config: BackendConfig) -> BackendClient:
    return BackendClient(backend_config, transport=stub.transport())
