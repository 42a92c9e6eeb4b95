import httpx
import pytest

from channel3_mcp import server
from channel3_mcp.auth import SessionContext
from channel3_mcp.upstream import UpstreamClient

BASE_URL = "https://api.trychannel3.com/v0"


class StubUpstream:
    """Stands in for the Channel3 API; records every request it receives."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.response = httpx.Response(200, json={})
        self.error: Exception | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.response

    def client(self, api_key: str) -> UpstreamClient:
        return UpstreamClient(
            api_key, base_url=BASE_URL, transport=httpx.MockTransport(self)
        )


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def stub():
    return StubUpstream()


@pytest.fixture
def tool_env(monkeypatch, stub):
    """Route tool calls to the stub with a fixed session."""
    monkeypatch.setattr(
        server, "current_session", lambda ctx: SessionContext(api_key="test-key")
    )
    monkeypatch.setattr(
        server, "upstream_client", lambda session: stub.client(session.api_key)
    )
    return stub
