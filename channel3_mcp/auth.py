"""
API key gate for both MCP transports.

Every inbound HTTP request must carry a Channel3 API key:
  1. ``Authorization: Bearer <key>`` is checked first
  2. ``x-api-key: <key>`` is accepted when no bearer token is present
  3. A missing or empty key is answered with 401 before any MCP handling
  4. An accepted key is attached to the request scope as a SessionContext

The key itself is not validated here; the Channel3 API does that.
"""

from dataclasses import dataclass

from mcp.server.fastmcp import Context
from mcp.server.fastmcp.exceptions import ToolError
from starlette.datastructures import Headers
from starlette.responses import PlainTextResponse
from starlette.types import ASGIApp, Receive, Scope, Send

BEARER_PREFIX = "Bearer "
API_KEY_HEADER = "x-api-key"


@dataclass(frozen=True)
class SessionContext:
    """Credential bound to one inbound request."""

    api_key: str


class MissingCredential(Exception):
    """Raised when a request carries no usable API key."""


def extract_api_key(headers: Headers) -> str:
    """Return the caller's API key or raise MissingCredential."""
    authorization = headers.get("authorization", "")
    # HTTP stacks may strip the trailing space of "Bearer "
    if authorization.startswith(BEARER_PREFIX) or authorization == BEARER_PREFIX.strip():
        api_key = authorization[len(BEARER_PREFIX):]
    elif API_KEY_HEADER in headers:
        api_key = headers[API_KEY_HEADER]
    else:
        raise MissingCredential("Bearer token required")

    if not api_key:
        raise MissingCredential("API Key required")
    return api_key


class ApiKeyMiddleware:
    """Reject unauthenticated HTTP requests, tag the rest with a session."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        try:
            api_key = extract_api_key(Headers(scope=scope))
        except MissingCredential as exc:
            response = PlainTextResponse(str(exc), status_code=401)
            await response(scope, receive, send)
            return

        scope.setdefault("state", {})["session"] = SessionContext(api_key=api_key)
        await self.app(scope, receive, send)


def current_session(ctx: Context) -> SessionContext:
    """Look up the session attached to the HTTP request behind a tool call."""
    try:
        request = ctx.request_context.request
    except ValueError:
        request = None

    session = getattr(request.state, "session", None) if request is not None else None
    if session is None:
        raise ToolError("API Key required")
    return session
