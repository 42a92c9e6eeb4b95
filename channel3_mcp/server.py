"""
Channel3 MCP server: product search tools over Streamable HTTP and SSE
Protocol version: 2025-11-25

Exposes the Channel3 product catalog API to MCP clients:
  - Tools: search, get_product_detail, get_brands, get_brand_detail

Each tool forwards to a single Channel3 endpoint using the API key the
caller presented (``Authorization: Bearer <key>`` or ``x-api-key``).

Endpoints:
  /               Streamable HTTP
  /sse            SSE stream (messages are posted to /sse/message/)

Run with:  uv run channel3-mcp
"""

import json
import logging
from enum import Enum
from typing import Annotated

import uvicorn
from mcp.server.fastmcp import Context, FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from mcp.types import ToolAnnotations
from pydantic import Field
from starlette.applications import Starlette
from starlette.middleware import Middleware

from channel3_mcp.auth import ApiKeyMiddleware, SessionContext, current_session
from channel3_mcp.config import LOG_LEVEL, SERVER_HOST, SERVER_PORT
from channel3_mcp.schemas import SearchFilters, brand_params, search_body
from channel3_mcp.upstream import (
    Rejected,
    Success,
    TransportFailed,
    UpstreamClient,
    UpstreamResult,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Tool set
# ---------------------------------------------------------------------------
class ToolName(str, Enum):
    SEARCH = "search"
    GET_PRODUCT_DETAIL = "get_product_detail"
    GET_BRANDS = "get_brands"
    GET_BRAND_DETAIL = "get_brand_detail"

    @property
    def label(self) -> str:
        """Prefix used in error messages."""
        return _LABELS[self]


_LABELS = {
    ToolName.SEARCH: "Search",
    ToolName.GET_PRODUCT_DETAIL: "Get product",
    ToolName.GET_BRANDS: "Get brands",
    ToolName.GET_BRAND_DETAIL: "Get brand",
}


def render(tool: ToolName, result: UpstreamResult) -> str:
    """Turn an upstream outcome into tool output, raising ToolError on failure."""
    if isinstance(result, Success):
        return json.dumps(result.payload, separators=(",", ":"), ensure_ascii=False)
    if isinstance(result, Rejected):
        raise ToolError(f"{tool.label} failed ({result.status}): {result.reason}")
    if isinstance(result, TransportFailed):
        raise ToolError(f"{tool.label} error: {result.message}")
    raise TypeError(f"Unexpected upstream result: {result!r}")


def upstream_client(session: SessionContext) -> UpstreamClient:
    return UpstreamClient(session.api_key)


# ---------------------------------------------------------------------------
# Server instance
# ---------------------------------------------------------------------------
mcp = FastMCP(
    "Channel3",
    instructions=(
        "Search the Channel3 product catalog, fetch product and brand "
        "details, and list brands."
    ),
    host=SERVER_HOST,
    port=SERVER_PORT,
    streamable_http_path="/",
    sse_path="/sse",
    message_path="/sse/message/",
)


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------
@mcp.tool(
    name=ToolName.SEARCH.value,
    annotations=ToolAnnotations(title="Search products", readOnlyHint=True),
)
async def search(
    ctx: Context,
    query: Annotated[
        str | None,
        Field(
            description=(
                "Free-text search. You can include brand names, product types, "
                "attributes, colors, pricing, etc."
            )
        ),
    ] = None,
    image_url: Annotated[
        str | None,
        Field(description="Public URL of an image to find visually similar products"),
    ] = None,
    limit: Annotated[
        int | None,
        Field(gt=0, description="Maximum number of results to return. Defaults to 20."),
    ] = None,
    filters: Annotated[
        SearchFilters | None,
        Field(description="Optional structured filters"),
    ] = None,
    context: Annotated[
        str | None,
        Field(
            description=(
                "Optional end-user context (preferences, style, size, budget, "
                "purpose). Helps ranking and disambiguation."
            )
        ),
    ] = None,
) -> str:
    """Search products.

    Provide either 'query' or 'image_url' (or both), plus optional filters
    and user context.

    Args:
        query: Free-text search (e.g. "red running shoes under $100")
        image_url: Public image URL to find visually similar products
        limit: Maximum number of results, 20 when omitted
        filters: Brand IDs, gender, price range and availability filters
        context: End-user preferences that help ranking
    """
    session = current_session(ctx)
    body = search_body(
        query=query, image_url=image_url, limit=limit, filters=filters, context=context
    )
    result = await upstream_client(session).search(body)
    return render(ToolName.SEARCH, result)


@mcp.tool(
    name=ToolName.GET_PRODUCT_DETAIL.value,
    annotations=ToolAnnotations(title="Get product detail", readOnlyHint=True),
)
async def get_product_detail(
    ctx: Context,
    product_id: Annotated[str, Field(description="Channel3 product ID")],
) -> str:
    """Get product detail by ID.

    Args:
        product_id: The Channel3 product ID (e.g. from a search result)
    """
    session = current_session(ctx)
    result = await upstream_client(session).get_product(product_id)
    return render(ToolName.GET_PRODUCT_DETAIL, result)


@mcp.tool(
    name=ToolName.GET_BRANDS.value,
    annotations=ToolAnnotations(title="List brands", readOnlyHint=True),
)
async def get_brands(
    ctx: Context,
    query: Annotated[str | None, Field(description="Filter brands by name")] = None,
    page: Annotated[int | None, Field(description="Page number (1-based)")] = None,
    size: Annotated[
        int | None, Field(description="Page size (defaults upstream if omitted)")
    ] = None,
) -> str:
    """List brands with optional filtering and pagination.

    Args:
        query: Filter brands by name (e.g. "nike")
        page: Page number, starting at 1
        size: Page size, left to Channel3 when omitted
    """
    session = current_session(ctx)
    params = brand_params(query=query, page=page, size=size)
    result = await upstream_client(session).list_brands(params)
    return render(ToolName.GET_BRANDS, result)


@mcp.tool(
    name=ToolName.GET_BRAND_DETAIL.value,
    annotations=ToolAnnotations(title="Get brand detail", readOnlyHint=True),
)
async def get_brand_detail(
    ctx: Context,
    brand_id: Annotated[str, Field(description="Channel3 brand ID")],
) -> str:
    """Get brand detail by ID.

    Args:
        brand_id: The Channel3 brand ID (e.g. from get_brands)
    """
    session = current_session(ctx)
    result = await upstream_client(session).get_brand(brand_id)
    return render(ToolName.GET_BRAND_DETAIL, result)


# ---------------------------------------------------------------------------
# ASGI app: both transports behind the API key gate
# ---------------------------------------------------------------------------
def create_app() -> Starlette:
    sse = mcp.sse_app()
    streamable = mcp.streamable_http_app()
    return Starlette(
        routes=[*sse.routes, *streamable.routes],
        middleware=[Middleware(ApiKeyMiddleware)],
        lifespan=lambda app: mcp.session_manager.run(),
    )


app = create_app()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
def main():
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting Channel3 MCP server on %s:%s", SERVER_HOST, SERVER_PORT)
    uvicorn.run(app, host=SERVER_HOST, port=SERVER_PORT, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
