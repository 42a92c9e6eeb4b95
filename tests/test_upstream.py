import json

import httpx
import pytest

from channel3_mcp.upstream import Rejected, Success, TransportFailed

pytestmark = pytest.mark.anyio


async def test_search_posts_json_with_api_key(stub):
    stub.response = httpx.Response(200, json={"products": []})

    result = await stub.client("sk-123").search({"query": "boots", "limit": 20, "filters": {}})

    assert result == Success(payload={"products": []})
    [request] = stub.requests
    assert request.method == "POST"
    assert request.url.path == "/v0/search"
    assert request.headers["x-api-key"] == "sk-123"
    assert request.headers["content-type"] == "application/json"
    assert json.loads(request.content) == {"query": "boots", "limit": 20, "filters": {}}


async def test_get_requests_carry_headers(stub):
    await stub.client("sk-123").get_brand("b1")

    [request] = stub.requests
    assert request.method == "GET"
    assert request.url.path == "/v0/brands/b1"
    assert request.headers["x-api-key"] == "sk-123"
    assert request.headers["content-type"] == "application/json"


async def test_product_id_is_escaped_into_path(stub):
    await stub.client("sk-123").get_product("a/b c")

    [request] = stub.requests
    assert request.url.raw_path == b"/v0/products/a%2Fb%20c"


async def test_list_brands_without_params_has_no_query_string(stub):
    await stub.client("sk-123").list_brands({})

    [request] = stub.requests
    assert request.url.path == "/v0/brands"
    assert request.url.query == b""


async def test_list_brands_sends_present_params(stub):
    await stub.client("sk-123").list_brands({"query": "nike", "size": 10})

    [request] = stub.requests
    assert dict(request.url.params) == {"query": "nike", "size": "10"}


async def test_non_2xx_is_rejected_with_body(stub):
    stub.response = httpx.Response(404, text="Product not found")

    result = await stub.client("sk-123").get_product("missing")

    assert result == Rejected(status=404, reason="Product not found")


async def test_non_2xx_without_body_uses_reason_phrase(stub):
    stub.response = httpx.Response(503)

    result = await stub.client("sk-123").get_product("p1")

    assert result == Rejected(status=503, reason="Service Unavailable")


async def test_invalid_json_is_transport_failure(stub):
    stub.response = httpx.Response(200, text="<html>not json</html>")

    result = await stub.client("sk-123").get_product("p1")

    assert isinstance(result, TransportFailed)
    assert result.message


async def test_network_error_is_transport_failure(stub):
    stub.error = httpx.ConnectError("Connection refused")

    result = await stub.client("sk-123").search({"limit": 20, "filters": {}})

    assert result == TransportFailed(message="Connection refused")


async def test_dot_ids_stay_inside_the_path(stub):
    await stub.client("sk-123").get_product("..")
    await stub.client("sk-123").get_brand(".")

    assert [request.url.raw_path for request in stub.requests] == [
        b"/v0/products/%2E%2E",
        b"/v0/brands/%2E",
    ]
