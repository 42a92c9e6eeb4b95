"""
HTTP client for the Channel3 API.

Every call ends in exactly one of three outcomes:
  - Success:          2xx with a JSON body
  - Rejected:         the API answered with a non-2xx status
  - TransportFailed:  the API could not be reached, or its body was not JSON

Nothing is retried and nothing raises out of ``UpstreamClient.request``.
"""

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx

from channel3_mcp.config import CHANNEL3_BASE_URL

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Success:
    payload: Any


@dataclass(frozen=True)
class Rejected:
    status: int
    reason: str


@dataclass(frozen=True)
class TransportFailed:
    message: str


UpstreamResult = Success | Rejected | TransportFailed


def path_segment(value: str) -> str:
    """Escape an opaque ID into a single URL path segment."""
    segment = quote(value, safe="")
    # "." and ".." would otherwise be collapsed as dot segments
    if segment in (".", ".."):
        segment = segment.replace(".", "%2E")
    return segment


class UpstreamClient:
    """Issue Channel3 API calls on behalf of one API key."""

    def __init__(
        self,
        api_key: str,
        base_url: str = CHANNEL3_BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-api-key": self.api_key,
        }

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> UpstreamResult:
        """Send one request and classify the outcome."""
        url = f"{self.base_url}{path}"
        logger.debug("Channel3 %s %s", method, path)
        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                response = await client.request(
                    method,
                    url,
                    headers=self._headers(),
                    params=params,
                    json=body,
                )
                if not response.is_success:
                    logger.warning(
                        "Channel3 %s %s returned %s", method, path, response.status_code
                    )
                    return Rejected(
                        status=response.status_code,
                        reason=response.text or response.reason_phrase,
                    )
                return Success(payload=response.json())
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Channel3 %s %s failed: %s", method, path, exc)
            return TransportFailed(message=str(exc) or type(exc).__name__)

    async def search(self, body: dict[str, Any]) -> UpstreamResult:
        return await self.request("POST", "/search", body=body)

    async def get_product(self, product_id: str) -> UpstreamResult:
        return await self.request("GET", f"/products/{path_segment(product_id)}")

    async def list_brands(self, params: dict[str, Any]) -> UpstreamResult:
        return await self.request("GET", "/brands", params=params or None)

    async def get_brand(self, brand_id: str) -> UpstreamResult:
        return await self.request("GET", f"/brands/{path_segment(brand_id)}")
