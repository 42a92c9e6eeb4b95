"""Tool parameter models and the shaping of outbound request data."""

from typing import Any, Literal

from pydantic import BaseModel, Field

from channel3_mcp.config import DEFAULT_SEARCH_LIMIT

Gender = Literal["male", "female", "unisex"]

AvailabilityStatus = Literal[
    "InStock",
    "OutOfStock",
    "PreOrder",
    "LimitedAvailability",
    "BackOrder",
    "Discontinued",
    "SoldOut",
    "Unknown",
]


class PriceRange(BaseModel):
    """Price range filter."""

    min_price: float | None = Field(
        default=None,
        description="Minimum price to include in results (vendor currency units).",
    )
    max_price: float | None = Field(
        default=None,
        description="Maximum price to include in results (vendor currency units).",
    )


class SearchFilters(BaseModel):
    """Structured filters to refine search results."""

    brand_ids: list[str] | None = Field(
        default=None,
        description=(
            "Filter by brand IDs (not brand names). Brand names can also be "
            "included in 'query' and will be parsed automatically."
        ),
    )
    gender: Gender | None = Field(
        default=None, description="Filter by intended gender"
    )
    price: PriceRange | None = Field(
        default=None, description="Filter by price range"
    )
    availability: list[AvailabilityStatus] | None = Field(
        default=None, description="Filter by one or more availability statuses"
    )


def search_body(
    query: str | None = None,
    image_url: str | None = None,
    limit: int | None = None,
    filters: SearchFilters | None = None,
    context: str | None = None,
) -> dict[str, Any]:
    """Build the POST /search body.

    Absent optional fields are left out, except ``limit`` and ``filters``
    which always go out with their defaults.
    """
    body: dict[str, Any] = {}
    if query is not None:
        body["query"] = query
    if image_url is not None:
        body["image_url"] = image_url
    if context is not None:
        body["context"] = context

    body["limit"] = limit if limit is not None else DEFAULT_SEARCH_LIMIT
    body["filters"] = (
        filters.model_dump(exclude_none=True) if filters is not None else {}
    )
    return body


def brand_params(
    query: str | None = None,
    page: int | None = None,
    size: int | None = None,
) -> dict[str, str | int]:
    """Query-string parameters for GET /brands, present values only."""
    params = {"query": query, "page": page, "size": size}
    return {name: value for name, value in params.items() if value is not None}
