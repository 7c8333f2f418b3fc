"""Station search service: merge suggest categories and cap output by tokens."""

import logging

from japan_transfer_mcp.data.config import get_jorudan_config
from japan_transfer_mcp.data.jorudan_client import JorudanClient
from japan_transfer_mcp.models.places import Place, PlaceCategory, SuggestResult
from japan_transfer_mcp.services.budget import allocate_fragments
from japan_transfer_mcp.services.tokenizer import Tokenizer

logger = logging.getLogger(__name__)

# Fixed interleave order for the round-robin merge
CATEGORY_ORDER = (PlaceCategory.RAILWAY, PlaceCategory.BUS, PlaceCategory.SPOT)

UNKNOWN_CITY_CODE = "unknown"
FRAGMENT_SEPARATOR = ","


def merge_places(result: SuggestResult) -> list[Place]:
    """Interleave the three ranked lists by rank.

    Takes rank 0 of railway, bus and spot (in that order), then rank 1 of
    each, and so on, skipping a category once its list runs out. Keeps a long
    category from pushing the other categories' best matches out of a
    token-limited head.
    """
    ranked = [result.by_category(category) for category in CATEGORY_ORDER]
    depth = max((len(places) for places in ranked), default=0)

    merged: list[Place] = []
    for rank in range(depth):
        for places in ranked:
            if rank < len(places):
                merged.append(places[rank])
    return merged


def describe_place(place: Place, name_only: bool = False) -> str:
    """Render a candidate as its bare name or a one-line descriptor.

    Example: "東京（東京都千代田区, citycode: 13101, lat: 35.681, lon: 139.767, reading: とうきょう）"
    """
    if name_only:
        return place.name

    area = f"{place.prefecture}{place.city or ''}"
    if place.address:
        area += f" {place.address}"
    city_code = place.city_code if place.city_code is not None else UNKNOWN_CITY_CODE

    return (
        f"{place.name}（{area}, citycode: {city_code}, "
        f"lat: {place.latitude}, lon: {place.longitude}, reading: {place.reading}）"
    )


def render_station_candidates(
    result: SuggestResult,
    tokenizer: Tokenizer,
    max_tokens: int | None = None,
    name_only: bool = False,
) -> str:
    """Merge, describe and token-cap a suggest result into one comma-joined string."""
    fragments = [describe_place(place, name_only) for place in merge_places(result)]
    text = allocate_fragments(fragments, FRAGMENT_SEPARATOR, tokenizer.count, max_tokens)
    logger.debug(
        f"Rendered {len(fragments)} station candidates (max_tokens={max_tokens}, "
        f"{len(text)} chars)"
    )
    return text


async def _fetch_suggest(query: str) -> SuggestResult:
    """Fetch the raw suggest payload for a query."""
    async with JorudanClient(get_jorudan_config()) as client:
        return await client.fetch_suggest(query, format="json")


async def search_station_by_name(
    query: str,
    tokenizer: Tokenizer,
    max_tokens: int | None = None,
    name_only: bool = False,
) -> str:
    """Look up places by name and return the token-bounded candidate list.

    Args:
        query: Place name in Japanese.
        tokenizer: Token counter used for the budget.
        max_tokens: Optional ceiling on the returned text.
        name_only: Return bare names instead of full descriptors.

    Raises:
        RemoteFetchError: If the suggest endpoint fails.
    """
    result = await _fetch_suggest(query)
    return render_station_candidates(result, tokenizer, max_tokens, name_only)
