"""Route search service: build the site query, parse the page, render within budget."""

import logging
from datetime import datetime
from enum import Enum
from typing import Any
from zoneinfo import ZoneInfo

from japan_transfer_mcp.data.config import get_jorudan_config
from japan_transfer_mcp.data.jorudan_client import JorudanClient
from japan_transfer_mcp.errors import ValidationInputError
from japan_transfer_mcp.models.routes import RouteSearchPage
from japan_transfer_mcp.services.narrative import RenderContext
from japan_transfer_mcp.services.route_parser import parse_route_search_result
from japan_transfer_mcp.services.tokenizer import Tokenizer
from japan_transfer_mcp.services.truncation import render_within_budget

logger = logging.getLogger(__name__)

JST = ZoneInfo("Asia/Tokyo")

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

# Full-width brackets only appear in bus stop names, e.g. "新宿駅西口〔京王バス〕"
BUS_STOP_MARKERS = ("〔", "［")
BUS_STOP_KIND = "B-"
STATION_KIND = "R-"


class DatetimeType(str, Enum):
    """How the query datetime is interpreted by the site."""

    DEPARTURE = "departure"
    ARRIVAL = "arrival"
    FIRST = "first"
    LAST = "last"


# Cway codes expected by the route search page
WAY_CODES = {
    DatetimeType.DEPARTURE: 0,
    DatetimeType.ARRIVAL: 1,
    DatetimeType.FIRST: 2,
    DatetimeType.LAST: 3,
}

# Fixed search options sent with every query
FIXED_SEARCH_FLAGS: dict[str, Any] = {
    "via_on": -1,
    "Cfp": 1,
    "Czu": 2,
    "C7": 1,
    "C2": 0,
    "C3": 0,
    "C1": 0,
    "cartaxy": 1,
    "bikeshare": 1,
    "sort": "time",
    "C4": 5,
    "C5": 0,
    "C6": 2,
    "S": "検索",
    "Cmap1": "",
    "rf": "nr",
    "pg": 0,
    "Csg": 1,
}


def is_bus_stop(name: str) -> bool:
    """A name containing 〔 or ［ is a bus stop; anything else is a station."""
    return any(marker in name for marker in BUS_STOP_MARKERS)


def lookup_kind(name: str) -> str:
    return BUS_STOP_KIND if is_bus_stop(name) else STATION_KIND


def resolve_query_datetime(value: str | None, now: datetime | None = None) -> datetime:
    """Parse a 'YYYY-MM-DD HH:MM:SS' string, or fall back to now in Japan.

    None and the empty string both mean "now".

    Raises:
        ValidationInputError: If value is set but malformed.
    """
    if not value:
        return now if now is not None else datetime.now(JST)

    try:
        return datetime.strptime(value.strip(), DATETIME_FORMAT)
    except ValueError as e:
        raise ValidationInputError(
            f"Invalid datetime '{value}': expected format YYYY-MM-DD HH:MM:SS"
        ) from e


def build_route_search_params(
    origin: str,
    destination: str,
    datetime_type: DatetimeType,
    when: datetime,
) -> dict[str, Any]:
    """Build the route search page query for one request."""
    return {
        "eki1": origin,
        "eki2": destination,
        "Dyy": when.year,
        "Dmm": when.month,
        "Ddd": when.day,
        "Dhh": when.hour,
        "Dmn1": when.minute // 10,
        "Dmn2": when.minute % 10,
        "Cway": WAY_CODES[datetime_type],
        **FIXED_SEARCH_FLAGS,
        "eok1": lookup_kind(origin),
        "eok2": lookup_kind(destination),
    }


async def _fetch_route_search(params: dict[str, Any]) -> RouteSearchPage:
    """Fetch the raw route search page."""
    async with JorudanClient(get_jorudan_config()) as client:
        return await client.fetch_route_search(params)


async def search_route_by_station_name(
    origin: str,
    destination: str,
    datetime_type: DatetimeType,
    tokenizer: Tokenizer,
    query_datetime: str | None = None,
    max_tokens: int | None = None,
    now: datetime | None = None,
) -> str:
    """Search routes between two names and return the rendered report.

    Args:
        origin: Departure name as returned by the station search.
        destination: Arrival name as returned by the station search.
        datetime_type: departure, arrival, first or last train.
        tokenizer: Token counter used for the budget.
        query_datetime: 'YYYY-MM-DD HH:MM:SS'; defaults to now in Japan.
        max_tokens: Optional best-effort ceiling on the report size.
        now: Fixed clock for both the default query datetime and the capture
            time. Defaults to the real time in Japan, read after the fetch
            for the capture time.

    Raises:
        ValidationInputError: If query_datetime is malformed.
        RemoteFetchError: If the route search page cannot be fetched.
    """
    when = resolve_query_datetime(query_datetime, now)
    datetime_label = query_datetime or when.strftime(DATETIME_FORMAT)

    params = build_route_search_params(origin, destination, datetime_type, when)
    page = await _fetch_route_search(params)
    captured_at = now if now is not None else datetime.now(JST)

    result = parse_route_search_result(page.data, captured_at=captured_at)
    logger.debug(f"Route search {origin} -> {destination}: {len(result.routes)} routes")

    context = RenderContext(
        search_url=page.url,
        origin=origin,
        destination=destination,
        query_datetime=datetime_label,
    )
    return render_within_budget(result, context, tokenizer, max_tokens)
