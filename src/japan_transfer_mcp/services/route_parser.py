"""Parse the route search result page into typed routes.

Each itinerary is a ``div.bk_result`` block:

    <div class="bk_result">
      <div class="header">
        <h3>ルート1</h3>
        <ul class="tags"><li class="fast">早</li><li>IC優先</li></ul>
      </div>
      <dl class="data">
        <dt>発着時間</dt><dd>09:00発 → 10:35着</dd>
        <dt>所要時間</dt><dd>1時間35分</dd>
        <dt>乗換回数</dt><dd>1回</dd>
        <dt>総額</dt><dd>1,340円</dd>
        <dt>距離</dt><dd>58.4km</dd>
        <dt>CO2排出量</dt><dd><span class="amount">1.2kg</span>
            <span class="comparison">自動車と比べて</span><span class="rate">80%</span></dd>
      </dl>
      <table class="route">
        <tr class="eki start"><td class="nm">東京</td><td class="platform">1番線</td>
            <td class="weather" data-condition="sunny"></td></tr>
        <tr class="rosen" data-mode="train"><td class="nm">JR中央線快速</td>
            <td class="time">09:00-10:35</td><td class="duration">95分</td>
            <td class="fare">1,340円</td><td class="distance">53.1km</td></tr>
        <tr class="eki end"><td class="nm">高尾</td></tr>
      </table>
      <ul class="notices"><li><span class="title">...</span>
          <span class="description">...</span></li></ul>
    </div>

Route number, departure time and arrival time are mandatory; a block missing
any of them is dropped and recorded in ``parse_errors``. Everything else is
optional and read field by field, so a malformed fare or tag never costs the
whole route.
"""

import logging
import re
from datetime import datetime
from zoneinfo import ZoneInfo

from bs4 import BeautifulSoup, Tag as HtmlTag

from japan_transfer_mcp.errors import StructuralParseError
from japan_transfer_mcp.models.routes import (
    Co2Emission,
    Notice,
    Route,
    RouteSearchResult,
    Segment,
    StationRole,
    StationSegment,
    Tag,
    TagKind,
    TransportMode,
    TransportSegment,
    Weather,
)

logger = logging.getLogger(__name__)

JST = ZoneInfo("Asia/Tokyo")

ROUTE_BLOCK_SELECTOR = "div.bk_result"

ROUTE_NUMBER_RX = re.compile(r"ルート\s*(\d+)")
DEPARTURE_RX = re.compile(r"(\d{1,2}:\d{2})\s*発")
ARRIVAL_RX = re.compile(r"(\d{1,2}:\d{2})\s*着")
TIME_RANGE_RX = re.compile(r"(\d{1,2}:\d{2})\s*[-~〜→]\s*(\d{1,2}:\d{2})")
HOURS_RX = re.compile(r"(\d+)\s*時間")
MINUTES_RX = re.compile(r"(\d+)\s*分")
COUNT_RX = re.compile(r"(\d+)\s*回")
YEN_RX = re.compile(r"([\d,]+)\s*円")
KM_RX = re.compile(r"(\d+(?:\.\d+)?)\s*km", re.IGNORECASE)

# dt label -> summary field
SUMMARY_LABELS = {
    "発着時間": "times",
    "所要時間": "duration",
    "乗換回数": "transfers",
    "総額": "fare",
    "距離": "distance",
    "CO2": "co2",
}

KNOWN_TAG_KINDS = {kind.value for kind in TagKind if kind is not TagKind.OTHER}
KNOWN_ROLES = {StationRole.START.value, StationRole.END.value, StationRole.TRANSFER.value}
KNOWN_MODES = {mode.value for mode in TransportMode}


def _text(element: HtmlTag | None) -> str | None:
    """Stripped text of an element, or None when missing or blank."""
    if element is None:
        return None
    text = element.get_text(" ", strip=True)
    return text or None


def _classes(element: HtmlTag) -> list[str]:
    return list(element.get("class") or [])


def parse_minutes(text: str | None) -> int | None:
    """Parse '1時間35分' / '35分' / '2時間' into minutes."""
    if not text:
        return None
    hours = HOURS_RX.search(text)
    minutes = MINUTES_RX.search(text)
    if hours is None and minutes is None:
        return None
    total = int(hours.group(1)) * 60 if hours else 0
    if minutes:
        total += int(minutes.group(1))
    return total


def parse_yen(text: str | None) -> int | None:
    """Parse '1,340円' into 1340."""
    if not text:
        return None
    match = YEN_RX.search(text)
    if not match:
        return None
    digits = match.group(1).replace(",", "")
    return int(digits) if digits else None


def parse_count(text: str | None) -> int | None:
    if not text:
        return None
    match = COUNT_RX.search(text)
    return int(match.group(1)) if match else None


def parse_km(text: str | None) -> float | None:
    if not text:
        return None
    match = KM_RX.search(text)
    return float(match.group(1)) if match else None


def _parse_route_number(block: HtmlTag) -> int:
    heading = block.select_one("div.header h3") or block.find(["h2", "h3"])
    match = ROUTE_NUMBER_RX.search(_text(heading) or "")
    if not match:
        raise StructuralParseError("missing route number")
    return int(match.group(1))


def _read_summary(block: HtmlTag) -> dict[str, HtmlTag]:
    """Map summary field name -> its dd element."""
    summary: dict[str, HtmlTag] = {}
    for dt in block.select("dl.data dt"):
        label = _text(dt) or ""
        dd = dt.find_next_sibling("dd")
        if dd is None:
            continue
        for prefix, field in SUMMARY_LABELS.items():
            if label.startswith(prefix):
                summary.setdefault(field, dd)
                break
    return summary


def _parse_times(summary: dict[str, HtmlTag]) -> tuple[str, str]:
    text = _text(summary.get("times")) or ""
    departure = DEPARTURE_RX.search(text)
    arrival = ARRIVAL_RX.search(text)
    if departure is None and arrival is None:
        raise StructuralParseError("missing departure and arrival times")
    if departure is None:
        raise StructuralParseError("missing departure time")
    if arrival is None:
        raise StructuralParseError("missing arrival time")
    return departure.group(1), arrival.group(1)


def _parse_co2(dd: HtmlTag | None) -> Co2Emission | None:
    if dd is None:
        return None
    amount = _text(dd.select_one(".amount")) or _text(dd)
    if not amount:
        return None
    return Co2Emission(
        amount=amount,
        comparison=_text(dd.select_one(".comparison")),
        reduction_rate=_text(dd.select_one(".rate")),
    )


def _parse_tags(block: HtmlTag) -> list[Tag]:
    tags: list[Tag] = []
    for item in block.select("ul.tags li"):
        label = _text(item)
        kind = next((c for c in _classes(item) if c in KNOWN_TAG_KINDS), None)
        if kind is None and not label:
            continue
        tags.append(Tag(kind=TagKind(kind) if kind else TagKind.OTHER, label=label or kind))
    return tags


def _parse_station_row(row: HtmlTag) -> StationSegment | None:
    name = _text(row.select_one(".nm"))
    if not name:
        return None

    role = next((c for c in _classes(row) if c in KNOWN_ROLES), StationRole.OTHER.value)

    weather = None
    weather_el = row.select_one(".weather")
    if weather_el is not None:
        condition = weather_el.get("data-condition") or _text(weather_el)
        if condition:
            weather = Weather(condition=condition)

    return StationSegment(
        role=StationRole(role),
        name=name,
        platform=_text(row.select_one(".platform")),
        weather=weather,
    )


def _parse_transport_row(row: HtmlTag) -> TransportSegment | None:
    line_name = _text(row.select_one(".nm"))
    if not line_name:
        return None

    mode = row.get("data-mode") or next(
        (c for c in _classes(row) if c in KNOWN_MODES), TransportMode.TRAIN.value
    )

    departure_time = arrival_time = None
    times = TIME_RANGE_RX.search(_text(row.select_one(".time")) or "")
    if times:
        departure_time, arrival_time = times.group(1), times.group(2)

    return TransportSegment(
        mode=mode,
        line_name=line_name,
        departure_time=departure_time,
        arrival_time=arrival_time,
        duration_minutes=parse_minutes(_text(row.select_one(".duration"))),
        fare=parse_yen(_text(row.select_one(".fare"))),
        distance=_text(row.select_one(".distance")),
    )


def _parse_segments(block: HtmlTag) -> list[Segment]:
    """Segments in row order; rows that are neither eki nor rosen are skipped."""
    segments: list[Segment] = []
    for row in block.select("table.route tr"):
        classes = _classes(row)
        segment: Segment | None = None
        if "eki" in classes:
            segment = _parse_station_row(row)
        elif "rosen" in classes:
            segment = _parse_transport_row(row)
        if segment is not None:
            segments.append(segment)
    return segments


def _parse_notices(block: HtmlTag) -> list[Notice]:
    notices: list[Notice] = []
    for item in block.select("ul.notices li"):
        title = _text(item.select_one(".title")) or _text(item)
        if not title:
            continue
        notices.append(Notice(title=title, description=_text(item.select_one(".description"))))
    return notices


def _parse_route_block(block: HtmlTag) -> Route:
    """Build a Route from one result block.

    Raises:
        StructuralParseError: If a mandatory field is missing.
    """
    route_number = _parse_route_number(block)
    summary = _read_summary(block)
    departure_time, arrival_time = _parse_times(summary)

    return Route(
        route_number=route_number,
        departure_time=departure_time,
        arrival_time=arrival_time,
        total_minutes=parse_minutes(_text(summary.get("duration"))),
        transfer_count=parse_count(_text(summary.get("transfers"))),
        total_fare=parse_yen(_text(summary.get("fare"))),
        total_distance_km=parse_km(_text(summary.get("distance"))),
        tags=_parse_tags(block),
        co2=_parse_co2(summary.get("co2")),
        segments=_parse_segments(block),
        notices=_parse_notices(block),
    )


def parse_route_search_result(
    html: str,
    captured_at: datetime | None = None,
) -> RouteSearchResult:
    """Parse a route search result page.

    Args:
        html: Raw HTML of the result page.
        captured_at: When the page was fetched. Defaults to now (Asia/Tokyo).

    Returns:
        RouteSearchResult with routes in document order. Blocks that are
        missing a mandatory field are left out and listed in parse_errors.
    """
    if captured_at is None:
        captured_at = datetime.now(JST)

    soup = BeautifulSoup(html, "html.parser")

    routes: list[Route] = []
    parse_errors: list[str] = []
    for index, block in enumerate(soup.select(ROUTE_BLOCK_SELECTOR), start=1):
        try:
            routes.append(_parse_route_block(block))
        except StructuralParseError as e:
            logger.warning(f"Dropping route block {index}: {e}")
            parse_errors.append(f"block {index}: {e}")

    logger.debug(f"Parsed {len(routes)} routes ({len(parse_errors)} blocks dropped)")
    return RouteSearchResult(captured_at=captured_at, routes=routes, parse_errors=parse_errors)
