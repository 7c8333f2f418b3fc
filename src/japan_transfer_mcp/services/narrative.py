"""Render parsed route search results as a Markdown-flavoured report.

Rendering is pure: the same result and context always give byte-identical
text. Nothing here reads the clock or the locale; the capture time and the
query datetime come in already resolved.
"""

from dataclasses import dataclass

from japan_transfer_mcp.models.routes import (
    Route,
    RouteSearchResult,
    StationRole,
    StationSegment,
    TagKind,
    TransportMode,
    TransportSegment,
)

NO_ROUTES_MESSAGE = "❌ No matching routes were found."

CAPTURED_AT_FORMAT = "%Y-%m-%d %H:%M:%S"

TAG_LABELS = {
    TagKind.FAST: "⚡Fast",
    TagKind.COMFORTABLE: "😌Comfortable",
    TagKind.CHEAP: "💰Cheap",
    TagKind.CAR: "🚗Car",
}

STATION_PREFIXES = {
    StationRole.START: "🚩 **Depart**: ",
    StationRole.END: "🏁 **Arrive**: ",
    StationRole.TRANSFER: "🔄 **Transfer**: ",
}
DEFAULT_STATION_PREFIX = "📍 "

WEATHER_ICONS = {
    "sunny": "☀️",
    "cloudy": "☁️",
    "rainy": "🌧️",
    "snowy": "❄️",
}
DEFAULT_WEATHER_ICON = "🌤️"

TRANSPORT_ICONS = {
    TransportMode.TRAIN.value: "🚃",
    TransportMode.SUBWAY.value: "🚇",
    TransportMode.BUS.value: "🚌",
    TransportMode.CAR.value: "🚗",
    TransportMode.TAXI.value: "🚕",
    TransportMode.WALK.value: "🚶",
}
DEFAULT_TRANSPORT_ICON = TRANSPORT_ICONS[TransportMode.TRAIN.value]


@dataclass(frozen=True)
class RenderContext:
    """Request details echoed in the report header."""

    search_url: str
    origin: str
    destination: str
    query_datetime: str


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def format_duration(total_minutes: int) -> str:
    """95 -> '1 hour 35 minutes', 35 -> '35 minutes'."""
    hours, minutes = divmod(total_minutes, 60)
    if hours > 0:
        return f"{_plural(hours, 'hour')} {_plural(minutes, 'minute')}"
    return _plural(minutes, "minute")


def format_yen(amount: int) -> str:
    return f"¥{amount:,}"


def format_km(distance: float) -> str:
    return f"{distance:g}km"


def _summary_line(route: Route) -> str | None:
    parts = []
    if route.total_minutes:
        parts.append(f"⏱️ Duration: {format_duration(route.total_minutes)}")
    if route.transfer_count is not None:
        parts.append(f"🔄 Transfers: {route.transfer_count}")
    if route.total_fare:
        parts.append(f"💰 Fare: {format_yen(route.total_fare)}")
    if route.total_distance_km:
        parts.append(f"📏 Distance: {format_km(route.total_distance_km)}")
    return " | ".join(parts) if parts else None


def _tag_line(route: Route) -> str | None:
    if not route.tags:
        return None
    labels = [TAG_LABELS.get(tag.kind, tag.label) for tag in route.tags]
    return f"🏷️ {' '.join(labels)}"


def _co2_line(route: Route) -> str | None:
    if route.co2 is None:
        return None
    line = f"🌱 CO2 emissions: {route.co2.amount}"
    if route.co2.reduction_rate:
        line += f" ({route.co2.comparison or ''}{route.co2.reduction_rate} reduction)"
    return line


def _station_line(segment: StationSegment) -> str:
    line = STATION_PREFIXES.get(segment.role, DEFAULT_STATION_PREFIX) + segment.name
    if segment.platform:
        line += f" ({segment.platform})"
    if segment.weather:
        line += f" {WEATHER_ICONS.get(segment.weather.condition, DEFAULT_WEATHER_ICON)}"
    return line


def _transport_line(segment: TransportSegment) -> str:
    icon = TRANSPORT_ICONS.get(segment.mode, DEFAULT_TRANSPORT_ICON)
    line = f"{icon} {segment.line_name}"

    timing = []
    if segment.departure_time and segment.arrival_time:
        timing.append(f"{segment.departure_time}-{segment.arrival_time}")
    if segment.duration_minutes:
        timing.append(f"{segment.duration_minutes} min")
    if timing:
        line += f" ({', '.join(timing)})"

    if segment.fare:
        line += f" 💰{format_yen(segment.fare)}"
    if segment.distance:
        line += f" 📏{segment.distance}"
    return f"  {line}"


def _render_route(route: Route) -> list[str]:
    lines = [f"## 🛤️ Route {route.route_number}: {route.departure_time} → {route.arrival_time}"]

    for optional in (_summary_line(route), _tag_line(route), _co2_line(route)):
        if optional is not None:
            lines.append(optional)
    lines.append("")

    if route.segments:
        lines.append("### 📍 Itinerary")
        for segment in route.segments:
            if isinstance(segment, StationSegment):
                lines.append(_station_line(segment))
            else:
                lines.append(_transport_line(segment))

    if route.notices:
        lines.append("")
        lines.append("### ⚠️ Notices")
        for notice in route.notices:
            line = f"- {notice.title}"
            if notice.description and notice.description != notice.title:
                line += f": {notice.description}"
            lines.append(line)

    lines.extend(["", "---", ""])
    return lines


def render_route_report(result: RouteSearchResult, context: RenderContext) -> str:
    """Render the full report for a route search.

    Args:
        result: Parsed routes, in the order they should be listed.
        context: Search URL, endpoint names and the query datetime.

    Returns:
        Report text. With no routes, the header is followed only by
        NO_ROUTES_MESSAGE.
    """
    lines = [
        f"🚃 Route search results from **{context.origin}** to **{context.destination}**",
        f"📅 Search datetime: {context.query_datetime}",
        f"🔗 Search URL: {context.search_url}",
        f"⏰ Captured at: {result.captured_at.strftime(CAPTURED_AT_FORMAT)}",
        "",
    ]

    if not result.routes:
        lines.append(NO_ROUTES_MESSAGE)
        return "\n".join(lines)

    count = len(result.routes)
    lines.append(f"📋 **{count} route{'s' if count != 1 else ''} found**")
    lines.append("")

    for route in result.routes:
        lines.extend(_render_route(route))

    return "\n".join(lines)
