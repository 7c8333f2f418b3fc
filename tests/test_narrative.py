"""Tests for the route report renderer."""

from datetime import datetime

import pytest

from japan_transfer_mcp.models.routes import (
    Co2Emission,
    Notice,
    Route,
    RouteSearchResult,
    StationRole,
    StationSegment,
    Tag,
    TagKind,
    TransportSegment,
    Weather,
)
from japan_transfer_mcp.services.narrative import (
    NO_ROUTES_MESSAGE,
    RenderContext,
    format_duration,
    render_route_report,
)

CONTEXT = RenderContext(
    search_url="https://example.com/search?eki1=東京",
    origin="東京",
    destination="高尾山口",
    query_datetime="2025-07-15 08:05:00",
)


def _route(number: int = 1, **overrides) -> Route:
    """Create a route with only the mandatory fields unless overridden."""
    return Route(
        route_number=number,
        departure_time="09:00",
        arrival_time="10:35",
        **overrides,
    )


def _result(*routes: Route) -> RouteSearchResult:
    return RouteSearchResult(captured_at=datetime(2025, 7, 15, 8, 0, 30), routes=list(routes))


def _full_route() -> Route:
    return _route(
        total_minutes=95,
        transfer_count=1,
        total_fare=1340,
        total_distance_km=58.4,
        tags=[Tag(kind=TagKind.FAST, label="早"), Tag(kind=TagKind.OTHER, label="Foo")],
        co2=Co2Emission(amount="1.2kg", comparison="vs car ", reduction_rate="80%"),
        segments=[
            StationSegment(
                role=StationRole.START, name="東京", platform="1番線", weather=Weather(condition="sunny")
            ),
            TransportSegment(
                mode="train",
                line_name="JR中央線快速",
                departure_time="09:00",
                arrival_time="10:35",
                duration_minutes=95,
                fare=1340,
                distance="53.1km",
            ),
            StationSegment(role=StationRole.END, name="高尾山口"),
        ],
        notices=[
            Notice(title="遅延情報", description="遅延情報"),
            Notice(title="運休", description="一部列車が運休"),
        ],
    )


class TestFormatDuration:
    """Tests for duration formatting."""

    @pytest.mark.parametrize(
        ("minutes", "expected"),
        [
            (95, "1 hour 35 minutes"),
            (35, "35 minutes"),
            (1, "1 minute"),
            (120, "2 hours 0 minutes"),
            (61, "1 hour 1 minute"),
        ],
    )
    def test_format(self, minutes: int, expected: str) -> None:
        assert format_duration(minutes) == expected


def test_header():
    lines = render_route_report(_result(_route()), CONTEXT).split("\n")

    assert lines[0] == "🚃 Route search results from **東京** to **高尾山口**"
    assert lines[1] == "📅 Search datetime: 2025-07-15 08:05:00"
    assert lines[2] == "🔗 Search URL: https://example.com/search?eki1=東京"
    assert lines[3] == "⏰ Captured at: 2025-07-15 08:00:30"
    assert lines[5] == "📋 **1 route found**"


def test_no_routes_renders_only_fixed_sentence():
    text = render_route_report(_result(), CONTEXT)

    assert text.endswith(NO_ROUTES_MESSAGE)
    assert text.split("\n")[-1] == NO_ROUTES_MESSAGE
    assert "## " not in text
    assert "found**" not in text


def test_full_route_block():
    text = render_route_report(_result(_full_route()), CONTEXT)

    expected = "\n".join(
        [
            "## 🛤️ Route 1: 09:00 → 10:35",
            "⏱️ Duration: 1 hour 35 minutes | 🔄 Transfers: 1 | 💰 Fare: ¥1,340 | 📏 Distance: 58.4km",
            "🏷️ ⚡Fast Foo",
            "🌱 CO2 emissions: 1.2kg (vs car 80% reduction)",
            "",
            "### 📍 Itinerary",
            "🚩 **Depart**: 東京 (1番線) ☀️",
            "  🚃 JR中央線快速 (09:00-10:35, 95 min) 💰¥1,340 📏53.1km",
            "🏁 **Arrive**: 高尾山口",
            "",
            "### ⚠️ Notices",
            "- 遅延情報",
            "- 運休: 一部列車が運休",
            "",
            "---",
            "",
        ]
    )
    assert expected in text


def test_minimal_route_has_no_optional_lines():
    text = render_route_report(_result(_route()), CONTEXT)

    assert "Duration" not in text
    assert "🏷️" not in text
    assert "CO2" not in text
    assert "Itinerary" not in text
    assert "Notices" not in text


def test_zero_transfers_are_shown():
    text = render_route_report(_result(_route(transfer_count=0)), CONTEXT)

    assert "🔄 Transfers: 0" in text


def test_duration_under_an_hour():
    text = render_route_report(_result(_route(total_minutes=35)), CONTEXT)

    assert "⏱️ Duration: 35 minutes" in text


def test_other_tag_uses_label_verbatim():
    text = render_route_report(_result(_route(tags=[Tag(kind=TagKind.OTHER, label="Foo")])), CONTEXT)

    assert "🏷️ Foo" in text


def test_co2_without_reduction():
    text = render_route_report(_result(_route(co2=Co2Emission(amount="0.5kg"))), CONTEXT)

    assert "🌱 CO2 emissions: 0.5kg\n" in text


def test_station_markers():
    segments = [
        StationSegment(role=StationRole.TRANSFER, name="八王子", weather=Weather(condition="snowy")),
        StationSegment(role=StationRole.OTHER, name="高尾", weather=Weather(condition="foggy")),
    ]
    text = render_route_report(_result(_route(segments=segments)), CONTEXT)

    assert "🔄 **Transfer**: 八王子 ❄️" in text
    assert "📍 高尾 🌤️" in text


def test_transport_markers_and_default():
    segments = [
        TransportSegment(mode="walk", line_name="徒歩", duration_minutes=5),
        TransportSegment(mode="subway", line_name="東京メトロ丸ノ内線"),
        TransportSegment(mode="ferry", line_name="東京湾フェリー"),
    ]
    text = render_route_report(_result(_route(segments=segments)), CONTEXT)

    assert "  🚶 徒歩 (5 min)" in text
    assert "  🚇 東京メトロ丸ノ内線\n" in text
    assert "  🚃 東京湾フェリー" in text


def test_routes_rendered_in_order():
    text = render_route_report(_result(_route(3), _route(1), _route(2)), CONTEXT)

    positions = [text.index(f"Route {n}:") for n in (3, 1, 2)]
    assert positions == sorted(positions)
    assert "📋 **3 routes found**" in text


def test_rendering_is_deterministic():
    result = _result(_full_route(), _route(2, total_minutes=12))

    assert render_route_report(result, CONTEXT) == render_route_report(result, CONTEXT)
