"""Tests for the adaptive truncation controller."""

from datetime import datetime

from japan_transfer_mcp.models.routes import Route, RouteSearchResult
from japan_transfer_mcp.services.narrative import RenderContext, render_route_report
from japan_transfer_mcp.services.truncation import render_within_budget, retained_route_count

CONTEXT = RenderContext(
    search_url="https://example.com/search",
    origin="東京",
    destination="高尾山口",
    query_datetime="2025-07-15 08:05:00",
)


def _result(route_numbers: list[int]) -> RouteSearchResult:
    routes = [
        Route(
            route_number=n,
            departure_time="09:00",
            arrival_time="10:35",
            total_minutes=95,
            transfer_count=1,
            total_fare=1340,
        )
        for n in route_numbers
    ]
    return RouteSearchResult(captured_at=datetime(2025, 7, 15, 8, 0), routes=routes)


def _route_headers(text: str) -> list[str]:
    return [line for line in text.split("\n") if line.startswith("## ")]


def test_no_budget_returns_full_render(word_tokenizer):
    result = _result([1, 2, 3])

    text = render_within_budget(result, CONTEXT, word_tokenizer)

    assert text == render_route_report(result, CONTEXT)
    assert word_tokenizer.calls == []


def test_within_budget_returns_full_render(word_tokenizer):
    result = _result([1, 2, 3])
    full = render_route_report(result, CONTEXT)

    text = render_within_budget(result, CONTEXT, word_tokenizer, max_tokens=10_000)

    assert text == full
    assert len(word_tokenizer.calls) == 1


def test_over_budget_keeps_proportional_prefix(word_tokenizer):
    result = _result(list(range(1, 11)))
    measured = len(render_route_report(result, CONTEXT).split())
    budget = measured // 2

    text = render_within_budget(result, CONTEXT, word_tokenizer, max_tokens=budget)

    expected = retained_route_count(10, budget, measured)
    assert 1 <= expected < 10
    assert len(_route_headers(text)) == expected


def test_truncation_counts_tokens_once(word_tokenizer):
    """Single-shot: one count of the full report, no refinement loop."""
    result = _result(list(range(1, 11)))

    render_within_budget(result, CONTEXT, word_tokenizer, max_tokens=20)

    assert len(word_tokenizer.calls) == 1


def test_tiny_budget_keeps_exactly_one_route(word_tokenizer):
    result = _result([4, 5, 6])

    text = render_within_budget(result, CONTEXT, word_tokenizer, max_tokens=1)

    assert _route_headers(text) == ["## 🛤️ Route 4: 09:00 → 10:35"]
    assert "📋 **1 route found**" in text


def test_truncation_keeps_original_route_numbers(word_tokenizer):
    result = _result([7, 3, 9, 1])
    measured = len(render_route_report(result, CONTEXT).split())

    text = render_within_budget(result, CONTEXT, word_tokenizer, max_tokens=measured - 1)

    headers = _route_headers(text)
    retained = retained_route_count(4, measured - 1, measured)
    assert [h.split(":")[0] for h in headers] == [
        f"## 🛤️ Route {n}" for n in [7, 3, 9, 1][:retained]
    ]


def test_retained_count_bounds():
    for routes in (1, 2, 5, 20):
        for budget in (0, 1, 10, 99):
            retained = retained_route_count(routes, budget, 100)
            assert 1 <= retained <= routes


def test_empty_result_over_budget(word_tokenizer):
    result = _result([])

    text = render_within_budget(result, CONTEXT, word_tokenizer, max_tokens=1)

    assert _route_headers(text) == []
