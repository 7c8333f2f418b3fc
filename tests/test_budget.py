"""Tests for the greedy token budget allocator."""

from japan_transfer_mcp.services.budget import allocate_fragments


def test_no_limit_includes_every_fragment():
    """Without max_tokens all fragments are joined."""
    assert allocate_fragments(["a", "b", "c"], ",", len) == "a,b,c"


def test_keeps_longest_prefix_within_limit():
    """Stops before the fragment that would exceed the limit."""
    # "aa,bb" = 5 chars, "aa,bb,c" = 7 chars
    assert allocate_fragments(["aa", "bb", "c"], ",", len, max_tokens=5) == "aa,bb"


def test_limit_counts_separators():
    """Separators are part of the counted string."""
    assert allocate_fragments(["aa", "bb"], ",", len, max_tokens=4) == "aa"


def test_first_fragment_over_limit_returns_empty():
    """If the first fragment alone is too large, nothing is returned."""
    assert allocate_fragments(["toolong", "a"], ",", len, max_tokens=3) == ""


def test_never_skips_ahead_to_shorter_fragments():
    """A later short fragment is not considered once one fragment failed."""
    assert allocate_fragments(["a", "bbbbbb", "c"], ",", len, max_tokens=3) == "a"


def test_zero_budget_returns_empty():
    assert allocate_fragments(["a"], ",", len, max_tokens=0) == ""


def test_empty_fragments():
    assert allocate_fragments([], ",", len, max_tokens=10) == ""
    assert allocate_fragments([], ",", len) == ""


def test_counts_whole_prefix_each_step():
    """Each tentative append re-counts the full joined prefix."""
    seen: list[str] = []

    def count(text: str) -> int:
        seen.append(text)
        return len(text)

    allocate_fragments(["ab", "cd", "efgh"], ",", count, max_tokens=6)

    assert seen == ["ab", "ab,cd", "ab,cd,efgh"]


def test_result_never_exceeds_limit():
    """Whatever the limit, the returned text fits in it."""
    fragments = ["東京", "新宿駅西口〔京王バス〕", "渋谷", "東京スカイツリー", "高尾山口"]
    for limit in range(0, 60):
        result = allocate_fragments(fragments, ",", len, max_tokens=limit)
        assert len(result) <= limit
