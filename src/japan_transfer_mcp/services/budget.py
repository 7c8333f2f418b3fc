from collections.abc import Callable, Iterable


def allocate_fragments(
    fragments: Iterable[str],
    separator: str,
    count_tokens: Callable[[str], int],
    max_tokens: int | None = None,
) -> str:
    """Join the longest prefix of fragments that fits in max_tokens.

    Fragments are appended one at a time and the whole joined string is
    re-counted after each append. Selection stops for good at the first
    fragment that would push the count over the limit; later, shorter
    fragments are never tried.

    Args:
        fragments: Ordered text fragments, most important first.
        separator: String placed between fragments.
        count_tokens: Token counter, usually ``Tokenizer.count``.
        max_tokens: Token ceiling. None means no limit.

    Returns:
        The accepted fragments joined with separator. Empty if even the first
        fragment is over the limit.
    """
    if max_tokens is None:
        return separator.join(fragments)

    accepted: list[str] = []
    for fragment in fragments:
        candidate = separator.join([*accepted, fragment])
        if count_tokens(candidate) > max_tokens:
            break
        accepted.append(fragment)

    return separator.join(accepted)
