"""Shared fixtures: deterministic tokenizers standing in for tiktoken."""

import pytest


class WordTokenizer:
    """Counts whitespace-separated words; records every call."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def count(self, text: str) -> int:
        self.calls.append(text)
        return len(text.split())


class CharTokenizer:
    """Counts characters, one token each."""

    def count(self, text: str) -> int:
        return len(text)


@pytest.fixture
def word_tokenizer() -> WordTokenizer:
    return WordTokenizer()


@pytest.fixture
def char_tokenizer() -> CharTokenizer:
    return CharTokenizer()
