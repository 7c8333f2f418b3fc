"""Token counting for output budgets.

The tokenizer is built once per process and handed to every component that
needs counts. Anything with a ``count(text) -> int`` method will do, which
lets tests substitute a deterministic fake.
"""

from functools import lru_cache
from typing import Protocol

import tiktoken

from japan_transfer_mcp.data.config import get_server_config
from japan_transfer_mcp.errors import TokenizationFailure


class Tokenizer(Protocol):
    def count(self, text: str) -> int:
        """Return the number of model tokens in text."""
        ...


class TiktokenTokenizer:
    """Tokenizer backed by a tiktoken encoding (cl100k_base by default).

    Encoding is read-only once loaded, so one instance can be shared across
    concurrent tool calls.
    """

    def __init__(self, encoding_name: str = "cl100k_base"):
        self.encoding_name = encoding_name
        self._encoding = tiktoken.get_encoding(encoding_name)

    def count(self, text: str) -> int:
        try:
            return len(self._encoding.encode(text, disallowed_special=()))
        except Exception as e:
            raise TokenizationFailure(f"Failed to tokenize text: {e}") from e


@lru_cache
def get_tokenizer() -> TiktokenTokenizer:
    """Get the process-wide tokenizer (cached singleton)."""
    return TiktokenTokenizer(get_server_config().token_encoding)
