"""Error kinds raised by the search pipeline.

Tool handlers catch all of these at their boundary and turn them into
error-flagged results, so none of them ever reaches the hosting process.
"""


class TransitError(Exception):
    """Base class for every domain-level failure."""


class ValidationInputError(TransitError):
    """Tool input could not be validated (e.g. a malformed datetime string)."""


class RemoteFetchError(TransitError):
    """The transit site could not be reached or answered with an HTTP error."""


class StructuralParseError(TransitError):
    """A route block is missing a mandatory field.

    Raised per block by the route parser and handled there: the block is
    dropped and the rest of the document is still parsed.
    """


class TokenizationFailure(TransitError):
    """The tokenizer failed to count tokens for a piece of text."""
