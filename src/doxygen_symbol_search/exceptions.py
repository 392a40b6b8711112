"""Exceptions raised by the symbol index."""


class MalformedIndex(ValueError):  # noqa: N818
    """Raised when index input violates a structural invariant."""


class IndexUnavailable(RuntimeError):  # noqa: N818
    """Raised when a query is issued with no index loaded."""
