"""Exception hierarchy for fee quoting.

All errors are raised synchronously to the immediate caller and carry the
offending ``field`` and the ``bound`` it violated, so a presentation layer
can render a specific message. None of them are retryable.
"""

from __future__ import annotations


class FeeQuoteError(Exception):
    """Base exception for fee quote failures."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        bound: str | None = None,
    ) -> None:
        super().__init__(message)
        self.field = field
        self.bound = bound


class InvalidAmount(FeeQuoteError):
    """Payment amount outside the quotable range, or not a whole number of sats."""


class MissingSnapshot(FeeQuoteError):
    """No fee-rate snapshot and no congestion override to quote against."""


class InvalidCongestion(FeeQuoteError):
    """Congestion rate is zero, negative, or not finite."""
