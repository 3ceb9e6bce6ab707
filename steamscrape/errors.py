"""Error type shared by every steamscrape component."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """What went wrong, independent of the underlying exception."""

    CONFIGURATION = "configuration"
    LOOKUP = "lookup"
    LOCATOR = "locator"
    FETCH = "fetch"
    PERSIST = "persist"


class ScrapeError(Exception):
    """A failure tagged with its :class:`ErrorKind`.

    ``cause`` keeps the original exception (if any) so the CLI can show the
    full chain; callers should also ``raise ... from cause``.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        parts = [f"{self.kind.value} error: {self.message}"]
        cause = self.cause
        while cause is not None:
            if isinstance(cause, ScrapeError):
                parts.append(f"caused by: {cause.kind.value} error: {cause.message}")
                cause = cause.cause
            else:
                parts.append(f"caused by: {cause}")
                cause = cause.__cause__
        return "\n  ".join(parts)
