# helixcompare/core/sink/errors.py
"""
Typed errors for the record-store sink.

Exports
-------
- SinkError, SinkConfigError, SinkNetworkError, SinkBatchError
- SINK_ERRORS
- classify_sink_error(exc)
- sink_error_guard()

The extraction core never raises; the sink is the only component whose
failures reach the caller, and it reports them through these types.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import requests

# =========================
# Exception types
# =========================


class SinkError(RuntimeError):
    """Base class for record-store failures."""


class SinkConfigError(SinkError):
    """Missing token/base/table or an invalid batch size."""


class SinkNetworkError(SinkError):
    """Transport failure (timeout, connection reset, DNS) while calling the store."""


class SinkBatchError(SinkError):
    """The store rejected one batch; remaining batches were not sent."""

    def __init__(
        self,
        message: str,
        *,
        batch_index: int,
        status_code: int | None = None,
        body: str = "",
        remaining: int = 0,
    ) -> None:
        super().__init__(message)
        self.batch_index = batch_index
        self.status_code = status_code
        self.body = body
        self.remaining = remaining


# Selector tuple for grouped exception handling
SINK_ERRORS = (
    SinkConfigError,
    SinkNetworkError,
    SinkBatchError,
)

# =========================
# Classification helpers
# =========================


def classify_sink_error(exc: Exception) -> SinkError:
    """
    Map arbitrary exceptions raised while talking to the store to a SinkError subclass.

      - SinkError subclasses → passed through
      - requests.* errors    → SinkNetworkError
      - anything else        → SinkError
    """
    if isinstance(exc, SinkError):
        return exc
    if isinstance(exc, requests.RequestException):
        return SinkNetworkError(str(exc))
    return SinkError(f"{type(exc).__name__}: {exc}")


@contextmanager
def sink_error_guard() -> Iterator[None]:
    """Context manager to normalize unexpected exceptions from sink internals."""
    try:
        yield
    except SINK_ERRORS:
        raise
    except Exception as exc:  # noqa: BLE001
        raise classify_sink_error(exc) from exc


__all__ = [
    "SinkError",
    "SinkConfigError",
    "SinkNetworkError",
    "SinkBatchError",
    "SINK_ERRORS",
    "classify_sink_error",
    "sink_error_guard",
]
