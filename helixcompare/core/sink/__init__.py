# helixcompare/core/sink/__init__.py
from .airtable import AirtableSink, offer_to_store_fields
from .errors import (
    SINK_ERRORS,
    SinkBatchError,
    SinkConfigError,
    SinkError,
    SinkNetworkError,
    classify_sink_error,
    sink_error_guard,
)

__all__ = [
    "AirtableSink",
    "offer_to_store_fields",
    "SinkError",
    "SinkConfigError",
    "SinkNetworkError",
    "SinkBatchError",
    "SINK_ERRORS",
    "classify_sink_error",
    "sink_error_guard",
]
