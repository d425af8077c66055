"""Log source access — query windows, query construction, fetching, filtering."""

from src.logs.client import LogSourceClient
from src.logs.filters import partition_entries, should_alert
from src.logs.query import build_log_query, build_query_params, quote_literal
from src.logs.window import QueryWindow

__all__ = [
    "LogSourceClient",
    "QueryWindow",
    "build_log_query",
    "build_query_params",
    "partition_entries",
    "quote_literal",
    "should_alert",
]
