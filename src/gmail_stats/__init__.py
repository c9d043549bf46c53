"""Core package exports for the gmail_stats application."""

from .aggregator import aggregate, categorize
from .classifier import DomainClassifier
from .config import Settings
from .errors import InvalidInputError, NotFoundError, StatsError, UpstreamError, ValidationError
from .models import CounterSet, Message, StatsRecord, TimeSeries
from .range_query import range_query
from .record_store import StatsRecordStore, WeaviateStatsTable

__all__ = [
    "Settings",
    "DomainClassifier",
    "aggregate",
    "categorize",
    "range_query",
    "StatsRecordStore",
    "WeaviateStatsTable",
    "Message",
    "CounterSet",
    "StatsRecord",
    "TimeSeries",
    "StatsError",
    "ValidationError",
    "InvalidInputError",
    "NotFoundError",
    "UpstreamError",
]
