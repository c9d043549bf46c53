"""Inclusive hour-range queries returned as aligned per-metric series."""

from __future__ import annotations

import logging

from .errors import NotFoundError, ValidationError
from .models import StatsRecord, TimeSeries
from .record_store import StatsTable, is_integer

logger = logging.getLogger(__name__)


def range_query(table: StatsTable, account: str, start_hour: int, end_hour: int) -> TimeSeries:
    """Return the stats of ``account`` for ``start_hour <= hour <= end_hour``.

    Records are sorted by hour whatever order the table yields them in.
    Raises :class:`NotFoundError` when nothing matches.
    """
    for name, value in (("start_hour", start_hour), ("end_hour", end_hour)):
        if not is_integer(value):
            raise ValidationError(
                f"{name} must be an integer, got {type(value).__name__}", field=name, value=value
            )
    if start_hour > end_hour:
        raise ValidationError(
            f"start_hour {start_hour} is after end_hour {end_hour}", field="start_hour", value=start_hour
        )

    records = [
        StatsRecord.from_properties(properties)
        for properties in table.query_range(account, start_hour, end_hour)
    ]
    if not records:
        raise NotFoundError(
            f"No stats stored for {account} between {start_hour} and {end_hour}",
            key=(account, start_hour, end_hour),
        )

    logger.debug("Range query for %s matched %d hours", account, len(records))
    return TimeSeries.from_records(account, records)


__all__ = ["range_query"]
