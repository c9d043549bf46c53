"""Collect one completed hour of mailbox activity into the stats store."""

from __future__ import annotations

import logging
import time
from typing import Optional

from .aggregator import aggregate
from .classifier import DomainClassifier
from .errors import ValidationError
from .gmail_client import GmailClient
from .models import StatsRecord
from .models.stats_record import HOUR_SECONDS
from .record_store import StatsRecordStore, is_integer

logger = logging.getLogger(__name__)


def last_complete_hour(now: Optional[float] = None) -> int:
    """Start of the last full hour before ``now`` (Unix seconds).

    At 7:10 PM this is 6:00 PM, so the window scanned is 6:00 to 7:00 PM.
    """
    current = time.time() if now is None else now
    return int(current // HOUR_SECONDS) * HOUR_SECONDS - HOUR_SECONDS


def collect_hour(
    gmail_client: GmailClient,
    store: StatsRecordStore,
    classifier: DomainClassifier,
    hour: Optional[int] = None,
) -> StatsRecord:
    """Aggregate the messages of ``[hour, hour + 3600)`` and store the result.

    Re-running for the same hour overwrites the previous record.
    """
    window_start = last_complete_hour() if hour is None else hour
    if not is_integer(window_start) or window_start % HOUR_SECONDS:
        raise ValidationError(f"hour {window_start!r} is not an hour boundary", field="hour", value=window_start)

    account = gmail_client.get_email_address()
    messages = list(gmail_client.iter_window(window_start, window_start + HOUR_SECONDS))
    logger.info("Fetched %d messages for %s in hour %s", len(messages), account, window_start)

    counters = aggregate(account, messages, classifier)
    record = StatsRecord.from_counters(account, window_start, counters)
    store.write(record)
    return record


__all__ = ["collect_hour", "last_complete_hour"]
