"""Data models for hourly mailbox statistics."""

from .stats_record import Category, CounterSet, Message, StatsRecord, TimeSeries

__all__ = ["Category", "CounterSet", "Message", "StatsRecord", "TimeSeries"]
