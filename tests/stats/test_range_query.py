from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional

import pytest

from gmail_stats.errors import NotFoundError, ValidationError
from gmail_stats.models import StatsRecord
from gmail_stats.range_query import range_query
from gmail_stats.record_store import StatsRecordStore


class _MemoryTable:
    """Dictionary-backed table that yields range rows in insertion order."""

    def __init__(self) -> None:
        self.rows: Dict[tuple, Dict[str, Any]] = {}
        self.range_calls: List[tuple] = []

    def get(self, account: str, hour: int) -> Optional[Dict[str, Any]]:
        row = self.rows.get((account, hour))
        return dict(row) if row is not None else None

    def put(self, properties: Dict[str, Any]) -> str:
        self.rows[(properties["account"], properties["hour"])] = dict(properties)
        return f"{properties['account']}:{properties['hour']}"

    def query_range(self, account: str, start_hour: int, end_hour: int) -> Iterator[Dict[str, Any]]:
        self.range_calls.append((account, start_hour, end_hour))
        for (row_account, hour), row in self.rows.items():
            if row_account == account and start_hour <= hour <= end_hour:
                yield dict(row)


def _record(hour: int, gmail_in: int, account: str = "a") -> StatsRecord:
    return StatsRecord(
        account=account,
        hour=hour,
        to_me_from_gmail=gmail_in,
        to_me_from_non_gmail=gmail_in + 1,
        from_me_to_gmail=gmail_in + 2,
        from_me_to_non_gmail=gmail_in + 3,
    )


def test_range_is_sorted_regardless_of_storage_order() -> None:
    table = _MemoryTable()
    store = StatsRecordStore(table)
    store.write(_record(7200, gmail_in=20))
    store.write(_record(3600, gmail_in=10))

    series = range_query(table, "a", 3600, 7200)

    assert series.hours == [3600, 7200]
    assert series.to_me_from_gmail == [10, 20]
    assert series.to_me_from_non_gmail == [11, 21]
    assert series.from_me_to_gmail == [12, 22]
    assert series.from_me_to_non_gmail == [13, 23]


def test_bounds_are_inclusive_and_scoped_to_account() -> None:
    table = _MemoryTable()
    store = StatsRecordStore(table)
    for hour in (0, 3600, 7200, 10800):
        store.write(_record(hour, gmail_in=hour // 3600))
    store.write(_record(3600, gmail_in=99, account="b"))

    series = range_query(table, "a", 3600, 7200)

    assert series.account == "a"
    assert series.hours == [3600, 7200]
    assert series.to_me_from_gmail == [1, 2]


def test_series_stay_aligned_with_hours() -> None:
    table = _MemoryTable()
    store = StatsRecordStore(table)
    for hour, gmail_in in ((18000, 5), (3600, 1), (10800, 3), (7200, 2)):
        store.write(_record(hour, gmail_in=gmail_in))

    series = range_query(table, "a", 0, 18000)

    for index, hour in enumerate(series.hours):
        assert series.to_me_from_gmail[index] == {3600: 1, 7200: 2, 10800: 3, 18000: 5}[hour]
    assert len(series) == 4


def test_to_dict_shape() -> None:
    table = _MemoryTable()
    StatsRecordStore(table).write(_record(3600, gmail_in=2))

    payload = range_query(table, "a", 3600, 3600).to_dict()

    assert payload == {
        "account": "a",
        "hours": [3600],
        "toMeFromGmail": [2],
        "toMeFromNonGmail": [3],
        "fromMeToGmail": [4],
        "fromMeToNonGmail": [5],
    }


def test_empty_range_raises_not_found() -> None:
    table = _MemoryTable()
    StatsRecordStore(table).write(_record(3600, gmail_in=1))

    with pytest.raises(NotFoundError) as excinfo:
        range_query(table, "a", 7200, 10800)

    assert excinfo.value.key == ("a", 7200, 10800)


def test_unknown_account_raises_not_found() -> None:
    table = _MemoryTable()
    StatsRecordStore(table).write(_record(3600, gmail_in=1))

    with pytest.raises(NotFoundError):
        range_query(table, "nobody", 0, 7200)


@pytest.mark.parametrize("bounds", [("0", 3600), (0, 3600.0), (True, 3600)])
def test_non_integer_bounds_rejected_before_io(bounds: tuple) -> None:
    table = _MemoryTable()

    with pytest.raises(ValidationError):
        range_query(table, "a", *bounds)

    assert table.range_calls == []


def test_inverted_bounds_rejected() -> None:
    table = _MemoryTable()

    with pytest.raises(ValidationError):
        range_query(table, "a", 7200, 3600)

    assert table.range_calls == []
