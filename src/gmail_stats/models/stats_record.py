"""Data models for hourly Gmail statistics persistence."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

HOUR_SECONDS = 3600


class Category(str, Enum):
    """Provenance bucket of a single message, named after its stored counter."""

    TO_ME_FROM_GMAIL = "toMeFromGmail"
    TO_ME_FROM_NON_GMAIL = "toMeFromNonGmail"
    FROM_ME_TO_GMAIL = "fromMeToGmail"
    FROM_ME_TO_NON_GMAIL = "fromMeToNonGmail"


@dataclass(frozen=True)
class Message:
    """The two headers of a Gmail message that classification looks at."""

    sender: str = ""
    recipients: str = ""
    id: Optional[str] = None

    @classmethod
    def from_headers(cls, message: Dict[str, Any]) -> "Message":
        """Build a message from a simplified Gmail payload with ``from``/``to`` keys."""
        return cls(
            sender=message.get("from") or "",
            recipients=message.get("to") or "",
            id=message.get("id"),
        )


@dataclass(frozen=True)
class CounterSet:
    """The four mutually exclusive message counters of one hour."""

    to_me_from_gmail: int = 0
    to_me_from_non_gmail: int = 0
    from_me_to_gmail: int = 0
    from_me_to_non_gmail: int = 0

    @classmethod
    def from_categories(cls, categories: Iterable[Category]) -> "CounterSet":
        counts = {category: 0 for category in Category}
        for category in categories:
            counts[category] += 1
        return cls(
            to_me_from_gmail=counts[Category.TO_ME_FROM_GMAIL],
            to_me_from_non_gmail=counts[Category.TO_ME_FROM_NON_GMAIL],
            from_me_to_gmail=counts[Category.FROM_ME_TO_GMAIL],
            from_me_to_non_gmail=counts[Category.FROM_ME_TO_NON_GMAIL],
        )

    @property
    def total(self) -> int:
        return (
            self.to_me_from_gmail
            + self.to_me_from_non_gmail
            + self.from_me_to_gmail
            + self.from_me_to_non_gmail
        )


@dataclass(frozen=True)
class StatsRecord:
    """Aggregate counters of one account for the window ``[hour, hour + 3600)``."""

    account: str
    hour: int
    to_me_from_gmail: int = 0
    to_me_from_non_gmail: int = 0
    from_me_to_gmail: int = 0
    from_me_to_non_gmail: int = 0
    is_deleted: bool = False

    @classmethod
    def from_counters(cls, account: str, hour: int, counters: CounterSet) -> "StatsRecord":
        return cls(
            account=account,
            hour=hour,
            to_me_from_gmail=counters.to_me_from_gmail,
            to_me_from_non_gmail=counters.to_me_from_non_gmail,
            from_me_to_gmail=counters.from_me_to_gmail,
            from_me_to_non_gmail=counters.from_me_to_non_gmail,
        )

    @property
    def counters(self) -> CounterSet:
        return CounterSet(
            to_me_from_gmail=self.to_me_from_gmail,
            to_me_from_non_gmail=self.to_me_from_non_gmail,
            from_me_to_gmail=self.from_me_to_gmail,
            from_me_to_non_gmail=self.from_me_to_non_gmail,
        )

    def to_properties(self) -> dict:
        """Serialise record fields using the stored attribute names."""
        return {
            "account": self.account,
            "hour": self.hour,
            Category.TO_ME_FROM_GMAIL.value: self.to_me_from_gmail,
            Category.TO_ME_FROM_NON_GMAIL.value: self.to_me_from_non_gmail,
            Category.FROM_ME_TO_GMAIL.value: self.from_me_to_gmail,
            Category.FROM_ME_TO_NON_GMAIL.value: self.from_me_to_non_gmail,
            "isDeleted": self.is_deleted,
        }

    @classmethod
    def from_properties(cls, properties: dict) -> "StatsRecord":
        """Rehydrate a record from stored attributes."""
        return cls(
            account=properties["account"],
            hour=int(properties["hour"]),
            to_me_from_gmail=int(properties[Category.TO_ME_FROM_GMAIL.value]),
            to_me_from_non_gmail=int(properties[Category.TO_ME_FROM_NON_GMAIL.value]),
            from_me_to_gmail=int(properties[Category.FROM_ME_TO_GMAIL.value]),
            from_me_to_non_gmail=int(properties[Category.FROM_ME_TO_NON_GMAIL.value]),
            is_deleted=bool(properties.get("isDeleted", False)),
        )


@dataclass(frozen=True)
class TimeSeries:
    """Column-oriented view of a range of hourly records.

    Every counter list is aligned index for index with ``hours``.
    """

    account: str
    hours: List[int] = field(default_factory=list)
    to_me_from_gmail: List[int] = field(default_factory=list)
    to_me_from_non_gmail: List[int] = field(default_factory=list)
    from_me_to_gmail: List[int] = field(default_factory=list)
    from_me_to_non_gmail: List[int] = field(default_factory=list)

    @classmethod
    def from_records(cls, account: str, records: Iterable[StatsRecord]) -> "TimeSeries":
        ordered = sorted(records, key=lambda record: record.hour)
        return cls(
            account=account,
            hours=[record.hour for record in ordered],
            to_me_from_gmail=[record.to_me_from_gmail for record in ordered],
            to_me_from_non_gmail=[record.to_me_from_non_gmail for record in ordered],
            from_me_to_gmail=[record.from_me_to_gmail for record in ordered],
            from_me_to_non_gmail=[record.from_me_to_non_gmail for record in ordered],
        )

    def __len__(self) -> int:
        return len(self.hours)

    def to_dict(self) -> dict:
        return {
            "account": self.account,
            "hours": list(self.hours),
            Category.TO_ME_FROM_GMAIL.value: list(self.to_me_from_gmail),
            Category.TO_ME_FROM_NON_GMAIL.value: list(self.to_me_from_non_gmail),
            Category.FROM_ME_TO_GMAIL.value: list(self.from_me_to_gmail),
            Category.FROM_ME_TO_NON_GMAIL.value: list(self.from_me_to_non_gmail),
        }
