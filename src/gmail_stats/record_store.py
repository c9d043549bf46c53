"""Persist hourly stats records in a Weaviate collection keyed by account and hour."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional, Protocol, TYPE_CHECKING

import weaviate
from weaviate.classes.config import Configure, DataType, Property, Tokenization
from weaviate.classes.query import Filter, Sort
from weaviate.exceptions import UnexpectedStatusCodeError, WeaviateBaseError
from weaviate.util import generate_uuid5

from .config import WeaviateSettings, load_weaviate_settings
from .errors import InvalidInputError, NotFoundError, UpstreamError, ValidationError
from .models import Category, StatsRecord
from .models.stats_record import HOUR_SECONDS

if TYPE_CHECKING:  # pragma: no cover - import only used for typing
    from weaviate.client import WeaviateClient
    from weaviate.collections.collection import Collection

logger = logging.getLogger(__name__)

COLLECTION_NAME = "GmailHourlyStats"
DEFAULT_PAGE_SIZE = 100
RETURN_PROPERTIES = [
    "account",
    "hour",
    Category.TO_ME_FROM_GMAIL.value,
    Category.TO_ME_FROM_NON_GMAIL.value,
    Category.FROM_ME_TO_GMAIL.value,
    Category.FROM_ME_TO_NON_GMAIL.value,
    "isDeleted",
]


def is_integer(value: Any) -> bool:
    """``True`` for real integers; bools and numeric strings do not count."""
    return isinstance(value, int) and not isinstance(value, bool)


class StatsTable(Protocol):
    """Key-value primitives the record store and range query are built on."""

    def get(self, account: str, hour: int) -> Optional[Dict[str, Any]]: ...

    def put(self, properties: Dict[str, Any]) -> str: ...

    def query_range(self, account: str, start_hour: int, end_hour: int) -> Iterator[Dict[str, Any]]: ...


class WeaviateStatsTable:
    """One Weaviate object per ``(account, hour)``, addressed by a deterministic UUID."""

    def __init__(
        self,
        client: "WeaviateClient",
        *,
        collection_name: str = COLLECTION_NAME,
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        if page_size < 1:
            raise ValueError("page_size must be positive")
        self._client = client
        self._collection_name = collection_name
        self._page_size = page_size
        self._collection = self._ensure_collection()

    @classmethod
    @contextmanager
    def connect(
        cls,
        settings: Optional[WeaviateSettings] = None,
        *,
        collection_name: str = COLLECTION_NAME,
    ) -> Iterator["WeaviateStatsTable"]:
        """Context-managed helper that yields a table with an active client."""
        resolved = settings or load_weaviate_settings()
        with weaviate.connect_to_local(
            host=resolved.host,
            port=resolved.port,
            grpc_port=resolved.grpc_port,
            headers=resolved.headers,
        ) as client:
            yield cls(client, collection_name=collection_name)

    def _ensure_collection(self) -> "Collection":
        try:
            if not self._client.collections.exists(self._collection_name):
                logger.info("Creating collection %s", self._collection_name)
                self._client.collections.create(
                    name=self._collection_name,
                    properties=[
                        Property(name="account", data_type=DataType.TEXT, tokenization=Tokenization.FIELD),
                        Property(name="hour", data_type=DataType.INT),
                        Property(name=Category.TO_ME_FROM_GMAIL.value, data_type=DataType.INT),
                        Property(name=Category.TO_ME_FROM_NON_GMAIL.value, data_type=DataType.INT),
                        Property(name=Category.FROM_ME_TO_GMAIL.value, data_type=DataType.INT),
                        Property(name=Category.FROM_ME_TO_NON_GMAIL.value, data_type=DataType.INT),
                        Property(name="isDeleted", data_type=DataType.BOOL),
                    ],
                    vectorizer_config=Configure.Vectorizer.none(),
                )
            return self._client.collections.get(self._collection_name)
        except WeaviateBaseError as exc:
            raise UpstreamError(f"Could not prepare collection {self._collection_name}: {exc}") from exc

    def _uuid_for(self, account: str, hour: int) -> str:
        return str(generate_uuid5(f"{account}:{hour}", self._collection_name))

    def get(self, account: str, hour: int) -> Optional[Dict[str, Any]]:
        try:
            obj = self._collection.query.fetch_object_by_id(
                self._uuid_for(account, hour),
                return_properties=RETURN_PROPERTIES,
            )
        except WeaviateBaseError as exc:
            raise UpstreamError(f"Reading {account}@{hour} failed: {exc}") from exc
        if obj is None:
            return None
        return dict(obj.properties)

    def put(self, properties: Dict[str, Any]) -> str:
        """Insert the object, or replace it wholesale when the key already exists."""
        uuid = self._uuid_for(properties["account"], properties["hour"])
        try:
            if self._collection.data.exists(uuid):
                self._collection.data.replace(uuid=uuid, properties=properties)
            else:
                self._insert_or_replace(uuid, properties)
        except WeaviateBaseError as exc:
            raise UpstreamError(
                f"Writing {properties['account']}@{properties['hour']} failed: {exc}"
            ) from exc
        return uuid

    def _insert_or_replace(self, uuid: str, properties: Dict[str, Any]) -> None:
        try:
            self._collection.data.insert(properties=properties, uuid=uuid)
        except UnexpectedStatusCodeError as exc:
            # 422: another writer created the object after the exists() check.
            if exc.status_code != 422:
                raise
            self._collection.data.replace(uuid=uuid, properties=properties)

    def query_range(self, account: str, start_hour: int, end_hour: int) -> Iterator[Dict[str, Any]]:
        """Yield every object of ``account`` with ``start_hour <= hour <= end_hour``.

        Pages are sorted by hour and each page starts just past the last hour
        seen, so neither a row limit nor the server's offset cap can truncate
        the result.
        """
        lower = start_hour
        while lower <= end_hour:
            filters = Filter.all_of(
                [
                    Filter.by_property("account").equal(account),
                    Filter.by_property("hour").greater_or_equal(lower),
                    Filter.by_property("hour").less_or_equal(end_hour),
                ]
            )
            try:
                response = self._collection.query.fetch_objects(
                    filters=filters,
                    sort=Sort.by_property("hour", ascending=True),
                    limit=self._page_size,
                    return_properties=RETURN_PROPERTIES,
                )
            except WeaviateBaseError as exc:
                raise UpstreamError(f"Range query for {account} failed: {exc}") from exc
            for obj in response.objects:
                yield dict(obj.properties)
            if len(response.objects) < self._page_size:
                return
            lower = int(response.objects[-1].properties["hour"]) + 1


class StatsRecordStore:
    """Validated single-record reads and writes on top of a :class:`StatsTable`.

    Writes are unconditional upserts: no version check and no merge with the
    previous value, so concurrent writers of one key resolve last-writer-wins.
    """

    def __init__(self, table: StatsTable) -> None:
        self._table = table

    @property
    def table(self) -> StatsTable:
        return self._table

    def write(self, record: StatsRecord) -> None:
        self.validate(record)
        self._table.put(record.to_properties())
        logger.info("Stored stats for %s at hour %s", record.account, record.hour)

    def read_one(self, account: str, hour: int) -> StatsRecord:
        if not is_integer(hour):
            raise InvalidInputError(
                f"hour must be an integer, got {type(hour).__name__}", field="hour", value=hour
            )
        properties = self._table.get(account, hour)
        if properties is None:
            raise NotFoundError(f"No stats stored for {account} at hour {hour}", key=(account, hour))
        return StatsRecord.from_properties(properties)

    @staticmethod
    def validate(record: StatsRecord) -> None:
        """Reject a record before any I/O is attempted."""
        hour = getattr(record, "hour", None)
        if hour is None:
            raise ValidationError("record has no hour", field="hour")
        if not is_integer(hour):
            raise ValidationError(
                f"hour must be an integer, got {type(hour).__name__}", field="hour", value=hour
            )
        if hour % HOUR_SECONDS:
            raise ValidationError(f"hour {hour} is not aligned to an hour boundary", field="hour", value=hour)
        if not isinstance(record.account, str) or not record.account:
            raise ValidationError("account must be a non-empty string", field="account", value=record.account)
        for name, value in record.to_properties().items():
            if name in ("account", "hour", "isDeleted"):
                continue
            if not is_integer(value) or value < 0:
                raise ValidationError(f"{name} must be a non-negative integer", field=name, value=value)
        if not isinstance(record.is_deleted, bool):
            raise ValidationError("isDeleted must be a boolean", field="isDeleted", value=record.is_deleted)


__all__ = [
    "COLLECTION_NAME",
    "StatsRecordStore",
    "StatsTable",
    "WeaviateStatsTable",
    "is_integer",
]
