"""
Record storage for DynamoDB and an in-memory test implementation.

Every entity kind lives in its own table keyed by a random identifier that is
generated at write time. Records are written once and never updated.
"""

from __future__ import annotations

import json
import logging
import threading
import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from qaboard.exceptions import StorageReadError, StorageWriteError

logger = logging.getLogger(__name__)


class EntityKind(Enum):
    """Record categories, each with a default table name and primary key."""

    QUESTION = ("Questions", "questionid")
    ANSWER = ("Answers", "answerid")
    QUERY = ("Queries", "queryid")
    EMAIL = ("Emails", "emailid")

    def __init__(self, table_name: str, primary_key: str):
        self.table_name = table_name
        self.primary_key = primary_key


def new_record_id() -> str:
    return str(uuid.uuid4())


def build_record(kind: EntityKind, fields: dict) -> dict:
    """Merge submitted fields with a freshly generated primary key."""
    record = dict(fields)
    record[kind.primary_key] = new_record_id()
    return record


class StorageClient(Protocol):
    """Defines the operations the routes need from the record store."""

    def insert(self, kind: EntityKind, fields: dict) -> dict:
        ...

    def scan_all(self, kind: EntityKind) -> list[dict]:
        ...


class InMemoryStorageClient:
    """Thread-safe dictionary-backed store for development and tests."""

    def __init__(self):
        self.tables: dict[EntityKind, dict[str, dict]] = {
            kind: {} for kind in EntityKind
        }
        self._lock = threading.Lock()

    def insert(self, kind: EntityKind, fields: dict) -> dict:
        record = build_record(kind, fields)
        with self._lock:
            self.tables[kind][record[kind.primary_key]] = record
        return dict(record)

    def scan_all(self, kind: EntityKind) -> list[dict]:
        with self._lock:
            return [dict(record) for record in self.tables[kind].values()]

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        with self._lock:
            for table in self.tables.values():
                table.clear()


@dataclass
class DynamoDbStorageClient:
    """
    DynamoDB-backed store using the boto3 resource (document) API.

    ``table_names`` overrides the default table of individual entity kinds.
    """

    region: Optional[str] = None
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    endpoint_url: Optional[str] = None
    table_names: dict = field(default_factory=dict)

    def __post_init__(self):
        self._resource = boto3.resource(
            "dynamodb",
            region_name=self.region or None,
            endpoint_url=self.endpoint_url or None,
            aws_access_key_id=self.access_key_id or None,
            aws_secret_access_key=self.secret_access_key or None,
        )
        self._tables = {}

    @property
    def client(self):
        """Low-level client shared by every table handle."""
        return self._resource.meta.client

    def table_name(self, kind: EntityKind) -> str:
        return self.table_names.get(kind, kind.table_name)

    def _table(self, kind: EntityKind):
        table = self._tables.get(kind)
        if table is None:
            table = self._resource.Table(self.table_name(kind))
            self._tables[kind] = table
        return table

    def insert(self, kind: EntityKind, fields: dict) -> dict:
        record = build_record(kind, fields)
        table_name = self.table_name(kind)
        try:
            # The DynamoDB serializer only accepts Decimal numbers.
            item = json.loads(json.dumps(record), parse_float=Decimal)
            self._table(kind).put_item(Item=item)
        except (TypeError, ValueError) as exc:
            raise StorageWriteError(
                f"Cannot store record in {table_name}: {exc}"
            ) from exc
        except (BotoCoreError, ClientError) as exc:
            raise StorageWriteError(
                f"Failed to insert into {table_name}: {exc}"
            ) from exc
        return item

    def scan_all(self, kind: EntityKind) -> list[dict]:
        table_name = self.table_name(kind)
        table = self._table(kind)
        items: list[dict] = []
        scan_kwargs: dict = {}
        try:
            while True:
                response = table.scan(**scan_kwargs)
                items.extend(response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                scan_kwargs["ExclusiveStartKey"] = last_key
        except (BotoCoreError, ClientError) as exc:
            raise StorageReadError(f"Failed to scan {table_name}: {exc}") from exc
        logger.debug("Scanned %d records from %s", len(items), table_name)
        return items
