import threading
import time
from typing import Dict, Iterable, List, Optional, Tuple

import pytest

from db_microbench.errors import DataUnavailable
from db_microbench.facade import BackendClient, DataAccessFacade, Record, make_record


class FakeFacade(DataAccessFacade):
    """In-memory table guarded by a lock."""

    def __init__(
        self,
        random_string_length: int = 8,
        latency: float = 0.0,
        failing_values: Iterable[int] = (),
        missing_values: Iterable[int] = (),
    ):
        self._random_string_length = random_string_length
        self._latency = latency
        self._failing_values = set(failing_values)
        self._missing_values = set(missing_values)
        self._lock = threading.Lock()
        self.rows: Dict[str, Record] = {}
        self.inserted: List[int] = []
        self.selected: List[int] = []

    def insert(self, value: int) -> None:
        if self._latency:
            time.sleep(self._latency)
        if value in self._failing_values:
            raise DataUnavailable(f"cannot write {value}")
        record = make_record(value, self._random_string_length)
        with self._lock:
            self.inserted.append(value)
            if value not in self._missing_values:
                self.rows[record.id] = record

    def select_one(self, value: int) -> Optional[Record]:
        if self._latency:
            time.sleep(self._latency)
        if value in self._failing_values:
            raise DataUnavailable(f"cannot read {value}")
        with self._lock:
            self.selected.append(value)
            return self.rows.get(str(value))


class FakeClient(BackendClient):
    def __init__(self, facade: Optional[FakeFacade] = None):
        self.facade = facade or FakeFacade()
        self.calls: List[Tuple] = []
        self.entered = False
        self.exited = False

    def __enter__(self) -> "FakeClient":
        self.entered = True
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.exited = True

    def ensure_keyspace(self, name: str, replication_factor: int) -> None:
        self.calls.append(("keyspace", name, replication_factor))

    def ensure_table(self, keyspace: str, table: str) -> None:
        self.calls.append(("table", keyspace, table))

    def ensure_secondary_index(self, keyspace: str, table: str, column: str) -> None:
        self.calls.append(("index", keyspace, table, column))

    def data_access(self, keyspace: str, table: str, random_string_length: int) -> FakeFacade:
        self.calls.append(("data_access", keyspace, table, random_string_length))
        return self.facade


@pytest.fixture
def facade() -> FakeFacade:
    return FakeFacade()


@pytest.fixture
def client(facade) -> FakeClient:
    return FakeClient(facade)
