"""
Capability interfaces the workload engine calls through.

Backends implement SchemaAdmin for provisioning and hand out a
DataAccessFacade for the insert and select phases. A facade instance is
shared by every worker thread, so implementations must be thread-safe.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from .generator import random_string, to_hex


@dataclass(frozen=True)
class Record:
    """One row of the benchmark table."""

    id: str
    value: int
    hex: str
    random: str


def make_record(value: int, random_string_length: int) -> Record:
    """
    Derive the row written for value.

    Args:
        value: Work item
        random_string_length: Length of the generated filler string

    Returns:
        Record keyed by the decimal form of value
    """
    return Record(
        id=str(value),
        value=value,
        hex=to_hex(value),
        random=random_string(random_string_length),
    )


class DataAccessFacade(ABC):
    @abstractmethod
    def insert(self, value: int) -> None:
        """
        Write the record derived from value.

        Raises:
            DataUnavailable: If the database cannot be reached
            OperationFailed: If the statement fails
        """

    @abstractmethod
    def select_one(self, value: int) -> Optional[Record]:
        """Look up the record whose id is str(value). Returns None if absent."""


class SchemaAdmin(ABC):
    """Idempotent provisioning calls run once before any workload phase."""

    @abstractmethod
    def ensure_keyspace(self, name: str, replication_factor: int) -> None:
        pass

    @abstractmethod
    def ensure_table(self, keyspace: str, table: str) -> None:
        pass

    @abstractmethod
    def ensure_secondary_index(self, keyspace: str, table: str, column: str) -> None:
        pass


class BackendClient(SchemaAdmin):
    """A connection to a database, usable as a context manager."""

    def __enter__(self) -> "BackendClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        pass

    @abstractmethod
    def data_access(self, keyspace: str, table: str, random_string_length: int) -> DataAccessFacade:
        """Return a facade over keyspace.table. The table must already exist."""
