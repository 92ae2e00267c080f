import re
from dataclasses import dataclass

from .constants import (
    DEFAULT_ITEM_COUNT,
    DEFAULT_KEYSPACE,
    DEFAULT_RANDOM_STRING_LENGTH,
    DEFAULT_READ_THREADS,
    DEFAULT_REPLICATION_FACTOR,
    DEFAULT_TABLE,
    DEFAULT_WRITE_THREADS,
    HEX_COLUMN,
)
from .errors import InvalidArgument

# Keyspace and table names are interpolated into DDL
IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def validate_identifier(name: str) -> str:
    if not IDENTIFIER_RE.match(name):
        raise InvalidArgument(
            f"Invalid name '{name}'. Only letters, digits and underscores are allowed, "
            "and the name must not start with a digit."
        )
    return name


@dataclass(frozen=True)
class BenchmarkConfig:
    """Parameters of a benchmark run. Static for the process lifetime."""

    keyspace: str = DEFAULT_KEYSPACE
    table: str = DEFAULT_TABLE
    replication_factor: int = DEFAULT_REPLICATION_FACTOR
    item_count: int = DEFAULT_ITEM_COUNT
    write_thread_count: int = DEFAULT_WRITE_THREADS
    read_thread_count: int = DEFAULT_READ_THREADS
    random_string_length: int = DEFAULT_RANDOM_STRING_LENGTH
    index_column: str = HEX_COLUMN

    def __post_init__(self) -> None:
        validate_identifier(self.keyspace)
        validate_identifier(self.table)
        for name in ("replication_factor", "item_count", "write_thread_count", "read_thread_count"):
            if getattr(self, name) <= 0:
                raise InvalidArgument(f"`{name}` must be positive, got {getattr(self, name)}")
        if self.random_string_length < 0:
            raise InvalidArgument(f"`random_string_length` can't be negative, got {self.random_string_length}")
