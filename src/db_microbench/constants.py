"""
Constants shared by the CLI, the backends and the workload engine.
"""

from enum import Enum

MILLISECONDS_PER_SECOND = 1000.0

# Values are int32 so they fit the `value` column on every backend
MIN_VALUE = -(2**31)
MAX_VALUE = 2**31 - 1

# Columns of the benchmark table
ID_COLUMN = "id"
VALUE_COLUMN = "value"
HEX_COLUMN = "hex"
RANDOM_COLUMN = "random"

DEFAULT_KEYSPACE = "foobar"
DEFAULT_TABLE = "lorem"
DEFAULT_REPLICATION_FACTOR = 3
DEFAULT_ITEM_COUNT = 1000
DEFAULT_WRITE_THREADS = 50
DEFAULT_READ_THREADS = 500
DEFAULT_RANDOM_STRING_LENGTH = 1024

DEFAULT_CASSANDRA_PORT = 9042
DEFAULT_DATACENTER = "datacenter1"


class Backend(str, Enum):
    YDB = "ydb"
    CASSANDRA = "cassandra"
