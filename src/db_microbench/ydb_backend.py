import logging
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Dict, List, Optional

import ydb

from .errors import DataUnavailable, OperationFailed
from .facade import BackendClient, DataAccessFacade, Record, make_record

logger = logging.getLogger(__name__)

# Failed operations are reported, never retried
NO_RETRIES = ydb.RetrySettings(max_retries=0)


def _execute(pool: ydb.QuerySessionPool, query: str, parameters: Optional[Dict[str, Any]] = None) -> List[Any]:
    try:
        return pool.execute_with_retries(query, parameters, retry_settings=NO_RETRIES)
    except (ydb.issues.Unavailable, ydb.issues.ConnectionError) as e:
        raise DataUnavailable(str(e)) from e
    except ydb.issues.Error as e:
        raise OperationFailed(str(e)) from e


class YdbDataAccess(DataAccessFacade):
    """Reads and writes benchmark rows through a shared QuerySessionPool."""

    def __init__(self, pool: ydb.QuerySessionPool, keyspace: str, table: str, random_string_length: int):
        self._pool = pool
        self._table_path = f"{keyspace}/{table}"
        self._random_string_length = random_string_length

    def insert(self, value: int) -> None:
        record = make_record(value, self._random_string_length)
        # UPSERT because randomly drawn values may repeat
        _execute(
            self._pool,
            f"""
            UPSERT INTO `{self._table_path}` (id, value, hex, random)
            VALUES ($id, $value, $hex, $random);
            """,
            {
                "$id": ydb.TypedValue(record.id, ydb.PrimitiveType.Utf8),
                "$value": ydb.TypedValue(record.value, ydb.PrimitiveType.Int32),
                "$hex": ydb.TypedValue(record.hex, ydb.PrimitiveType.Utf8),
                "$random": ydb.TypedValue(record.random, ydb.PrimitiveType.Utf8),
            },
        )

    def select_one(self, value: int) -> Optional[Record]:
        result_sets = _execute(
            self._pool,
            f"""
            SELECT id, value, hex, random FROM `{self._table_path}` WHERE id = $id LIMIT 1;
            """,
            {"$id": ydb.TypedValue(str(value), ydb.PrimitiveType.Utf8)},
        )
        if not result_sets or not result_sets[0].rows:
            return None
        row = result_sets[0].rows[0]
        return Record(id=row["id"], value=row["value"], hex=row["hex"], random=row["random"])


class YdbClient(BackendClient):
    def __init__(
        self,
        endpoint: str,
        database: str,
        root_certificates_file: Optional[str] = None,
        user: Optional[str] = None,
        password: Optional[str] = None,
        timeout: int = 5,
    ):
        """
        Initialize YdbClient with YDB connection parameters.

        Args:
            endpoint: YDB endpoint (e.g., "grpcs://ydb-host:2135")
            database: Database path (e.g., "/Root/database")
            root_certificates_file: Optional path to root certificate file for TLS
            user: Optional username for authentication
            password: Optional password for authentication
            timeout: Connection timeout in seconds (default: 5)
        """
        self._endpoint = endpoint
        self._database = database.rstrip("/")
        self._timeout = timeout
        self._driver: Optional[ydb.Driver] = None
        self._pool: Optional[ydb.QuerySessionPool] = None

        root_certificates = None
        if root_certificates_file:
            root_certificates = ydb.load_ydb_root_certificate(root_certificates_file)

        self._config = ydb.DriverConfig(
            endpoint=endpoint,
            database=self._database,
            root_certificates=root_certificates,
        )

        self._credentials = None
        if user and password:
            self._credentials = ydb.StaticCredentials(self._config, user=user, password=password)

    def __enter__(self) -> "YdbClient":
        self._driver = ydb.Driver(driver_config=self._config, credentials=self._credentials)
        try:
            self._driver.wait(timeout=self._timeout, fail_fast=True)
        except (ydb.issues.Error, TimeoutError, FutureTimeoutError) as e:
            self._driver.stop()
            self._driver = None
            raise DataUnavailable(f"Failed to connect to {self._endpoint}{self._database}: {e}") from e
        logger.info(f"Connected to {self._endpoint}{self._database}")
        self._pool = ydb.QuerySessionPool(self._driver)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._pool is not None:
            self._pool.stop()
            self._pool = None
        if self._driver is not None:
            self._driver.stop()
            self._driver = None

    @property
    def pool(self) -> ydb.QuerySessionPool:
        if self._pool is None:
            raise RuntimeError("YdbClient is not connected, use it as a context manager")
        return self._pool

    def data_access(self, keyspace: str, table: str, random_string_length: int) -> YdbDataAccess:
        return YdbDataAccess(self.pool, keyspace, table, random_string_length)

    def ensure_keyspace(self, name: str, replication_factor: int) -> None:
        """Keyspaces map to scheme directories. Replication is set by the cluster's storage pools."""
        logger.debug(f"Replication factor {replication_factor} is not applicable to YDB, ignoring")
        try:
            self._driver.scheme_client.make_directory(f"{self._database}/{name}")
        except (ydb.issues.Unavailable, ydb.issues.ConnectionError) as e:
            raise DataUnavailable(str(e)) from e
        except ydb.issues.Error as e:
            raise OperationFailed(str(e)) from e

    def ensure_table(self, keyspace: str, table: str) -> None:
        _execute(
            self.pool,
            f"""
            CREATE TABLE IF NOT EXISTS `{keyspace}/{table}`
            (
                id Utf8,
                value Int32,
                hex Utf8,
                random Utf8,
                PRIMARY KEY (id, value)
            );
            """,
        )

    def ensure_secondary_index(self, keyspace: str, table: str, column: str) -> None:
        index_name = f"{column}_index"
        if index_name in self._index_names(keyspace, table):
            logger.debug(f"Index {index_name} already exists")
            return
        _execute(
            self.pool,
            f"ALTER TABLE `{keyspace}/{table}` ADD INDEX {index_name} GLOBAL ON ({column});",
        )

    def _index_names(self, keyspace: str, table: str) -> List[str]:
        path = f"{self._database}/{keyspace}/{table}"
        try:
            with ydb.SessionPool(self._driver, size=1) as table_pool:
                description = table_pool.retry_operation_sync(lambda session: session.describe_table(path))
        except ydb.issues.Error as e:
            raise OperationFailed(str(e)) from e
        return [index.name for index in description.indexes]
