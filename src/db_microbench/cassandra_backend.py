import logging
from typing import Optional, Sequence

from cassandra import DriverException, OperationTimedOut, RequestExecutionException, RequestValidationException, Unavailable
from cassandra.auth import PlainTextAuthProvider
from cassandra.cluster import Cluster, NoHostAvailable, Session
from cassandra.policies import DCAwareRoundRobinPolicy

from .constants import DEFAULT_CASSANDRA_PORT, DEFAULT_DATACENTER
from .errors import DataUnavailable, OperationFailed
from .facade import BackendClient, DataAccessFacade, Record, make_record

logger = logging.getLogger(__name__)


def _execute(session: Session, statement, parameters=None):
    try:
        return session.execute(statement, parameters)
    except (NoHostAvailable, Unavailable, OperationTimedOut) as e:
        raise DataUnavailable(str(e)) from e
    except (RequestExecutionException, RequestValidationException, DriverException) as e:
        raise OperationFailed(str(e)) from e


class CassandraDataAccess(DataAccessFacade):
    """Prepared-statement reads and writes over one shared Session."""

    def __init__(self, session: Session, keyspace: str, table: str, random_string_length: int):
        self._session = session
        self._random_string_length = random_string_length
        self._insert = session.prepare(f"INSERT INTO {keyspace}.{table} (id, value, hex, random) VALUES (?, ?, ?, ?)")
        self._select = session.prepare(f"SELECT id, value, hex, random FROM {keyspace}.{table} WHERE id = ? LIMIT 1")

    def insert(self, value: int) -> None:
        record = make_record(value, self._random_string_length)
        _execute(self._session, self._insert, (record.id, record.value, record.hex, record.random))

    def select_one(self, value: int) -> Optional[Record]:
        row = _execute(self._session, self._select, (str(value),)).one()
        if row is None:
            return None
        return Record(id=row.id, value=row.value, hex=row.hex, random=row.random)


class CassandraClient(BackendClient):
    def __init__(
        self,
        contact_points: Sequence[str],
        port: int = DEFAULT_CASSANDRA_PORT,
        datacenter: str = DEFAULT_DATACENTER,
        user: Optional[str] = None,
        password: Optional[str] = None,
    ):
        """
        Args:
            contact_points: Addresses of cluster nodes to bootstrap from
            port: Native protocol port (default: 9042)
            datacenter: Local data center for load balancing (default: datacenter1)
            user: Optional username for authentication
            password: Optional password for authentication
        """
        self._contact_points = list(contact_points)
        self._port = port
        self._datacenter = datacenter
        self._auth_provider = None
        if user and password:
            self._auth_provider = PlainTextAuthProvider(username=user, password=password)
        self._cluster: Optional[Cluster] = None
        self._session: Optional[Session] = None

    def __enter__(self) -> "CassandraClient":
        self._cluster = Cluster(
            contact_points=self._contact_points,
            port=self._port,
            load_balancing_policy=DCAwareRoundRobinPolicy(local_dc=self._datacenter),
            auth_provider=self._auth_provider,
        )
        try:
            self._session = self._cluster.connect()
        except NoHostAvailable as e:
            self._cluster.shutdown()
            self._cluster = None
            raise DataUnavailable(f"Failed to connect to {', '.join(self._contact_points)}: {e}") from e
        logger.info(f"Connected to {', '.join(self._contact_points)} ({self._datacenter})")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._cluster is not None:
            self._cluster.shutdown()
            self._cluster = None
            self._session = None

    @property
    def session(self) -> Session:
        if self._session is None:
            raise RuntimeError("CassandraClient is not connected, use it as a context manager")
        return self._session

    def data_access(self, keyspace: str, table: str, random_string_length: int) -> CassandraDataAccess:
        return CassandraDataAccess(self.session, keyspace, table, random_string_length)

    def ensure_keyspace(self, name: str, replication_factor: int) -> None:
        _execute(
            self.session,
            f"CREATE KEYSPACE IF NOT EXISTS {name} "
            f"WITH replication = {{'class': 'SimpleStrategy', 'replication_factor': {replication_factor}}}",
        )

    def ensure_table(self, keyspace: str, table: str) -> None:
        _execute(
            self.session,
            f"""
            CREATE TABLE IF NOT EXISTS {keyspace}.{table} (
                id text,
                value int,
                hex text,
                random text,
                PRIMARY KEY (id, value)
            ) WITH CLUSTERING ORDER BY (value DESC)
            """,
        )

    def ensure_secondary_index(self, keyspace: str, table: str, column: str) -> None:
        _execute(
            self.session,
            f"CREATE CUSTOM INDEX IF NOT EXISTS ON {keyspace}.{table} ({column}) "
            "USING 'org.apache.cassandra.index.sasi.SASIIndex' WITH OPTIONS = {'mode': 'CONTAINS'}",
        )
