from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
import ydb
from cassandra.cluster import NoHostAvailable

from db_microbench.cassandra_backend import CassandraClient, CassandraDataAccess
from db_microbench.errors import DataUnavailable, OperationFailed
from db_microbench.facade import Record
from db_microbench.ydb_backend import NO_RETRIES, YdbDataAccess


def test_ydb_insert_sends_derived_fields():
    pool = MagicMock()
    facade = YdbDataAccess(pool, "ks", "tbl", 6)

    facade.insert(-1)

    query, parameters = pool.execute_with_retries.call_args.args
    assert "UPSERT INTO `ks/tbl`" in query
    assert parameters["$id"].value == "-1"
    assert parameters["$value"].value == -1
    assert parameters["$hex"].value == "ffffffff"
    assert len(parameters["$random"].value) == 6
    assert pool.execute_with_retries.call_args.kwargs["retry_settings"] is NO_RETRIES


def test_ydb_select_found():
    pool = MagicMock()
    row = {"id": "42", "value": 42, "hex": "2a", "random": "abc"}
    pool.execute_with_retries.return_value = [SimpleNamespace(rows=[row])]

    record = YdbDataAccess(pool, "ks", "tbl", 6).select_one(42)

    assert record == Record(id="42", value=42, hex="2a", random="abc")
    assert pool.execute_with_retries.call_args.args[1]["$id"].value == "42"


def test_ydb_select_missing():
    pool = MagicMock()
    pool.execute_with_retries.return_value = [SimpleNamespace(rows=[])]

    assert YdbDataAccess(pool, "ks", "tbl", 6).select_one(42) is None


def test_ydb_errors_are_translated():
    pool = MagicMock()
    facade = YdbDataAccess(pool, "ks", "tbl", 6)

    pool.execute_with_retries.side_effect = ydb.issues.Unavailable("down")
    with pytest.raises(DataUnavailable):
        facade.insert(1)

    pool.execute_with_retries.side_effect = ydb.issues.SchemeError("no such table")
    with pytest.raises(OperationFailed):
        facade.select_one(1)


def test_cassandra_facade_uses_prepared_statements():
    session = MagicMock()
    session.prepare.side_effect = lambda query: query
    facade = CassandraDataAccess(session, "ks", "tbl", 4)

    facade.insert(255)

    statement, parameters = session.execute.call_args.args
    assert statement.startswith("INSERT INTO ks.tbl")
    assert parameters[:3] == ("255", 255, "ff")
    assert len(parameters[3]) == 4


def test_cassandra_select():
    session = MagicMock()
    session.execute.return_value.one.return_value = SimpleNamespace(id="7", value=7, hex="7", random="xy")
    facade = CassandraDataAccess(session, "ks", "tbl", 4)

    assert facade.select_one(7) == Record(id="7", value=7, hex="7", random="xy")

    session.execute.return_value.one.return_value = None
    assert facade.select_one(8) is None


def test_cassandra_errors_are_translated():
    session = MagicMock()
    session.execute.side_effect = NoHostAvailable("no hosts", {})
    facade = CassandraDataAccess(session, "ks", "tbl", 4)

    with pytest.raises(DataUnavailable):
        facade.insert(1)


def test_cassandra_schema_statements():
    client = CassandraClient(["127.0.0.1"])
    session = MagicMock()
    client._session = session

    client.ensure_keyspace("ks", 3)
    client.ensure_table("ks", "tbl")
    client.ensure_secondary_index("ks", "tbl", "hex")

    statements = [c.args[0] for c in session.execute.call_args_list]
    assert "CREATE KEYSPACE IF NOT EXISTS ks" in statements[0]
    assert "'replication_factor': 3" in statements[0]
    assert "CREATE TABLE IF NOT EXISTS ks.tbl" in statements[1]
    assert "CLUSTERING ORDER BY (value DESC)" in statements[1]
    assert "SASIIndex" in statements[2] and "(hex)" in statements[2]


def test_cassandra_client_requires_connection():
    with pytest.raises(RuntimeError):
        CassandraClient(["127.0.0.1"]).session
