#!/usr/bin/env python3
import logging
import sys
from typing import Any, Optional, Tuple

import click
from click_option_group import optgroup

from .config import BenchmarkConfig, validate_identifier
from .constants import (
    DEFAULT_CASSANDRA_PORT,
    DEFAULT_DATACENTER,
    DEFAULT_ITEM_COUNT,
    DEFAULT_KEYSPACE,
    DEFAULT_RANDOM_STRING_LENGTH,
    DEFAULT_READ_THREADS,
    DEFAULT_REPLICATION_FACTOR,
    DEFAULT_TABLE,
    DEFAULT_WRITE_THREADS,
    Backend,
)
from .errors import BenchmarkError, InvalidArgument
from .facade import BackendClient
from .runner import Benchmark


def setup_logging(log_level_str: str) -> None:
    """Convert a log level name to its numeric level and configure logging."""
    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }

    if log_level_str not in level_map:
        raise ValueError(f"Invalid log level: {log_level_str}. " f"Valid values: {list(level_map.keys())}")

    log_level = level_map[log_level_str]

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - PID:%(process)d - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def validate_name(_ctx: Any, _param: Any, value: str) -> str:
    """
    Click callback for keyspace and table names, which end up inside DDL statements.
    """
    try:
        return validate_identifier(value)
    except InvalidArgument as e:
        raise click.BadParameter(str(e))


def create_client(
    backend: str,
    endpoint: Optional[str],
    database: Optional[str],
    ca_file: Optional[str],
    contact_points: Tuple[str, ...],
    port: int,
    datacenter: str,
    user: Optional[str],
    password: Optional[str],
) -> BackendClient:
    """
    Build a not yet connected client for the selected backend.

    Raises:
        click.UsageError: If options required by the backend are missing
    """
    if backend == Backend.YDB.value:
        if not endpoint or not database:
            raise click.UsageError("--endpoint and --database are required for the ydb backend")
        from .ydb_backend import YdbClient

        return YdbClient(
            endpoint=endpoint,
            database=database,
            root_certificates_file=ca_file,
            user=user,
            password=password,
        )

    from .cassandra_backend import CassandraClient

    return CassandraClient(
        contact_points=contact_points or ("127.0.0.1",),
        port=port,
        datacenter=datacenter,
        user=user,
        password=password,
    )


@click.group()
@click.option(
    "--backend",
    "-b",
    envvar="BENCH_BACKEND",
    type=click.Choice([b.value for b in Backend]),
    default=Backend.YDB.value,
    show_default=True,
    help="Database to benchmark",
)
@optgroup.group("YDB connection")
@optgroup.option("--endpoint", "-e", envvar="YDB_ENDPOINT", help="Endpoint to connect. (e.g., grpcs://host:2135)")
@optgroup.option("--database", "-d", envvar="YDB_DATABASE", help="Database to work with (e.g., /Root/database)")
@optgroup.option("--ca-file", envvar="YDB_ROOT_CERT", help="Path to root certificate file")
@optgroup.group("Cassandra connection")
@optgroup.option(
    "--contact-point",
    "-c",
    "contact_points",
    envvar="CASSANDRA_CONTACT_POINTS",
    multiple=True,
    help="Cluster node address. Can be specified multiple times (default: 127.0.0.1)",
)
@optgroup.option("--port", envvar="CASSANDRA_PORT", type=int, default=DEFAULT_CASSANDRA_PORT, show_default=True)
@optgroup.option(
    "--datacenter",
    envvar="CASSANDRA_DATACENTER",
    default=DEFAULT_DATACENTER,
    show_default=True,
    help="Local data center name",
)
@click.option("--user", envvar="BENCH_USER", help="Username for authentication")
@click.option("--password", envvar="BENCH_PASSWORD", help="Password for authentication")
@click.option(
    "--keyspace",
    "-k",
    envvar="BENCH_KEYSPACE",
    default=DEFAULT_KEYSPACE,
    show_default=True,
    callback=validate_name,
    help="Keyspace (directory on YDB) holding the benchmark table",
)
@click.option(
    "--table",
    "-t",
    envvar="BENCH_TABLE",
    default=DEFAULT_TABLE,
    show_default=True,
    callback=validate_name,
    help="Benchmark table name",
)
@click.option(
    "--replication-factor",
    "-r",
    type=int,
    default=DEFAULT_REPLICATION_FACTOR,
    show_default=True,
    help="Replication factor of the keyspace (ignored by ydb)",
)
@click.option(
    "--log-level",
    type=str,
    default="INFO",
    help="Logging level. Options: DEBUG, INFO, WARNING, ERROR, CRITICAL. Default: INFO",
)
@click.pass_context
def cli(
    ctx: click.Context,
    backend: str,
    endpoint: Optional[str],
    database: Optional[str],
    ca_file: Optional[str],
    contact_points: Tuple[str, ...],
    port: int,
    datacenter: str,
    user: Optional[str],
    password: Optional[str],
    keyspace: str,
    table: str,
    replication_factor: int,
    log_level: str,
) -> None:
    """Insert/select throughput micro-benchmark."""
    setup_logging(log_level)

    ctx.ensure_object(dict)
    ctx.obj["client"] = create_client(
        backend, endpoint, database, ca_file, contact_points, port, datacenter, user, password
    )
    ctx.obj["keyspace"] = keyspace
    ctx.obj["table"] = table
    ctx.obj["replication_factor"] = replication_factor


def _make_config(ctx: click.Context, **kwargs: Any) -> BenchmarkConfig:
    try:
        return BenchmarkConfig(
            keyspace=ctx.obj["keyspace"],
            table=ctx.obj["table"],
            replication_factor=ctx.obj["replication_factor"],
            **kwargs,
        )
    except InvalidArgument as e:
        raise click.BadParameter(str(e))


@cli.command()
@click.pass_context
def init(ctx: click.Context) -> None:
    """Create the keyspace, table and index if they don't exist."""
    config = _make_config(ctx)
    client = ctx.obj["client"]

    click.echo(f"Initializing {config.keyspace}.{config.table}, replication_factor={config.replication_factor}")

    try:
        with client:
            Benchmark(client, config).init_schema()
    except BenchmarkError as e:
        raise click.ClickException(str(e))

    click.echo("Initialization completed")


@cli.command()
@click.option(
    "--item-count",
    "-n",
    type=int,
    default=DEFAULT_ITEM_COUNT,
    show_default=True,
    help="Number of random values to insert and select",
)
@click.option(
    "--write-threads",
    "-w",
    type=int,
    default=DEFAULT_WRITE_THREADS,
    show_default=True,
    help="Number of threads for the insert phase",
)
@click.option(
    "--read-threads",
    "-R",
    type=int,
    default=DEFAULT_READ_THREADS,
    show_default=True,
    help="Number of threads for the select phase",
)
@click.option(
    "--random-string-length",
    "-l",
    type=int,
    default=DEFAULT_RANDOM_STRING_LENGTH,
    show_default=True,
    help="Length of the random string stored with every row",
)
@click.pass_context
def run(
    ctx: click.Context,
    item_count: int,
    write_threads: int,
    read_threads: int,
    random_string_length: int,
) -> None:
    """Provision the schema, then measure insert and select throughput."""
    config = _make_config(
        ctx,
        item_count=item_count,
        write_thread_count=write_threads,
        read_thread_count=read_threads,
        random_string_length=random_string_length,
    )
    client = ctx.obj["client"]

    click.echo(
        f"Running workload with keyspace={config.keyspace}, table={config.table}, items={config.item_count}, "
        f"write_threads={config.write_thread_count}, read_threads={config.read_thread_count}"
    )

    try:
        with client:
            report = Benchmark(client, config).run()
    except BenchmarkError as e:
        raise click.ClickException(str(e))

    report.print_summary()

    click.echo("Workload completed")


if __name__ == "__main__":
    cli()
