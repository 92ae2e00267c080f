import logging
import os
from typing import Optional

from .config import BenchmarkConfig
from .evaluation import WorkloadRunner
from .facade import BackendClient
from .generator import create_values
from .metrics import BenchmarkReport
from .worker_pool import WorkerPool

logger = logging.getLogger(__name__)


class Benchmark:
    """
    Provisions the schema and runs the insert phase followed by the select phase.

    The client must already be connected (entered as a context manager).
    """

    def __init__(self, client: BackendClient, config: BenchmarkConfig, pool: Optional[WorkerPool] = None):
        """
        Args:
            client: Connected backend client
            config: Benchmark parameters
            pool: Worker pool used by both phases (default: new WorkerPool)
        """
        self._client = client
        self._config = config
        self._pool = pool

    def init_schema(self) -> None:
        """Create the keyspace, table and secondary index if they don't exist."""
        config = self._config

        logger.info(f"Ensuring keyspace {config.keyspace} (replication factor {config.replication_factor})")
        self._client.ensure_keyspace(config.keyspace, config.replication_factor)

        logger.info(f"Ensuring table {config.keyspace}.{config.table}")
        self._client.ensure_table(config.keyspace, config.table)

        logger.info(f"Ensuring index on {config.keyspace}.{config.table} ({config.index_column})")
        self._client.ensure_secondary_index(config.keyspace, config.table, config.index_column)

    def run(self) -> BenchmarkReport:
        """Provision the schema, then evaluate inserts and selects over one set of values."""
        config = self._config

        self.init_schema()

        logger.info(f"Number of processors: {os.cpu_count()}")

        facade = self._client.data_access(config.keyspace, config.table, config.random_string_length)
        runner = WorkloadRunner(facade, self._pool)

        values = create_values(config.item_count)

        report = BenchmarkReport()
        report.add(runner.evaluate_insert(values, config.write_thread_count))
        report.add(runner.evaluate_select(values, config.read_thread_count))

        logger.info("Benchmark completed")
        return report
