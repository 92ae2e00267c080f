import logging
import random
from typing import Iterator, List, Optional, Sequence

from .batching import partition
from .facade import DataAccessFacade
from .metrics import INSERT_PHASE, SELECT_PHASE, EvaluationResult, describe_intent
from .stopwatch import measure
from .worker_pool import WorkerOutcome, WorkerPool

logger = logging.getLogger(__name__)


def random_draws(batch: Sequence[int]) -> Iterator[int]:
    """
    Yield len(batch) values picked uniformly at random from batch.

    The same value may be drawn more than once and some values may never be
    drawn. Each call uses its own generator so workers do not share state.
    """
    rng = random.Random()
    for _ in range(len(batch)):
        yield batch[rng.randrange(len(batch))]


class WorkloadRunner:
    """
    Runs the insert and select evaluation phases against a facade.

    Each phase partitions the values, starts one thread per batch, waits for
    all of them under a stopwatch and logs the resulting throughput.
    """

    def __init__(self, facade: DataAccessFacade, pool: Optional[WorkerPool] = None):
        self._facade = facade
        self._pool = pool or WorkerPool()

    def evaluate_insert(self, values: Sequence[int], thread_count: int) -> EvaluationResult:
        batches = partition(values, thread_count)
        return self._evaluate(INSERT_PHASE, batches, lambda: self._pool.run_concurrently(batches, self._insert))

    def evaluate_select(self, values: Sequence[int], thread_count: int) -> EvaluationResult:
        batches = partition(values, thread_count)
        return self._evaluate(
            SELECT_PHASE,
            batches,
            lambda: self._pool.run_concurrently(batches, self._select, draw=random_draws),
        )

    def _insert(self, value: int) -> None:
        self._facade.insert(value)

    def _select(self, value: int) -> None:
        if self._facade.select_one(value) is None:
            logger.warning(f"Missing value {value}")

    def _evaluate(self, phase: str, batches: List[List[int]], work) -> EvaluationResult:
        thread_count = len(batches)
        item_count = sum(len(batch) for batch in batches)

        logger.info(describe_intent(phase, item_count, thread_count))

        outcomes: List[WorkerOutcome] = []
        duration_ms = measure(lambda: outcomes.extend(work()))

        result = EvaluationResult(
            phase=phase,
            item_count=item_count,
            thread_count=thread_count,
            duration_ms=duration_ms,
            failed_workers=sum(1 for o in outcomes if o.failed),
        )
        logger.info(result.summary_line())
        return result
