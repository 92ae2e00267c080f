"""Thread-per-batch execution of a per-item callback."""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, List, Optional, Sequence, TypeVar

from .errors import WorkerInterrupted

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class WorkerOutcome:
    """What a single worker did with its batch."""

    index: int
    batch_size: int
    processed: int = 0
    error: Optional[BaseException] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class _Worker(threading.Thread, Generic[T]):
    def __init__(
        self,
        index: int,
        batch: Sequence[T],
        per_item: Callable[[T], None],
        draw: Optional[Callable[[Sequence[T]], Iterable[T]]],
        name: str,
    ):
        super().__init__(name=f"{name}-{index}")
        self._batch = batch
        self._per_item = per_item
        self._draw = draw
        self.outcome = WorkerOutcome(index=index, batch_size=len(batch))

    def run(self) -> None:
        try:
            items = self._draw(self._batch) if self._draw is not None else self._batch
            for item in items:
                self._per_item(item)
                self.outcome.processed += 1
        except Exception as e:
            # The rest of this batch is dropped, other workers keep going
            self.outcome.error = e
            logger.error(f"{self.name} failed after {self.outcome.processed} items: {e}", exc_info=True)


class WorkerPool:
    """
    Runs one thread per batch and waits for all of them.

    This is not a queue-based pool: the number of concurrently running
    threads always equals the number of batches.
    """

    def __init__(self, name: str = "worker"):
        self._name = name

    def run_concurrently(
        self,
        batches: Sequence[Sequence[T]],
        per_item: Callable[[T], None],
        draw: Optional[Callable[[Sequence[T]], Iterable[T]]] = None,
    ) -> List[WorkerOutcome]:
        """
        Process every batch on its own thread.

        Args:
            batches: Batches to process, one thread each
            per_item: Callback invoked synchronously for each item
            draw: Optional function turning a batch into the items to feed to
                per_item. It runs inside the worker thread. Defaults to the
                batch itself, in order.

        Returns:
            One WorkerOutcome per batch, in batch order
        """
        workers = [_Worker(i, batch, per_item, draw, self._name) for i, batch in enumerate(batches)]

        for worker in workers:
            worker.start()

        for worker in workers:
            worker.join()
            if worker.outcome.failed:
                interrupted = WorkerInterrupted(worker.outcome.index, worker.outcome.error)
                logger.error(f"A thread was interrupted. {interrupted}")

        return [worker.outcome for worker in workers]
