import math
import sys
from dataclasses import dataclass, field
from typing import List

from .constants import MILLISECONDS_PER_SECOND

INSERT_PHASE = "insert"
SELECT_PHASE = "select"

_INTENTS = {
    INSERT_PHASE: "Inserting {items} items using {threads} threads",
    SELECT_PHASE: "Selecting {items} items randomly using {threads} threads",
}


def describe_intent(phase: str, item_count: int, thread_count: int) -> str:
    """Human-readable description of what a phase is about to do."""
    return _INTENTS[phase].format(items=item_count, threads=thread_count)


@dataclass
class EvaluationResult:
    """Timing of one evaluation phase."""

    phase: str
    item_count: int
    thread_count: int
    duration_ms: float
    failed_workers: int = 0

    @property
    def elapsed_seconds(self) -> float:
        return self.duration_ms / MILLISECONDS_PER_SECOND

    @property
    def throughput(self) -> float:
        """Items per second. Infinite when the phase took no measurable time."""
        if self.duration_ms <= 0:
            return math.inf
        return self.item_count / self.duration_ms * MILLISECONDS_PER_SECOND

    def summary_line(self) -> str:
        return (
            f"{describe_intent(self.phase, self.item_count, self.thread_count)} "
            f"takes {self.elapsed_seconds:.2f} seconds (average: {self.throughput:.2f} per second)"
        )


@dataclass
class BenchmarkReport:
    """Results of all phases of one benchmark run."""

    results: List[EvaluationResult] = field(default_factory=list)

    def add(self, result: EvaluationResult) -> None:
        self.results.append(result)

    @property
    def total_failed_workers(self) -> int:
        return sum(r.failed_workers for r in self.results)

    def print_summary(self) -> None:
        """Print formatted results to stdout (not as log)."""
        print("=" * 90, file=sys.stdout)
        print("PERFORMANCE METRICS", file=sys.stdout)
        print("=" * 90, file=sys.stdout)
        print(
            f"{'Phase':<22} {'Items':>10} {'Threads':>10} {'Seconds':>12} {'Items/s':>16} {'Failed':>10}",
            file=sys.stdout,
        )
        print("-" * 90, file=sys.stdout)
        for r in self.results:
            print(
                f"{r.phase:<22} {r.item_count:>10} {r.thread_count:>10} "
                f"{r.elapsed_seconds:>12.2f} {r.throughput:>16.2f} {r.failed_workers:>10}",
                file=sys.stdout,
            )
        print("=" * 90, file=sys.stdout)

        if self.total_failed_workers:
            print(f"\n{self.total_failed_workers} worker(s) stopped early, see log for details", file=sys.stderr)

        sys.stdout.flush()
