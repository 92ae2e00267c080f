class BenchmarkError(Exception):
    """Base class for all benchmark errors."""


class InvalidArgument(BenchmarkError, ValueError):
    """Raised for a bad partition count or configuration value."""


class DataUnavailable(BenchmarkError):
    """The database could not be reached."""


class OperationFailed(BenchmarkError):
    """The database rejected or failed a statement."""


class WorkerInterrupted(BenchmarkError):
    """A worker terminated before finishing its batch."""

    def __init__(self, worker_index: int, cause: BaseException):
        super().__init__(f"Worker {worker_index} was interrupted: {cause!r}")
        self.worker_index = worker_index
        self.cause = cause
