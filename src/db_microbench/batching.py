import math
from typing import List, Sequence, TypeVar

from .errors import InvalidArgument

T = TypeVar("T")


def partition(items: Sequence[T], desired_partition_count: int) -> List[List[T]]:
    """
    Split items into contiguous batches of near-equal size.

    Every batch holds ceil(len(items) / desired_partition_count) items except
    the last one, which holds the remainder. Because the batch size is rounded
    up, fewer batches than requested may be produced.

    Args:
        items: Ordered work items
        desired_partition_count: Number of batches to aim for

    Returns:
        List of batches which, concatenated, reproduce items

    Raises:
        InvalidArgument: If desired_partition_count is not positive
    """
    if desired_partition_count <= 0:
        raise InvalidArgument(f"Partition count must be positive, got {desired_partition_count}")

    if not items:
        return []

    batch_size = math.ceil(len(items) / desired_partition_count)
    return [list(items[i : i + batch_size]) for i in range(0, len(items), batch_size)]
