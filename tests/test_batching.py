import itertools
import math

import pytest

from db_microbench.batching import partition
from db_microbench.errors import InvalidArgument


@pytest.mark.parametrize(
    "size,count",
    [(1000, 50), (1000, 500), (1000, 3), (7, 3), (5, 10), (1, 1), (10, 1), (11, 4)],
)
def test_partition_is_lossless_and_ordered(size, count):
    items = list(range(size))
    batches = partition(items, count)

    assert list(itertools.chain.from_iterable(batches)) == items


@pytest.mark.parametrize("size,count", [(1000, 7), (999, 500), (13, 5), (5, 10)])
def test_partition_batch_sizes(size, count):
    items = list(range(size))
    batch_size = math.ceil(size / count)

    batches = partition(items, count)

    assert all(len(batch) == batch_size for batch in batches[:-1])
    assert 1 <= len(batches[-1]) <= batch_size
    assert len(batches) == math.ceil(size / batch_size)


def test_partition_1000_into_500():
    batches = partition(list(range(1000)), 500)

    assert len(batches) == 500
    assert all(len(batch) == 2 for batch in batches)


def test_partition_1000_into_50():
    batches = partition(list(range(1000)), 50)

    assert len(batches) == 50
    assert all(len(batch) == 20 for batch in batches)


def test_partition_rounding_yields_fewer_batches():
    # batch size is ceil(10 / 4) = 3, so only 4 batches of 3, 3, 3, 1
    assert partition(list(range(10)), 4) == [[0, 1, 2], [3, 4, 5], [6, 7, 8], [9]]
    # ceil(10 / 6) = 2, five batches instead of six
    assert len(partition(list(range(10)), 6)) == 5


def test_fewer_items_than_partitions():
    assert partition([1, 2, 3], 10) == [[1], [2], [3]]


def test_empty_input():
    assert partition([], 5) == []


def test_does_not_mutate_input():
    items = [3, 1, 2]
    batches = partition(items, 2)
    batches[0].append(99)

    assert items == [3, 1, 2]


@pytest.mark.parametrize("count", [0, -1])
def test_rejects_non_positive_count(count):
    with pytest.raises(InvalidArgument):
        partition([1, 2, 3], count)


def test_invalid_argument_is_value_error():
    with pytest.raises(ValueError):
        partition([1], 0)
