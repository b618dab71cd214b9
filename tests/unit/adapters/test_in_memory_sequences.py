"""Unit tests for the in-memory sequence allocator."""

from concurrent.futures import ThreadPoolExecutor

from podium.adapters.sequences import InMemorySequenceAllocator

# pylint: disable=magic-value-comparison


def test_counts_from_one_per_name_and_period():
    """Each (name, period) pair has its own counter starting at 1."""
    seq = InMemorySequenceAllocator()
    assert [seq.next_value("CTR", 2025) for _ in range(3)] == [1, 2, 3]
    assert seq.next_value("CTR", 2026) == 1
    assert seq.next_value("PAY", 2025) == 1


def test_threads_never_share_a_value():
    """Concurrent callers get distinct, gap-free values."""
    seq = InMemorySequenceAllocator()
    with ThreadPoolExecutor(max_workers=8) as pool:
        values = list(pool.map(lambda _: seq.next_value("PAY", 2025), range(200)))
    assert sorted(values) == list(range(1, 201))
