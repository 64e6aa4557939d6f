"""
Tests for SizePool reuse, bounds and periodic cleanup.
"""

from sizekit.context import SizeContext
from sizekit.pool import SizePool
from sizekit.size import Size
from sizekit.units import SizeUnit


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestSizePool:
    """Acquire/release semantics."""

    def test_reuse_does_not_leak_previous_value(self):
        """Should hand back a recycled instance holding only the new value."""
        pool = SizeContext().pool
        first = pool.acquire("2rem")
        assert first.pixels == 32
        pool.release(first)

        second = pool.acquire(10)
        assert second is first
        assert second.value == 10
        assert second.unit == SizeUnit.PX
        assert second.pixels == 10
        assert second.is_pooled
        assert not second.flags.in_pool

    def test_release_resets_to_zero(self):
        """Should zero a released instance."""
        pool = SizeContext().pool
        size = pool.acquire(42)
        pool.release(size)
        assert size.value == 0
        assert size.flags.in_pool

    def test_ignores_unpooled_instances(self):
        """Should not accept sizes it did not hand out."""
        context = SizeContext()
        context.pool.release(Size(5, context))
        assert len(context.pool) == 0

    def test_double_release_is_ignored(self):
        """Should not keep the same instance twice."""
        pool = SizeContext().pool
        size = pool.acquire(1)
        pool.release(size)
        pool.release(size)
        assert len(pool) == 1

    def test_capacity_bound(self):
        """Should drop released instances beyond capacity."""
        pool = SizePool(SizeContext(), capacity=3)
        sizes = [pool.acquire(i) for i in range(5)]
        for size in sizes:
            pool.release(size)
        assert len(pool) == 3

    def test_periodic_cleanup_halves_pool(self):
        """Should trim to half the capacity once the interval has elapsed."""
        clock = FakeClock()
        pool = SizePool(SizeContext(), capacity=10, cleanup_interval=60, clock=clock)
        sizes = [pool.acquire(i) for i in range(10)]
        for size in sizes:
            pool.release(size)
        assert len(pool) == 10

        clock.now = 30
        pool.acquire(1)
        assert len(pool) == 9

        clock.now = 61
        pool.acquire(1)
        assert len(pool) == 4

    def test_stats(self):
        """Should count hits, misses and creations."""
        pool = SizeContext().pool
        a = pool.acquire(1)
        pool.release(a)
        pool.acquire(2)
        pool.acquire(3)
        stats = pool.stats()
        assert stats.hits == 1
        assert stats.misses == 2
        assert stats.created == 2
        assert stats.hit_rate == 1 / 3

    def test_clear(self):
        """Should drop idle instances and reset counters."""
        pool = SizeContext().pool
        pool.release(pool.acquire(1))
        pool.clear()
        assert len(pool) == 0
        assert pool.stats().misses == 0
