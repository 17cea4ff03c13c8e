"""
Tests for the packed bit table.
"""

import pytest

from fermats_kitchen import bitset
from fermats_kitchen.bitset import CompositeBits


class TestBasics:

    def test_starts_clear(self):
        bits = CompositeBits(20)
        assert len(bits) == 20
        assert bits.count() == 0
        assert not any(bits[i] for i in range(20))

    def test_packed_size(self):
        """ceil(size / 8) bytes."""
        assert CompositeBits(0).nbytes == 0
        assert CompositeBits(1).nbytes == 1
        assert CompositeBits(8).nbytes == 1
        assert CompositeBits(9).nbytes == 2
        assert CompositeBits(1_000_000).nbytes == 125_000

    def test_set_and_get(self):
        bits = CompositeBits(20)
        for i in [0, 7, 8, 19]:
            bits.set(i)
        assert [i for i in range(20) if bits[i]] == [0, 7, 8, 19]
        assert bits.count() == 4

    def test_set_twice_stays_set(self):
        bits = CompositeBits(5)
        bits.set(3)
        bits.set(3)
        assert bits[3]
        assert bits.count() == 1

    def test_out_of_range(self):
        bits = CompositeBits(10)
        with pytest.raises(IndexError):
            bits[10]
        with pytest.raises(IndexError):
            bits[-1]
        with pytest.raises(IndexError):
            bits.set(10)

    def test_negative_size(self):
        with pytest.raises(ValueError):
            CompositeBits(-1)


class TestSetEvery:

    @pytest.mark.parametrize("start,step", [(0, 1), (1, 2), (2, 3), (5, 7), (3, 8), (4, 9), (99, 5)])
    def test_matches_range(self, start, step):
        bits = CompositeBits(100)
        bits.set_every(start, step)
        expected = set(range(start, 100, step))
        assert {i for i in range(100) if bits[i]} == expected

    def test_start_past_end_is_noop(self):
        bits = CompositeBits(10)
        bits.set_every(10, 3)
        bits.set_every(50, 1)
        assert bits.count() == 0

    def test_stops_at_last_index(self):
        """Nothing is written past the end of the table."""
        bits = CompositeBits(10)
        bits.set_every(9, 5)
        assert bits.count() == 1
        assert bits[9]

    def test_small_chunks(self, monkeypatch):
        """Chunk boundaries do not skip or repeat indices."""
        monkeypatch.setattr(bitset, 'MARK_CHUNK', 3)
        bits = CompositeBits(1000)
        bits.set_every(5, 7)
        assert {i for i in range(1000) if bits[i]} == set(range(5, 1000, 7))

    @pytest.mark.parametrize("start,step", [(0, 1), (3, 7), (40, 13), (90, 3), (999, 1)])
    def test_scalar_and_vector_paths_agree(self, monkeypatch, start, step):
        results = []
        for limit in [0, 10**9]:
            monkeypatch.setattr(bitset, 'SCALAR_MARK_LIMIT', limit)
            bits = CompositeBits(1000)
            bits.set_every(start, step)
            results.append({i for i in range(1000) if bits[i]})
        assert results[0] == results[1] == set(range(start, 1000, step))

    def test_short_run_leaves_neighbours_clear(self):
        """Long strides take the one-bit-at-a-time path."""
        bits = CompositeBits(100)
        bits.set_every(10, 45)
        assert {i for i in range(100) if bits[i]} == {10, 55}
        assert bits.count() == 2

    def test_bad_step(self):
        bits = CompositeBits(10)
        with pytest.raises(ValueError):
            bits.set_every(0, 0)
        with pytest.raises(ValueError):
            bits.set_every(0, -2)


class TestFirstClear:

    def test_empty_table(self):
        assert CompositeBits(10).first_clear(0, 10) == 0

    def test_skips_set_bits(self):
        bits = CompositeBits(30)
        bits.set_every(0, 1)
        assert bits.first_clear(0, 30) is None

        bits = CompositeBits(30)
        for i in range(0, 17):
            bits.set(i)
        assert bits.first_clear(0, 30) == 17
        assert bits.first_clear(18, 30) == 18

    def test_respects_stop(self):
        bits = CompositeBits(30)
        for i in range(10, 20):
            bits.set(i)
        assert bits.first_clear(10, 20) is None
        assert bits.first_clear(10, 21) == 20

    def test_empty_range(self):
        bits = CompositeBits(10)
        assert bits.first_clear(5, 5) is None
        assert bits.first_clear(7, 3) is None

    def test_stop_clamped_to_size(self):
        bits = CompositeBits(10)
        bits.set_every(0, 1)
        assert bits.first_clear(0, 1000) is None

    @pytest.mark.parametrize("scan_limit", [0, 1, 64, 10**6])
    def test_scalar_prefix_length_does_not_matter(self, monkeypatch, scan_limit):
        monkeypatch.setattr(bitset, 'SCALAR_SCAN_LIMIT', scan_limit)
        bits = CompositeBits(300)
        for i in range(300):
            if i not in (5, 150, 299):
                bits.set(i)
        assert bits.first_clear(0, 300) == 5
        assert bits.first_clear(6, 300) == 150
        assert bits.first_clear(151, 299) is None
        assert bits.first_clear(151, 300) == 299
        assert bits.first_clear(300, 300) is None

    def test_across_many_windows(self, monkeypatch):
        monkeypatch.setattr(bitset, 'SCAN_WINDOW', 1)
        bits = CompositeBits(500)
        bits.set_every(0, 1)
        bits2 = CompositeBits(500)
        for i in range(500):
            if i != 333:
                bits2.set(i)
        assert bits.first_clear(0, 500) is None
        assert bits2.first_clear(0, 500) == 333
        assert bits2.first_clear(334, 500) is None


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
