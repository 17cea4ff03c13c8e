"""
Packed bit table backed by a numpy uint8 array.

One bit per entry, so a table of N entries costs ceil(N/8) bytes.

Bit layout:
- Entry i lives in byte i >> 3
- Within the byte it is bit (i & 7), least significant first
  (the 'little' bit order of np.unpackbits)
"""

import numpy as np
from typing import Optional

# Upper limit on temporary index arrays built by set_every.
MARK_CHUNK = 1 << 16

# set_every writes runs this short one bit at a time, skipping numpy setup.
SCALAR_MARK_LIMIT = 32

# Largest number of bytes unpacked per window in first_clear.
SCAN_WINDOW = 1 << 12

# first_clear checks this many bits one at a time before unpacking windows.
SCALAR_SCAN_LIMIT = 64


class CompositeBits:
    """Fixed-size table of bits, all initially clear."""

    def __init__(self, size: int):
        if size < 0:
            raise ValueError(f"size must be non-negative, got {size}")
        self._size = size
        self._data = np.zeros((size + 7) // 8, dtype=np.uint8)

    def __len__(self) -> int:
        return self._size

    def __repr__(self) -> str:
        return f"CompositeBits(size={self._size}, set={self.count()})"

    @property
    def nbytes(self) -> int:
        """Size of the backing store in bytes."""
        return self._data.nbytes

    def _check(self, i: int) -> None:
        if not 0 <= i < self._size:
            raise IndexError(f"bit index {i} out of range [0, {self._size})")

    def __getitem__(self, i: int) -> bool:
        self._check(i)
        return bool((self._data[i >> 3] >> (i & 7)) & 1)

    def set(self, i: int) -> None:
        """Set bit i. Bits are never cleared."""
        self._check(i)
        self._data[i >> 3] |= np.uint8(1 << (i & 7))

    def set_every(self, start: int, step: int) -> None:
        """
        Set bits start, start + step, start + 2*step, ... below len(self).

        Parameters
        ----------
        start : int
            First index to set. Nothing happens if start >= len(self).
        step : int
            Stride between indices. Must be positive.
        """
        if step <= 0:
            raise ValueError(f"step must be positive, got {step}")
        if start < 0:
            raise IndexError(f"bit index {start} out of range [0, {self._size})")

        if start >= self._size:
            return
        if (self._size - 1 - start) // step < SCALAR_MARK_LIMIT:
            data = self._data
            for i in range(start, self._size, step):
                data[i >> 3] |= 1 << (i & 7)
            return

        lo = start
        while lo < self._size:
            # Python ints, so lo + span cannot wrap
            hi = min(lo + step * MARK_CHUNK, self._size)
            idx = np.arange(lo, hi, step, dtype=np.int64)
            masks = np.left_shift(1, idx & 7).astype(np.uint8)
            # .at is unbuffered: repeated byte indices (step < 8) all apply
            np.bitwise_or.at(self._data, idx >> 3, masks)
            lo = int(idx[-1]) + step

    def first_clear(self, start: int, stop: int) -> Optional[int]:
        """
        Return the first index in [start, stop) whose bit is clear.

        Returns None if every bit in the range is set, or the range is empty.
        """
        stop = min(stop, self._size)
        start = max(start, 0)

        data = self._data
        pos = min(stop, start + SCALAR_SCAN_LIMIT)
        for i in range(start, pos):
            if not (data[i >> 3] >> (i & 7)) & 1:
                return i

        # Windows grow from 8 bytes, as the next clear bit is usually close
        window = min(8, SCAN_WINDOW)
        while pos < stop:
            b0 = pos >> 3
            b1 = min(b0 + window, (stop + 7) >> 3)
            window = min(window * 2, SCAN_WINDOW)
            bits = np.unpackbits(self._data[b0:b1], bitorder='little')

            offset = b0 * 8
            lo = pos - offset
            hi = min(stop - offset, bits.size)
            clear = np.flatnonzero(bits[lo:hi] == 0)
            if clear.size:
                return offset + lo + int(clear[0])
            pos = offset + hi
        return None

    def count(self) -> int:
        """Number of set bits."""
        return int(np.unpackbits(self._data).sum())
