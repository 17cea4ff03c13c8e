"""
Incremental Sieve of Eratosthenes.

Responsibility: find all primes up to and including a bound, one divisor
at a time. The state can be inspected between steps.

Table layout:
- Bit m-1 records whether m is known to be composite
- Bit 0 (the integer 1) is never set; 1 is neither prime nor composite
"""

import operator
import time
from enum import Enum
from typing import List, Optional

from .bitset import CompositeBits


class SieveError(Exception):
    """Base class for sieve construction errors."""


class BadBound(SieveError, ValueError):
    """The upper bound is not a positive integer."""


class BadMemory(SieveError, MemoryError):
    """The composite table could not be allocated."""


class EndCondition(Enum):
    UPPER_BOUND_REACHED = 'upper_bound_reached'


class SieveState:
    """
    State of the sieve after some number of steps (or none).

    Construct with SieveState.with_upper_bound(n), then advance with
    sieve_once() or run().
    """

    def __init__(self, is_known_composite: CompositeBits, upper_bound: int):
        self._is_known_composite = is_known_composite
        self._primes: List[int] = []
        self._upper_bound = upper_bound
        self._last_divisor = 1

    @classmethod
    def with_upper_bound(cls, n: int) -> 'SieveState':
        """
        Initialize a sieve that will find every prime <= n.

        Allocates one bit per integer in [1, n].

        Complexity: O(n) time, O(n) bits of memory.

        Raises
        ------
        BadBound
            n is not an integer, or n < 1.
        BadMemory
            The table for n integers cannot be allocated.
        """
        if isinstance(n, bool):
            raise BadBound(f"upper bound must be an integer, got {n!r}")
        try:
            n = operator.index(n)
        except TypeError:
            raise BadBound(f"upper bound must be an integer, got {n!r}") from None
        if n <= 0:
            raise BadBound(f"upper bound must be positive, got {n}")
        try:
            is_known_composite = CompositeBits(n)
        except (MemoryError, ValueError) as e:
            raise BadMemory(f"cannot allocate composite table for {n} integers") from e
        return cls(is_known_composite, n)

    def __repr__(self) -> str:
        return (f"SieveState(upper_bound={self._upper_bound}, "
                f"last_divisor={self._last_divisor}, primes={len(self._primes)})")

    @property
    def upper_bound(self) -> int:
        return self._upper_bound

    @property
    def last_divisor(self) -> int:
        """Most recent prime used as a divisor, 1 before the first step."""
        return self._last_divisor

    @property
    def table_nbytes(self) -> int:
        return self._is_known_composite.nbytes

    def primes_found(self) -> List[int]:
        """Primes discovered so far, ascending."""
        return list(self._primes)

    def is_known_composite(self, m: int) -> bool:
        """True if m has been struck off as a multiple of a found prime."""
        if not 1 <= m <= self._upper_bound:
            raise IndexError(f"{m} outside [1, {self._upper_bound}]")
        return self._is_known_composite[m - 1]

    @property
    def is_complete(self) -> bool:
        """True once sieve_once can make no further progress."""
        return self._next_divisor() is None

    def _next_divisor(self) -> Optional[int]:
        # Integers last_divisor+1 .. upper_bound sit at bits last_divisor .. upper_bound-1
        i = self._is_known_composite.first_clear(self._last_divisor, self._upper_bound)
        if i is None:
            return None
        return i + 1

    def _mark_multiples(self, divisor: int) -> None:
        # Strict multiples 2d, 3d, ... <= upper_bound, at bits 2d-1, 3d-1, ...
        self._is_known_composite.set_every(2 * divisor - 1, divisor)

    def sieve_once(self) -> bool:
        return sieve_once(self)

    def run(self, stop_when: EndCondition = EndCondition.UPPER_BOUND_REACHED,
            verbose: bool = False) -> None:
        run(self, stop_when, verbose)


def sieve_once(state: SieveState) -> bool:
    """
    Advance the sieve by one divisor.

    The next integer above last_divisor that is not marked composite is
    prime, since every smaller prime has already struck off its multiples.
    It is recorded and its multiples are marked.

    Returns
    -------
    bool
        True if a new divisor was found, False once the bound is exhausted.
    """
    divisor = state._next_divisor()
    if divisor is None:
        return False

    state._primes.append(divisor)
    state._mark_multiples(divisor)
    state._last_divisor = divisor
    return True


def run(state: SieveState,
        stop_when: EndCondition = EndCondition.UPPER_BOUND_REACHED,
        verbose: bool = False) -> None:
    """
    Sieve until the end condition is met.

    Parameters
    ----------
    state : SieveState
        Sieve to advance in place.
    stop_when : EndCondition
        Only UPPER_BOUND_REACHED (run until every prime is found).
    verbose : bool
        Print a summary line when done.
    """
    if stop_when is not EndCondition.UPPER_BOUND_REACHED:
        raise ValueError(f"unsupported end condition: {stop_when!r}")

    t0 = time.time()
    while sieve_once(state):
        pass

    if verbose:
        print(f"    Sieved up to {state.upper_bound:,}: "
              f"{len(state._primes):,} primes, "
              f"table {state.table_nbytes / 1e6:.1f}MB, "
              f"{time.time() - t0:.2f}s")
