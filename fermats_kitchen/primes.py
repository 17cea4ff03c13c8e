"""
Prime generation utilities.

Responsibility: whole-range prime listings. Thin wrappers that drive an
incremental sieve to completion and hand back numpy arrays.
"""

import numpy as np

from .esieve import SieveState


def _completed_sieve(N: int, verbose: bool = False) -> SieveState:
    state = SieveState.with_upper_bound(N)
    state.run(verbose=verbose)
    return state


def prime_flags_upto(N: int, verbose: bool = False) -> np.ndarray:
    """
    Return boolean array where flags[i] is True iff i is prime.

    Parameters
    ----------
    N : int
        Upper bound (inclusive).

    Returns
    -------
    np.ndarray
        Boolean array of length N+1 (all False for N < 2).
    """
    flags = np.zeros(max(N, 0) + 1, dtype=bool)
    if N < 2:
        return flags
    flags[primes_upto(N, verbose)] = True
    return flags


def primes_upto(N: int, verbose: bool = False) -> np.ndarray:
    """
    Return array of all primes <= N.

    Parameters
    ----------
    N : int
        Upper bound (inclusive).

    Returns
    -------
    np.ndarray
        Array of primes, ascending. Empty for N < 2.
    """
    if N < 2:
        return np.zeros(0, dtype=np.int64)
    state = _completed_sieve(N, verbose)
    return np.asarray(state.primes_found(), dtype=np.int64)
