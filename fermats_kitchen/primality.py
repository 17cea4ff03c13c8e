"""
Primality testing.

Reference implementations of Fermat's test and the Miller-Rabin test on
gmpy2 integers, plus a combined classifier. gmpy2.is_prime is the faster
choice in production; these exist to expose the mechanics.

Both tests are probabilistic: a prime always passes, some composites
pass too. A failure proves the candidate composite. Running the test
again with other bases makes a pass more convincing.

Pseudoprimes:
- Carmichael numbers (561, 41041, 825265, ...) pass Fermat's test for
  every coprime base
- Miller-Rabin has no such universal liars; for large n at least 3/4 of
  the bases in [2, n-2] are witnesses

Preconditions (n positive, a nonzero) raise AssertionError, also under
python -O. Violating them is a programming error, not a data error.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional

import gmpy2

from .bigint import BigInt, FIRST_100_PRIMES, LARGEST_TABLE_PRIME, in_prime_table

# 4**-25 == 2**-50 for independently chosen bases
DEFAULT_ROUNDS = 25


def _require(condition, message: str) -> None:
    # Raises under python -O too
    if not condition:
        raise AssertionError(message)


def fermats_test(n, a) -> bool:
    """
    Fermat's test for primality: check a**n == a (mod n).

    If n is prime then a**n == a (mod n) for every a.

    >>> fermats_test(11, 2)
    True
    >>> fermats_test(8, 2)
    False
    >>> fermats_test(561, 2)   # Carmichael number, 3 * 11 * 17
    True

    Parameters
    ----------
    n : int or gmpy2.mpz
        Candidate, must be positive.
    a : int or gmpy2.mpz
        Base, must be nonzero. 2 is the usual choice; a=1, a=n-1 and
        multiples of n say nothing.

    Returns
    -------
    bool
        False means n is composite (or 1). True means probable prime.
    """
    n = BigInt(n)
    a = BigInt(a)

    if n == 1:
        return False

    _require(a != 0, "base must be nonzero")
    _require(n > 0, f"candidate must be positive, got {n}")

    return gmpy2.powmod(a, n, n) == a % n


def miller_rabin_test(n, a) -> bool:
    """
    The Miller-Rabin primality test.

    Slower than fermats_test (one exponentiation plus up to k squarings,
    where 2**k is the largest power of two dividing n - 1) but has no
    Carmichael-style universal pseudoprimes.

    a is a witness for n if this returns False, and a liar if n is
    composite and this returns True.

    Parameters
    ----------
    n : int or gmpy2.mpz
        Candidate, must be positive.
    a : int or gmpy2.mpz
        Base, must be nonzero.

    Returns
    -------
    bool
        False means n is definitely composite (or 1).
    """
    n = BigInt(n)
    a = BigInt(a)

    _require(a != 0, "base must be nonzero")
    _require(n > 0, f"candidate must be positive, got {n}")

    if n == 2:
        return True

    # n - 1 == 2**k * q, q odd
    q = n - 1
    k = 0
    while q > 1 and gmpy2.is_even(q):
        k += 1
        q >>= 1

    # For prime n the only square roots of 1 are +1 and -1, so walking
    # a**q, a**(2q), ..., a**(2**(k-1) q) must start at 1 or reach -1.
    minus_one = n - 1

    x = gmpy2.powmod(a, q, n)
    if x == 1:
        return True

    for _ in range(k):
        if x == minus_one:
            return True
        x = gmpy2.powmod(x, 2, n)

    return False


class Primality(Enum):
    COMPOSITE = 'composite'
    PROBABLY_PRIME = 'probably_prime'
    PRIME = 'prime'


class BasePolicy(Enum):
    """How witness bases are chosen."""
    FIXED = 'fixed'     # 2, 3, 5, ... from FIRST_100_PRIMES
    RANDOM = 'random'   # uniform in [2, n-2]


@dataclass(frozen=True)
class PrimalityTestOptions:
    """
    Parameters for probabilistic_primality_test.

    rounds : int
        Number of Miller-Rabin bases to try. At most 100 for FIXED.
    policy : BasePolicy or str
        Base selection.
    seed : int, optional
        Seed for RANDOM when no random state is passed in.
    """
    rounds: int
    policy: BasePolicy = BasePolicy.FIXED
    seed: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, 'policy', BasePolicy(self.policy))
        if isinstance(self.rounds, bool) or not isinstance(self.rounds, int):
            raise ValueError(f"rounds must be an integer, got {self.rounds!r}")
        if self.rounds < 1:
            raise ValueError(f"rounds must be at least 1, got {self.rounds}")
        if self.policy is BasePolicy.FIXED and self.rounds > len(FIRST_100_PRIMES):
            raise ValueError(
                f"fixed policy supports at most {len(FIRST_100_PRIMES)} rounds, "
                f"got {self.rounds}")
        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int)):
            raise ValueError(f"seed must be an integer or None, got {self.seed!r}")

    @classmethod
    def suggested(cls, n) -> 'PrimalityTestOptions':
        """
        Default options for candidate n: DEFAULT_ROUNDS fixed bases, fewer
        when n is too small to have that many usable bases.
        """
        usable = sum(1 for p in FIRST_100_PRIMES if p <= n - 2)
        return cls(rounds=max(1, min(DEFAULT_ROUNDS, usable)))


def witness_bases(n, options: PrimalityTestOptions, rng=None) -> Iterator[BigInt]:
    """
    Yield up to options.rounds bases in [2, n-2] for candidate n.

    Parameters
    ----------
    n : int or gmpy2.mpz
        Candidate.
    options : PrimalityTestOptions
        Round count and policy.
    rng : gmpy2 random_state, optional
        Source of randomness for RANDOM. Defaults to a fresh
        gmpy2.random_state seeded with options.seed.
    """
    n = BigInt(n)
    if n < 4:
        return

    if options.policy is BasePolicy.FIXED:
        for p in FIRST_100_PRIMES[:options.rounds]:
            if p > n - 2:
                return
            yield BigInt(p)
        return

    if rng is None:
        rng = gmpy2.random_state() if options.seed is None else gmpy2.random_state(options.seed)
    for _ in range(options.rounds):
        yield gmpy2.mpz_random(rng, n - 3) + 2


def probabilistic_primality_test(n, options: Optional[PrimalityTestOptions] = None,
                                 rng=None) -> Primality:
    """
    Classify n using the prime table, Fermat's test and Miller-Rabin.

    PRIME is only returned when it is certain: n is in FIRST_100_PRIMES,
    or n <= 541**2 and has no factor in the table. COMPOSITE is always
    certain. Everything else that survives every base is PROBABLY_PRIME.

    1 is reported as COMPOSITE, meaning "not prime".
    """
    n = BigInt(n)
    _require(n > 0, f"candidate must be positive, got {n}")

    if n == 1:
        return Primality.COMPOSITE

    if n <= LARGEST_TABLE_PRIME:
        return Primality.PRIME if in_prime_table(n) else Primality.COMPOSITE

    for p in FIRST_100_PRIMES:
        if n % p == 0:
            return Primality.COMPOSITE

    # Any composite with no factor <= 541 is at least 547**2
    if n <= LARGEST_TABLE_PRIME ** 2:
        return Primality.PRIME

    if options is None:
        options = PrimalityTestOptions.suggested(n)

    if not fermats_test(n, 2):
        return Primality.COMPOSITE

    for a in witness_bases(n, options, rng):
        if not miller_rabin_test(n, a):
            return Primality.COMPOSITE

    return Primality.PROBABLY_PRIME
