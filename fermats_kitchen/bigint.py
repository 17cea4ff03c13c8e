"""
Arbitrary-precision integer helpers.

Responsibility: the integer type used by the primality tests and the
known-primes table. Nothing here knows about sieving.
"""

import gmpy2

# gmpy2.mpz is the arbitrary-precision integer used throughout.
BigInt = gmpy2.mpz

FIRST_100_PRIMES = (
    2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47, 53, 59, 61, 67, 71,
    73, 79, 83, 89, 97, 101, 103, 107, 109, 113, 127, 131, 137, 139, 149, 151,
    157, 163, 167, 173, 179, 181, 191, 193, 197, 199, 211, 223, 227, 229, 233,
    239, 241, 251, 257, 263, 269, 271, 277, 281, 283, 293, 307, 311, 313, 317,
    331, 337, 347, 349, 353, 359, 367, 373, 379, 383, 389, 397, 401, 409, 419,
    421, 431, 433, 439, 443, 449, 457, 461, 463, 467, 479, 487, 491, 499, 503,
    509, 521, 523, 541,
)

LARGEST_TABLE_PRIME = FIRST_100_PRIMES[-1]

_KNOWN_PRIMES = frozenset(FIRST_100_PRIMES)


def to_bigint(value) -> BigInt:
    """
    Convert an int, mpz or decimal string to a BigInt.

    Parameters
    ----------
    value : int, gmpy2.mpz or str
        Strings may carry surrounding whitespace, a sign and ``_``
        digit separators.

    Returns
    -------
    gmpy2.mpz
    """
    if isinstance(value, bool):
        raise TypeError("bool is not an integer value here")
    if isinstance(value, str):
        text = value.strip()
        try:
            return BigInt(int(text, 10))
        except ValueError:
            raise ValueError(f"not a decimal integer: {value!r}") from None
    if isinstance(value, (int, BigInt)):
        return BigInt(value)
    raise TypeError(f"cannot convert {type(value).__name__} to an integer")


def in_prime_table(n) -> bool:
    """True iff n is one of the first 100 primes."""
    return n in _KNOWN_PRIMES
