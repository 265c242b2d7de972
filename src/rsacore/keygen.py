"""Core Key Generation Utility, covering primality testing, probable prime generation and key pair assembly.

Primes are probable primes, classified by the Miller-Rabin test with a caller chosen number of rounds. Candidates are
drawn uniformly below an exclusive bound, so the resulting keys are small textbook keys rather than keys of a fixed
bit length. All randomness comes from an explicit `RandomSource`, defaulting to the operating system.

Typical usage example:

    is_probable_prime(561)
    p = generate_probable_prime(1000)
    kp = generate_key_pair(1000, 17, source=SeededRandomSource(7))
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
import math
from typing import NamedTuple

from rsacore.arith import mod_exp
from rsacore.arith import mod_inverse
from rsacore.arith import NotInvertibleError
from rsacore.entropy import RandomSource
from rsacore.entropy import resolve

logger = logging.getLogger(__name__)

DEFAULT_ROUNDS: int = 5
DEFAULT_PUBLIC_EXPONENT: int = 65537
MAX_KEYGEN_ATTEMPTS: int = 1000


class KeyGenerationError(RuntimeError):
    """Raised when key generation gives up, either after too many rejections or on an inverse failure."""


class KeyPair(NamedTuple):
    """A freshly generated textbook RSA key pair.

    Attributes:
        e: The public exponent.
        n: The modulus, p * q.
        d: The private exponent, inverse of `e` modulo (p - 1) * (q - 1).
        p: Private Prime 1.
        q: Private Prime 2.
    """
    e: int
    n: int
    d: int
    p: int
    q: int

    @property
    def public_key(self) -> tuple[int, int]:
        """The public key as (exponent, modulus)."""
        return self.e, self.n

    @property
    def private_key(self) -> int:
        return self.d

    @property
    def totient(self) -> int:
        return (self.p - 1) * (self.q - 1)


def _decompose(n: int) -> tuple[int, int]:
    """Split `n - 1` into `d * 2**s` with `d` odd."""
    d = n - 1
    s = 0
    while d % 2 == 0:
        d //= 2
        s += 1
    return d, s


def witness(n: int, a: int, incremental: bool = False) -> bool:
    """Checks whether `a` is a Miller-Rabin witness for the compositeness of `n`.

    By default, every round recomputes `a**(d * 2**r) mod n` from scratch. Setting `incremental` squares the previous
    residue instead, which gives the same verdict with a single full exponentiation.

    Args:
        n: The number under test. Values <= 4 are never judged, callers must special-case them.
        a: The base, expected in `[2, n - 2]`.
        incremental: Whether to square the previous residue instead of recomputing it. Defaults to False.

    Returns:
        True if `a` proves `n` composite, False otherwise.
    """
    if n <= 4:
        return False
    d, s = _decompose(n)
    x = mod_exp(a, d, n)
    if x == 1 or x == n - 1:
        return False
    for r in range(1, s):
        if incremental:
            x = (x * x) % n
        else:
            x = mod_exp(a, d * 2**r, n)
        if x == n - 1:
            return False
    return True


def is_probable_prime(n: int, rounds: int = DEFAULT_ROUNDS, source: RandomSource | None = None) -> bool:
    """Perform the Miller-Rabin primality test.

    Even numbers other than 2 are rejected outright. Otherwise, each round draws a base uniformly from `[2, n - 2]`.
    A prime is never rejected, a composite slips through with a probability of at most 4**-rounds.

    Args:
        n: The candidate to classify.
        rounds: Number of Miller-Rabin rounds. Defaults to 5. Must be >= 1.
        source: Where to draw the bases from. Defaults to the system source.

    Returns:
        True if `n` is probably prime, False if it is definitely composite.

    Raises:
        ValueError: If `rounds` is less than 1.
    """
    if rounds < 1:
        raise ValueError("rounds must be >= 1")
    if n < 2:
        return False
    if n in (2, 3):
        return True
    # Covers 4, which witness() cannot judge.
    if n % 2 == 0:
        return False
    source = resolve(source)
    for _ in range(rounds):
        a = source.next_random(n - 3) + 2
        if witness(n, a):
            return False
    return True


def generate_probable_prime(bound: int, rounds: int = DEFAULT_ROUNDS, source: RandomSource | None = None) -> int:
    """Generate a probable prime below `bound`.

    Samples candidates uniformly from `[0, bound)` until one passes `is_probable_prime`. There is no attempt cap, by
    prime density the expected number of draws is in the order of ln(bound).

    Args:
        bound: Exclusive upper limit for the prime. Must be >= 3.
        rounds: Number of Miller-Rabin rounds per candidate. Defaults to 5.
        source: Where to draw candidates and bases from. Defaults to the system source.

    Returns:
        A probable prime in `[2, bound)`.

    Raises:
        ValueError: If `bound` leaves no prime to find.
    """
    if bound < 3:
        raise ValueError("bound must be >= 3, no prime lies below it otherwise")
    source = resolve(source)
    while True:
        candidate = source.next_random(bound)
        if candidate < 2:
            continue
        if is_probable_prime(candidate, rounds, source):
            return candidate


def generate_key_pair(bound: int,
                      e: int = DEFAULT_PUBLIC_EXPONENT,
                      source: RandomSource | None = None,
                      rounds: int = DEFAULT_ROUNDS,
                      max_attempts: int = MAX_KEYGEN_ATTEMPTS) -> KeyPair:
    """Generates a textbook RSA key pair.

    Draws two primes below `bound` and derives the private exponent. Equal primes or a public exponent sharing a
    factor with the totient cause both primes to be discarded and the whole procedure to start over.

    Args:
        bound: Exclusive upper limit for both primes. Must be >= 4.
        e: The public exponent. Defaults to 65537. Must be >= 1.
        source: Where to draw the randomness from. Defaults to the system source.
        rounds: Number of Miller-Rabin rounds per candidate. Defaults to 5.
        max_attempts: How many full attempts to make before giving up. Defaults to `MAX_KEYGEN_ATTEMPTS`.

    Returns:
        The new key pair.

    Raises:
        ValueError: If any argument is out of range.
        KeyGenerationError: If every attempt was rejected, or the private exponent could not be derived.
    """
    if bound < 4:
        raise ValueError("bound must be >= 4 to leave room for two distinct primes")
    if e < 1:
        raise ValueError("Public exponent must be >= 1")
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")
    source = resolve(source)
    for attempt in range(1, max_attempts + 1):
        p = generate_probable_prime(bound, rounds, source)
        q = generate_probable_prime(bound, rounds, source)
        if p == q:
            logger.debug("Attempt %d: drew %d twice, restarting", attempt, p)
            continue
        n = p * q
        phi = (p - 1) * (q - 1)
        if math.gcd(e, phi) != 1:
            logger.debug("Attempt %d: exponent %d shares a factor with totient %d, restarting", attempt, e, phi)
            continue
        try:
            d = mod_inverse(e, phi)
        except NotInvertibleError as exc:
            raise KeyGenerationError(f"Could not invert exponent {e} modulo {phi}") from exc
        logger.debug("Key pair found after %d attempt(s)", attempt)
        return KeyPair(e, n, d, p, q)
    raise KeyGenerationError(f"Ran {max_attempts} attempts with no usable prime pair. Check the public exponent.")
