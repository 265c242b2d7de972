"""Modular arithmetic primitives underlying key generation and the RSA permutation.

Holds the square-and-multiply exponentiation as well as the Extended Euclidean Algorithm and the modular inverse
derived from it. Python integers are unbounded, so no intermediate value can overflow.

Typical usage example:

    mod_exp(4, 13, 497)
    g, x, y = ext_gcd(240, 46)
    d = mod_inverse(17, 3120)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0


class NotInvertibleError(ValueError):
    """Raised when a number has no inverse under the requested modulus."""


def mod_exp(base: int, exp: int, m: int) -> int:
    """Computes `base**exp mod m` by repeated squaring.

    Walks the bits of `exp` from least significant upwards, squaring the running base and folding it into the
    accumulator whenever the current bit is set. Needs O(log exp) modular multiplications.

    Args:
        base: The base. Reduced modulo `m` before anything else.
        exp: The exponent. Must be >= 0.
        m: The modulus. Must be >= 1.

    Returns:
        The residue in `[0, m)`. For `exp == 0` this is 1 (even for base 0), unless `m == 1` in which case every
        result is 0.

    Raises:
        ValueError: If `m < 1` or `exp < 0`.
    """
    if m < 1:
        raise ValueError("Modulus must be >= 1")
    if exp < 0:
        raise ValueError("Exponent must be >= 0")
    result = 1 % m
    base %= m
    while exp > 0:
        if exp & 1:
            result = (result * base) % m
        base = (base * base) % m
        exp >>= 1
    return result


def ext_gcd(a: int, b: int) -> tuple[int, int, int]:
    """Implements the Extended Euclidean Algorithm.

    Such that a*x + b*y = g = gcd(a, b). Iterative unrolling of ext_gcd(a, b) = combine(ext_gcd(b, a mod b)), with
    ext_gcd(a, 0) = (a, 1, 0).

    Args:
        a: The first natural number.
        b: The second natural number.

    Returns:
        Greatest common divisor of both numbers, followed by the Bezout coefficients.
    """
    r0, r1 = a, b
    s0, s1, t0, t1 = 1, 0, 0, 1
    while r1 != 0:
        q = r0 // r1
        r0, r1 = r1, r0 - q * r1
        s0, s1 = s1, s0 - q * s1
        t0, t1 = t1, t0 - q * t1
    return r0, s0, t0


def mod_inverse(a: int, m: int) -> int:
    """Finds d such that (a * d) mod m == 1.

    Args:
        a: The number to invert.
        m: The modulus. Must be >= 1.

    Returns:
        The inverse, normalised into `[0, m)`.

    Raises:
        NotInvertibleError: If `a` and `m` are not coprime.
        ValueError: If `m < 1`.
    """
    if m < 1:
        raise ValueError("Modulus must be >= 1")
    g, x, _ = ext_gcd(a, m)
    if g != 1:
        raise NotInvertibleError(f"{a} has no inverse modulo {m} (gcd {g})")
    # The Bezout coefficient may be negative.
    return ((x % m) + m) % m
