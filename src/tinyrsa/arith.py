"""Modular arithmetic helpers backing both prime generation and the RSA primitive.

Provides the greatest common divisor, the Extended Euclidean Algorithm, the modular inverse derived from it, and
square-and-multiply modular exponentiation. Python integers are arbitrary precision, so intermediate products can never
overflow, but every step is still reduced under the modulus to keep them small.

Typical usage example:

    d = mod_inverse(17, 3120)
    s = mod_pow(65, d, 3233)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from tinyrsa.errors import InvalidExponent
from tinyrsa.errors import InvalidModulus
from tinyrsa.errors import NotInvertible


def gcd(a: int, b: int) -> int:
    """Greatest common divisor by the Euclidean algorithm.

    Args:
        a: The first integer.
        b: The second integer.

    Returns:
        The non-negative greatest common divisor. `gcd(a, 0)` is `abs(a)`.
    """
    a, b = abs(a), abs(b)
    while b:
        a, b = b, a % b
    return a


def are_coprime(a: int, b: int) -> bool:
    """Whether `a` and `b` share no common factor beyond 1."""
    return gcd(a, b) == 1


def eea(a: int, b: int) -> tuple[int, int, int]:
    """Implements the Extended Euclidean Algorithm.

    Iterative form, tracking the Bezout coefficients such that a*s + b*t = g = gcd(a, b).

    Args:
        a: The first natural number.
        b: The second natural number.

    Returns:
        Tuple of (g, s, t): the greatest common divisor followed by the Bezout coefficients.
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
    """Computes the modular multiplicative inverse of `a` modulo `m`.

    Args:
        a: The value to invert.
        m: The modulus. Must be positive.

    Returns:
        The unique `d` in `[0, m)` such that `a * d % m == 1 % m`.

    Raises:
        InvalidModulus: If `m` is not positive.
        NotInvertible: If `a` and `m` are not coprime.
    """
    if m <= 0:
        raise InvalidModulus(f"Modulus must be positive, got {m}")
    g, s, _ = eea(a % m, m)
    if g != 1:
        raise NotInvertible(f"{a} has no inverse modulo {m} (gcd {g})")
    return s % m


def mod_pow(base: int, exponent: int, modulus: int) -> int:
    """Modular exponentiation by right-to-left square-and-multiply.

    Args:
        base: The base, any integer. Reduced modulo `modulus` before use.
        exponent: The exponent. Must be non-negative.
        modulus: The modulus. Must be positive.

    Returns:
        `base**exponent % modulus`. Anything modulo 1 is 0.

    Raises:
        InvalidModulus: If `modulus` is not positive.
        InvalidExponent: If `exponent` is negative.
    """
    if modulus <= 0:
        raise InvalidModulus(f"Modulus must be positive, got {modulus}")
    if exponent < 0:
        raise InvalidExponent(f"Exponent must be non-negative, got {exponent}")
    if modulus == 1:
        return 0
    result = 1
    base %= modulus
    while exponent:
        if exponent & 1:
            result = result * base % modulus
        base = base * base % modulus
        exponent >>= 1
    return result
