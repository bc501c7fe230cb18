"""Typed failures raised by the prime generation and RSA routines.

Every error derives from `TinyRSAError`, so callers may catch the whole family at once. Each one also subclasses the
builtin exception the equivalent check would otherwise raise, which keeps plain `except ValueError` handlers working.
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0


class TinyRSAError(Exception):
    """Base class for all library failures."""


class InvalidBound(TinyRSAError, ValueError):
    """The bound is too small to contain the requested primes."""


class GenerationExhausted(TinyRSAError, RuntimeError):
    """Rejection sampling ran out of attempts without finding a suitable prime."""


class NotInvertible(TinyRSAError, ValueError):
    """The value shares a factor with the modulus and has no modular inverse."""


class InvalidModulus(TinyRSAError, ValueError):
    """The modulus is not a positive integer."""


class InvalidExponent(TinyRSAError, ValueError):
    """The exponent is negative."""


class NoValidExponent(TinyRSAError, RuntimeError):
    """No public exponent below the totient is coprime to it."""


class MessageOutOfRange(TinyRSAError, ValueError):
    """The message representative lies outside [0, n)."""


class SignatureOutOfRange(TinyRSAError, ValueError):
    """The signature representative lies outside [0, n)."""
