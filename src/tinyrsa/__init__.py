"""Textbook RSA and Prime Utilities over Bounded Integers, in an Academic Sense.

Provides random prime generation below a caller supplied bound, exact primality testing for 64-bit integers, modular
arithmetic, and textbook RSA key generation, signing, decoding and verification on integer representatives. The named
operations front ends call are in `tinyrsa.commands`.

Typical usage example:

    p = generate_prime(1844674407370955)
    (n, e), (_, d) = generate_key_pair(10000)
    s = sign(42, n, d)
    assert verify(42, s, n, e)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from tinyrsa.arith import gcd
from tinyrsa.arith import mod_inverse
from tinyrsa.arith import mod_pow
from tinyrsa.errors import GenerationExhausted
from tinyrsa.errors import InvalidBound
from tinyrsa.errors import InvalidExponent
from tinyrsa.errors import InvalidModulus
from tinyrsa.errors import MessageOutOfRange
from tinyrsa.errors import NotInvertible
from tinyrsa.errors import NoValidExponent
from tinyrsa.errors import SignatureOutOfRange
from tinyrsa.errors import TinyRSAError
from tinyrsa.keygen import generate_key_pair
from tinyrsa.keygen import generate_prime
from tinyrsa.keygen import generate_primes
from tinyrsa.keygen import get_pre_primes
from tinyrsa.keygen import is_prime
from tinyrsa.rsa import decode
from tinyrsa.rsa import RSAPrivKey
from tinyrsa.rsa import RSAPubKey
from tinyrsa.rsa import sign
from tinyrsa.rsa import verify

__version__ = "0.1.0"
__all__ = [
    "RSAPrivKey",
    "RSAPubKey",
    "get_pre_primes",
    "is_prime",
    "generate_prime",
    "generate_primes",
    "generate_key_pair",
    "gcd",
    "mod_inverse",
    "mod_pow",
    "sign",
    "decode",
    "verify",
    "TinyRSAError",
    "InvalidBound",
    "GenerationExhausted",
    "InvalidExponent",
    "NotInvertible",
    "InvalidModulus",
    "NoValidExponent",
    "MessageOutOfRange",
    "SignatureOutOfRange",
]
