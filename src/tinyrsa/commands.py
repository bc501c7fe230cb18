"""The named operations exposed to clients, taking and returning plain integers.

Each command is a pure function over integers, mirroring the request/response pairs a front end sends: it receives
the fields as keyword arguments and either returns a result or raises a `TinyRSAError`. Commands are stateless and
safe to run concurrently, so a front end may push slow ones (prime generation) onto a worker thread.

Typical usage example:

    prime = invoke("generate-prime", bound=1000)
    (n, e), (_, d) = invoke("generate-rsa-keys")
    sig = invoke("sign-message", message=7, private_n=n, private_d=d)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
import typing

from tinyrsa import keygen
from tinyrsa import rsa

_log = logging.getLogger(__name__)

PRIME_BOUND: int = 1844674407370955
RSA_BOUND: int = 10000


def generate_big_prime(bound: int = PRIME_BOUND, rng: keygen.RandomSource | None = None) -> int:
    """Random prime strictly below `bound`, drawn from `rng` when given."""
    return keygen.generate_prime(bound, rng)


def generate_rsa_keys(bound: int = RSA_BOUND,
                      pub: int | None = None,
                      rng: keygen.RandomSource | None = None) -> tuple[tuple[int, int], tuple[int, int]]:
    """Fresh key pair as `((n, e), (n, d))`, both primes below `bound`, preferring `pub` as the public exponent."""
    return keygen.generate_key_pair(bound, pub, rng=rng)


def sign_message(message: int, private_n: int, private_d: int) -> int:
    return rsa.sign(message, private_n, private_d)


def decode_message(signature: int, public_n: int, public_e: int) -> int:
    return rsa.decode(signature, public_n, public_e)


def verify_signature(message: int, signature: int, public_n: int, public_e: int) -> bool:
    return rsa.verify(message, signature, public_n, public_e)


COMMANDS: dict[str, typing.Callable[..., typing.Any]] = {
    "generate-prime": generate_big_prime,
    "generate-rsa-keys": generate_rsa_keys,
    "sign-message": sign_message,
    "decode-message": decode_message,
    "verify-signature": verify_signature,
}


def invoke(name: str, **fields: int) -> typing.Any:
    """Runs a command by name.

    Args:
        name: One of the keys of `COMMANDS`.
        **fields: The integer fields of the request, passed as keyword arguments.

    Returns:
        The command's result.

    Raises:
        KeyError: If `name` is not a known command.
        TinyRSAError: Whatever the command itself raises, unchanged.
    """
    try:
        command = COMMANDS[name]
    except KeyError:
        raise KeyError(f"Unknown command: {name}") from None
    _log.debug("Invoking %s with fields %s", name, sorted(fields))
    return command(**fields)
