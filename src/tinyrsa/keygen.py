"""Core Key Generation Utility, focusing on primality testing and the generation of random primes below a bound.

This module is responsible for generating textbook RSA key pairs whose primes lie below a caller supplied, exclusive
bound. Primality is decided exactly for every 64-bit candidate (trial division, then Miller-Rabin over a fixed witness
set) and probabilistically, with FIPS 186-5 iteration counts, beyond that.

Typical usage example:

    get_pre_primes(12000)
    p = generate_prime(1844674407370955)
    (n, e), (n, d) = generate_key_pair(10000)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
import secrets
from typing import Literal, overload, Protocol
import warnings

from tinyrsa.arith import are_coprime
from tinyrsa.arith import mod_inverse
from tinyrsa.arith import mod_pow
from tinyrsa.errors import GenerationExhausted
from tinyrsa.errors import InvalidBound
from tinyrsa.errors import NoValidExponent

_log = logging.getLogger(__name__)

DEFAULT_PUBLIC_EXPONENT: int = 65537

_SMALL_PRIMES: list[int] = []
_SMALL_PRIMES_CAP: int = 0
_RETRY_FACTOR: int = 64
# Witnesses 2..37 make Miller-Rabin exact for every w below the limit, which is well past 2**64.
_DETERMINISTIC_BASES: tuple[int, ...] = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37)
_DETERMINISTIC_LIMIT: int = 318665857834031151167461


class RandomSource(Protocol):
    """Anything able to draw a uniform integer from a half-open range, such as `random.Random`."""

    def randrange(self, start: int, stop: int) -> int:
        ...


_RNG: RandomSource = secrets.SystemRandom()


def _sieve(n: int = 10000) -> list[int]:
    """Implements the Sieve of Eratosthenes.

    Uses the textbook Sieve of Eratosthenes to generate a set of primes up to `n`.
    Includes memory space optimization and sieving until root.

    Args:
        n: The number up to which to generate primes. Defaults to 10000. Must be >= 0.

    Returns:
        A list of primes up to `n`.
    """
    if n < 2:
        return []
    i_size = (n - 1) // 2
    candidate: list[bool] = [True] * i_size
    for i in range(int(n**0.5) // 2):
        if candidate[i]:
            r = 2 * i + 3
            for j in range((r * r - 3) // 2, i_size, r):
                candidate[j] = False
    return [2] + [(no * 2 + 3) for no, ele in enumerate(candidate) if ele]


def get_pre_primes(n: int = 10000, change: bool = False) -> list[int]:
    """Get the small primes, automatically generating if necessary.

    Uses the `_SMALL_PRIMES` global as a cache if available. Regeneration occurs if requested range is greater,
    forced by `change` or cache is empty. The cache is swapped in whole, so concurrent readers never see a partial
    list.

    Args:
        n: The number up to which to generate primes. Defaults to 10000. Must be >= 0.
            Ignored if smaller or equal than `_SMALL_PRIMES_CAP`, `change` is False and `_SMALL_PRIMES` is non-empty.
        change: Whether to force a recomputation of primes. Defaults to False.

    Returns:
        List of primes in ascending order. All primes at least to `n` or more unless `change` is True.
    """
    if n < 0:
        raise ValueError("n must be >= 0")
    global _SMALL_PRIMES
    global _SMALL_PRIMES_CAP
    if n > _SMALL_PRIMES_CAP or change or not _SMALL_PRIMES:
        _log.debug("Sieving small primes up to %d", n)
        _SMALL_PRIMES = _sieve(n)
        _SMALL_PRIMES_CAP = n
    return _SMALL_PRIMES


def _trial_division(no: int, n: int = 10000) -> bool:
    """Check the provided `no` against the known small primes.

    Runs a fast pre-check before Miller-Rabin by using modulo division on our known frequent primes.

    Args:
         no: The number to check. Must be integer and non-negative.
         n: The number up to which to generate primes. Defaults to 10000.
           Passed to `get_pre_primes()`, without the `change` argument.

    Returns:
        False if `no` cannot be prime, True otherwise.
    """
    if no < 2:
        return False
    for prime in get_pre_primes(n):
        if prime**2 > no:
            return True
        if no % prime == 0:
            return False
    return True


def _miller_rabin(w: int, iters: int | None = None, *, bases: tuple[int, ...] | None = None) -> bool:
    """Perform Miller-Rabin primality test.

    With `bases` given, runs one strong probable prime round per base, which is exact for `w` below
    `_DETERMINISTIC_LIMIT` when given `_DETERMINISTIC_BASES`. Otherwise draws `iters` random bases as specified in
    FIPS 186-5.

    Args:
        w: Integer to be tested.
        iters: Number of random-base iterations to perform. Ignored when `bases` is provided.
        bases: Fixed witnesses to test against.

    Returns:
        True if `w` is (probably) prime, False otherwise.

    Raises:
        ValueError: If neither `bases` nor a positive `iters` is given, as no round would run.
    """
    if bases is None and (iters is None or iters < 1):
        raise ValueError("Miller-Rabin needs fixed bases or at least one random iteration.")
    if w <= 3:
        return w in (2, 3)
    if w % 2 == 0:
        return False
    tw = w - 1
    a = (tw & -tw).bit_length() - 1
    m = tw >> a
    if bases is None:
        bases = tuple(secrets.randbelow(w - 3) + 2 for _ in range(iters))
    for b in bases:
        b %= w
        if b == 0:
            # The witness is w itself, so w is one of the witness primes.
            continue
        z = mod_pow(b, m, w)
        if z == 1 or z == w - 1:
            continue
        for _ in range(1, a):
            z = z * z % w
            if z == w - 1:
                break
            if z == 1:
                return False
        else:
            return False
    return True


def is_prime(candidate: int, iters: None | int = None, n: int = 10000) -> bool:
    """Performs a composite Primality test, using a limited amount of trial divisions, before a Miller-Rabin test.

    Trial division by all primes up to `n` settles every candidate up to `n**2` on its own. Larger candidates go to
    a deterministic Miller-Rabin test while below `_DETERMINISTIC_LIMIT`, and to a FIPS 186-5 based probabilistic one
    past it.

    Args:
        candidate: The candidate prime to test.
        iters: Number of Miller-Rabin iterations to perform past the deterministic range.
            If not provided will use defaults as per the FIPS 186-5 Appendix C.1
        n: The number up to which to generate primes. Defaults to 10000.
            Passed to `_trial_division()`.

    Returns:
        True if `candidate` is prime (or probably prime past the deterministic range), False otherwise.
    """
    if candidate < 2:
        return False
    if not _trial_division(candidate, n):
        return False
    if candidate <= n * n:
        return True
    if candidate < _DETERMINISTIC_LIMIT:
        return _miller_rabin(candidate, bases=_DETERMINISTIC_BASES)
    if iters is None:
        if candidate.bit_length() <= 512:
            iters = 40
        elif candidate.bit_length() <= 1024:
            iters = 56
        elif candidate.bit_length() <= 1536:
            iters = 64
        elif candidate.bit_length() <= 2048:
            iters = 70
        else:
            iters = 74
    return _miller_rabin(candidate, iters)


def generate_prime(bound: int, rng: RandomSource | None = None, exclude: int | None = None) -> int:
    """Generate a random prime strictly below `bound`.

    Rejection sampling: uniform draws from `[2, bound)` until one passes `is_prime`. `randrange` rejects internally
    rather than reducing a wider draw modulo the range, so the draw carries no modulo bias.

    Args:
        bound: Exclusive upper limit for the prime. Must be at least 3.
        rng: Source of randomness. Defaults to the process-wide `secrets.SystemRandom` instance.
        exclude: A prime that must not be returned, counted as a rejected draw. Used to get a second, distinct prime.

    Returns:
        A prime `p` with `2 <= p < bound`.

    Raises:
        InvalidBound: If `bound` leaves no eligible prime.
        GenerationExhausted: If no prime was drawn within `_RETRY_FACTOR * bound.bit_length()` attempts.
    """
    if bound < 3:
        raise InvalidBound(f"Bound must be at least 3 for a prime to exist below it, got {bound}")
    if exclude is not None and bound < 4:
        raise InvalidBound(f"Bound must be at least 4 for two distinct primes, got {bound}")
    if rng is None:
        rng = _RNG
    rep_cap = _RETRY_FACTOR * bound.bit_length()
    for attempt in range(1, rep_cap + 1):
        candidate = rng.randrange(2, bound)
        if candidate != exclude and is_prime(candidate):
            _log.debug("Drew prime below %d after %d attempt(s)", bound, attempt)
            return candidate
    raise GenerationExhausted(f"Ran an improbable {rep_cap} draws below {bound} with no prime found. "
                              "Check the random number generator.")


def generate_primes(bound: int, rng: RandomSource | None = None) -> tuple[int, int]:
    """Generates a pair of distinct primes below `bound`.

    Args:
        bound: Exclusive upper limit for both primes. Must be at least 4.
        rng: Source of randomness, passed to `generate_prime`.

    Returns:
        Two distinct primes `(p, q)`, both below `bound`.

    Raises:
        InvalidBound: If fewer than two primes lie below `bound`.
    """
    if bound < 4:
        raise InvalidBound(f"Bound must be at least 4 for two distinct primes, got {bound}")
    p = generate_prime(bound, rng)
    q = generate_prime(bound, rng, exclude=p)
    return p, q


def choose_exponent(phi: int, pub: int | None = None) -> int:
    """Picks the public exponent for a totient.

    The preferred exponent is kept when it is below `phi` and coprime to it. Otherwise, the smallest `e >= 2` meeting
    those conditions is used.

    Args:
        phi: The totient `(p - 1) * (q - 1)`.
        pub: The preferred public exponent. Defaults to `DEFAULT_PUBLIC_EXPONENT`, in which case falling back is
            silent. An explicitly requested exponent that has to be replaced raises a `RuntimeWarning`.

    Returns:
        A public exponent `e` with `2 <= e < phi` and `gcd(e, phi) == 1`.

    Raises:
        NoValidExponent: If no such exponent exists.
    """
    preferred = DEFAULT_PUBLIC_EXPONENT if pub is None else pub
    if 2 <= preferred < phi and are_coprime(preferred, phi):
        return preferred
    for e in range(2, phi):
        if are_coprime(e, phi):
            if pub is not None:
                warnings.warn(f"Public exponent {pub} is unusable for totient {phi}, falling back to {e}.",
                              RuntimeWarning)
            _log.debug("Exponent %d rejected for totient %d, using %d", preferred, phi, e)
            return e
    raise NoValidExponent(f"No public exponent below {phi} is coprime to it.")


@overload
def generate_key_pair(bound: int,
                      pub: int | None = None,
                      expose_primes: Literal[False] = False,
                      rng: RandomSource | None = None) -> tuple[tuple[int, int], tuple[int, int]]:
    ...


@overload
def generate_key_pair(bound: int,
                      pub: int | None,
                      expose_primes: Literal[True],
                      rng: RandomSource | None = None) -> tuple[tuple[int, int], tuple[int, int, int, int]]:
    ...


@overload
def generate_key_pair(bound: int,
                      pub: int | None = None,
                      *,
                      expose_primes: Literal[True],
                      rng: RandomSource | None = None) -> tuple[tuple[int, int], tuple[int, int, int, int]]:
    ...


def generate_key_pair(
    bound: int,
    pub: int | None = None,
    expose_primes: bool = False,
    rng: RandomSource | None = None,
) -> tuple[tuple[int, int], tuple[int, int]] | tuple[tuple[int, int], tuple[int, int, int, int]]:
    """Generates a textbook RSA key pair from two distinct primes below `bound`.

    Bound 5 only admits the primes 2 and 3, whose totient of 2 leaves no usable exponent. Above it that pair is
    redrawn, so the smallest bound that always succeeds is 6.

    Args:
        bound: Exclusive upper limit for both primes. Must be at least 5.
        pub: The preferred public exponent, see `choose_exponent`. Defaults to 65537 where usable.
        expose_primes: Whether to export the prime numbers as well or not. Defaults to False.
            Provides some acceleration for signing if used correctly.
        rng: Source of randomness, passed down to the prime generator.

    Returns:
        A tuple of (public, private) sub-tuples (modulus, exponent) or if exposed for the private
        (modulus, exponent, p, q)

    Raises:
        InvalidBound: If `bound` is below 5.
        NoValidExponent: If the drawn primes leave no usable public exponent, i.e. for a bound of 5.
        GenerationExhausted: If prime generation ran out of attempts.
    """
    if bound < 5:
        raise InvalidBound(f"Bound must be at least 5 to build an RSA modulus, got {bound}")
    rep_cap = _RETRY_FACTOR * bound.bit_length()
    # The pair {2, 3} has totient 2 and no usable exponent. Below 5 it is the only pair, so let it fail there.
    for _ in range(rep_cap):
        p, q = generate_primes(bound, rng)
        if (p - 1) * (q - 1) != 2 or bound == 5:
            break
    else:
        raise GenerationExhausted(f"Ran an improbable {rep_cap} prime pair draws below {bound} without a usable pair.")
    n = p * q
    phi = (p - 1) * (q - 1)
    e = choose_exponent(phi, pub)
    d = mod_inverse(e, phi)
    _log.debug("Generated key pair with modulus %d and public exponent %d", n, e)
    if not expose_primes:
        del p, q
        return (n, e), (n, d)
    return (n, e), (n, d, p, q)
