"""Provides core RSA functionalities over integer representatives: signing, decoding and verification.

Facilitates core RSA, solely under "textbook" conditions: messages and signatures are integers in `[0, n)` and no
padding or hashing is applied. Handles the general key handling, as well as the plain function forms operating
directly on the `(n, exponent)` key halves.

Typical usage example:

    pk = RSAPrivKey.generate(10000)
    s = pk.sign(42)
    assert pk.pub.verify(42, s)
    assert verify(42, sign(42, pk.mod, pk.expo), pk.pub.mod, pk.pub.expo)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from tinyrsa import keygen
from tinyrsa.arith import mod_inverse
from tinyrsa.arith import mod_pow
from tinyrsa.errors import InvalidExponent
from tinyrsa.errors import InvalidModulus
from tinyrsa.errors import MessageOutOfRange
from tinyrsa.errors import SignatureOutOfRange


class RSAKey:
    """The overall RSA key class implementation.

    Acts mostly as a template for the "core" components of a RSA Key that are strictly mandatory in both a public
    and a private key.

    Attributes:
        mod: The modulus of the keypair.
        expo: The exponent of the key, whether private or public.
    """

    range_error: type[ValueError] = MessageOutOfRange

    def __init__(self, mod: int, expo: int) -> None:
        if mod < 1:
            raise InvalidModulus(f"Modulus must be positive, got {mod}")
        if expo < 0:
            raise InvalidExponent(f"Exponent must be non-negative, got {expo}")
        self.mod = mod
        self.expo = expo

    def _check_range(self, value: int) -> None:
        if not 0 <= value < self.mod:
            raise self.range_error(f"Representative must be in range [0, {self.mod - 1}], got {value}")

    def c_rsa(self, value: int) -> int:
        """Performs core RSA operation. (Sign/Decode)

        Args:
            value: The integer representative to exponentiate.

        Returns:
            `value**expo % mod`

        Raises:
            MessageOutOfRange: If the value is out of range for a private or plain key.
            SignatureOutOfRange: If the value is out of range for a public key.
        """
        self._check_range(value)
        return mod_pow(value, self.expo, self.mod)


class RSAPubKey(RSAKey):
    """A rather straightforward subclass of RSAKey, for Public Keys.

    The init is not overwritten as a Public Key consists solely of a modulus and exponent.
    Its inputs are signatures, so range failures are reported as `SignatureOutOfRange`.
    """

    range_error = SignatureOutOfRange

    def decode(self, signature: int) -> int:
        """Recovers the message representative from a signature."""
        return self.c_rsa(signature)

    def verify(self, message: int, signature: int) -> bool:
        """Verify the signature of the message.

        Args:
            message: The message the signature should decode to.
            signature: The signature to check.

        Returns:
            True if the signature decodes to `message`, False otherwise.

        Raises:
            SignatureOutOfRange: If the signature is out of range for the key. A mismatch never raises.
        """
        return self.decode(signature) == message


class RSAPrivKey(RSAKey):
    """RSA Private Key class implementation.

    Modifies the baseline RSAKey class to provide private-key specific attributes, even if they are not strictly
    necessary for it's functioning. When the primes are known the CRT components are derived to accelerate signing.
    Exposes its connected public key.

    Attributes:
        mod: The modulus of the keypair.
        expo: The private exponent of the key.
        pub: The public key of the key.
        p: Private Prime 1.
        q: Private Prime 2.
    """

    def __init__(self,
                 mod: int,
                 pub_exp: int,
                 priv_exp: int,
                 p: int | None = None,
                 q: int | None = None,
                 exp1: int | None = None,
                 exp2: int | None = None,
                 coeff: int | None = None) -> None:
        """Initialize the RSA Private Key.

        Args:
            mod: The modulus of the keypair.
            pub_exp: The public exponent of the key.
            priv_exp: The private exponent of the key.
            p: The private prime 1.
            q: The private prime 2.
            exp1: CRT Component dmp1.
            exp2: CRT Component dmq1.
            coeff: CRT Component iqmp.
        """
        super().__init__(mod, priv_exp)
        self.pub: RSAPubKey = RSAPubKey(mod, pub_exp)
        self.p: int | None = None
        self.q: int | None = None
        self.exp1: int | None = None
        self.exp2: int | None = None
        self.coeff: int | None = None
        if p and q:
            self.p = p
            self.q = q
            self.exp1 = exp1 if exp1 is not None else _crt_exponent(priv_exp, p)
            self.exp2 = exp2 if exp2 is not None else _crt_exponent(priv_exp, q)
            self.coeff = coeff if coeff is not None else mod_inverse(q, p)

    def c_rsa(self, value: int) -> int:
        """Performs core RSA operation accelerated with CRT. (Sign)

        Args:
            value: The message representative to sign.

        Returns:
            `value**expo % mod`, identical to the non-CRT result.

        Raises:
            MessageOutOfRange: If the message is out of range for the current key.
        """
        if not self.p or not self.q:
            return super().c_rsa(value)
        self._check_range(value)
        m_1 = mod_pow(value, self.exp1, self.p)
        m_2 = mod_pow(value, self.exp2, self.q)
        h = ((m_1 - m_2) * self.coeff) % self.p
        return m_2 + self.q * h

    def sign(self, message: int) -> int:
        """Signs the message representative using the private key."""
        return self.c_rsa(message)

    @classmethod
    def generate(cls,
                 bound: int,
                 pub_exp: int | None = None,
                 rng: keygen.RandomSource | None = None) -> "RSAPrivKey":
        """Generates an RSA Private Key, and it's respective Public Key.

        Args:
            bound: Exclusive upper limit for both primes, see `keygen.generate_key_pair`.
            pub_exp: The preferred public exponent of the key. None prefers 65537 and falls back silently.
            rng: Source of randomness, passed down to the prime generator.

        Returns:
            A new generated RSA Private Key, with its primes retained for CRT.
        """
        (n, pub), (_, d, p, q) = keygen.generate_key_pair(bound, pub_exp, True, rng)
        return cls(n, pub, d, p, q)


def _crt_exponent(d: int, prime: int) -> int:
    """Reduces the private exponent for a single prime.

    A zero reduction (only possible for the prime 2) is replaced by `prime - 1` so that `0**exp` stays 0.
    """
    return d % (prime - 1) or prime - 1


def sign(message: int, n: int, d: int) -> int:
    """Signs `message` with the private key half `(n, d)`.

    Raises:
        MessageOutOfRange: If `message` is outside `[0, n)`.
    """
    return RSAKey(n, d).c_rsa(message)


def decode(signature: int, n: int, e: int) -> int:
    """Decodes `signature` with the public key half `(n, e)`.

    Raises:
        SignatureOutOfRange: If `signature` is outside `[0, n)`.
    """
    return RSAPubKey(n, e).decode(signature)


def verify(message: int, signature: int, n: int, e: int) -> bool:
    """Checks that `signature` decodes to `message` under `(n, e)`. A mismatch returns False, never raises."""
    return RSAPubKey(n, e).verify(message, signature)
