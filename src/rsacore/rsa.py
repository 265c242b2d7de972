"""Provides the textbook RSA permutation, along with key objects that can be saved to and loaded from disk.

Encryption and decryption are the bare modular exponentiation, no padding is applied. Messages must be integers in
`[0, n)`; anything larger silently wraps around the modulus and cannot be recovered, checking this is up to the
caller. On disk, public keys are PEM armored PKCS1 and private keys PEM armored PKCS8.

Typical usage example:

    pk = RSAPrivKey.generate(1000, 17)
    c = pk.pub.encrypt(123)
    r = pk.decrypt(c)
    pk.save(pathlib.Path("key"))
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import base64
import pathlib
import textwrap

from pyasn1.codec.der import decoder
from pyasn1.codec.der import encoder
from pyasn1.type import univ
from pyasn1_modules import rfc5208
from pyasn1_modules import rfc8017

from rsacore import keygen
from rsacore.arith import mod_exp
from rsacore.arith import mod_inverse
from rsacore.entropy import RandomSource

PUBLIC_LABEL = "RSA PUBLIC KEY"
PRIVATE_LABEL = "PRIVATE KEY"


def encrypt(message: int, public_key: tuple[int, int]) -> int:
    """Encrypts `message` under the public key `(e, n)`.

    Args:
        message: The plaintext. Only values in `[0, n)` survive a round trip.
        public_key: Tuple of (exponent, modulus).

    Returns:
        The ciphertext.
    """
    e, n = public_key
    return mod_exp(message, e, n)


def decrypt(ciphertext: int, d: int, n: int) -> int:
    """Decrypts `ciphertext` with the private exponent `d` under modulus `n`."""
    return mod_exp(ciphertext, d, n)


class RSAKey:
    """An exponent paired with its modulus, applied to integer messages.

    Attributes:
        mod: The modulus n = p * q.
        expo: The exponent, e for public keys and d for private ones.
    """

    def __init__(self, mod: int, expo: int) -> None:
        self.mod = mod
        self.expo = expo

    def c_rsa(self, message: int) -> int:
        """Raises `message` to the key's exponent modulo `mod`. Values >= `mod` wrap."""
        return mod_exp(message, self.expo, self.mod)


class RSAPubKey(RSAKey):
    """The public half, (e, n), of a textbook key pair."""

    def encrypt(self, message: int) -> int:
        return encrypt(message, (self.expo, self.mod))

    def to_der(self) -> bytes:
        body = rfc8017.RSAPublicKey()
        body["modulus"] = self.mod
        body["publicExponent"] = self.expo
        return encoder.encode(body)

    @classmethod
    def from_der(cls, der: bytes) -> "RSAPubKey":
        body, _ = decoder.decode(der, asn1Spec=rfc8017.RSAPublicKey())
        return cls(int(body["modulus"]), int(body["publicExponent"]))

    def save(self, file: pathlib.Path) -> None:
        """Writes the key to `file` as a PKCS1 "RSA PUBLIC KEY" PEM."""
        pathlib.Path(file).write_text(armor(self.to_der(), PUBLIC_LABEL), encoding="ascii")

    @classmethod
    def load(cls, file: pathlib.Path) -> "RSAPubKey":
        """Reads a key written by `save`.

        Raises:
            IOError: If the file is not a PKCS1 public key PEM.
        """
        return cls.from_der(unarmor(pathlib.Path(file).read_text(encoding="ascii"), PUBLIC_LABEL))


class RSAPrivKey(RSAKey):
    """The private exponent of a key pair, holding on to its public half and, optionally, the primes.

    Decryption only needs `mod` and `expo`. Saving needs the primes as well, since a PKCS1 private key carries the CRT
    values d mod (p - 1), d mod (q - 1) and q^-1 mod p.

    Attributes:
        mod: The modulus n = p * q.
        expo: The private exponent d.
        pub: The matching public key.
        p: First prime, if known.
        q: Second prime, if known.
    """

    def __init__(self, mod: int, pub_exp: int, priv_exp: int, p: int | None = None, q: int | None = None) -> None:
        super().__init__(mod, priv_exp)
        self.pub: RSAPubKey = RSAPubKey(mod, pub_exp)
        self.p: int | None = p
        self.q: int | None = q

    def decrypt(self, ciphertext: int) -> int:
        return decrypt(ciphertext, self.expo, self.mod)

    def to_der(self) -> bytes:
        """Encodes the key as PKCS8 `PrivateKeyInfo` around a two-prime PKCS1 `RSAPrivateKey`.

        Raises:
            NotImplementedError: If the key does not know its primes.
        """
        if not self.p or not self.q:
            raise NotImplementedError("Key export needs both primes to derive the CRT components.")
        values = {
            "version": 0,
            "modulus": self.mod,
            "publicExponent": self.pub.expo,
            "privateExponent": self.expo,
            "prime1": self.p,
            "prime2": self.q,
            "exponent1": self.expo % (self.p - 1),
            "exponent2": self.expo % (self.q - 1),
            "coefficient": mod_inverse(self.q, self.p),
        }
        body = rfc8017.RSAPrivateKey()
        for field, value in values.items():
            body[field] = value
        algorithm = rfc5208.AlgorithmIdentifier()
        algorithm["algorithm"] = rfc8017.rsaEncryption
        algorithm["parameters"] = univ.Null("")
        wrapper = rfc5208.PrivateKeyInfo()
        wrapper["version"] = 0
        wrapper["privateKeyAlgorithm"] = algorithm
        wrapper["privateKey"] = encoder.encode(body)
        return encoder.encode(wrapper)

    @classmethod
    def from_der(cls, der: bytes) -> "RSAPrivKey":
        """Decodes a PKCS8 wrapped two-prime RSA key.

        Raises:
            IOError: If the wrapper version, the algorithm or the key version is not the one `to_der` writes.
        """
        wrapper, _ = decoder.decode(der, asn1Spec=rfc5208.PrivateKeyInfo())
        if wrapper["version"] != 0:
            raise IOError("Unsupported version of private key information wrapper")
        if wrapper["privateKeyAlgorithm"]["algorithm"] != rfc8017.rsaEncryption:
            raise IOError("Private Key Algorithm not supported.")
        body, _ = decoder.decode(wrapper["privateKey"], asn1Spec=rfc8017.RSAPrivateKey())
        if body["version"] != 0:
            raise IOError("Multi-prime keys are not supported.")
        fields = ("modulus", "publicExponent", "privateExponent", "prime1", "prime2")
        return cls(*(int(body[field]) for field in fields))

    def save(self, file: pathlib.Path) -> None:
        """Writes the key to `file` as a PKCS8 "PRIVATE KEY" PEM."""
        pathlib.Path(file).write_text(armor(self.to_der(), PRIVATE_LABEL), encoding="ascii")

    @classmethod
    def load(cls, file: pathlib.Path) -> "RSAPrivKey":
        """Reads a key written by `save`, or any unencrypted PKCS8 RSA key."""
        return cls.from_der(unarmor(pathlib.Path(file).read_text(encoding="ascii"), PRIVATE_LABEL))

    @classmethod
    def from_key_pair(cls, key_pair: keygen.KeyPair) -> "RSAPrivKey":
        return cls(key_pair.n, key_pair.e, key_pair.d, key_pair.p, key_pair.q)

    @classmethod
    def generate(cls,
                 bound: int,
                 pub_exp: int = keygen.DEFAULT_PUBLIC_EXPONENT,
                 source: RandomSource | None = None) -> "RSAPrivKey":
        """Runs `keygen.generate_key_pair` and wraps the result.

        Args:
            bound: Exclusive upper limit for both primes.
            pub_exp: The public exponent of the key.
            source: Randomness provider. Defaults to the system source.

        Returns:
            The private key, with its public key under `.pub`.
        """
        return cls.from_key_pair(keygen.generate_key_pair(bound, pub_exp, source))


def armor(der: bytes, label: str) -> str:
    """Wraps DER bytes in PEM armor with 64 character base64 lines."""
    body = textwrap.wrap(base64.b64encode(der).decode("ascii"), 64)
    return "\n".join([f"-----BEGIN {label}-----", *body, f"-----END {label}-----"]) + "\n"


def unarmor(text: str, label: str) -> bytes:
    """Strips PEM armor of the given `label` and returns the DER bytes.

    Raises:
        IOError: If the BEGIN line is not the first line or the END line is missing.
    """
    lines = [line.strip() for line in text.strip().splitlines()]
    begin, end = f"-----BEGIN {label}-----", f"-----END {label}-----"
    if not lines or lines[0] != begin:
        raise IOError(f"Expected PEM armor {begin}")
    if end not in lines:
        raise IOError(f"PEM armor is missing {end}")
    return base64.b64decode("".join(lines[1:lines.index(end)]))
