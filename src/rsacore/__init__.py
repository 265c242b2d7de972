"""Textbook RSA in an Academic Sense.

Provides the number theoretic building blocks of RSA: modular exponentiation, the Extended Euclidean Algorithm,
Miller-Rabin probable prime testing and generation, and key pair generation on top of them. Encryption and
decryption are unpadded and meant for study, not for protecting anything.

Typical usage example:

    kp = generate_key_pair(1000, 17)
    c = encrypt(123, kp.public_key)
    r = decrypt(c, kp.private_key, kp.n)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from rsacore.arith import ext_gcd
from rsacore.arith import mod_exp
from rsacore.arith import mod_inverse
from rsacore.arith import NotInvertibleError
from rsacore.entropy import RandomSource
from rsacore.entropy import SeededRandomSource
from rsacore.entropy import SystemRandomSource
from rsacore.keygen import generate_key_pair
from rsacore.keygen import generate_probable_prime
from rsacore.keygen import is_probable_prime
from rsacore.keygen import KeyGenerationError
from rsacore.keygen import KeyPair
from rsacore.keygen import witness
from rsacore.rsa import decrypt
from rsacore.rsa import encrypt
from rsacore.rsa import RSAPrivKey
from rsacore.rsa import RSAPubKey

__version__ = "0.1.0"
__all__ = [
    "RSAPrivKey",
    "RSAPubKey",
    "KeyPair",
    "KeyGenerationError",
    "NotInvertibleError",
    "RandomSource",
    "SeededRandomSource",
    "SystemRandomSource",
    "mod_exp",
    "ext_gcd",
    "mod_inverse",
    "witness",
    "is_probable_prime",
    "generate_probable_prime",
    "generate_key_pair",
    "encrypt",
    "decrypt",
]
