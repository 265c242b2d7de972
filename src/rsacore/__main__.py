"""Command line front-end for key generation, textbook encryption and primality checks.

Typical usage example:

    rsacore keygen --bound 100000 --exponent 17 key.pub key
    rsacore encrypt key.pub 123
    rsacore decrypt key 4711
    rsacore check 561 --rounds 20
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import argparse
import logging
import pathlib
import sys
import warnings

import rsacore
from rsacore import keygen


def positive_int(text: str) -> int:
    """argparse type accepting integers >= 1."""
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"{text} is not a positive integer")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rsacore", description="Textbook RSA utilities. Not for real secrets.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {rsacore.__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="log key generation progress")
    commands = parser.add_subparsers(dest="command", required=True)

    gen = commands.add_parser("keygen", help="generate a key pair and save both halves")
    gen.add_argument("public_key", type=pathlib.Path)
    gen.add_argument("private_key", type=pathlib.Path)
    gen.add_argument("--bound", "-b", type=positive_int, default=2**32, help="exclusive upper limit for the primes")
    gen.add_argument("--exponent", "-e", type=positive_int, default=keygen.DEFAULT_PUBLIC_EXPONENT)
    gen.add_argument("--force", "-f", action="store_true", help="overwrite existing key files")

    enc = commands.add_parser("encrypt", help="encrypt an integer with a public key")
    enc.add_argument("public_key", type=pathlib.Path)
    enc.add_argument("message", type=int)

    dec = commands.add_parser("decrypt", help="decrypt an integer with a private key")
    dec.add_argument("private_key", type=pathlib.Path)
    dec.add_argument("ciphertext", type=int)

    chk = commands.add_parser("check", help="run Miller-Rabin on a number, exits 1 if composite")
    chk.add_argument("candidate", type=int)
    chk.add_argument("--rounds", "-r", type=positive_int, default=keygen.DEFAULT_ROUNDS)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    match args.command:
        case "keygen":
            if not args.force and (args.public_key.exists() or args.private_key.exists()):
                print("Destination private or public key already exists! Use --force to replace it.", file=sys.stderr)
                return 1
            key = rsacore.RSAPrivKey.generate(args.bound, args.exponent)
            key.pub.save(args.public_key)
            key.save(args.private_key)
            print(f"Generated modulus {key.mod}")
        case "encrypt":
            warnings.warn("Textbook encryption is unsecure! Please use with care.", RuntimeWarning)
            pub = rsacore.RSAPubKey.load(args.public_key)
            if not 0 <= args.message < pub.mod:
                print(f"Message does not fit below the modulus {pub.mod} and will not decrypt to itself.",
                      file=sys.stderr)
            print(pub.encrypt(args.message))
        case "decrypt":
            print(rsacore.RSAPrivKey.load(args.private_key).decrypt(args.ciphertext))
        case "check":
            if not rsacore.is_probable_prime(args.candidate, args.rounds):
                print(f"{args.candidate} is composite.")
                return 1
            print(f"{args.candidate} is probably prime.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
