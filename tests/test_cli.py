# pylint: disable=missing-module-docstring
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import argparse

import pytest

from rsacore import __main__ as cli
import rsacore.rsa as rsau


@pytest.fixture
def keyfiles(tmp_path):
    return tmp_path / "key.pub", tmp_path / "key"


def _keygen(keyfiles, *extra):
    pub, priv = keyfiles
    return cli.main(["keygen", str(pub), str(priv), "-b", "10000", "-e", "17", *extra])


def test_keygen_writes_keys(keyfiles, capsys):
    assert _keygen(keyfiles) == 0
    pub, priv = keyfiles
    rpk = rsau.RSAPrivKey.load(priv)
    rpu = rsau.RSAPubKey.load(pub)
    assert rpu.mod == rpk.mod == rpk.p * rpk.q
    assert rpu.expo == 17
    assert capsys.readouterr().out.strip() == f"Generated modulus {rpk.mod}"


def test_keygen_refuses_overwrite(keyfiles, capsys):
    _keygen(keyfiles)
    before = keyfiles[1].read_text(encoding="ascii")
    assert _keygen(keyfiles) == 1
    assert "already exists" in capsys.readouterr().err
    assert keyfiles[1].read_text(encoding="ascii") == before


def test_keygen_force(keyfiles, capsys):
    _keygen(keyfiles)
    assert _keygen(keyfiles, "--force") == 0
    assert "already exists" not in capsys.readouterr().err


def test_encrypt_decrypt(keyfiles, capsys):
    _keygen(keyfiles)
    pub, priv = keyfiles
    message = 123 % rsau.RSAPubKey.load(pub).mod
    capsys.readouterr()
    with pytest.warns(RuntimeWarning):
        assert cli.main(["encrypt", str(pub), str(message)]) == 0
    ciphertext = int(capsys.readouterr().out.strip())
    assert cli.main(["decrypt", str(priv), str(ciphertext)]) == 0
    assert int(capsys.readouterr().out.strip()) == message


def test_encrypt_notes_oversized(keyfiles, capsys):
    _keygen(keyfiles)
    pub, _ = keyfiles
    mod = rsau.RSAPubKey.load(pub).mod
    capsys.readouterr()
    with pytest.warns(RuntimeWarning):
        cli.main(["encrypt", str(pub), str(mod + 5)])
    assert "will not decrypt to itself" in capsys.readouterr().err


def test_check_prime(capsys):
    assert cli.main(["check", "97"]) == 0
    assert capsys.readouterr().out.strip() == "97 is probably prime."


def test_check_composite(capsys):
    assert cli.main(["check", "561", "-r", "40"]) == 1
    assert capsys.readouterr().out.strip() == "561 is composite."


@pytest.mark.parametrize("rounds", ["0", "-3", "many"])
def test_check_rejects_bad_rounds(rounds, capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["check", "97", "--rounds", rounds])
    assert exc.value.code == 2
    assert "--rounds" in capsys.readouterr().err


@pytest.mark.parametrize("value", ["0", "-1"])
def test_keygen_rejects_non_positive(keyfiles, value):
    pub, priv = keyfiles
    with pytest.raises(SystemExit):
        cli.main(["keygen", str(pub), str(priv), "--exponent", value])
    assert not pub.exists()


def test_command_required():
    with pytest.raises(SystemExit) as exc:
        cli.main([])
    assert exc.value.code == 2


def test_positive_int():
    assert cli.positive_int("5") == 5
    with pytest.raises(argparse.ArgumentTypeError):
        cli.positive_int("0")
