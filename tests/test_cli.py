# pylint: disable=missing-module-docstring
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import builtins

import pytest
import sympy

from tinyrsa import __main__ as cli
from tinyrsa import commands


def feed(mocker, *answers):
    return mocker.patch.object(builtins, "input", side_effect=list(answers))


def test_prime_non_interactive(capsys):
    cli.main(["-N", "prime", "--bound", "100"])
    out = capsys.readouterr().out.strip()
    assert sympy.isprime(int(out))
    assert int(out) < 100


def test_prime_default_bound(mocker, capsys):
    gen = mocker.patch("tinyrsa.keygen.generate_prime", return_value=1000000000000037)
    cli.main(["-N", "prime"])
    gen.assert_called_once_with(commands.PRIME_BOUND, None)
    assert capsys.readouterr().out.strip() == "1000000000000037"


def test_keygen_non_interactive(capsys):
    cli.main(["-N", "keygen", "-b", "100"])
    public, private = capsys.readouterr().out.strip().splitlines()
    n, e = map(int, public.split())
    n2, d = map(int, private.split())
    assert n == n2
    for m in range(n):
        assert pow(pow(m, d, n), e, n) == m


def test_keygen_default_exponent_is_silent(mocker, capsys):
    gen = mocker.patch("tinyrsa.keygen.generate_key_pair", return_value=((3233, 7), (3233, 1783)))
    cli.main(["-N", "keygen"])
    gen.assert_called_once_with(commands.RSA_BOUND, None, rng=None)
    assert capsys.readouterr().out.splitlines() == ["3233 7", "3233 1783"]


def test_keygen_requested_exponent(mocker):
    gen = mocker.patch("tinyrsa.keygen.generate_key_pair", return_value=((3233, 17), (3233, 2753)))
    cli.main(["-N", "keygen", "--pub-exponent", "17"])
    gen.assert_called_once_with(commands.RSA_BOUND, 17, rng=None)


def test_keygen_explicit_default_exponent_is_passed_on(mocker):
    gen = mocker.patch("tinyrsa.keygen.generate_key_pair", return_value=((3233, 7), (3233, 1783)))
    cli.main(["-N", "keygen", "--pub-exponent", "65537"])
    gen.assert_called_once_with(commands.RSA_BOUND, 65537, rng=None)


def test_keygen_explicit_default_exponent_warns_when_replaced(capsys):
    with pytest.warns(RuntimeWarning):
        cli.main(["-N", "keygen", "-b", "100", "--pub-exponent", "65537"])
    public, _ = capsys.readouterr().out.strip().splitlines()
    assert int(public.split()[1]) != 65537


def test_sign_non_interactive(capsys):
    cli.main(["-N", "sign", "-m", "2790", "-n", "3233", "-d", "2753"])
    assert capsys.readouterr().out.strip() == "65"


def test_decode_non_interactive(capsys):
    cli.main(["-N", "decode", "-S", "65", "-n", "3233", "-e", "17"])
    assert capsys.readouterr().out.strip() == "2790"


def test_verify_success(capsys):
    cli.main(["-N", "verify", "-m", "2790", "-S", "65", "-n", "3233", "-e", "17"])
    assert capsys.readouterr().out == ""


def test_verify_failure(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["-N", "verify", "-m", "2791", "-S", "65", "-n", "3233", "-e", "17"])
    assert exc.value.code == 1
    assert "Signature Verification Failed!" in capsys.readouterr().out


@pytest.mark.parametrize("argv,kind", [
    (["-N", "sign", "-m", "5000", "-n", "3233", "-d", "2753"], "MessageOutOfRange"),
    (["-N", "decode", "-S", "5000", "-n", "3233", "-e", "17"], "SignatureOutOfRange"),
    (["-N", "prime", "-b", "2"], "InvalidBound"),
    (["-N", "keygen", "-b", "5"], "NoValidExponent"),
    (["-N", "sign", "-m", "5", "-n", "3233", "-d", "-1"], "InvalidExponent"),
    (["-N", "decode", "-S", "5", "-n", "3233", "-e", "-17"], "InvalidExponent"),
])
def test_failures_are_reported(capsys, argv, kind):
    with pytest.raises(SystemExit) as exc:
        cli.main(argv)
    assert exc.value.code == 2
    assert kind in capsys.readouterr().err


def test_non_interactive_missing_field():
    with pytest.raises(IOError):
        cli.main(["-N", "sign", "-m", "2790"])


def test_interactive_sign(mocker, capsys):
    feed(mocker, "abc", "2790", "3233", "", "2753")
    cli.main(["sign"])
    out = capsys.readouterr().out
    assert "We could not convert your value to int." in out
    assert "Please provide a value." in out
    assert "Signature:\n65\n" in out
    assert "Goodbye!" in out


def test_interactive_subcommand_choice(mocker, capsys):
    prompts = feed(mocker, "nope", "decode", "65", "3233", "17")
    cli.main([])
    out = capsys.readouterr().out
    assert "Please select an option from the list." in out
    assert "Decoded message:\n2790\n" in out
    assert prompts.call_count == 5


def test_interactive_defaults(mocker, capsys):
    gen = mocker.patch("tinyrsa.keygen.generate_key_pair", return_value=((3233, 7), (3233, 1783)))
    feed(mocker, "")
    cli.main(["keygen"])
    gen.assert_called_once_with(commands.RSA_BOUND, None, rng=None)
    assert "Default value: 10000" in capsys.readouterr().out


def test_advanced_mode_prompts_exponent(mocker):
    gen = mocker.patch("tinyrsa.keygen.generate_key_pair", return_value=((3233, 17), (3233, 2753)))
    feed(mocker, "100", "17")
    cli.main(["-a", "keygen"])
    gen.assert_called_once_with(100, 17, rng=None)


def test_advanced_mode_exponent_can_be_left_out(mocker, capsys):
    gen = mocker.patch("tinyrsa.keygen.generate_key_pair", return_value=((3233, 7), (3233, 1783)))
    feed(mocker, "100", "")
    cli.main(["-a", "keygen"])
    gen.assert_called_once_with(100, None, rng=None)
    assert "This value is optional" in capsys.readouterr().out


def test_verbose_logging(mocker):
    basic = mocker.patch("logging.basicConfig")
    cli.main(["-N", "-V", "decode", "-S", "65", "-n", "3233", "-e", "17"])
    basic.assert_called_once()
