"""The Command Line Interface for the utility, including Interactive elements.

What I would call a hybrid CLI/ICLI (Command Line Interface/Interactive Command Line Interface) that automagically
generates the INTERACTIVE part on-the-fly based on the missing components of the CLI interaction, including the
option that none are included. Every subcommand maps onto one of the named operations in `tinyrsa.commands`.

Typical usage example:

    tinyrsa
    OR
    python -m tinyrsa sign --message 7 --modulus 3233 --private-exponent 2753
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import argparse
import logging
import sys
import typing

import tinyrsa
from tinyrsa import commands
from tinyrsa import keygen


class HelpData(typing.NamedTuple):
    description: str
    format: typing.Type = str
    choices: list[str] | None = None
    default: typing.Any = None
    advanced: bool = False
    optional: bool = False


help_dict: dict[str, HelpData] = {
    "subcommand":
        HelpData(
            description="The available subcommands in tinyrsa.",
            choices=["prime", "keygen", "sign", "decode", "verify"],
        ),
    "prime":
        HelpData("Random prime generation utility."),
    "keygen":
        HelpData("Key pair generation utility."),
    "sign":
        HelpData("Signing utility."),
    "decode":
        HelpData("Signature decoding utility."),
    "verify":
        HelpData("Signature verification utility."),
    "prime_bound":
        HelpData(
            description="Exclusive upper bound for the generated prime.",
            format=int,
            default=commands.PRIME_BOUND,
        ),
    "key_bound":
        HelpData(
            description="Exclusive upper bound for both primes of the key pair.",
            format=int,
            default=commands.RSA_BOUND,
        ),
    "pub_exponent":
        HelpData(
            description=(f"Preferred exponent for the public key, {keygen.DEFAULT_PUBLIC_EXPONENT} if omitted. "
                         "An exponent given here warns when it has to be replaced for the drawn primes."),
            format=int,
            advanced=True,
            optional=True,
        ),
    "message":
        HelpData(
            description="Message representative, an integer in [0, n).",
            format=int,
        ),
    "signature":
        HelpData(
            description="Signature representative, an integer in [0, n).",
            format=int,
        ),
    "modulus":
        HelpData(
            description="Key modulus n.",
            format=int,
        ),
    "private_exponent":
        HelpData(
            description="Private exponent d.",
            format=int,
        ),
    "public_exponent":
        HelpData(
            description="Public exponent e.",
            format=int,
        ),
}

needs = {
    "prime": ("prime_bound",),
    "keygen": ("key_bound", "pub_exponent"),
    "sign": ("message", "modulus", "private_exponent"),
    "decode": ("signature", "modulus", "public_exponent"),
    "verify": ("message", "signature", "modulus", "public_exponent"),
}

modulus = argparse.ArgumentParser(add_help=False)
modulus.add_argument("--modulus", "-n", type=help_dict["modulus"].format, help=help_dict["modulus"].description)
pubexp = argparse.ArgumentParser(add_help=False)
pubexp.add_argument("--public-exponent",
                    "-e",
                    type=help_dict["public_exponent"].format,
                    help=help_dict["public_exponent"].description)
payloads = argparse.ArgumentParser(add_help=False)
payloads.add_argument("--message", "-m", type=help_dict["message"].format, help=help_dict["message"].description)
sigp = argparse.ArgumentParser(add_help=False)
sigp.add_argument("--signature", "-S", type=help_dict["signature"].format, help=help_dict["signature"].description)
corep = argparse.ArgumentParser(prog="tinyrsa")
corep.add_argument("--version", "-v", action="version", version=f"%(prog)s {tinyrsa.__version__}")
corep.add_argument("--non-interactive", "-N", action="store_true", help="Enable non-interactive mode")
corep.add_argument("--advanced", "-a", action="store_true", help="Enable advanced mode, for interactive mode")
corep.add_argument("--verbose", "-V", action="store_true", help="Log debug output to stderr")
subcommands = corep.add_subparsers(dest="subcommand", title="Subcommands")

prime = subcommands.add_parser("prime", help=help_dict["prime"].description)
prime.add_argument("--bound",
                   "-b",
                   dest="prime_bound",
                   type=help_dict["prime_bound"].format,
                   help=help_dict["prime_bound"].description)

keygen_p = subcommands.add_parser("keygen", help=help_dict["keygen"].description)
keygen_p.add_argument("--bound",
                      "-b",
                      dest="key_bound",
                      type=help_dict["key_bound"].format,
                      help=help_dict["key_bound"].description)
keygen_p.add_argument("--pub-exponent",
                      type=help_dict["pub_exponent"].format,
                      help=help_dict["pub_exponent"].description)

sign = subcommands.add_parser("sign", parents=[payloads, modulus], help=help_dict["sign"].description)
sign.add_argument("--private-exponent",
                  "-d",
                  type=help_dict["private_exponent"].format,
                  help=help_dict["private_exponent"].description)
decode = subcommands.add_parser("decode", parents=[sigp, modulus, pubexp], help=help_dict["decode"].description)
verify = subcommands.add_parser("verify",
                                parents=[payloads, sigp, modulus, pubexp],
                                help=help_dict["verify"].description)


def checkmodes(arg: str, mode: tuple[bool, bool]):
    helper_data = help_dict[arg]
    skippable = helper_data.default is not None or helper_data.optional
    if (mode[0] or (helper_data.advanced and not mode[1])) and skippable:
        return helper_data.default
    if mode[0]:
        raise IOError(f"Argument {arg} is missing and non-interactive mode is active.")
    return helper_data


def choice_handler(arg: str, mode: tuple[bool, bool], prntr: typing.Callable = print):
    helper_data = checkmodes(arg, mode)
    if not isinstance(helper_data, HelpData):
        return helper_data
    prntr(f"Please specify the {arg}!")
    prntr(f"Description: {helper_data.description}")
    choices = helper_data.choices
    vald = set(choices)
    for choice in choices:
        defstring = " (Default)" if choice == helper_data.default else ""
        if help_dict.get(choice, None):
            prntr(f"{choice} - {help_dict[choice].description}" + defstring)
        else:
            prntr(f"{choice}" + defstring)
    if helper_data.default is not None:
        prntr("To accept default just click enter. Otherwise specify value.")
    while True:
        ch = input(f"{arg}: ")
        if ch in vald:
            return ch
        if not ch and helper_data.default is not None:
            return helper_data.default
        prntr("Please select an option from the list.")


def input_handler(arg: str, mode: tuple[bool, bool], prntr: typing.Callable = print):
    helper_data = checkmodes(arg, mode)
    if not isinstance(helper_data, HelpData):
        return helper_data
    prntr(f"Please specify the {arg}!")
    prntr("Description: " + helper_data.description)
    if helper_data.default is not None:
        prntr(f"Default value: {helper_data.default}")
        prntr("To accept default just click enter. Otherwise specify value.")
    elif helper_data.optional:
        prntr("This value is optional, just click enter to leave it out.")
    cls = helper_data.format
    while True:
        ch = input(f"{arg}: ")
        if not ch and helper_data.default is not None:
            return helper_data.default
        if not ch and helper_data.optional:
            return None
        if ch == "":
            prntr("Please provide a value.")
            continue
        try:
            return cls(ch)
        except ValueError:
            prntr(f"We could not convert your value to {cls.__name__}.")


def main(argv: list[str] | None = None):
    """Core Hybrid CLI/ICLI (Command Line Interface/Interactive Command Line Interface)"""
    args = corep.parse_args(argv)
    pstatus = (args.non_interactive, args.advanced)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    def pspr(text: str):
        """Print only if not in non-interactive mode."""
        if not pstatus[0]:
            print(text)

    pspr("Welcome to tinyrsa!\n")
    if not args.subcommand:
        args.subcommand = choice_handler("subcommand", pstatus)
    for reqs in needs[args.subcommand]:
        if getattr(args, reqs, None) is None:
            if help_dict[reqs].choices is not None:
                res = choice_handler(reqs, pstatus)
            else:
                res = input_handler(reqs, pstatus)
            setattr(args, reqs, res)
        else:
            pspr(f"{reqs}: {getattr(args, reqs)}")
    pspr("\nInput Complete! Executing...")
    try:
        match args.subcommand:
            case "prime":
                result = commands.invoke("generate-prime", bound=args.prime_bound)
                pspr("Prime:")
                print(result)
            case "keygen":
                (n, e), (_, d) = commands.invoke("generate-rsa-keys", bound=args.key_bound, pub=args.pub_exponent)
                pspr("Public key (n, e):")
                print(n, e)
                pspr("Private key (n, d):")
                print(n, d)
            case "sign":
                signature = commands.invoke("sign-message",
                                            message=args.message,
                                            private_n=args.modulus,
                                            private_d=args.private_exponent)
                pspr("Signature:")
                print(signature)
            case "decode":
                decoded = commands.invoke("decode-message",
                                          signature=args.signature,
                                          public_n=args.modulus,
                                          public_e=args.public_exponent)
                pspr("Decoded message:")
                print(decoded)
            case "verify":
                if commands.invoke("verify-signature",
                                   message=args.message,
                                   signature=args.signature,
                                   public_n=args.modulus,
                                   public_e=args.public_exponent):
                    pspr("Signature Verified!")
                else:
                    print("Signature Verification Failed!")
                    sys.exit(1)
    except tinyrsa.TinyRSAError as err:
        print(f"Operation failed ({type(err).__name__}): {err}", file=sys.stderr)
        sys.exit(2)
    pspr("Thank you for using tinyrsa!")
    pspr("Goodbye!")


if __name__ == "__main__":
    main()
