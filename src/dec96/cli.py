from __future__ import annotations

import argparse
import sys

import dec96.error
from dec96.error import Colors, Dec96Error, report
from dec96.literal import parse_decimal
from dec96.value import CONSTANTS, MAX_PREC, Decimal

PREDICATES = (
    "is_zero",
    "is_positive",
    "is_negative",
    "is_approx_zero",
    "is_approx_positive",
    "is_approx_negative",
)


def int_word(s: str) -> int:
    """Parse a word given in decimal or 0x hex."""
    try:
        return int(s, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer {s!r}")


def describe(d: Decimal) -> str:
    lines = [repr(d)]
    for name in PREDICATES:
        result = getattr(d, name)()
        lines.append(f"{name}: {Colors.true(str(result)) if result else result}")
    lines.append(f"to_string: {Colors.rendered(d.to_string())}")
    lines.append(f"serialized: {d.serialize().hex()}")
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dec96",
        description="Construct a 96-bit fixed-point decimal and print its predicates",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Include stack traces in error output",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    words = sub.add_parser("words", help="Build a value from its three words and precision")
    words.add_argument("high", type=int_word)
    words.add_argument("med", type=int_word)
    words.add_argument("low", type=int_word)
    words.add_argument("prec", type=int_word)

    literal = sub.add_parser("parse", help="Build a value from a decimal literal")
    literal.add_argument("literal")
    literal.add_argument("--prec", type=int_word, default=MAX_PREC)

    constant = sub.add_parser("constant", help="Show one of the named constants")
    constant.add_argument("name", choices=sorted(CONSTANTS))

    return parser


def make_value(args: argparse.Namespace) -> Decimal:
    if args.command == "words":
        return Decimal.new(args.high, args.med, args.low, args.prec)
    if args.command == "parse":
        return parse_decimal(args.literal, args.prec)
    return CONSTANTS[args.name]


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    dec96.error.debug = args.debug

    try:
        d = make_value(args)
    except Dec96Error as err:
        report(err, source=f"dec96 {args.command}")
        return 1

    print(describe(d))
    return 0


if __name__ == "__main__":
    sys.exit(main())
