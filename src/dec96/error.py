from __future__ import annotations

import sys
import traceback
from dataclasses import dataclass
from typing import TextIO


class Colors:
    """ANSI styling for CLI output. A style is applied only when the stream
    it is headed for is a terminal: diagnostics go to stderr, results to
    stdout."""

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"
    BOLD_RED = "\033[1;31m"
    RESET = "\033[0m"

    @classmethod
    def _paint(cls, code: str, s: str, stream: TextIO) -> str:
        return f"{code}{s}{cls.RESET}" if stream.isatty() else s

    # -- stderr ------------------------------------------------------------

    @classmethod
    def message(cls, s: str) -> str:
        return cls._paint(cls.BOLD_RED, s, sys.stderr)

    @classmethod
    def source(cls, s: str) -> str:
        return cls._paint(cls.CYAN, s, sys.stderr)

    @classmethod
    def caret(cls, s: str) -> str:
        return cls._paint(cls.RED, s, sys.stderr)

    # -- stdout ------------------------------------------------------------

    @classmethod
    def true(cls, s: str) -> str:
        return cls._paint(cls.GREEN, s, sys.stdout)

    @classmethod
    def rendered(cls, s: str) -> str:
        return cls._paint(cls.YELLOW, s, sys.stdout)


# assigned in cli.main, or by the --dec96-debug pytest option
debug = False


class Dec96Error(Exception):
    """Base class for every error raised by dec96."""


class InvalidPrecision(Dec96Error, ValueError):
    """Raised when a precision is not an int in [1, 95]."""

    def __init__(self, prec):
        self.prec = prec
        super().__init__(f"invalid prec {prec!r}, must be in (0, 96)")


class InvalidWord(Dec96Error, ValueError):
    """Raised when one of high/med/low is not a 32-bit unsigned int."""

    def __init__(self, name: str, value):
        self.name = name
        self.value = value
        super().__init__(f"invalid {name} word {value!r}, must be in [0, 2**32)")


class ValueOutOfRange(Dec96Error, ValueError):
    """Raised when a value does not fit the 96-bit layout."""


class TruncatedInput(Dec96Error, ValueError):
    """Raised when there are not enough bytes to deserialize a value."""

    def __init__(self, needed: int, available: int):
        self.needed = needed
        self.available = available
        super().__init__(f"need {needed} bytes to deserialize, only {available} available")


class LiteralSyntaxError(Dec96Error, ValueError):
    """Raised for a malformed decimal literal."""

    def __init__(self, msg: str, text: str, line: int = 1, column: int = 1):
        self.msg = msg
        self.text = text
        self.line = line
        self.column = column
        super().__init__(f"{msg} at line {line}, column {column}")


@dataclass
class ErrorReport:
    """Printable form of a Dec96Error, with the offending literal and a caret
    under the column for syntax errors."""

    err: Exception
    source: str = "<input>"

    def __post_init__(self):
        self.stack_trace = "".join(traceback.format_exception(self.err)) if debug else ""

    def __str__(self):
        msg = self.err.msg if isinstance(self.err, LiteralSyntaxError) else str(self.err)
        result = f"{self.stack_trace}{Colors.source(self.source)}: {Colors.message(msg)}"

        if not isinstance(self.err, LiteralSyntaxError):
            return result

        lines = self.err.text.splitlines() or [""]
        line_idx = min(max(self.err.line, 1), len(lines)) - 1
        location = f"{self.err.line}:{self.err.column}"
        result += f" ({location})\n    | {lines[line_idx]}\n"
        result += " " * (self.err.column - 1 + 6) + Colors.caret("^")
        return result


def report(err: Exception, source: str = "<input>", file: TextIO | None = None) -> None:
    print(str(ErrorReport(err, source)), file=file if file is not None else sys.stderr)
