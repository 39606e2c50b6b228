import sys

import pytest

import dec96.error
from dec96.cli import main
from dec96.error import Colors, ErrorReport, LiteralSyntaxError
from dec96.literal import parse_decimal


def test_words(capsys):
    assert main(["words", "1", "0", "0", "10"]) == 0
    out = capsys.readouterr().out
    assert "Decimal(high=0x00000001, med=0x00000000, low=0x00000000, prec=10)" in out
    assert "is_zero: False" in out
    assert "is_positive: True" in out
    assert "is_negative: False" in out
    assert "is_approx_zero: True" in out
    assert "is_approx_positive: False" in out
    assert "is_approx_negative: False" in out
    assert "to_string: 0" in out
    assert "serialized: 0000000100000000000000000a" in out


def test_words_hex(capsys):
    assert main(["words", "0x80000000", "0", "0", "10"]) == 0
    out = capsys.readouterr().out
    assert "is_negative: True" in out
    assert "is_approx_zero: True" in out


def test_parse(capsys):
    assert main(["parse", "-0.5"]) == 0
    out = capsys.readouterr().out
    assert "to_string: -0.5" in out
    assert "is_approx_negative: True" in out


def test_parse_with_prec(capsys):
    assert main(["parse", "1.75", "--prec", "32"]) == 0
    assert "to_string: 1.5" in capsys.readouterr().out


def test_constant(capsys):
    assert main(["constant", "ZERO"]) == 0
    out = capsys.readouterr().out
    assert "is_zero: True" in out
    assert "to_string: 0" in out


def test_invalid_prec_reports_error(capsys):
    assert main(["words", "0", "0", "0", "0"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "invalid prec" in captured.err


def test_syntax_error_reports_caret(capsys):
    assert main(["parse", "1.x"]) == 1
    err = capsys.readouterr().err
    assert "Invalid decimal literal" in err
    assert "| 1.x" in err
    assert err.rstrip().endswith("^")


def test_bad_integer_argument():
    with pytest.raises(SystemExit) as excinfo:
        main(["words", "one", "0", "0", "10"])
    assert excinfo.value.code == 2


def test_debug_flag_sets_module_state(capsys):
    assert main(["--debug", "constant", "MAX"]) == 0
    assert dec96.error.debug is True


def test_report_includes_traceback_in_debug_mode():
    with pytest.raises(LiteralSyntaxError) as excinfo:
        parse_decimal("1..2")
    dec96.error.debug = True
    assert "Traceback" in str(ErrorReport(excinfo.value))
    dec96.error.debug = False
    assert "Traceback" not in str(ErrorReport(excinfo.value))


def test_caret_after_last_character_at_end_of_input(capsys):
    assert main(["parse", "1."]) == 1
    err = capsys.readouterr().err
    assert "(1:3)" in err
    assert err.rstrip("\n").splitlines()[-1] == " " * 8 + "^"


def test_parse_just_below_two_pow_31(capsys):
    assert main(["parse", "2147483647.99999999999999999999999999"]) == 0
    assert "serialized: 7fffffffffffffffffffffff5f" in capsys.readouterr().out


class _Terminal:
    def isatty(self):
        return True


class _Pipe:
    def isatty(self):
        return False


def test_colors_follow_target_stream(monkeypatch):
    monkeypatch.setattr(sys, "stdout", _Terminal())
    monkeypatch.setattr(sys, "stderr", _Pipe())
    assert Colors.true("True") == f"{Colors.GREEN}True{Colors.RESET}"
    assert Colors.rendered("1.5") == f"{Colors.YELLOW}1.5{Colors.RESET}"
    assert Colors.message("bad") == "bad"
    assert Colors.caret("^") == "^"

    monkeypatch.setattr(sys, "stdout", _Pipe())
    monkeypatch.setattr(sys, "stderr", _Terminal())
    assert Colors.true("True") == "True"
    assert Colors.source("dec96 parse") == f"{Colors.CYAN}dec96 parse{Colors.RESET}"
    assert Colors.message("bad") == f"{Colors.BOLD_RED}bad{Colors.RESET}"
