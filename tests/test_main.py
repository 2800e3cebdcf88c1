"""Test the command-line entrypoint."""
from pathlib import Path

import pytest

from shunting_calculator.main import build_output_path, main, parse_args


@pytest.mark.parametrize(
    "input_path,expected",
    [
        ("resources/operations_short.7z", "resources/operations_short_7z_results.txt"),
        ("resources/ops.tar.xz", "resources/ops_tar_xz_results.txt"),
        ("ops.txt", "ops_txt_results.txt"),
    ],
)
def test_build_output_path(input_path: str, expected: str) -> None:
    """Output files live beside the input with the extension folded into the name."""
    assert build_output_path(Path(input_path)) == Path(expected)


def test_parse_args_requires_input() -> None:
    """Calling without expressions or file exits with a usage error."""
    with pytest.raises(SystemExit):
        parse_args([])


def test_parse_args_rejects_missing_file(tmp_path) -> None:
    """--file must point to an existing file."""
    with pytest.raises(SystemExit):
        parse_args(["--file", str(tmp_path / "missing.txt")])


def test_main_prints_results(capsys) -> None:
    """Expressions given as arguments are evaluated in order."""
    assert main(["1 + 2 * 3", "-1 + (-10)"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == ["1 + 2 * 3 = 7.0", "-1 + (-10) = -11.0"]


def test_main_prints_rpn(capsys) -> None:
    """--rpn prints the postfix form below each result."""
    assert main(["--rpn", "3 + 4 * 2"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == ["3 + 4 * 2 = 11.0", "  RPN: 3 4 2 * +"]


def test_main_reports_errors(capsys) -> None:
    """A failing expression is reported and sets the exit status."""
    assert main(["10 / 0", "2"]) == 1
    out = capsys.readouterr().out.splitlines()
    assert out[0].startswith("10 / 0 -> ERROR: DivisionByZero")
    assert out[1] == "2 = 2.0"


def test_main_file(tmp_path, capsys) -> None:
    """--file evaluates every line and writes the results file."""
    input_file = tmp_path / "ops.txt"
    input_file.write_text("1+1\n6/2*3\n")

    assert main(["--file", str(input_file)]) == 0

    results = (tmp_path / "ops_txt_results.txt").read_text().splitlines()
    assert sorted(results) == ["1+1 = 2.0", "6/2*3 = 9.0"]
    assert "Results written to" in capsys.readouterr().out


def test_main_expression_starting_with_minus(capsys) -> None:
    """Expressions starting with "-(" are passed after "--"."""
    assert main(["--", "-(1 + 2) * 3", "-4"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == ["-(1 + 2) * 3 = -9.0", "-4 = -4.0"]


def test_help_mentions_double_dash(capsys) -> None:
    """The help text explains how to pass a leading "-(" expression."""
    with pytest.raises(SystemExit):
        parse_args(["--help"])
    assert "--" in capsys.readouterr().out.split("Put", 1)[1]
