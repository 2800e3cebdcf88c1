"""
Command-line entrypoint.

This script either:
- Evaluates the expressions given as arguments and prints each result
- Evaluates every line of an operations file (plain text or archive) in parallel,
  writing the results next to the input file
"""

import argparse
import logging
from pathlib import Path
import sys
from typing import List, Optional

from pydantic import BaseModel, Field, FilePath, ValidationError, model_validator

from shunting_calculator.batch.runner import BatchEvaluator
from shunting_calculator.batch.source import read_expressions
from shunting_calculator.common.logger import logger
from shunting_calculator.common.operations import OperationResult, OperationRequest, evaluate_request
from shunting_calculator.common.parser import ExpressionParser
from shunting_calculator.common.tokens import format_rpn


class CliArgs(BaseModel):
    """
    Pydantic model used to validate CLI arguments.

    Attributes
    ----------
    expressions : list of str
        Expressions to evaluate directly.
    file_path : FilePath, optional
        Path to a file containing one arithmetic operation per line.
    rpn : bool
        Also print the Reverse Polish Notation of each expression.
    verbose : bool
        Enable debug logging.
    """

    expressions: List[str] = Field(default_factory=list)
    file_path: Optional[FilePath] = None
    rpn: bool = False
    verbose: bool = False

    @model_validator(mode="after")
    def require_input(self) -> "CliArgs":
        """Ensure that at least one expression or a file is given."""
        if not self.expressions and self.file_path is None:
            raise ValueError("Provide at least one expression or --file")
        return self


def parse_args(argv: Optional[List[str]] = None) -> CliArgs:
    """
    Parse and validate command-line arguments.

    :param argv: Arguments to parse, defaults to sys.argv[1:]
    :return: Validated CLI arguments
    :rtype: CliArgs
    """
    parser = argparse.ArgumentParser(
        prog="shunting-calc",
        description="Evaluate arithmetic expressions with + - * / %, parentheses and unary minus",
        epilog=(
            "Put -- before expressions starting with a minus sign followed by a parenthesis, "
            "e.g. shunting-calc -- \"-(1 + 2) * 3\""
        ),
    )

    parser.add_argument("expressions", nargs="*", help="Arithmetic expressions to evaluate")
    parser.add_argument(
        "-f",
        "--file",
        dest="file_path",
        help="Path to a .txt, .zip, .tar.xz or .7z file containing one operation per line",
    )
    parser.add_argument("--rpn", action="store_true", help="Also print the postfix (RPN) form")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    try:
        return CliArgs(**vars(args))
    except ValidationError as exc:
        parser.error(str(exc))


def build_output_path(input_path: Path) -> Path:
    """
    Construct a safe output file path based on the input file.

    - Preserves the original folder
    - Replaces dots in extensions with underscores
    - Appends '_results.txt' at the end

    Examples
    --------
    input: resources/operations_short.7z
    output: resources/operations_short_7z_results.txt

    :param input_path: Path to the input file
    :return: Path to the output file
    """
    suffix_safe = "".join(input_path.suffixes).replace(".", "_")
    stem = input_path.name[: len(input_path.name) - len("".join(input_path.suffixes))]
    return input_path.with_name(f"{stem}{suffix_safe}_results.txt")


def evaluate_expressions(expressions: List[str], show_rpn: bool = False) -> bool:
    """
    Evaluate expressions in-process and print one line per expression.

    :param expressions: Expressions to evaluate
    :param show_rpn: Print the postfix form under each successful expression
    :return: True if every expression was evaluated
    """
    ok = True
    for line, expr in enumerate(expressions, start=1):
        outcome = evaluate_request(OperationRequest(expression=expr), line=line)
        print(outcome)
        if not isinstance(outcome, OperationResult):
            ok = False
        elif show_rpn:
            rpn = ExpressionParser.to_rpn(ExpressionParser.tokenize(expr))
            print(f"  RPN: {format_rpn(rpn)}")
    return ok


def evaluate_file(input_path: Path) -> bool:
    """
    Evaluate every operation of a file in parallel worker processes.

    :param input_path: Path to the operations file or archive
    :return: True if every expression was evaluated
    """
    output_path: Path = build_output_path(input_path)
    payloads = BatchEvaluator(output_file=output_path).run(read_expressions(input_path))
    print(f"Results written to {output_path}")
    return all("result" in payload for payload in payloads)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function executed by the ``shunting-calc`` console script.

    :return: Process exit status, 1 if any expression failed
    """
    cli_args = parse_args(argv)
    if cli_args.verbose:
        logger.setLevel(logging.DEBUG)

    ok = True
    if cli_args.expressions:
        ok = evaluate_expressions(cli_args.expressions, show_rpn=cli_args.rpn)
    if cli_args.file_path is not None:
        ok = evaluate_file(Path(cli_args.file_path)) and ok

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
