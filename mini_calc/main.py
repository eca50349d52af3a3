"""
Command-line entry point.

This script:
- Evaluates a single expression given as argument
- Or evaluates every line of a text file or archive
- Updates the persisted settings (precision, theme)
- Prints the most recent history entries

Every evaluation is recorded in the history kept in the data directory.
"""

import argparse
from pathlib import Path
import sys
from typing import List, Optional

from pydantic import BaseModel, Field, FilePath, ValidationError

from mini_calc.batch import build_output_path, read_expressions, result_line
from mini_calc.common.logger import configure_logging, logger
from mini_calc.common.models import MAX_PRECISION, MIN_PRECISION, Theme
from mini_calc.session import HISTORY_DISPLAY_LIMIT, CalculatorSession


DEFAULT_DATA_DIR: Path = Path.home() / ".mini-calc"


class CliArgs(BaseModel):
    """
    Pydantic model used to validate CLI arguments.

    Attributes
    ----------
    expression : Optional[str]
        Expression to evaluate.
    file_path : Optional[FilePath]
        Path to a file containing one expression per line.
    precision : Optional[int]
        New display precision to store.
    theme : Optional[Theme]
        New theme to store.
    history : Optional[int]
        Number of history entries to print.
    data_dir : Path
        Directory holding settings and history.
    """

    expression: Optional[str] = None
    file_path: Optional[FilePath] = None
    precision: Optional[int] = Field(default=None, ge=MIN_PRECISION, le=MAX_PRECISION)
    theme: Optional[Theme] = None
    history: Optional[int] = Field(default=None, ge=0)
    data_dir: Path = DEFAULT_DATA_DIR


def parse_args(argv: Optional[List[str]] = None) -> CliArgs:
    """
    Parse and validate command-line arguments.

    :param argv: Arguments to parse, defaults to ``sys.argv[1:]``
    :return: Validated CLI arguments
    :rtype: CliArgs
    """
    parser = argparse.ArgumentParser(
        prog="mini-calc",
        description="Evaluate arithmetic expressions with + - * / and parentheses",
    )

    parser.add_argument("expression", nargs="?", help="Expression to evaluate, e.g. '(2+3)×4'")
    parser.add_argument("-f", "--file", dest="file_path", help="File (.txt, .zip, .tar.xz, .7z) with one expression per line")
    parser.add_argument("-p", "--precision", type=int, help="Store the number of fractional digits shown (0-12)")
    parser.add_argument("-t", "--theme", choices=[t.value for t in Theme], help="Store the display theme")
    parser.add_argument(
        "--history",
        nargs="?",
        type=int,
        const=HISTORY_DISPLAY_LIMIT,
        help=f"Print the latest history entries (default {HISTORY_DISPLAY_LIMIT})",
    )
    parser.add_argument("--data-dir", type=Path, default=DEFAULT_DATA_DIR, help="Directory for settings and history")

    args = parser.parse_args(argv)

    try:
        return CliArgs(**vars(args))
    except ValidationError as exc:
        parser.error(str(exc))


def run_file(session: CalculatorSession, input_path: Path) -> Path:
    """
    Evaluate every expression of a file and write one result line per expression.

    :param CalculatorSession session: Session used for evaluation and history
    :param Path input_path: Text file or archive to read

    :return: Path of the written results file
    :rtype: Path
    """
    output_path = build_output_path(input_path)
    expressions = read_expressions(input_path)
    logger.info(f"📄 Evaluating {len(expressions)} expressions from {input_path}")

    with output_path.open("w", encoding="utf-8") as f_out:
        for expr in expressions:
            result, text = session.evaluate(expr)
            f_out.write(result_line(result, expr, text) + "\n")
            f_out.flush()

    logger.info(f"📄✅ Results written to {output_path}")
    return output_path


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function of the ``mini-calc`` command.

    :return: Exit status, 1 when an expression could not be evaluated
    """
    cli_args = parse_args(argv)
    configure_logging()
    session = CalculatorSession.open(cli_args.data_dir)
    status = 0

    if cli_args.precision is not None:
        session.settings.set_precision(cli_args.precision)
    if cli_args.theme is not None:
        session.settings.set_theme(cli_args.theme)

    if cli_args.file_path is not None:
        try:
            print(run_file(session, Path(cli_args.file_path)))
        except (ValueError, OSError) as exc:
            logger.error(str(exc))
            status = 1

    if cli_args.expression is not None:
        result, text = session.evaluate(cli_args.expression)
        print(text)
        if result.error is not None:
            status = 1

    if cli_args.history is not None:
        for entry in session.recent_history(cli_args.history):
            print(f"{entry.expression} = {entry.result}")

    return status


if __name__ == "__main__":
    sys.exit(main())
