#!/usr/bin/env python3.14
# SPDX-License-Identifier: Apache-2.0

"""
sol driver – orchestrates lexing, parsing, semantic analysis and
interpretation, and maps the outcome to an exit status.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

from sol.errors import SolError
from sol.interpreter import Interpreter
from sol.lexer import Lexer
from sol.parser import Parser
from sol.runtime import DEFAULT_INT_BITS, recursion_limit
from sol.semantic import SemanticAnalyzer

logger = logging.getLogger(__name__)


class Outcome:
    """Result of running a program: success, or the single diagnostic that stopped it."""

    __slots__ = ("error",)

    def __init__(self, error: Optional[SolError] = None):
        self.error = error

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> Optional[str]:
        return self.error.kind if self.error else None

    def __repr__(self):
        return "Outcome(ok)" if self.ok else f"Outcome({self.kind}: {self.error.message})"


def run_source(
    source: str,
    out: Optional[TextIO] = None,
    filename: str = "<input>",
    int_bits: int = DEFAULT_INT_BITS,
) -> Outcome:
    """Lex, parse, check and execute `source`, writing program output to `out`."""
    try:
        with recursion_limit():
            logger.debug("lexing and parsing %s", filename)
            lexer = Lexer(source, filename=filename)
            program = Parser(lexer).parse_program()
            logger.debug("checking %d function(s)", len(program.functions))
            SemanticAnalyzer().analyze(program)
            logger.debug("executing")
            Interpreter(out, int_bits=int_bits).run(program)
    except SolError as e:
        logger.debug("%s: %s", e.kind, e.message)
        return Outcome(e)
    return Outcome()


def main(argv=None):
    parser = argparse.ArgumentParser(description="sol interpreter")
    parser.add_argument("input", help="Input .sol file")
    parser.add_argument(
        "--int-bits",
        type=int,
        choices=(8, 16, 32, 64),
        default=DEFAULT_INT_BITS,
        help="Width of the wrapping signed integer type",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log each phase")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: input file {input_path} not found", file=sys.stderr)
        return 1

    source = input_path.read_text(encoding="utf-8")
    outcome = run_source(source, sys.stdout, filename=str(input_path), int_bits=args.int_bits)
    if not outcome.ok:
        sys.stdout.flush()
        print(f"{input_path}:{outcome.error}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
