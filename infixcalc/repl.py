"""Interactive read-eval-print loop.

Reads one expression per line, prints the result or a generic error line,
and stops at the first blank line (or end of input).
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.markup import escape

from infixcalc import __version__
from infixcalc.config import Settings
from infixcalc.evaluator import Evaluator
from infixcalc.render import format_result
from infixcalc.tokenizer import Tokenizer

logger = logging.getLogger(__name__)

PARSE_ERROR_LINE = "-- parsing error --"
EVAL_ERROR_LINE = "-- error --"


def print_banner(console: Console) -> None:
    console.print(f"Simple math expression evaluator v {__version__}")
    console.print("Unary + and - is not supported. Operations: + - * / ")
    console.print("Use (.) for decimal point, blank line to exit")
    console.print()


def evaluate_line(line: str, settings: Settings) -> str:
    """Evaluate one stripped input line and return the line to print."""
    tokenizer = Tokenizer(line)
    tokenizer.parse()
    if tokenizer.error_state():
        return PARSE_ERROR_LINE

    evaluator = Evaluator(tokenizer, policy=settings.flush_policy)
    evaluator.solve()
    if evaluator.error_state():
        return EVAL_ERROR_LINE
    return f"(result): {format_result(evaluator.get_result())}"


def run_repl(console: Console, settings: Settings) -> int:
    """Run the loop until a blank line; return the number of lines evaluated."""
    print_banner(console)
    evaluated = 0
    prompt = escape(settings.prompt)

    while True:
        try:
            line = console.input(prompt)
        except EOFError:
            break
        line = line.strip()
        if not line:
            break
        console.print(evaluate_line(line, settings), markup=False, highlight=False)
        evaluated += 1

    logger.debug("repl finished after %d lines", evaluated)
    return evaluated
