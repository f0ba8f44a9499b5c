"""CLI for the infixcalc expression evaluator.

Usage:
    python -m infixcalc repl                       # Interactive loop, blank line exits
    python -m infixcalc repl --standard            # Textbook operator-stack flushing
    python -m infixcalc eval "2 + 3 * 4"           # Evaluate one expression
    echo "10/4" | python -m infixcalc eval --json  # JSON output, expression from stdin
    python -m infixcalc tokens "(2 + 3) * 4"       # Show infix and postfix tokens
"""

from __future__ import annotations

import json
import logging
import math
import sys
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from infixcalc.config import Settings, load_settings
from infixcalc.evaluator import Evaluator
from infixcalc.models import CalcError
from infixcalc.render import format_error, format_result, render_tokens
from infixcalc.repl import run_repl
from infixcalc.tokenizer import Tokenizer

app = typer.Typer(
    name="infixcalc",
    help="Evaluator for infix arithmetic expressions",
    no_args_is_help=True,
)
console = Console(stderr=True)

_STANDARD_HELP = "Flush only higher-or-equal precedence operators (textbook shunting-yard)"


def _settings(standard: bool, verbose: bool) -> Settings:
    """Load settings from the environment, apply flags, configure logging."""
    try:
        settings = load_settings().override(standard=standard, verbose=verbose)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    logging.basicConfig(
        level=settings.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    return settings


def _read_expression(parts: Optional[list[str]]) -> str:
    if parts:
        return " ".join(parts).strip()
    return sys.stdin.read().strip()


@app.command("repl")
def cmd_repl(
    standard: bool = typer.Option(False, "--standard", "-s", help=_STANDARD_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log tokenizer and evaluator details"),
) -> None:
    """Read expressions line by line until a blank line."""
    settings = _settings(standard, verbose)
    run_repl(Console(), settings)


@app.command("eval")
def cmd_eval(
    expression: Optional[list[str]] = typer.Argument(None, help="Expression (read from stdin when omitted)"),
    standard: bool = typer.Option(False, "--standard", "-s", help=_STANDARD_HELP),
    as_json: bool = typer.Option(False, "--json", help="Print a JSON object instead of plain text"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log tokenizer and evaluator details"),
) -> None:
    """Evaluate one expression. Exits 2 on a parse or evaluation error."""
    settings = _settings(standard, verbose)
    text = _read_expression(expression)

    tokenizer = Tokenizer(text)
    tokenizer.parse()
    error: Optional[CalcError] = tokenizer.error
    result: Optional[float] = None
    if error is None:
        evaluator = Evaluator(tokenizer, policy=settings.flush_policy)
        evaluator.solve()
        error = evaluator.error
        result = evaluator.get_result()

    if error is not None:
        if as_json:
            typer.echo(json.dumps(error.to_dict(), allow_nan=False))
        else:
            console.print(f"[red]{format_error(error)}[/red]")
        raise typer.Exit(2)

    if as_json:
        payload = {"status": "ok", "finite": math.isfinite(result)}
        # JSON has no inf/nan literals; non-finite results go out as strings.
        payload["result"] = result if payload["finite"] else format_result(result)
        typer.echo(json.dumps(payload, allow_nan=False))
    else:
        typer.echo(format_result(result))


@app.command("tokens")
def cmd_tokens(
    expression: list[str] = typer.Argument(help="Expression to tokenize"),
    standard: bool = typer.Option(False, "--standard", "-s", help=_STANDARD_HELP),
) -> None:
    """Show the infix token sequence and its postfix rewrite."""
    settings = _settings(standard, verbose=False)
    text = _read_expression(expression)
    out = Console()

    tokenizer = Tokenizer(text)
    tokenizer.parse()
    if tokenizer.error is not None:
        console.print(f"[red]{format_error(tokenizer.error)}[/red]")
        raise typer.Exit(2)
    render_tokens(tokenizer.get_tokens(), out, title="Infix")

    evaluator = Evaluator(tokenizer, policy=settings.flush_policy)
    evaluator.solve()
    render_tokens(evaluator.get_tokens(), out, title=f"Postfix ({settings.flush_policy.value})")
    if evaluator.error is not None:
        console.print(f"[red]{format_error(evaluator.error)}[/red]")
        raise typer.Exit(2)
    out.print(f"Result: {format_result(evaluator.get_result())}", highlight=False)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
