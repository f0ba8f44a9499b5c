"""Console formatting for results and token sequences.

Results are printed like a C++ ostream prints a double (six significant
digits); token sequences are rendered as Rich tables.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from infixcalc.models import CalcError, TokenKind, TokenSequence

_KIND_STYLES = {
    TokenKind.NUMBER: "green",
    TokenKind.OPEN_BRACKET: "cyan",
    TokenKind.CLOSE_BRACKET: "cyan",
}


def format_result(value: float) -> str:
    """Format a result with %g: 14, 3.75, 1e+20, inf, nan."""
    return f"{value:g}"


def format_error(error: CalcError) -> str:
    """One-line description of an error, safe to pass to console.print()."""
    return escape(f"{error.stage} error ({error.code}): {error}")


def render_tokens(tokens: TokenSequence, console: Console, title: str) -> None:
    """Render a token sequence as a Rich table."""
    if not tokens:
        console.print(f"[yellow]{escape(title)}: no tokens[/yellow]")
        return

    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Kind", min_width=14)
    table.add_column("Text", justify="center")
    table.add_column("Value", justify="right")

    for index, token in enumerate(tokens):
        style = _KIND_STYLES.get(token.kind, "yellow")
        value = format_result(token.value) if token.is_number else "[dim]--[/dim]"
        table.add_row(
            str(index),
            f"[{style}]{token.kind.value}[/{style}]",
            escape(token.text),
            value,
        )

    console.print(table)
