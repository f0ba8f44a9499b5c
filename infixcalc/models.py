"""Data models for the infixcalc evaluator.

TokenKind, Token, TokenSequence, FlushPolicy and the error taxonomy — all the
typed structures that flow through tokenizer → evaluator → CLI.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class TokenKind(str, Enum):
    """Lexical token kinds."""

    UNKNOWN = "unknown"
    NUMBER = "number"
    OPEN_BRACKET = "open_bracket"
    CLOSE_BRACKET = "close_bracket"
    ADD = "add"
    SUB = "sub"
    MUL = "mul"
    DIV = "div"


OPERATOR_KINDS = frozenset({TokenKind.ADD, TokenKind.SUB, TokenKind.MUL, TokenKind.DIV})
BRACKET_KINDS = frozenset({TokenKind.OPEN_BRACKET, TokenKind.CLOSE_BRACKET})
VALID_KINDS = OPERATOR_KINDS | BRACKET_KINDS | {TokenKind.NUMBER}

# Single-character tokens: operators and brackets.
SYMBOL_KINDS: dict[str, TokenKind] = {
    "+": TokenKind.ADD,
    "-": TokenKind.SUB,
    "*": TokenKind.MUL,
    "/": TokenKind.DIV,
    "(": TokenKind.OPEN_BRACKET,
    ")": TokenKind.CLOSE_BRACKET,
}

_PRECEDENCE: dict[TokenKind, int] = {
    TokenKind.ADD: 10,
    TokenKind.SUB: 10,
    TokenKind.MUL: 20,
    TokenKind.DIV: 20,
}


def precedence(kind: TokenKind) -> int:
    """Operator precedence; -1 for anything that is not an operator."""
    return _PRECEDENCE.get(kind, -1)


@dataclass(frozen=True)
class Token:
    """A single lexical unit.

    ``value`` is only meaningful for NUMBER tokens; it is parsed from ``text``
    when the number is finalized.
    """

    kind: TokenKind
    text: str = ""
    value: float = 0.0

    @property
    def is_number(self) -> bool:
        return self.kind is TokenKind.NUMBER

    @property
    def is_operator(self) -> bool:
        return self.kind in OPERATOR_KINDS

    @property
    def is_bracket(self) -> bool:
        return self.kind in BRACKET_KINDS

    def __str__(self) -> str:
        if self.is_number:
            return f"Number({self.text})"
        return self.kind.name.title().replace("_", "")


# Reading order before rewriting, postfix order after.
TokenSequence = tuple[Token, ...]


class FlushPolicy(str, Enum):
    """How a lower-or-equal precedence operator empties the operator stack."""

    LEGACY = "legacy"
    STANDARD = "standard"


class StructuralErrorKind(str, Enum):
    INVALID_TOKEN = "invalid_token"
    BRACKET_MISMATCH = "bracket_mismatch"
    OPERAND_COUNT = "operand_count"


class EvalErrorKind(str, Enum):
    UNEXPECTED_TOKEN = "unexpected_token"
    BRACKET_IN_POSTFIX = "bracket_in_postfix"
    STACK_UNDERFLOW = "stack_underflow"
    STACK_IMBALANCE = "stack_imbalance"


class CalcError(ValueError):
    """Base class for everything that aborts evaluation of one line."""

    stage = "parse"

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        return {"status": "error", "stage": self.stage, "error": self.code, "message": str(self)}

    @property
    def code(self) -> str:
        return "error"


class LexError(CalcError):
    """An unrecognized character in the source text."""

    def __init__(self, position: int, char: str) -> None:
        super().__init__(f"unexpected character {char!r} at position {position}")
        self.position = position
        self.char = char

    @property
    def code(self) -> str:
        return "lex_error"

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["position"] = self.position
        d["char"] = self.char
        return d


class StructuralError(CalcError):
    """The token sequence fails the count-based sanity check."""

    _MESSAGES = {
        StructuralErrorKind.INVALID_TOKEN: "token sequence contains an invalid token",
        StructuralErrorKind.BRACKET_MISMATCH: "unbalanced brackets",
        StructuralErrorKind.OPERAND_COUNT: "operand count does not match operator count",
    }

    def __init__(self, kind: StructuralErrorKind) -> None:
        super().__init__(self._MESSAGES[kind])
        self.kind = kind

    @property
    def code(self) -> str:
        return self.kind.value


class EvalError(CalcError):
    """Rewrite or postfix evaluation failed."""

    stage = "eval"

    def __init__(self, kind: EvalErrorKind, detail: Optional[str] = None) -> None:
        message = kind.value.replace("_", " ")
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.kind = kind

    @property
    def code(self) -> str:
        return self.kind.value
