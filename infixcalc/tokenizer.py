"""Lexical analysis for infix expressions.

One left-to-right scan turns the source text into a TokenSequence, then a
count-based structural check (operands vs. operators, bracket balance) runs
over the result. Numbers are accumulated by a two-state machine:

    EMPTY ──digit/'.'──▶ ACCUMULATING_NUMBER
    ACCUMULATING_NUMBER ──operator/bracket/end──▶ EMPTY (number emitted)
"""

from __future__ import annotations

import logging
import re
import string
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from infixcalc.models import (
    OPERATOR_KINDS,
    SYMBOL_KINDS,
    VALID_KINDS,
    CalcError,
    LexError,
    StructuralError,
    StructuralErrorKind,
    Token,
    TokenKind,
    TokenSequence,
)

logger = logging.getLogger(__name__)

VALUE_CHARS = frozenset(string.digits + ".")

# C isspace() in the "C" locale; other Unicode whitespace is a lex error.
SPACE_CHARS = frozenset(" \t\n\v\f\r")

# Leading "digits[.digits]" prefix, as atof() would read it.
_ATOF_PREFIX_RE = re.compile(r"\d*(?:\.\d*)?", re.ASCII)


def atof(text: str) -> float:
    """Convert number text the way C atof() does.

    Parsing stops at the first character that cannot extend the number, so
    '1.2.3' reads as 1.2. A prefix with no digits reads as 0.0.
    """
    prefix = _ATOF_PREFIX_RE.match(text).group(0)
    if not prefix.strip("."):
        return 0.0
    return float(prefix)


class LexState(str, Enum):
    """States of the number accumulator."""

    EMPTY = "empty"
    ACCUMULATING_NUMBER = "accumulating_number"


@dataclass
class PendingToken:
    """The number currently being accumulated during a scan."""

    state: LexState = LexState.EMPTY
    text: str = ""

    def feed(self, char: str) -> None:
        self.state = LexState.ACCUMULATING_NUMBER
        self.text += char

    def flush(self) -> Optional[Token]:
        """Finalize the pending number, if any, and reset to EMPTY."""
        if self.state is LexState.EMPTY:
            return None
        token = Token(TokenKind.NUMBER, self.text, atof(self.text))
        self.state = LexState.EMPTY
        self.text = ""
        return token


class Tokenizer:
    """Turns one line of source text into a TokenSequence.

    Construct with the text, call parse() once, then query error_state()
    and get_tokens(). Build a fresh instance for every line.
    """

    def __init__(self, src_text: str) -> None:
        self.src = src_text
        self._tokens: list[Token] = []
        self._error: Optional[CalcError] = None

    @property
    def error(self) -> Optional[CalcError]:
        return self._error

    def error_state(self) -> bool:
        return self._error is not None

    def get_tokens(self) -> TokenSequence:
        return tuple(self._tokens)

    def parse(self) -> None:
        pending = PendingToken()

        for position, char in enumerate(self.src):
            if char in SPACE_CHARS:
                continue
            if char in VALUE_CHARS:
                pending.feed(char)
                continue
            kind = SYMBOL_KINDS.get(char)
            if kind is not None:
                self._append(pending.flush())
                self._tokens.append(Token(kind, char))
                continue
            self._error = LexError(position, char)
            logger.debug("lex error in %r: %s", self.src, self._error)
            return

        self._append(pending.flush())
        self.verify()

    def _append(self, token: Optional[Token]) -> None:
        if token is not None:
            self._tokens.append(token)

    def verify(self) -> None:
        """Count-based structural check; skipped after a lex error."""
        if self._error is not None:
            return

        numbers = operators = open_brackets = close_brackets = 0
        invalid = False
        for token in self._tokens:
            if token.kind not in VALID_KINDS:
                invalid = True
            elif token.kind is TokenKind.NUMBER:
                numbers += 1
            elif token.kind is TokenKind.OPEN_BRACKET:
                open_brackets += 1
            elif token.kind is TokenKind.CLOSE_BRACKET:
                close_brackets += 1
            elif token.kind in OPERATOR_KINDS:
                operators += 1

        if invalid:
            self._error = StructuralError(StructuralErrorKind.INVALID_TOKEN)
        elif open_brackets != close_brackets:
            self._error = StructuralError(StructuralErrorKind.BRACKET_MISMATCH)
        elif numbers != operators + 1:
            self._error = StructuralError(StructuralErrorKind.OPERAND_COUNT)

        if self._error is not None:
            logger.debug("structural error in %r: %s", self.src, self._error)


def tokenize(src_text: str) -> TokenSequence:
    """Tokenize and verify; raise the CalcError on failure."""
    tokenizer = Tokenizer(src_text)
    tokenizer.parse()
    if tokenizer.error is not None:
        raise tokenizer.error
    return tokenizer.get_tokens()
