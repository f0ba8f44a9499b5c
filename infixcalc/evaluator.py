"""Infix → postfix rewrite and postfix evaluation.

Data flow per solve():
1. Rewrite the owned infix sequence to postfix (shunting-yard variant)
2. Reject any bracket that survived the rewrite
3. Evaluate the postfix sequence on an operand stack
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Union

from infixcalc.models import (
    CalcError,
    EvalError,
    EvalErrorKind,
    FlushPolicy,
    Token,
    TokenKind,
    TokenSequence,
    precedence,
)
from infixcalc.tokenizer import Tokenizer

logger = logging.getLogger(__name__)


def ieee_divide(x: float, y: float) -> float:
    """Floating-point division that yields inf/nan instead of raising."""
    if y != 0.0:
        return x / y
    if x == 0.0 or math.isnan(x):
        return math.nan
    return math.copysign(math.inf, x) * math.copysign(1.0, y)


_APPLY = {
    TokenKind.ADD: lambda x, y: x + y,
    TokenKind.SUB: lambda x, y: x - y,
    TokenKind.MUL: lambda x, y: x * y,
    TokenKind.DIV: ieee_divide,
}


class Evaluator:
    """Evaluates one tokenized expression.

    Takes its own copy of the tokens (from a Tokenizer or a TokenSequence).
    solve() rewrites that copy to postfix, so an instance evaluates once.
    """

    def __init__(
        self,
        source: Union[Tokenizer, TokenSequence],
        policy: FlushPolicy = FlushPolicy.LEGACY,
    ) -> None:
        if isinstance(source, Tokenizer):
            source = source.get_tokens()
        self._tokens: TokenSequence = tuple(source)
        self.policy = policy
        self._error: Optional[CalcError] = None
        self._result: Optional[float] = None

    @property
    def error(self) -> Optional[CalcError]:
        return self._error

    def error_state(self) -> bool:
        return self._error is not None

    def get_result(self) -> Optional[float]:
        return self._result

    def get_tokens(self) -> TokenSequence:
        return self._tokens

    def solve(self) -> None:
        self.to_postfix()
        if self._error is not None:
            return

        operands: list[float] = []
        for token in self._tokens:
            if token.is_number:
                operands.append(token.value)
                continue
            if token.is_operator:
                if len(operands) < 2:
                    self._fail(EvalErrorKind.STACK_UNDERFLOW, f"{token.text!r} needs two operands")
                    return
                y = operands.pop()
                x = operands.pop()
                operands.append(_APPLY[token.kind](x, y))
                continue
            self._fail(EvalErrorKind.UNEXPECTED_TOKEN, token.kind.value)
            return

        if len(operands) != 1:
            self._fail(EvalErrorKind.STACK_IMBALANCE, f"{len(operands)} values left on the stack")
            return
        self._result = operands[0]

    def to_postfix(self) -> None:
        """Reorder the owned tokens into postfix notation.

        Operators of strictly higher precedence than the stack top are pushed.
        Otherwise the stack is flushed per self.policy before the push:
        LEGACY empties the whole stack (brackets included), STANDARD pops
        operators of higher-or-equal precedence and stops at a bracket.
        """
        output: list[Token] = []
        stack: list[Token] = []

        for term in self._tokens:
            if term.is_number:
                output.append(term)
                continue
            if term.is_operator:
                if stack and not stack[-1].is_bracket and precedence(term.kind) <= precedence(stack[-1].kind):
                    self._flush(stack, output, term)
                stack.append(term)
                continue
            if term.kind is TokenKind.OPEN_BRACKET:
                stack.append(term)
                continue
            if term.kind is TokenKind.CLOSE_BRACKET:
                while stack:
                    top = stack.pop()
                    if top.kind is TokenKind.OPEN_BRACKET:
                        break
                    if not top.is_bracket:
                        output.append(top)
                continue
            self._fail(EvalErrorKind.UNEXPECTED_TOKEN, term.kind.value)
            break

        while stack:
            output.append(stack.pop())

        self._tokens = tuple(output)
        logger.debug("postfix: %s", " ".join(t.text for t in self._tokens))
        if self._error is None and any(t.is_bracket for t in self._tokens):
            self._fail(EvalErrorKind.BRACKET_IN_POSTFIX)

    def _flush(self, stack: list[Token], output: list[Token], term: Token) -> None:
        if self.policy is FlushPolicy.LEGACY:
            while stack:
                output.append(stack.pop())
            return
        while stack and stack[-1].is_operator and precedence(stack[-1].kind) >= precedence(term.kind):
            output.append(stack.pop())

    def _fail(self, kind: EvalErrorKind, detail: Optional[str] = None) -> None:
        self._error = EvalError(kind, detail)
        self._result = None
        logger.debug("evaluation error: %s", self._error)


def calculate(text: str, policy: FlushPolicy = FlushPolicy.LEGACY) -> float:
    """Tokenize and evaluate one expression.

    Raises:
        CalcError: LexError/StructuralError from tokenizing, EvalError from
            the rewrite or the evaluation.
    """
    tokenizer = Tokenizer(text)
    tokenizer.parse()
    if tokenizer.error is not None:
        raise tokenizer.error
    evaluator = Evaluator(tokenizer, policy=policy)
    evaluator.solve()
    if evaluator.error is not None:
        raise evaluator.error
    return evaluator.get_result()
