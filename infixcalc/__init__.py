"""infixcalc — evaluator for infix arithmetic expressions.

Tokenizes a line of text, rewrites it to postfix with a shunting-yard
variant, and evaluates it on an operand stack. Supports + - * / and
brackets over decimal numbers.

Usage:
    python -m infixcalc repl                  # Interactive loop
    python -m infixcalc eval "(2 + 3) * 4"    # One expression
    python -m infixcalc tokens "2 + 3 * 4"    # Show infix and postfix tokens
"""

__version__ = "0.1"
