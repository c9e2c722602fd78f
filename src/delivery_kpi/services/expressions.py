"""Sandboxed arithmetic for operator-typed amounts.

Operators may type small sums such as ``=120+35.5`` or ``(3*40)/2`` into
amount fields. The expression is tokenized and evaluated by a tiny
recursive-descent parser that understands numbers, ``+ - * /`` and
parentheses, nothing else.
"""

import math
import re
from dataclasses import dataclass

_TOKEN_PATTERN = re.compile(r"\s*(?:(\d+(?:\.\d*)?|\.\d+)|(.))")
_OPERATORS = frozenset("+-*/()")
MAX_NESTING = 100


class ExpressionError(ValueError):
    """Raised when an arithmetic expression cannot be evaluated."""


@dataclass(frozen=True)
class _Token:
    kind: str
    value: str


def tokenize(text: str) -> list[_Token]:
    """Split an expression into number and operator tokens."""
    tokens: list[_Token] = []
    position = 0
    stripped = text.rstrip()
    while position < len(stripped):
        match = _TOKEN_PATTERN.match(stripped, position)
        if match is None:
            raise ExpressionError(f"Unexpected input at {position}")
        number, symbol = match.groups()
        if number is not None:
            tokens.append(_Token("number", number))
        elif symbol in _OPERATORS:
            tokens.append(_Token("op", symbol))
        else:
            raise ExpressionError(f"Unsupported character {symbol!r}")
        position = match.end()
    return tokens


class _Parser:
    def __init__(self, tokens: list[_Token]) -> None:
        self._tokens = tokens
        self._index = 0
        self._depth = 0

    def parse(self) -> float:
        if not self._tokens:
            raise ExpressionError("Empty expression")
        value = self._expression()
        if self._index != len(self._tokens):
            raise ExpressionError(f"Unexpected token {self._peek().value!r}")
        return value

    def _peek(self) -> _Token:
        return self._tokens[self._index]

    def _at_op(self, *symbols: str) -> bool:
        if self._index >= len(self._tokens):
            return False
        token = self._peek()
        return token.kind == "op" and token.value in symbols

    def _advance(self) -> _Token:
        if self._index >= len(self._tokens):
            raise ExpressionError("Unexpected end of expression")
        token = self._tokens[self._index]
        self._index += 1
        return token

    def _expression(self) -> float:
        value = self._term()
        while self._at_op("+", "-"):
            operator = self._advance().value
            right = self._term()
            value = value + right if operator == "+" else value - right
        return value

    def _term(self) -> float:
        value = self._factor()
        while self._at_op("*", "/"):
            operator = self._advance().value
            right = self._factor()
            if operator == "*":
                value *= right
            else:
                if right == 0:
                    raise ExpressionError("Division by zero")
                value /= right
        return value

    def _factor(self) -> float:
        sign = 1.0
        while self._at_op("+", "-"):
            if self._advance().value == "-":
                sign = -sign
        token = self._advance()
        if token.kind == "number":
            return sign * float(token.value)
        if token.value == "(":
            self._depth += 1
            if self._depth > MAX_NESTING:
                raise ExpressionError("Expression is nested too deeply")
            value = self._expression()
            if not self._at_op(")"):
                raise ExpressionError("Missing closing parenthesis")
            self._advance()
            self._depth -= 1
            return sign * value
        raise ExpressionError(f"Unexpected token {token.value!r}")


def evaluate_expression(text: str) -> float:
    """Evaluate an arithmetic expression, optionally prefixed with ``=``."""
    expression = text.strip()
    if expression.startswith("="):
        expression = expression[1:]
    value = _Parser(tokenize(expression)).parse()
    if not math.isfinite(value):
        raise ExpressionError("Expression overflowed")
    return value
