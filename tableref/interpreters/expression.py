"""
The expression language allowed inside ``{...}`` fragments.

    expr    := term (("+" | "-") term)*
    term    := unary (("*" | "/") unary)*
    unary   := ("+" | "-") unary | atom
    atom    := NUMBER | STRING | NAME "(" [expr ("," expr)*] ")" | "(" expr ")"

NAME must be a registered formula reducer (``SUM(1, 2)``).  ``+`` joins
strings when either side is a string; the other operators need numbers.
Nothing else is accepted, and evaluation has no side effects.
"""

from __future__ import annotations

import math
import re
from typing import Callable, List, Mapping, Optional, Sequence, Tuple, Union

from tableref.errors import EvaluationError

Value = Union[int, float, str]
Reducer = Callable[[List[float]], Optional[Union[int, float]]]

_TOKEN_RE = re.compile(
    r"""
    \s*(?:
        (?P<number>\d+(?:\.\d*)?|\.\d+)
      | (?P<string>"[^"]*"|'[^']*')
      | (?P<name>[A-Za-z_]\w*)
      | (?P<op>[-+*/(),])
    )
    """,
    re.VERBOSE,
)

Token = Tuple[str, str]


def tokenize(text: str) -> List[Token]:
    tokens: List[Token] = []
    pos = 0
    text = text.rstrip()
    while pos < len(text):
        m = _TOKEN_RE.match(text, pos)
        if not m:
            raise EvaluationError(
                f"unexpected character {text[pos:].lstrip()[:1]!r} in {text!r}"
            )
        kind = m.lastgroup
        tokens.append((kind, m.group(kind)))
        pos = m.end()
    return tokens


def format_value(value: Value) -> str:
    """Render a value the way it is shown in a cell (``4.0`` -> ``4``)."""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    try:
        return str(value)
    except ValueError as exc:
        # int -> str refuses numbers past sys.get_int_max_str_digits()
        raise EvaluationError(f"value too large to display: {exc}") from exc


def _number(value: Value) -> Union[int, float]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    raise EvaluationError(f"expected a number, got {value!r}")


class ExpressionEvaluator:
    """Recursive-descent evaluator for fragment expressions."""

    def __init__(self, functions: Optional[Mapping[str, Reducer]] = None) -> None:
        # Shared with the FormulaEngine, so reducers registered later are
        # visible here too.
        self.functions: Mapping[str, Reducer] = functions if functions is not None else {}
        self._tokens: List[Token] = []
        self._pos = 0

    def evaluate(self, text: str) -> Value:
        self._tokens = tokenize(text)
        self._pos = 0
        if not self._tokens:
            raise EvaluationError("empty expression")
        try:
            value = self._expr()
        except ArithmeticError as exc:
            raise EvaluationError(str(exc)) from exc
        if self._pos < len(self._tokens):
            raise EvaluationError(
                f"unexpected {self._tokens[self._pos][1]!r} in {text!r}"
            )
        return value

    # ------------------------------------------------------------------
    # Token helpers
    # ------------------------------------------------------------------

    def _peek(self) -> Optional[Token]:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def _match(self, *ops: str) -> Optional[str]:
        token = self._peek()
        if token is not None and token[0] == "op" and token[1] in ops:
            self._pos += 1
            return token[1]
        return None

    def _expect(self, op: str) -> None:
        if self._match(op) is None:
            found = self._peek()
            raise EvaluationError(
                f"expected {op!r}, found {found[1] if found else 'end of input'!r}"
            )

    # ------------------------------------------------------------------
    # Grammar
    # ------------------------------------------------------------------

    def _expr(self) -> Value:
        value = self._term()
        while True:
            op = self._match("+", "-")
            if op is None:
                return value
            right = self._term()
            if op == "+":
                if isinstance(value, str) or isinstance(right, str):
                    value = format_value(value) + format_value(right)
                else:
                    value = value + right
            else:
                value = _number(value) - _number(right)

    def _term(self) -> Value:
        value = self._unary()
        while True:
            op = self._match("*", "/")
            if op is None:
                return value
            right = _number(self._unary())
            if op == "*":
                value = _number(value) * right
            else:
                if right == 0:
                    raise EvaluationError("division by zero")
                value = _number(value) / right

    def _unary(self) -> Value:
        op = self._match("+", "-")
        if op is None:
            return self._atom()
        value = _number(self._unary())
        return -value if op == "-" else value

    def _atom(self) -> Value:
        token = self._peek()
        if token is None:
            raise EvaluationError("unexpected end of expression")
        kind, text = token

        if kind == "number":
            self._pos += 1
            return float(text) if "." in text else int(text)
        if kind == "string":
            self._pos += 1
            return text[1:-1]
        if kind == "name":
            self._pos += 1
            return self._call(text)
        if self._match("("):
            value = self._expr()
            self._expect(")")
            return value
        raise EvaluationError(f"unexpected {text!r}")

    def _call(self, name: str) -> Value:
        reducer = self.functions.get(name.upper())
        if reducer is None:
            raise EvaluationError(f"unknown name {name!r}")
        self._expect("(")
        args: List[Value] = []
        if self._match(")") is None:
            args.append(self._expr())
            while self._match(","):
                args.append(self._expr())
            self._expect(")")
        result = reducer([float(_number(a)) for a in args])
        if result is None:
            raise EvaluationError(f"{name.upper()} returned no value")
        return result


def evaluate(text: str, functions: Optional[Mapping[str, Reducer]] = None) -> Value:
    return ExpressionEvaluator(functions).evaluate(text)


def values_as_numbers(values: Sequence[str]) -> List[float]:
    """Numeric values among *values*; anything that is not a number is skipped."""
    numbers: List[float] = []
    for value in values:
        try:
            number = float(value.strip())
        except ValueError:
            continue
        if math.isfinite(number):
            numbers.append(number)
    return numbers
