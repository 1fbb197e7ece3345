"""Expression parsing for curly parser.

Provides mixin for parsing output pipelines and ``if`` conditions.

Condition grammar:
    ```
    condition := ["not"] operand [("==" | "!=") operand]
    operand   := literal | path ("|" filter)*
    literal   := 'text' | "text" | 42 | -1.5 | true | false | none | null
    ```

A leading ``not`` negates the whole condition, so ``not a == b`` reads as
``not (a == b)``.
"""

from __future__ import annotations

import re
from collections.abc import Collection
from typing import TYPE_CHECKING

from curly.environment.exceptions import ErrorCode, UnknownFilterError
from curly.lexer import IDENT, PATH
from curly.nodes import Compare, Const, Expr, Filter, Not, Path

if TYPE_CHECKING:
    from curly._types import Token
    from curly.parser.errors import ParseError

_CONDITION_TOKEN_RE = re.compile(
    r"\s*(?:"
    r"(?P<string>'(?:[^'\\]|\\.)*'|\"(?:[^\"\\]|\\.)*\")"
    r"|(?P<number>-?\d+(?:\.\d+)?)(?![\w.])"
    r"|(?P<op>==|!=|\|)"
    rf"|(?P<name>{PATH})"
    r")",
    re.DOTALL,
)
_FILTER_NAME_RE = re.compile(IDENT)

_KEYWORD_CONSTANTS: dict[str, bool | None] = {
    "true": True,
    "false": False,
    "none": None,
    "null": None,
}


class ExpressionParsingMixin:
    """Mixin for parsing output pipelines and conditions.

    Required Host Attributes:
        - _filters: collection of registered filter names
        - _name, _filename, _source: for error messages
        - _error: method
    """

    if TYPE_CHECKING:
        _filters: Collection[str]
        _name: str | None
        _filename: str | None
        _source: str | None

        def _error(
            self,
            message: str,
            token: Token,
            *,
            suggestion: str | None = None,
            code: ErrorCode | None = None,
        ) -> ParseError: ...

    def _make_path(self, dotted: str, token: Token) -> Path:
        return Path(token.lineno, token.col_offset, tuple(dotted.split(".")))

    def _apply_pipeline(self, expr: Expr, names: tuple[str, ...] | list[str], token: Token) -> Expr:
        """Wrap expr in Filter nodes left to right, checking each name."""
        for name in names:
            self._check_filter(name, token)
            expr = Filter(token.lineno, token.col_offset, expr, name)
        return expr

    def _check_filter(self, name: str, token: Token) -> None:
        if name not in self._filters:
            raise UnknownFilterError(
                name,
                available=list(self._filters),
                lineno=token.lineno,
                col_offset=token.col_offset,
                name=self._name,
                filename=self._filename,
                source=self._source,
                fragment=token.value,
            )

    def _parse_pipeline(self, token: Token) -> Expr:
        """Build the expression for an OUTPUT token: path then filters."""
        path, *filters = token.args
        return self._apply_pipeline(self._make_path(path, token), filters, token)

    def _parse_condition(self, token: Token) -> Expr:
        """Parse the condition carried by an IF or ELSEIF token."""
        text = token.args[0]
        parts = self._scan_condition(text, token)

        negate = False
        if parts and parts[0] == ("name", "not"):
            negate = True
            parts = parts[1:]

        left, parts = self._parse_operand(parts, token)
        expr: Expr = left
        if parts:
            kind, op = parts[0]
            if kind != "op" or op not in ("==", "!="):
                raise self._error(
                    f"Unexpected '{op}' in condition",
                    token,
                    code=ErrorCode.INVALID_EXPRESSION,
                    suggestion="Conditions are 'name', 'not name' or 'left == right'",
                )
            right, parts = self._parse_operand(parts[1:], token)
            if parts:
                raise self._error(
                    f"Unexpected '{parts[0][1]}' after comparison",
                    token,
                    code=ErrorCode.INVALID_EXPRESSION,
                    suggestion="Only a single comparison is supported per condition",
                )
            expr = Compare(
                token.lineno, token.col_offset, left, op, right  # type: ignore[arg-type]
            )

        if negate:
            expr = Not(token.lineno, token.col_offset, expr)
        return expr

    def _scan_condition(self, text: str, token: Token) -> list[tuple[str, str]]:
        parts: list[tuple[str, str]] = []
        pos = 0
        text = text.rstrip()
        while pos < len(text):
            m = _CONDITION_TOKEN_RE.match(text, pos)
            if m is None or m.lastgroup is None or m.end() == pos:
                raise self._error(
                    f"Invalid condition near '{text[pos:].strip()}'",
                    token,
                    code=ErrorCode.INVALID_EXPRESSION,
                )
            parts.append((m.lastgroup, m.group(m.lastgroup)))
            pos = m.end()
        return parts

    def _parse_operand(
        self, parts: list[tuple[str, str]], token: Token
    ) -> tuple[Expr, list[tuple[str, str]]]:
        if not parts:
            raise self._error(
                "Condition is missing an operand",
                token,
                code=ErrorCode.INVALID_EXPRESSION,
            )

        kind, value = parts[0]
        rest = parts[1:]
        lineno, col = token.lineno, token.col_offset

        if kind == "string":
            return Const(lineno, col, _unquote(value)), rest
        if kind == "number":
            number: int | float = float(value) if "." in value else int(value)
            return Const(lineno, col, number), rest
        if kind == "name" and value.lower() in _KEYWORD_CONSTANTS:
            return Const(lineno, col, _KEYWORD_CONSTANTS[value.lower()]), rest
        if kind != "name":
            raise self._error(
                f"Expected a name or literal, got '{value}'",
                token,
                code=ErrorCode.INVALID_EXPRESSION,
            )

        expr: Expr = self._make_path(value, token)
        filters: list[str] = []
        while len(rest) >= 2 and rest[0] == ("op", "|"):
            filter_kind, filter_name = rest[1]
            if filter_kind != "name" or not _FILTER_NAME_RE.fullmatch(filter_name):
                raise self._error(
                    f"Expected a filter name after '|', got '{filter_name}'",
                    token,
                    code=ErrorCode.INVALID_EXPRESSION,
                )
            filters.append(filter_name)
            rest = rest[2:]
        if rest and rest[0] == ("op", "|"):
            raise self._error(
                "Expected a filter name after '|'",
                token,
                code=ErrorCode.INVALID_EXPRESSION,
            )
        return self._apply_pipeline(expr, filters, token), rest


def _unquote(literal: str) -> str:
    quote = literal[0]
    body = literal[1:-1]
    return body.replace("\\" + quote, quote).replace("\\\\", "\\")
