"""Curly Parser — builds the node tree from a token stream.

Recursive descent over the flat token list, with an explicit stack of open
blocks used to match close directives and to report where nesting broke.

Dispatch:
    Opening directives are routed through ``_BLOCK_PARSERS`` (token type →
    method name); DATA and OUTPUT tokens become leaf nodes of whatever block
    is currently open.
"""

from __future__ import annotations

from collections.abc import Collection

from curly._types import Token, TokenType
from curly.environment.exceptions import ErrorCode
from curly.nodes import Data, Node, Output, Template
from curly.parser.blocks import CLOSE_TOKENS, CONTINUATION_TOKENS, ControlFlowParsingMixin
from curly.parser.errors import ParseError
from curly.parser.expressions import ExpressionParsingMixin

_BLOCK_PARSERS: dict[TokenType, str] = {
    TokenType.IF: "_parse_if",
    TokenType.FOREACH: "_parse_foreach",
    TokenType.FOR: "_parse_for",
}


class Parser(ControlFlowParsingMixin, ExpressionParsingMixin):
    """Parse tokens into a ``nodes.Template``.

    Example:
            >>> from curly.lexer import tokenize
            >>> tree = Parser(tokenize("Hi {name|upper}"), filters={"upper"}).parse()
            >>> [type(n).__name__ for n in tree.body]
            ['Data', 'Output']

    Args:
        tokens: Token list ending with EOF (from ``curly.lexer.tokenize``)
        filters: Names of registered filters; unknown names fail here
        name: Template name for error messages
        filename: Source path for error messages
        source: Template source for error snippets
        autoescape: Whether Output nodes escape their value
    """

    __slots__ = (
        "_autoescape",
        "_block_stack",
        "_filename",
        "_filters",
        "_name",
        "_pos",
        "_source",
        "_tokens",
    )

    def __init__(
        self,
        tokens: list[Token],
        *,
        filters: Collection[str],
        name: str | None = None,
        filename: str | None = None,
        source: str | None = None,
        autoescape: bool = True,
    ):
        self._tokens = tokens
        self._pos = 0
        self._filters = filters
        self._name = name
        self._filename = filename
        self._source = source
        self._autoescape = autoescape
        self._block_stack: list[tuple[str, Token]] = []

    @property
    def _current(self) -> Token:
        return self._tokens[self._pos]

    def _advance(self) -> Token:
        token = self._tokens[self._pos]
        if token.type != TokenType.EOF:
            self._pos += 1
        return token

    def _error(
        self,
        message: str,
        token: Token,
        *,
        suggestion: str | None = None,
        code: ErrorCode | None = None,
    ) -> ParseError:
        return ParseError(
            message,
            token,
            source=self._source,
            filename=self._filename,
            name=self._name,
            suggestion=suggestion,
            code=code,
        )

    def parse(self) -> Template:
        """Parse the whole token stream.

        Raises:
            ParseError: On unmatched, misordered or unclosed blocks, or an
                invalid condition.
            UnknownFilterError: On a filter name missing from the registry.
        """
        body = self._parse_body()
        token = self._current
        if token.type != TokenType.EOF:
            raise self._unexpected_at_top_level(token)
        return Template(lineno=1, col_offset=0, body=tuple(body), name=self._name)

    def _parse_body(self) -> list[Node]:
        """Parse nodes until EOF or a close/continuation directive."""
        body: list[Node] = []
        while True:
            token = self._current
            if token.type == TokenType.EOF:
                return body

            if token.type == TokenType.DATA:
                self._advance()
                body.append(Data(token.lineno, token.col_offset, token.value))
            elif token.type == TokenType.OUTPUT:
                self._advance()
                body.append(
                    Output(
                        token.lineno,
                        token.col_offset,
                        self._parse_pipeline(token),
                        source=token.value,
                        escape=self._autoescape,
                    )
                )
            elif token.type in _BLOCK_PARSERS:
                body.append(getattr(self, _BLOCK_PARSERS[token.type])())
            elif token.type in CLOSE_TOKENS or token.type in CONTINUATION_TOKENS:
                if not self._block_stack:
                    raise self._unexpected_at_top_level(token)
                return body
            else:
                raise self._error(f"Unexpected token {token.type.name}", token)
