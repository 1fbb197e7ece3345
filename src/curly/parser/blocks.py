"""Block directive parsing for curly parser.

Provides the block stack (for matching open/close directives) and the
parsers for ``if``, ``foreach`` and ``for`` blocks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from curly._types import Token, TokenType
from curly.environment.exceptions import ErrorCode
from curly.nodes import For, Foreach, If, Node

if TYPE_CHECKING:
    from curly.nodes import Expr, Path
    from curly.parser.errors import ParseError

# Block kind → token that closes it
END_TOKENS: dict[str, TokenType] = {
    "if": TokenType.ENDIF,
    "foreach": TokenType.ENDFOREACH,
    "for": TokenType.ENDFOR,
}

CONTINUATION_TOKENS: frozenset[TokenType] = frozenset({TokenType.ELSEIF, TokenType.ELSE})
CLOSE_TOKENS: frozenset[TokenType] = frozenset(END_TOKENS.values())


class BlockStackMixin:
    """Track open blocks so close directives can be matched and reported.

    Required Host Attributes:
        - _current: current token
        - _advance: method
        - _error: method
    """

    if TYPE_CHECKING:
        _block_stack: list[tuple[str, Token]]

        @property
        def _current(self) -> Token: ...

        def _advance(self) -> Token: ...

        def _error(
            self,
            message: str,
            token: Token,
            *,
            suggestion: str | None = None,
            code: ErrorCode | None = None,
        ) -> ParseError: ...

    def _push_block(self, kind: str, token: Token) -> None:
        self._block_stack.append((kind, token))

    def _pop_block(self) -> tuple[str, Token]:
        return self._block_stack.pop()

    @property
    def _depth(self) -> int:
        return len(self._block_stack)

    def _consume_end_tag(self, kind: str) -> None:
        """Consume the close directive for the innermost open block.

        Raises:
            ParseError: End of input reached with the block still open, or
                a close/continuation directive of the wrong kind.
        """
        token = self._current
        if token.type == END_TOKENS[kind]:
            self._advance()
            self._pop_block()
            return

        open_kind, open_token = self._block_stack[-1]
        if token.type == TokenType.EOF:
            raise self._error(
                f"Unclosed '{open_kind}' block opened at line {open_token.lineno} "
                f"(depth {self._depth}); expected {{% end{open_kind} %}}",
                open_token,
                code=ErrorCode.UNCLOSED_BLOCK,
                suggestion=f"Add {{% end{open_kind} %}} to close the block",
            )
        raise self._error(
            f"Unexpected {token.value} at depth {self._depth}: expected "
            f"{{% end{open_kind} %}} to close '{open_kind}' opened at line {open_token.lineno}",
            token,
            suggestion="Close inner blocks before outer ones",
        )

    def _unexpected_at_top_level(self, token: Token) -> ParseError:
        if token.type in CONTINUATION_TOKENS:
            return self._error(
                f"{token.value} outside of an if block",
                token,
                suggestion="elseif and else must appear between {% if %} and {% endif %}",
            )
        return self._error(
            f"Unexpected {token.value} at depth 0: there is no open block to close",
            token,
            suggestion="Remove the directive or add the matching opening directive",
        )


class ControlFlowParsingMixin(BlockStackMixin):
    """Mixin for parsing if / foreach / for blocks.

    Required Host Attributes:
        - All from BlockStackMixin
        - _parse_body: method
        - _parse_condition: method
        - _make_path: method
    """

    if TYPE_CHECKING:

        def _parse_body(self) -> list[Node]: ...

        def _parse_condition(self, token: Token) -> Expr: ...

        def _make_path(self, dotted: str, token: Token) -> Path: ...

    def _parse_if(self) -> If:
        """Parse {% if %}...{% elseif %}...{% else %}...{% endif %}."""
        start = self._advance()  # consume 'if'
        self._push_block("if", start)
        test = self._parse_condition(start)
        body = self._parse_body()

        elif_: list[tuple[Expr, tuple[Node, ...]]] = []
        else_: tuple[Node, ...] = ()
        else_token: Token | None = None

        while self._current.type in CONTINUATION_TOKENS:
            token = self._advance()
            if else_token is not None:
                kind = "elseif" if token.type == TokenType.ELSEIF else "a second else"
                raise self._error(
                    f"Unexpected {kind} after {{% else %}} (line {else_token.lineno})",
                    token,
                    suggestion="{% else %} must be the last branch of an if block",
                )
            if token.type == TokenType.ELSEIF:
                cond = self._parse_condition(token)
                elif_.append((cond, tuple(self._parse_body())))
            else:
                else_token = token
                else_ = tuple(self._parse_body())

        self._consume_end_tag("if")

        return If(
            lineno=start.lineno,
            col_offset=start.col_offset,
            test=test,
            body=tuple(body),
            elif_=tuple(elif_),
            else_=else_,
        )

    def _parse_foreach(self) -> Foreach:
        """Parse {% foreach collection as alias %}...{% endforeach %}."""
        start = self._advance()  # consume 'foreach'
        self._push_block("foreach", start)
        collection, alias = start.args
        body = self._parse_body()
        self._consume_end_tag("foreach")

        return Foreach(
            lineno=start.lineno,
            col_offset=start.col_offset,
            collection=self._make_path(collection, start),
            alias=alias,
            body=tuple(body),
        )

    def _parse_for(self) -> For:
        """Parse {% for var in start..end %}...{% endfor %}."""
        start_token = self._advance()  # consume 'for'
        self._push_block("for", start_token)
        var, start, end = start_token.args
        body = self._parse_body()
        self._consume_end_tag("for")

        return For(
            lineno=start_token.lineno,
            col_offset=start_token.col_offset,
            var=var,
            start=int(start),
            end=int(end),
            body=tuple(body),
        )
