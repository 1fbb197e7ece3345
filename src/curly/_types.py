"""Token model shared by the lexer and parser."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TokenType(Enum):
    """Kinds of tokens produced by the lexer."""

    DATA = "data"
    OUTPUT = "output"

    IF = "if"
    ELSEIF = "elseif"
    ELSE = "else"
    ENDIF = "endif"

    FOREACH = "foreach"
    ENDFOREACH = "endforeach"

    FOR = "for"
    ENDFOR = "endfor"

    EOF = "eof"


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexed token.

    Attributes:
        type: Token kind
        value: Raw source fragment (the full ``{...}`` or ``{% ... %}`` text
            for directives, the literal text for DATA)
        lineno: 1-based line of the first character
        col_offset: 0-based column of the first character
        args: Payload parsed out of the directive:
            OUTPUT: (path, filter1, filter2, ...)
            IF / ELSEIF: (condition,)
            FOREACH: (collection_path, item_alias)
            FOR: (var_name, start, end)
    """

    type: TokenType
    value: str
    lineno: int
    col_offset: int
    args: tuple[str, ...] = ()

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.lineno}:{self.col_offset})"
