"""Lexer for curly templates.

Splits template source into a flat token stream of literal text, output
expressions and block directives.

Syntax:
    ```
    {name}  {a.b.c}  {a.b|upper}  {items|length}      output expressions
    {% if cond %} {% elseif cond %} {% else %} {% endif %}
    {% foreach items as item %} ... {% endforeach %}
    {% for i in 1..5 %} ... {% endfor %}
    ```

Output expressions are recognised only when the text between the braces is
a dotted path with an optional filter pipeline. Any other brace pair
(CSS rules, JavaScript objects, ``&lbrace;x&rbrace;`` entities) stays literal
text, so raw HTML/CSS/JS passes through untouched. Every ``{% ... %}`` is a
directive: an unknown keyword or malformed arguments is a LexerError.

Thread-Safety:
Compiled patterns are module-level and immutable; each Lexer holds only
per-call state.
"""

from __future__ import annotations

import re
from bisect import bisect_right
from difflib import get_close_matches

from curly._types import Token, TokenType
from curly.environment.exceptions import ErrorCode, LexerError

IDENT = r"[A-Za-z_][A-Za-z0-9_]*"
SEGMENT = r"[A-Za-z0-9_]+"
PATH = rf"{IDENT}(?:\.{SEGMENT})*"

_TOKEN_RE = re.compile(
    r"\{%(?P<block>.*?)%\}"
    rf"|\{{(?P<path>{PATH})(?P<filters>(?:[ \t]*\|[ \t]*{IDENT})*)\}}",
    re.DOTALL,
)
_FILTER_SPLIT_RE = re.compile(r"[ \t]*\|[ \t]*")
_DIRECTIVE_RE = re.compile(r"(?P<keyword>\S+)\s*(?P<rest>.*)", re.DOTALL)
_FOREACH_RE = re.compile(rf"(?P<collection>{PATH})\s+as\s+(?P<alias>{IDENT})")
_FOR_RE = re.compile(rf"(?P<var>{IDENT})\s+in\s+(?P<start>-?\d+)\s*\.\.\s*(?P<end>-?\d+)")

# Keyword → handler method name
_DIRECTIVE_HANDLERS: dict[str, str] = {
    "if": "_lex_condition",
    "elseif": "_lex_condition",
    "else": "_lex_bare",
    "endif": "_lex_bare",
    "foreach": "_lex_foreach",
    "endforeach": "_lex_bare",
    "for": "_lex_for",
    "endfor": "_lex_bare",
}

_KEYWORD_TYPES: dict[str, TokenType] = {
    "if": TokenType.IF,
    "elseif": TokenType.ELSEIF,
    "else": TokenType.ELSE,
    "endif": TokenType.ENDIF,
    "foreach": TokenType.FOREACH,
    "endforeach": TokenType.ENDFOREACH,
    "for": TokenType.FOR,
    "endfor": TokenType.ENDFOR,
}

DIRECTIVE_KEYWORDS: frozenset[str] = frozenset(_DIRECTIVE_HANDLERS)


class Lexer:
    """Tokenize one template source.

    Example:
            >>> [t.type.name for t in Lexer("Hi {name}!").tokenize()]
            ['DATA', 'OUTPUT', 'DATA', 'EOF']
    """

    __slots__ = ("_filename", "_line_starts", "_name", "_source")

    def __init__(self, source: str, *, name: str | None = None, filename: str | None = None):
        self._source = source
        self._name = name
        self._filename = filename
        self._line_starts = [0] + [m.end() for m in re.finditer("\n", source)]

    def tokenize(self) -> list[Token]:
        tokens: list[Token] = []
        pos = 0
        for match in _TOKEN_RE.finditer(self._source):
            if match.start() > pos:
                tokens.append(self._data(pos, match.start()))
            if match.group("block") is not None:
                tokens.append(self._lex_directive(match))
            else:
                tokens.append(self._lex_output(match))
            pos = match.end()

        if pos < len(self._source):
            tokens.append(self._data(pos, len(self._source)))

        lineno, col = self._position(len(self._source))
        tokens.append(Token(TokenType.EOF, "", lineno, col))
        return tokens

    def _position(self, offset: int) -> tuple[int, int]:
        index = bisect_right(self._line_starts, offset) - 1
        return index + 1, offset - self._line_starts[index]

    def _error(
        self,
        message: str,
        offset: int,
        fragment: str,
        *,
        code: ErrorCode = ErrorCode.MALFORMED_DIRECTIVE,
        suggestion: str | None = None,
    ) -> LexerError:
        lineno, col = self._position(offset)
        return LexerError(
            message,
            code=code,
            lineno=lineno,
            col_offset=col,
            name=self._name,
            filename=self._filename,
            source=self._source,
            fragment=fragment,
            suggestion=suggestion,
        )

    def _data(self, start: int, end: int) -> Token:
        text = self._source[start:end]
        unclosed = text.find("{%")
        if unclosed != -1:
            fragment = text[unclosed : unclosed + 40].splitlines()[0]
            raise self._error(
                "Unclosed block tag: '{%' without matching '%}'",
                start + unclosed,
                fragment,
                code=ErrorCode.UNCLOSED_TAG,
            )
        lineno, col = self._position(start)
        return Token(TokenType.DATA, text, lineno, col)

    def _lex_output(self, match: re.Match[str]) -> Token:
        lineno, col = self._position(match.start())
        filters = match.group("filters")
        names = tuple(_FILTER_SPLIT_RE.split(filters)[1:]) if filters else ()
        return Token(
            TokenType.OUTPUT,
            match.group(0),
            lineno,
            col,
            (match.group("path"), *names),
        )

    def _lex_directive(self, match: re.Match[str]) -> Token:
        fragment = match.group(0)
        content = match.group("block").strip()

        # A second '{%' inside the match means the first one was never closed
        nested = content.find("{%")
        if nested != -1:
            raise self._error(
                "Unclosed block tag: '{%' without matching '%}'",
                match.start(),
                fragment,
                code=ErrorCode.UNCLOSED_TAG,
            )

        parts = _DIRECTIVE_RE.fullmatch(content)
        if parts is None:
            raise self._error(
                "Empty directive",
                match.start(),
                fragment,
                code=ErrorCode.UNKNOWN_DIRECTIVE,
            )

        keyword = parts.group("keyword")
        handler = _DIRECTIVE_HANDLERS.get(keyword)
        if handler is None:
            matches = get_close_matches(keyword, sorted(DIRECTIVE_KEYWORDS), n=1, cutoff=0.6)
            raise self._error(
                f"Unknown directive '{keyword}'",
                match.start(),
                fragment,
                code=ErrorCode.UNKNOWN_DIRECTIVE,
                suggestion=f"Did you mean '{matches[0]}'?" if matches else None,
            )

        args = getattr(self, handler)(keyword, parts.group("rest").strip(), match.start(), fragment)
        lineno, col = self._position(match.start())
        return Token(_KEYWORD_TYPES[keyword], fragment, lineno, col, args)

    def _lex_condition(
        self, keyword: str, rest: str, offset: int, fragment: str
    ) -> tuple[str, ...]:
        if not rest:
            raise self._error(
                f"'{keyword}' requires a condition",
                offset,
                fragment,
                suggestion=f"{{% {keyword} name %}}, {{% {keyword} not name %}} "
                f"or {{% {keyword} a == b %}}",
            )
        return (rest,)

    def _lex_bare(self, keyword: str, rest: str, offset: int, fragment: str) -> tuple[str, ...]:
        if rest:
            raise self._error(f"'{keyword}' takes no arguments", offset, fragment)
        return ()

    def _lex_foreach(self, keyword: str, rest: str, offset: int, fragment: str) -> tuple[str, ...]:
        m = _FOREACH_RE.fullmatch(rest)
        if m is None:
            raise self._error(
                "Malformed foreach directive",
                offset,
                fragment,
                suggestion="{% foreach items as item %}",
            )
        return (m.group("collection"), m.group("alias"))

    def _lex_for(self, keyword: str, rest: str, offset: int, fragment: str) -> tuple[str, ...]:
        m = _FOR_RE.fullmatch(rest)
        if m is None:
            raise self._error(
                "Malformed for directive",
                offset,
                fragment,
                suggestion="{% for i in 1..10 %}",
            )
        return (m.group("var"), m.group("start"), m.group("end"))


def tokenize(source: str, *, name: str | None = None, filename: str | None = None) -> list[Token]:
    """Tokenize template source into a list of tokens ending with EOF."""
    return Lexer(source, name=name, filename=filename).tokenize()


__all__ = ["DIRECTIVE_KEYWORDS", "IDENT", "PATH", "Lexer", "LexerError", "tokenize"]
