"""Curly errors — one hierarchy for lexing, parsing, rendering and caching.

    TemplateError
    ├── TemplateNotFoundError     no loader has the name
    ├── TemplateSyntaxError       rejected at parse time, points at line:column
    │   ├── LexerError            bad or unknown ``{% ... %}`` directive
    │   ├── ParseError            blocks opened/closed out of order (curly.parser)
    │   └── UnknownFilterError    pipeline names an unregistered filter
    ├── TemplateRuntimeError      failed while rendering, carries line and values
    └── CacheError                cache directory unusable
        └── CacheMissError        no valid entry for a key

    FilterValueError (ValueError) raised by filters, wrapped by the renderer

A syntax error renders like this:

    ```
    Syntax Error: Unknown directive 'endwhile'
      --> page.html:3:4
       |
      3 |     {% endwhile %}
       |     ^
    ```

Looking up something that is not there (a missing key, an empty list) is
not an error. It renders as nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from enum import Enum
from typing import Any

_CATEGORIES = {
    "LEX": "lexer",
    "PAR": "parser",
    "RUN": "runtime",
    "TPL": "template",
    "CCH": "cache",
}

_MAX_VALUE_REPR = 80


class ErrorCode(Enum):
    """Stable ``C-<AREA>-<NNN>`` identifiers, safe to grep logs for."""

    UNCLOSED_TAG = "C-LEX-001"
    UNKNOWN_DIRECTIVE = "C-LEX-002"
    MALFORMED_DIRECTIVE = "C-LEX-003"

    UNEXPECTED_TOKEN = "C-PAR-001"
    UNCLOSED_BLOCK = "C-PAR-002"
    INVALID_EXPRESSION = "C-PAR-003"
    INVALID_FILTER = "C-PAR-004"

    FILTER_ERROR = "C-RUN-001"
    RUNTIME_ERROR = "C-RUN-002"

    TEMPLATE_NOT_FOUND = "C-TPL-001"
    SYNTAX_ERROR = "C-TPL-002"

    CACHE_UNAVAILABLE = "C-CCH-001"
    CACHE_MISS = "C-CCH-002"

    @property
    def category(self) -> str:
        """Area the code belongs to: lexer, parser, runtime, template or cache."""
        _, area, _ = self.value.split("-")
        return _CATEGORIES.get(area, "unknown")


@dataclass(frozen=True, slots=True)
class SourceSnippet:
    """A few numbered lines of template text around a failure.

    Attributes:
        lines: ``(lineno, text)`` pairs, in order
        error_line: 1-based line that failed, drawn with a ``>`` marker
        column: If set, a caret is drawn under this column
    """

    lines: tuple[tuple[int, str], ...]
    error_line: int
    column: int | None = None

    def format(self) -> str:
        out = ["    |"]
        out.extend(
            f"{'>' if lineno == self.error_line else ' '}{lineno:>3} | {text}"
            for lineno, text in self.lines
        )
        if self.column is not None:
            out.append("    | " + " " * self.column + "^")
        out.append("    |")
        return "\n".join(out)


def build_source_snippet(
    source: str,
    error_line: int,
    *,
    context_lines: int = 2,
    column: int | None = None,
) -> SourceSnippet:
    """Cut ``context_lines`` either side of ``error_line`` out of ``source``.

    The window is clamped to the start and end of the text.
    """
    first = max(1, error_line - context_lines)
    window = source.splitlines()[first - 1 : error_line + context_lines]
    return SourceSnippet(
        lines=tuple(enumerate(window, start=first)), error_line=error_line, column=column
    )


def _location(where: str | None, lineno: int | None, column: int | None = None) -> str:
    parts = [where or "<template>"]
    if lineno:
        parts.append(str(lineno))
        if column is not None:
            parts.append(str(column))
    return ":".join(parts)


def _compact(code: ErrorCode | None, message: str, *details: str | None) -> str:
    head = f"{code.value}: {message}" if code else message
    return "\n".join([head, *(d for d in details if d)])


def _describe_value(name: str, value: Any) -> str:
    shown = repr(value)
    if len(shown) > _MAX_VALUE_REPR:
        shown = shown[: _MAX_VALUE_REPR - 3] + "..."
    return f"    {name} = {shown} ({type(value).__name__})"


class TemplateError(Exception):
    """Root of every curly error.

    Catch it around a render to handle all template failures at once:

        >>> try:
        ...     env.render("page.html", data)
        ... except TemplateError as e:
        ...     log.error(e.format_compact())
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """The message prefixed with its error code, without snippets."""
        text = str(self).strip()
        if self.code is None or self.code.value in text:
            return text
        return f"{self.code.value}: {text}"


class TemplateNotFoundError(TemplateError):
    code: ErrorCode | None = ErrorCode.TEMPLATE_NOT_FOUND


class TemplateSyntaxError(TemplateError):
    """Template text that cannot be lexed or parsed.

    Given ``source`` and ``lineno`` the message quotes the offending line,
    and ``col_offset`` adds a caret under the column. Without the source,
    ``fragment`` (the token text) is shown instead.
    """

    code: ErrorCode | None = ErrorCode.SYNTAX_ERROR

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        name: str | None = None,
        filename: str | None = None,
        source: str | None = None,
        col_offset: int | None = None,
        fragment: str | None = None,
        suggestion: str | None = None,
    ):
        self.message = message
        self.lineno = lineno
        self.name = name
        self.filename = filename
        self.source = source
        self.col_offset = col_offset
        self.fragment = fragment
        self.suggestion = suggestion
        super().__init__(self._format_message())

    @property
    def location(self) -> str:
        return _location(self.filename or self.name, self.lineno, self.col_offset)

    def _quoted_line(self, source: str, lineno: int) -> list[str]:
        lines = source.splitlines()
        if not 0 < lineno <= len(lines):
            return []
        quoted = ["   |", f"{lineno:>3} | {lines[lineno - 1]}"]
        if self.col_offset is not None:
            quoted.append("   | " + " " * self.col_offset + "^")
        return quoted

    def _format_message(self) -> str:
        out = [f"Syntax Error: {self.message}", f"  --> {self.location}"]
        if self.source and self.lineno:
            out.extend(self._quoted_line(self.source, self.lineno))
        elif self.fragment:
            out.append(f"  Fragment: {self.fragment}")
        if self.suggestion:
            out.append(f"\nSuggestion: {self.suggestion}")
        return "\n".join(out)

    def format_compact(self) -> str:
        return _compact(
            self.code,
            self.message,
            f"  --> {self.location}",
            self.fragment and f"  Fragment: {self.fragment}",
            self.suggestion and f"  Hint: {self.suggestion}",
        )


class LexerError(TemplateSyntaxError):
    """A ``{% ... %}`` directive that is unterminated, malformed or unknown."""

    code: ErrorCode | None = ErrorCode.MALFORMED_DIRECTIVE

    def __init__(self, message: str, *, code: ErrorCode | None = None, **kwargs: Any):
        if code is not None:
            self.code = code
        super().__init__(message, **kwargs)


class UnknownFilterError(TemplateSyntaxError):
    code: ErrorCode | None = ErrorCode.INVALID_FILTER

    def __init__(self, filter_name: str, available: list[str] | None = None, **kwargs: Any):
        self.filter_name = filter_name
        hint = None
        if available:
            close = get_close_matches(filter_name, available, n=1, cutoff=0.6)
            hint = (
                f"Did you mean '{close[0]}'?"
                if close
                else f"Available filters: {', '.join(sorted(available))}"
            )
        super().__init__(f"Unknown filter '{filter_name}'", suggestion=hint, **kwargs)


class TemplateRuntimeError(TemplateError):
    """A failure while rendering, with enough context to find it.

    ``str(err)`` reads:

            ```
            Runtime Error: round expects a number, got 'abc'
              Location: product.html:12
              Expression: {price|round}
              Values:
                price = 'abc' (str)
            ```

    ``values`` maps the paths the failing expression looked up to what they
    resolved to.
    """

    code: ErrorCode | None = ErrorCode.RUNTIME_ERROR

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        values: dict[str, Any] | None = None,
        template_name: str | None = None,
        lineno: int | None = None,
        suggestion: str | None = None,
        source_snippet: SourceSnippet | None = None,
        code: ErrorCode | None = None,
    ):
        self.message = message
        self.expression = expression
        self.values = values or {}
        self.template_name = template_name
        self.lineno = lineno
        self.suggestion = suggestion
        self.source_snippet = source_snippet
        if code is not None:
            self.code = code
        super().__init__(self._format_message())

    @property
    def location(self) -> str:
        return _location(self.template_name, self.lineno)

    def _format_message(self) -> str:
        out = [f"Runtime Error: {self.message}", f"  Location: {self.location}"]
        if self.source_snippet:
            out.append(self.source_snippet.format())
        if self.expression:
            out.append(f"  Expression: {self.expression}")
        if self.values:
            out.append("  Values:")
            out.extend(_describe_value(name, value) for name, value in self.values.items())
        if self.suggestion:
            out.append(f"\n  Suggestion: {self.suggestion}")
        return "\n".join(out)

    def format_compact(self) -> str:
        return _compact(
            self.code,
            self.message,
            f"  Location: {self.location}",
            self.expression and f"  Expression: {self.expression}",
            self.suggestion and f"  Hint: {self.suggestion}",
        )


class CacheError(TemplateError):
    """The render cache directory cannot be created, read or written."""

    code: ErrorCode | None = ErrorCode.CACHE_UNAVAILABLE


class CacheMissError(CacheError):
    """``TemplateCache.get()`` found no live entry for ``key``."""

    code: ErrorCode | None = ErrorCode.CACHE_MISS

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"No valid cache entry for key '{key}'")


class FilterValueError(ValueError):
    """Raised by a filter that cannot handle its input.

    The renderer turns it into a TemplateRuntimeError with the location
    and the values involved.
    """

    def __init__(self, filter_name: str, value: Any, expected: str):
        self.filter_name = filter_name
        self.value = value
        self.expected = expected
        super().__init__(f"{filter_name} expects {expected}, got {value!r}")
