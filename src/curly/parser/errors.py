"""Parser error handling for curly.

Provides ParseError, a TemplateSyntaxError built directly from the token
where parsing failed.
"""

from __future__ import annotations

from curly._types import Token
from curly.environment.exceptions import ErrorCode, TemplateSyntaxError


class ParseError(TemplateSyntaxError):
    """Structural error with the offending token and its source context.

    Raised for unmatched or misordered block directives and invalid
    conditions. Rendering never starts for a template that fails to parse.
    """

    code: ErrorCode | None = ErrorCode.UNEXPECTED_TOKEN

    def __init__(
        self,
        message: str,
        token: Token,
        source: str | None = None,
        filename: str | None = None,
        name: str | None = None,
        suggestion: str | None = None,
        code: ErrorCode | None = None,
    ):
        self.token = token
        if code is not None:
            self.code = code
        super().__init__(
            message,
            lineno=token.lineno,
            name=name,
            filename=filename,
            source=source,
            col_offset=token.col_offset,
            fragment=token.value or None,
            suggestion=suggestion,
        )
