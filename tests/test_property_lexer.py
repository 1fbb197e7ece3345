"""Property-based tests for the curly lexer.

Uses hypothesis to verify structural invariants that must hold for
*all* inputs, not just hand-picked examples:

- Text without output expressions or directives round-trips unchanged
- Stray braces (CSS, JavaScript) never become output tokens
- Every dotted path in braces becomes a single OUTPUT token
- Arbitrary input never causes an unhandled crash
"""

from __future__ import annotations

from hypothesis import given, settings

from curly._types import TokenType
from curly.environment.exceptions import TemplateSyntaxError
from curly.lexer import tokenize

from .strategies import (
    arbitrary_template_source,
    brace_literal_text,
    dotted_path,
    literal_text,
    output_expression,
)


class TestLexerProperties:
    """Property-based lexer invariants."""

    @given(source=literal_text)
    @settings(max_examples=200)
    def test_literal_text_roundtrip(self, source: str) -> None:
        """Brace-free text produces only DATA tokens with the original content."""
        tokens = tokenize(source)
        assert tokens[-1].type == TokenType.EOF
        assert all(t.type == TokenType.DATA for t in tokens[:-1])
        assert "".join(t.value for t in tokens[:-1]) == source

    @given(source=brace_literal_text)
    @settings(max_examples=200)
    def test_stray_braces_stay_literal(self, source: str) -> None:
        tokens = tokenize(source)
        assert {t.type for t in tokens} <= {TokenType.DATA, TokenType.EOF}
        assert "".join(t.value for t in tokens[:-1]) == source

    @given(before=literal_text, expr=output_expression, after=literal_text)
    @settings(max_examples=200)
    def test_output_expression_is_one_token(self, before: str, expr: str, after: str) -> None:
        tokens = tokenize(before + expr + after)
        outputs = [t for t in tokens if t.type == TokenType.OUTPUT]
        assert len(outputs) == 1
        assert outputs[0].value == expr
        assert outputs[0].args == (expr[1:-1],)

    @given(path=dotted_path, text=literal_text)
    @settings(max_examples=100)
    def test_line_numbers_follow_newlines(self, path: str, text: str) -> None:
        source = text + "{" + path + "}"
        (output,) = [t for t in tokenize(source) if t.type == TokenType.OUTPUT]
        assert output.lineno == text.count("\n") + 1

    @given(source=arbitrary_template_source)
    @settings(max_examples=300)
    def test_no_unhandled_crash(self, source: str) -> None:
        """The lexer raises nothing but TemplateSyntaxError for bad input."""
        try:
            tokenize(source)
        except TemplateSyntaxError:
            pass
