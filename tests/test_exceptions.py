"""Tests for error types, formatting, error pages and the render context."""

import pytest

from curly import (
    ErrorCode,
    LexerError,
    TemplateNotFoundError,
    TemplateRuntimeError,
    build_source_snippet,
    error_page,
    get_render_context,
    render_context,
)
from curly.lexer import tokenize


class TestErrorCodes:
    @pytest.mark.parametrize(
        ("code", "category"),
        [
            (ErrorCode.UNCLOSED_TAG, "lexer"),
            (ErrorCode.UNCLOSED_BLOCK, "parser"),
            (ErrorCode.FILTER_ERROR, "runtime"),
            (ErrorCode.TEMPLATE_NOT_FOUND, "template"),
            (ErrorCode.CACHE_MISS, "cache"),
        ],
    )
    def test_category(self, code, category):
        assert code.category == category

    def test_codes_are_unique(self):
        values = [code.value for code in ErrorCode]
        assert len(values) == len(set(values))


class TestSyntaxErrorFormatting:
    def test_points_at_line_and_column(self):
        with pytest.raises(LexerError) as exc_info:
            tokenize("first\n  {% endwhile %}", name="page.html")
        err = exc_info.value
        assert err.code == ErrorCode.UNKNOWN_DIRECTIVE
        assert err.location == "page.html:2:2"
        text = str(err)
        assert text.startswith("Syntax Error: Unknown directive 'endwhile'")
        assert "  2 |   {% endwhile %}" in text
        assert "   |   ^" in text

    def test_compact(self):
        with pytest.raises(LexerError) as exc_info:
            tokenize("{% endwhile %}", name="page.html")
        compact = exc_info.value.format_compact()
        assert compact.splitlines()[0] == "C-LEX-002: Unknown directive 'endwhile'"
        assert "  --> page.html:1:0" in compact

    def test_filename_preferred_over_name(self):
        with pytest.raises(LexerError) as exc_info:
            tokenize("{% if %}", name="page.html", filename="views/page.html")
        assert exc_info.value.location.startswith("views/page.html:1")

    def test_unclosed_tag(self):
        with pytest.raises(LexerError) as exc_info:
            tokenize("ok {% if x")
        assert exc_info.value.code == ErrorCode.UNCLOSED_TAG


class TestRuntimeErrorFormatting:
    def test_full_message(self):
        err = TemplateRuntimeError(
            "round expects a number, got 'abc'",
            expression="price|round",
            values={"price": "abc"},
            template_name="product.html",
            lineno=12,
            suggestion="Pass a number",
        )
        text = str(err)
        assert text.splitlines()[0] == "Runtime Error: round expects a number, got 'abc'"
        assert "  Location: product.html:12" in text
        assert "    price = 'abc' (str)" in text
        assert "Suggestion: Pass a number" in text

    def test_long_values_truncated(self):
        err = TemplateRuntimeError("bad", values={"blob": "x" * 200})
        (line,) = [ln for ln in str(err).splitlines() if "blob =" in ln]
        assert "..." in line
        assert len(line) < 120

    def test_compact(self):
        err = TemplateRuntimeError("bad", expression="{x}", template_name="t.html", lineno=3)
        assert err.format_compact() == "C-RUN-002: bad\n  Location: t.html:3\n  Expression: {x}"

    def test_not_found_compact(self):
        err = TemplateNotFoundError("Template 'x.html' not found")
        assert err.format_compact() == "C-TPL-001: Template 'x.html' not found"


class TestSourceSnippet:
    def test_context_window(self):
        snippet = build_source_snippet("a\nb\nc\nd\ne", 3, context_lines=1)
        assert snippet.lines == ((2, "b"), (3, "c"), (4, "d"))
        assert snippet.format() == "    |\n   2 | b\n>  3 | c\n   4 | d\n    |"

    def test_clamped_at_edges(self):
        snippet = build_source_snippet("only", 1)
        assert snippet.lines == ((1, "only"),)

    def test_caret(self):
        snippet = build_source_snippet("abc", 1, column=2)
        assert "    |   ^" in snippet.format()


class TestErrorPage:
    def test_escapes_error_text(self):
        err = TemplateRuntimeError("<script>alert(1)</script>", template_name="x.html")
        page = error_page(err)
        assert "<script>alert" not in page
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in page

    def test_includes_code_and_type(self):
        page = error_page(TemplateNotFoundError("missing"))
        assert page.startswith("<!DOCTYPE html>")
        assert "C-TPL-001 Template Error" in page
        assert "TemplateNotFoundError" in page

    def test_marks_error_category(self):
        assert 'data-category="template"' in error_page(TemplateNotFoundError("missing"))
        assert 'data-category="internal"' in error_page(ValueError("boom"))

    def test_plain_exception(self):
        page = error_page(ValueError("a & b"), title="Oops")
        assert "<title>Oops</title>" in page
        assert "a &amp; b" in page


class TestRenderContext:
    def test_none_outside_render(self):
        assert get_render_context() is None

    def test_nested_contexts_restore(self):
        with render_context(template_name="outer.html") as outer:
            with render_context(template_name="inner.html"):
                assert get_render_context().template_name == "inner.html"
            assert get_render_context() is outer
        assert get_render_context() is None

    def test_mark(self):
        with render_context(source="x") as ctx:
            ctx.mark(4, "{name}")
            assert (ctx.line, ctx.expression) == (4, "{name}")
