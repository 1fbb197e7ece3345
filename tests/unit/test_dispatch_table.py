"""Tests for the node dispatch tables in the parser and renderer.

Every opening directive, statement node and expression node must route to
a method that exists on the class doing the dispatch.
"""

import pytest

from curly._types import TokenType
from curly.lexer import _DIRECTIVE_HANDLERS, _KEYWORD_TYPES, DIRECTIVE_KEYWORDS, Lexer
from curly.nodes import Compare, Const, Data, Filter, For, Foreach, If, Not, Output, Path
from curly.parser import Parser
from curly.parser.core import _BLOCK_PARSERS
from curly.template.renderer import _EVALUATORS, _RENDERERS, Renderer


class TestParserDispatch:
    """Opening directives → parser methods."""

    def test_block_parsers_are_parse_methods(self):
        for token_type, method_name in _BLOCK_PARSERS.items():
            assert isinstance(token_type, TokenType)
            assert method_name.startswith("_parse_")
            assert callable(getattr(Parser, method_name))

    def test_only_opening_directives_dispatch(self):
        assert set(_BLOCK_PARSERS) == {TokenType.IF, TokenType.FOREACH, TokenType.FOR}


class TestLexerDispatch:
    """Directive keywords → lexer handlers and token types."""

    def test_every_keyword_has_a_token_type(self):
        assert set(_DIRECTIVE_HANDLERS) == set(_KEYWORD_TYPES) == DIRECTIVE_KEYWORDS

    @pytest.mark.parametrize("keyword", sorted(DIRECTIVE_KEYWORDS))
    def test_handler_exists(self, keyword):
        assert callable(getattr(Lexer, _DIRECTIVE_HANDLERS[keyword]))


class TestRendererDispatch:
    """Node classes → renderer methods."""

    @pytest.mark.parametrize("node_type", [Data, Output, If, Foreach, For])
    def test_statement_renderers(self, node_type):
        method_name = _RENDERERS[node_type]
        assert method_name.startswith("_render_")
        assert callable(getattr(Renderer, method_name))

    @pytest.mark.parametrize("expr_type", [Const, Path, Filter, Not, Compare])
    def test_expression_evaluators(self, expr_type):
        method_name = _EVALUATORS[expr_type]
        assert method_name.startswith("_eval_")
        assert callable(getattr(Renderer, method_name))

    def test_tables_do_not_overlap(self):
        assert set(_RENDERERS).isdisjoint(_EVALUATORS)
