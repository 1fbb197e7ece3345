"""Tree-walking renderer for curly templates.

Walks a parsed ``nodes.Template`` and appends output fragments to a list
that is joined once at the end (StringBuilder pattern: O(n) in the output
size instead of O(n²) string concatenation).

Dispatch:
    Statement nodes route through ``_RENDERERS`` (node class → method
    name) and expression nodes through ``_EVALUATORS``, so adding a node
    type means one new method and one table entry.

Scopes:
    Loops push a fresh dict (alias and ``loop``) onto ``_scopes`` and pop it
    on exit. The caller's mapping is only read, never written.

Thread-Safety:
    A Renderer holds the state of one render. Create one per call.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any

from curly.environment.exceptions import (
    ErrorCode,
    FilterValueError,
    TemplateRuntimeError,
    build_source_snippet,
)
from curly.nodes import (
    Compare,
    Const,
    Data,
    Expr,
    Filter,
    For,
    Foreach,
    If,
    Node,
    Not,
    Output,
    Path,
    Template,
)
from curly.render_context import get_render_context
from curly.template.helpers import (
    apply_filters,
    is_sequence,
    is_truthy,
    resolve,
    to_str,
    values_equal,
)
from curly.template.loop_context import LoopContext
from curly.utils.html import html_escape

_RENDERERS: dict[type[Node], str] = {
    Data: "_render_data",
    Output: "_render_output",
    If: "_render_if",
    Foreach: "_render_foreach",
    For: "_render_for",
}

_EVALUATORS: dict[type[Expr], str] = {
    Const: "_eval_const",
    Path: "_eval_path",
    Filter: "_eval_filter",
    Not: "_eval_not",
    Compare: "_eval_compare",
}


class Renderer:
    """Render one node tree against one data context.

    Example:
            >>> tree = Parser(tokenize("Hi {name|upper}"), filters=DEFAULT_FILTERS).parse()
            >>> Renderer({"name": "ada"}, DEFAULT_FILTERS).render(tree)
            'Hi ADA'

    Args:
        ctx: Root data context (read-only)
        filters: Filter table the tree was parsed against
    """

    __slots__ = ("_buf", "_ctx", "_filters", "_scopes")

    def __init__(self, ctx: Mapping[str, Any], filters: Mapping[str, Callable[[Any], Any]]):
        self._ctx = ctx
        self._filters = filters
        self._scopes: list[dict[str, Any]] = []
        self._buf: list[str] = []

    def render(self, tree: Template) -> str:
        self._render_body(tree.body)
        return "".join(self._buf)

    def _render_body(self, body: Sequence[Node]) -> None:
        for node in body:
            getattr(self, _RENDERERS[type(node)])(node)

    # Statements

    def _render_data(self, node: Data) -> None:
        self._buf.append(node.value)

    def _render_output(self, node: Output) -> None:
        render_ctx = get_render_context()
        if render_ctx is not None:
            render_ctx.mark(node.lineno, node.source)
        # to_str keeps Markup instances intact, html_escape passes them through
        text = to_str(self.evaluate(node.expr))
        self._buf.append(html_escape(text) if node.escape else text)

    def _render_if(self, node: If) -> None:
        for test, body in node.branches:
            if is_truthy(self._evaluate_at(test, node)):
                self._render_body(body)
                return
        self._render_body(node.else_)

    def _render_foreach(self, node: Foreach) -> None:
        items = self._evaluate_at(node.collection, node)
        if not is_sequence(items) or not items:
            return
        loop = LoopContext(len(items))
        scope: dict[str, Any] = {"loop": loop}
        self._scopes.append(scope)
        try:
            for index, item in enumerate(items):
                loop.advance(index)
                scope[node.alias] = item
                self._render_body(node.body)
        finally:
            self._scopes.pop()

    def _render_for(self, node: For) -> None:
        if node.start > node.end:
            return
        loop = LoopContext(node.end - node.start + 1)
        scope: dict[str, Any] = {"loop": loop}
        self._scopes.append(scope)
        try:
            for index, value in enumerate(range(node.start, node.end + 1)):
                loop.advance(index)
                scope[node.var] = value
                self._render_body(node.body)
        finally:
            self._scopes.pop()

    # Expressions

    def _evaluate_at(self, expr: Expr, node: Node) -> Any:
        render_ctx = get_render_context()
        if render_ctx is not None:
            render_ctx.mark(node.lineno)
        return self.evaluate(expr)

    def evaluate(self, expr: Expr) -> Any:
        """Evaluate an expression node to a value (possibly UNDEFINED)."""
        return getattr(self, _EVALUATORS[type(expr)])(expr)

    def _eval_const(self, expr: Const) -> Any:
        return expr.value

    def _eval_path(self, expr: Path) -> Any:
        return resolve(expr.segments, self._ctx, self._scopes)

    def _eval_filter(self, expr: Filter) -> Any:
        value = self.evaluate(expr.value)
        try:
            return apply_filters(value, (expr.name,), self._filters)
        except FilterValueError as e:
            raise self._filter_error(expr, value, str(e)) from e

    def _eval_not(self, expr: Not) -> bool:
        return not is_truthy(self.evaluate(expr.operand))

    def _eval_compare(self, expr: Compare) -> bool:
        equal = values_equal(self.evaluate(expr.left), self.evaluate(expr.right))
        return equal if expr.op == "==" else not equal

    def _filter_error(self, expr: Filter, value: Any, message: str) -> TemplateRuntimeError:
        render_ctx = get_render_context()
        template_name = None
        snippet = None
        if render_ctx is not None:
            template_name = render_ctx.template_name
            if render_ctx.source:
                snippet = build_source_snippet(render_ctx.source, expr.lineno)

        return TemplateRuntimeError(
            message,
            expression=_describe(expr),
            values={_describe(expr.value): value},
            template_name=template_name,
            lineno=expr.lineno,
            suggestion=f"Check the value passed to the '{expr.name}' filter",
            source_snippet=snippet,
            code=ErrorCode.FILTER_ERROR,
        )


def _describe(expr: Expr) -> str:
    """Render an expression back to template-like text for error messages."""
    if isinstance(expr, Path):
        return expr.dotted
    if isinstance(expr, Filter):
        return f"{_describe(expr.value)}|{expr.name}"
    if isinstance(expr, Const):
        return repr(expr.value)
    if isinstance(expr, Not):
        return f"not {_describe(expr.operand)}"
    if isinstance(expr, Compare):
        return f"{_describe(expr.left)} {expr.op} {_describe(expr.right)}"
    return type(expr).__name__
