"""Curly Template — a parsed template, ready to render any number of times.

A Template owns its node tree and a snapshot of the filters it was parsed
against. Nothing on it changes after construction, so one instance can be
rendered from several threads at once: each ``render()`` builds its own
Renderer, and the line/expression being rendered is tracked in a
ContextVar (``curly.render_context``).
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from curly.environment.exceptions import TemplateError, TemplateRuntimeError, build_source_snippet
from curly.nodes import Template as TemplateNode
from curly.render_context import RenderContext, render_context
from curly.template.renderer import Renderer
from curly.utils.html import minify_html


def merge_context(args: tuple[Any, ...], kwargs: Mapping[str, Any]) -> dict[str, Any]:
    """Flatten ``render()`` arguments into one new dict.

    At most one positional mapping is allowed, and keywords take precedence
    over its keys. The mapping passed in is left untouched.

    Raises:
        TypeError: If more than one positional argument or a non-mapping
            is passed
    """
    ctx: dict[str, Any] = {}
    if args:
        if len(args) == 1 and isinstance(args[0], Mapping):
            ctx.update(args[0])
        else:
            raise TypeError(
                f"render() takes at most 1 positional argument (a mapping), got {len(args)}"
            )
    ctx.update(kwargs)
    return ctx


class Template:
    """A compiled template. Get one from ``Environment.get_template()`` or
    ``Environment.from_string()``.

    Example:
            >>> greeting = env.from_string("Hello, {name}!")
            >>> greeting.render({"name": "Ada"}, name="World")
            'Hello, World!'
    """

    __slots__ = ("_filename", "_filters", "_minify", "_name", "_source", "_tree")

    def __init__(
        self,
        tree: TemplateNode,
        filters: Mapping[str, Callable[[Any], Any]],
        *,
        name: str | None = None,
        filename: str | None = None,
        source: str | None = None,
        minify: bool = False,
    ):
        self._tree = tree
        self._filters = dict(filters)
        self._name = name
        self._filename = filename
        self._source = source
        self._minify = minify

    @property
    def name(self) -> str | None:
        """Name it was loaded or registered under; None for anonymous strings."""
        return self._name

    @property
    def filename(self) -> str | None:
        """Path on disk, when the source came from a file."""
        return self._filename

    @property
    def tree(self) -> TemplateNode:
        """Root node, as produced by the parser."""
        return self._tree

    def render(self, *args: Any, **kwargs: Any) -> str:
        """Render with ``render(mapping)``, ``render(**names)`` or both.

        Keyword arguments override keys of the mapping. Output is all or
        nothing: if any expression fails, no partial text is returned.

        Raises:
            TypeError: For more than one positional argument, or one that
                is not a mapping
            TemplateRuntimeError: If a filter fails
        """
        data = merge_context(args, kwargs)

        with render_context(self._name, self._filename, self._source) as active:
            try:
                output = Renderer(data, self._filters).render(self._tree)
            except TemplateError:
                raise
            except Exception as e:
                raise self._enhance_error(e, active) from e

        return minify_html(output) if self._minify else output

    def _enhance_error(self, error: Exception, active: RenderContext) -> TemplateRuntimeError:
        """Wrap an arbitrary exception (usually from a custom filter).

        ``active`` says which line and expression were being rendered.
        """
        kind = type(error).__name__
        detail = str(error).strip()
        if not detail:
            message = f"{kind} (no details available)"
        elif detail.startswith(kind):
            message = detail
        else:
            message = f"{kind}: {detail}"

        lineno = active.line
        return TemplateRuntimeError(
            message,
            expression=active.expression,
            template_name=self._name,
            lineno=lineno,
            source_snippet=(
                build_source_snippet(self._source, lineno) if self._source and lineno else None
            ),
        )

    def __repr__(self) -> str:
        label = self._name if self._name else "(inline)"
        return f"<Template {label}>"
