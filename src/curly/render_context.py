"""Per-render diagnostic state.

While a template renders, the renderer records which line and expression
it is working on. When something fails, the error is built from this
record instead of from keys smuggled into the caller's data.

The record lives in a ContextVar, so renders running in other threads or
asyncio tasks each see their own.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass


@dataclass(slots=True)
class RenderContext:
    """Where the active render is.

    Attributes:
        template_name: Name used in error locations
        filename: Path of the source file, when loaded from disk
        source: Full template text, for error snippets
        line: Line of the node currently being rendered
        expression: Source fragment of the node currently being rendered
    """

    template_name: str | None = None
    filename: str | None = None
    source: str | None = None
    line: int = 0
    expression: str | None = None

    def mark(self, line: int, expression: str | None = None) -> None:
        self.line = line
        self.expression = expression


_current: ContextVar[RenderContext | None] = ContextVar("curly_render_context", default=None)


def get_render_context() -> RenderContext | None:
    """The active render's context, or None outside a render."""
    return _current.get()


@contextmanager
def render_context(
    template_name: str | None = None,
    filename: str | None = None,
    source: str | None = None,
) -> Iterator[RenderContext]:
    """Install a fresh RenderContext for the duration of the block.

    Nested blocks restore the outer context on exit.

    Example:
            >>> with render_context(template_name="page.html") as active:
            ...     active.mark(3, "{price|round}")
    """
    active = RenderContext(template_name=template_name, filename=filename, source=source)
    reset_token = _current.set(active)
    try:
        yield active
    finally:
        _current.reset(reset_token)
