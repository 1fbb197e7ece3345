"""HTML utilities: escaping, trusted markup, minification and error pages.

Escaping is single-pass via ``str.translate()``. Values that are already
``Markup`` (or expose ``__html__``) are trusted and pass through unchanged.
"""

from __future__ import annotations

import re
from typing import Any

_ESCAPE_TABLE = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&#x27;",
    }
)

# Whitespace between tags; text content and attribute values are untouched
_SPACELESS_RE = re.compile(r">\s+<")
_PRESERVE_RE = re.compile(r"<(pre|textarea|script|style)\b.*?</\1\s*>", re.IGNORECASE | re.DOTALL)


class Markup(str):
    """A string that is already safe HTML and must not be escaped again.

    Example:
            >>> html_escape(Markup("<b>bold</b>"))
            '<b>bold</b>'
            >>> html_escape("<b>bold</b>")
            '&lt;b&gt;bold&lt;/b&gt;'
    """

    __slots__ = ()

    def __html__(self) -> Markup:
        return self

    def __repr__(self) -> str:
        return f"Markup({super().__repr__()})"


def html_escape(value: Any) -> str:
    """Escape a value for safe inclusion in HTML text or attribute values."""
    if hasattr(value, "__html__"):
        return str(value.__html__())
    return str(value).translate(_ESCAPE_TABLE)


def minify_html(html: str) -> str:
    """Remove whitespace between tags, leaving pre/textarea/script/style alone."""
    preserved: list[str] = []

    def _stash(match: re.Match[str]) -> str:
        preserved.append(match.group(0))
        # Tag-shaped placeholder so surrounding whitespace still collapses
        return f"<\x00{len(preserved) - 1}\x00>"

    stashed = _PRESERVE_RE.sub(_stash, html)
    collapsed = _SPACELESS_RE.sub("><", stashed).strip()
    return re.sub(r"<\x00(\d+)\x00>", lambda m: preserved[int(m.group(1))], collapsed)


def error_page(error: BaseException, *, title: str = "Template Error") -> str:
    """Build a standalone HTML page describing a rendering failure.

    The page is deliberately unlike normal output (fixed banner, monospace
    diagnostic) so a failed render is never mistaken for a valid document.
    Error text is escaped.
    """
    code = getattr(error, "code", None)
    code_value = getattr(code, "value", None)
    code_text = f"{code_value} " if isinstance(code_value, str) else ""
    category = getattr(code, "category", "internal")
    formatter = getattr(error, "format_compact", None)
    detail = formatter() if callable(formatter) else str(error)
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '<meta charset="utf-8">\n'
        f"<title>{html_escape(title)}</title>\n"
        "<style>"
        "body{margin:0;font-family:sans-serif;background:#fff5f5;color:#1a1a1a}"
        "header{background:#c53030;color:#fff;padding:1rem 2rem}"
        "pre{margin:2rem;padding:1rem;background:#fff;border:1px solid #feb2b2;"
        "white-space:pre-wrap}"
        "</style>\n"
        "</head>\n"
        "<body>\n"
        f'<header><strong>{html_escape(code_text)}{html_escape(title)}</strong>: '
        f"{html_escape(type(error).__name__)}</header>\n"
        f'<pre class="curly-error" data-category="{html_escape(str(category))}">'
        f"{html_escape(detail)}</pre>\n"
        "</body>\n"
        "</html>\n"
    )
