"""Curly — HTML template engine with a file-backed render cache.

Renders HTML templates written with ``{path|filter}`` output expressions and
``{% if %}``/``{% foreach %}``/``{% for %}`` blocks against nested data, and
caches rendered output on disk keyed by template path, source mtime and
data.

Quickstart:
    >>> from curly import Environment
    >>> env = Environment()
    >>> template = env.from_string("Hello, {name|capitalize}!")
    >>> template.render(name="world")
    'Hello, World!'

File-based templates:
    >>> from curly import Environment, FileSystemLoader, TemplateConfig
    >>> env = Environment(
    ...     FileSystemLoader("views/"),
    ...     config=TemplateConfig(cache_dir="/tmp/curly", cache_ttl=600),
    ... )
    >>> env.render("product.html", {"product": {"name": "Lamp", "rating": 4.4}})

Architecture:
Template Source → Lexer → Parser → node tree → Renderer → str

Pipeline stages:
1. **Lexer**: Splits source into DATA, OUTPUT and directive tokens
2. **Parser**: Matches block directives and builds an immutable node tree
3. **Renderer**: Walks the tree against the data (StringBuilder pattern)
4. **TemplateCache**: Stores rendered output per (path, mtime, data)

Syntax:
    ```html
    <h1>{page.title|title}</h1>
    {% if user.admin %}<a href="/admin">Admin</a>{% else %}Welcome{% endif %}
    <ul>
    {% foreach products as p %}
      <li>{loop.index}. {p.name} {p.rating|stars}</li>
    {% endforeach %}
    </ul>
    {% for i in 1..3 %}{i}{% endfor %}
    ```

Escaping:
Output is HTML-escaped by default. ``{html|raw}`` (or ``|safe``) marks a
value as trusted; ``TemplateConfig(autoescape=False)`` turns escaping off.

Missing data:
A path that does not resolve renders as the empty string and is falsy in
conditions. Structural mistakes (unclosed blocks, unknown directives or
filters) fail at parse time with the offending line and column.
"""

from curly._types import Token, TokenType
from curly.cache import TemplateCache, cache_key
from curly.environment import (
    CacheError,
    CacheMissError,
    ChoiceLoader,
    DictLoader,
    Environment,
    ErrorCode,
    FileSystemLoader,
    LexerError,
    SourceSnippet,
    TemplateConfig,
    TemplateError,
    TemplateNotFoundError,
    TemplateRuntimeError,
    TemplateSource,
    TemplateSyntaxError,
    UnknownFilterError,
    build_source_snippet,
)
from curly.parser import ParseError
from curly.render_context import (
    RenderContext,
    get_render_context,
    render_context,
)
from curly.template import UNDEFINED, LoopContext, Markup, Template
from curly.utils.html import error_page, html_escape, minify_html

__version__ = "0.1.0"

__all__ = [
    "UNDEFINED",
    "CacheError",
    "CacheMissError",
    "ChoiceLoader",
    "DictLoader",
    "Environment",
    "ErrorCode",
    "FileSystemLoader",
    "LexerError",
    "LoopContext",
    "Markup",
    "ParseError",
    "RenderContext",
    "SourceSnippet",
    "Template",
    "TemplateCache",
    "TemplateConfig",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateRuntimeError",
    "TemplateSource",
    "TemplateSyntaxError",
    "Token",
    "TokenType",
    "UnknownFilterError",
    "__version__",
    "build_source_snippet",
    "cache_key",
    "error_page",
    "get_render_context",
    "html_escape",
    "minify_html",
    "render_context",
]
