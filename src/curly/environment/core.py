"""Curly Environment — central configuration and template management hub.

The Environment ties together loading, parsing, rendering and the
rendered-output cache.

Pipeline (``Environment.render``):
    ```
    loader.get_source(name)
      → file-backed and caching on?  cache.get(key) ── hit ──→ output
      → miss: Lexer → Parser → Renderer
      → cache.store(key, output)
      → output
    ```

Caching:
    - Parsed templates are memoised in memory per (name, source mtime)
    - Rendered output is cached on disk per (path, mtime, data) when the
      source is file-backed and ``config.cache_enabled`` is set
    - Cache read or write failures are logged and never fail a render

Thread-Safety:
    The in-memory template table is guarded by a lock. Filter mutations are
    copy-on-write, so templates already parsed keep their filter snapshot.

Example:
        >>> env = Environment(FileSystemLoader("views/"))
        >>> env.add_filter("shout", lambda s: str(s).upper() + "!")
        >>> env.render("page.html", {"user": {"name": "Ada"}})
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from curly.environment.config import TemplateConfig
from curly.environment.exceptions import CacheError, CacheMissError
from curly.environment.filters import DEFAULT_FILTERS
from curly.environment.loaders import Loader, TemplateSource
from curly.environment.registry import FilterRegistry
from curly.lexer import tokenize
from curly.parser import Parser
from curly.template import Template
from curly.template.core import merge_context

if TYPE_CHECKING:
    from curly.cache import TemplateCache

logger = logging.getLogger(__name__)


class Environment:
    """Central configuration and template management.

    Args:
        loader: Template source provider (None allows only ``from_string``)
        config: Engine settings; defaults to ``TemplateConfig()``
        cache: Rendered-output cache; built lazily from ``config`` on first
            use when caching is enabled

    Example:
            >>> env = Environment(DictLoader({"hi.html": "Hi {name|upper}"}))
            >>> env.render("hi.html", name="ada")
            'Hi ADA'
    """

    def __init__(
        self,
        loader: Loader | None = None,
        *,
        config: TemplateConfig | None = None,
        cache: TemplateCache | None = None,
    ):
        self.loader = loader
        self.config = config or TemplateConfig()
        self._cache = cache
        self._cache_failed = False
        self._filters: dict[str, Callable[[Any], Any]] = dict(DEFAULT_FILTERS)
        # name → (mtime, filter table parsed against, template)
        self._templates: dict[str, tuple[float | None, dict[str, Any], Template]] = {}
        self._lock = threading.Lock()

    @property
    def filters(self) -> FilterRegistry:
        """Filters available to templates parsed from now on."""
        return FilterRegistry(self, "_filters")

    def add_filter(self, name: str, func: Callable[[Any], Any]) -> None:
        """Register a filter for templates parsed from now on."""
        self.filters[name] = func

    @property
    def cache(self) -> TemplateCache | None:
        """The rendered-output cache, or None when caching is off or unusable."""
        if not self.config.cache_enabled:
            return None
        if self._cache is None and not self._cache_failed:
            from curly.cache import TemplateCache

            try:
                self._cache = TemplateCache(self.config)
            except CacheError as e:
                # Render uncached rather than fail
                logger.error(f"Template cache disabled: {e}")
                self._cache_failed = True
        return self._cache

    def _parse(self, source: str, name: str | None, filename: str | None) -> Template:
        tokens = tokenize(source, name=name, filename=filename)
        tree = Parser(
            tokens,
            filters=self._filters,
            name=name,
            filename=filename,
            source=source,
            autoescape=self.config.autoescape,
        ).parse()
        return Template(
            tree,
            self._filters,
            name=name,
            filename=filename,
            source=source,
            minify=self.config.minify,
        )

    def from_string(self, source: str, name: str | None = None) -> Template:
        """Parse a template from a string.

        String templates are not memoised and their output is never written
        to the file cache.

        Raises:
            TemplateSyntaxError: If the source fails to lex or parse
        """
        return self._parse(source, name, None)

    def _load(self, name: str) -> TemplateSource:
        if self.loader is None:
            raise RuntimeError("No loader configured")
        return self.loader.get_source(name)

    def _template_for(self, name: str, source: TemplateSource) -> Template:
        with self._lock:
            cached = self._templates.get(name)
        if (
            cached is not None
            and source.mtime is not None
            and cached[0] == source.mtime
            and cached[1] is self._filters
        ):
            return cached[2]

        template = self._parse(source.source, name, source.filename)
        with self._lock:
            self._templates[name] = (source.mtime, self._filters, template)
        return template

    def get_template(self, name: str) -> Template:
        """Load and parse a template by name.

        File-backed templates are reparsed only when their mtime changes.

        Raises:
            TemplateNotFoundError: If the loader cannot find ``name``
            TemplateSyntaxError: If the source fails to lex or parse
        """
        return self._template_for(name, self._load(name))

    def render(self, name: str, /, *args: Any, **kwargs: Any) -> str:
        """Render a named template, serving and filling the file cache.

        ``name`` is positional-only, so templates can use a ``name`` variable:
        ``env.render("hello.html", name="World")``.

        Args:
            name: Template name for the loader
            *args: Single mapping of context variables
            **kwargs: Context variables as keyword arguments

        Raises:
            TemplateNotFoundError: If the loader cannot find ``name``
            TemplateSyntaxError: If the source fails to lex or parse
            TemplateRuntimeError: If rendering fails
        """
        data = merge_context(args, kwargs)
        source = self._load(name)

        cache = self.cache if source.mtime is not None else None
        key = None
        if cache is not None:
            try:
                key = cache.key_for(source.filename or name, source.mtime, data)
            except (TypeError, ValueError) as e:
                logger.warning(f"Cannot derive a cache key for '{name}', rendering uncached: {e}")
                cache = None
        if cache is not None and key is not None:
            try:
                return cache.get(key)
            except CacheMissError:
                pass
            except (OSError, ValueError) as e:
                logger.warning(f"Template cache read failed for '{name}', rendering: {e}")

        output = self._template_for(name, source).render(data)

        if cache is not None and key is not None:
            cache.store(key, output)
        return output

    def clear_cache(self) -> bool:
        """Drop parsed templates and every rendered-output cache entry.

        Returns:
            False if any cache file could not be removed (logged)
        """
        with self._lock:
            self._templates.clear()
        cache = self.cache
        if cache is None:
            return True
        return cache.clear()

    def __repr__(self) -> str:
        return f"<Environment loader={type(self.loader).__name__} cache={self._cache!r}>"
