"""Where template text comes from.

A loader is any object with ``get_source(name) -> TemplateSource``. The
environment never touches the filesystem itself.

    FileSystemLoader   files under one or more directories (cacheable)
    DictLoader         an in-memory ``{name: text}`` mapping
    ChoiceLoader       first loader that knows the name wins

A source's ``mtime`` decides whether its rendered output can go to the file
cache: it is part of the cache key, so only sources that have one (files)
are cached, and saving a file retires every cached render of it.

Writing your own:
    ```python
    class DatabaseLoader:
        def get_source(self, name: str) -> TemplateSource:
            row = db.fetch_template(name)
            if row is None:
                raise TemplateNotFoundError(f"Template '{name}' not found")
            return TemplateSource(row.body, f"db://{name}", row.updated_at.timestamp())
    ```
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from difflib import get_close_matches
from pathlib import Path
from typing import Protocol

from curly.environment.exceptions import TemplateNotFoundError


@dataclass(frozen=True, slots=True)
class TemplateSource:
    """Template text plus the metadata used for caching and errors.

    Attributes:
        source: Template text
        filename: Where the text came from (None for in-memory sources)
        mtime: Last-modified time in seconds, or None if not file-backed
    """

    source: str
    filename: str | None = None
    mtime: float | None = None


class Loader(Protocol):
    def get_source(self, name: str) -> TemplateSource: ...


def _not_found(name: str, known: Iterable[str], where: str | None = None) -> TemplateNotFoundError:
    """Build a not-found error with a close-match hint when there is one."""
    message = f"Template '{name}' not found"
    if where:
        message += f" in {where}"
    names = sorted(known)
    close = get_close_matches(name, names, n=1, cutoff=0.6)
    if close:
        message += f". Did you mean '{close[0]}'?"
    elif names:
        shown = ", ".join(names[:10])
        message += f". Available: {shown}"
        if len(names) > 10:
            message += f" ... ({len(names)} total)"
    return TemplateNotFoundError(message)


class FileSystemLoader:
    """Read templates from directories, first match wins.

    ``name`` is a ``/``-separated path relative to a search directory, plus
    ``suffix`` if one is configured. Names that would resolve outside every
    search directory are treated as missing.

    Example:
            >>> loader = FileSystemLoader(["themes/custom/", "themes/default/"], suffix=".html")
            >>> loader.get_source("pages/about").filename
            'themes/default/pages/about.html'
    """

    __slots__ = ("_encoding", "_roots", "_suffix")

    def __init__(
        self,
        paths: str | Path | Sequence[str | Path],
        encoding: str = "utf-8",
        suffix: str = "",
    ):
        roots = [paths] if isinstance(paths, (str, Path)) else list(paths)
        self._roots = [Path(root) for root in roots]
        self._encoding = encoding
        self._suffix = suffix

    def _locate(self, name: str) -> Path | None:
        relative = name.replace("\\", "/").lstrip("/") + self._suffix
        for root in self._roots:
            candidate = root / relative
            if not candidate.resolve().is_relative_to(root.resolve()):
                continue
            if candidate.is_file():
                return candidate
        return None

    def get_source(self, name: str) -> TemplateSource:
        """Read ``name`` from the first search directory that has it.

        Raises:
            TemplateNotFoundError: If no search directory has the file
        """
        path = self._locate(name)
        if path is None:
            raise _not_found(
                name,
                self.list_templates(),
                where=", ".join(str(root) for root in self._roots),
            )
        return TemplateSource(path.read_text(self._encoding), str(path), path.stat().st_mtime)

    def list_templates(self) -> list[str]:
        """Every template name reachable through the search directories."""
        found: set[str] = set()
        for root in self._roots:
            if not root.is_dir():
                continue
            for path in root.rglob(f"*{self._suffix}"):
                if path.is_file():
                    name = path.relative_to(root).as_posix()
                    found.add(name[: len(name) - len(self._suffix)])
        return sorted(found)


class DictLoader:
    """Serve templates from a ``{name: text}`` mapping.

    Handy for tests and templates embedded in code. Sources carry no mtime,
    so their output is rendered every time and never written to the cache.

    Example:
            >>> env = Environment(DictLoader({"hello.html": "Hello {name}!"}))
            >>> env.render("hello.html", name="World")
            'Hello World!'
    """

    __slots__ = ("_templates",)

    def __init__(self, templates: dict[str, str]):
        self._templates = templates

    def get_source(self, name: str) -> TemplateSource:
        try:
            return TemplateSource(self._templates[name])
        except KeyError:
            raise _not_found(name, self._templates) from None

    def list_templates(self) -> list[str]:
        return sorted(self._templates)


class ChoiceLoader:
    """Ask each loader in turn; the first one that has the name wins.

    Useful for a theme overriding a few templates of a base theme.
    """

    __slots__ = ("_loaders",)

    def __init__(self, loaders: Sequence[Loader]):
        self._loaders = list(loaders)

    def get_source(self, name: str) -> TemplateSource:
        """Raises TemplateNotFoundError if no loader has ``name``."""
        for loader in self._loaders:
            try:
                return loader.get_source(name)
            except TemplateNotFoundError:
                pass
        raise _not_found(name, self.list_templates(), where=f"{len(self._loaders)} loaders")

    def list_templates(self) -> list[str]:
        names: set[str] = set()
        for loader in self._loaders:
            lister = getattr(loader, "list_templates", None)
            if lister is not None:
                names.update(lister())
        return sorted(names)
