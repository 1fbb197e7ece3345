"""Configuration for the curly engine.

The engine never loads its own settings: callers build a ``TemplateConfig``
and pass it in. ``from_environ()`` is a convenience for command-line and
twelve-factor style deployments.

Example:
        >>> config = TemplateConfig(cache_dir="/var/cache/app/templates", cache_ttl=600)
        >>> env = Environment(FileSystemLoader("views/"), config=config)
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

DEFAULT_CACHE_DIR = Path(".curly-cache") / "templates"
DEFAULT_CACHE_TTL = 3600

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean (1/0, true/false, yes/no, on/off), got {raw!r}")


@dataclass(frozen=True, slots=True)
class TemplateConfig:
    """Engine settings.

    Attributes:
        cache_enabled: Store rendered output in the file cache
        cache_ttl: Entry lifetime in seconds; 0 means entries never expire
        cache_dir: Directory holding one file per cache entry
        development: Clear the cache every time a TemplateCache is built
        autoescape: HTML-escape output expressions (``raw``/``safe`` opt out)
        minify: Collapse whitespace between tags in rendered output
    """

    cache_enabled: bool = True
    cache_ttl: int = DEFAULT_CACHE_TTL
    cache_dir: Path = field(default=DEFAULT_CACHE_DIR)
    development: bool = False
    autoescape: bool = True
    minify: bool = False

    def __post_init__(self) -> None:
        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "cache_dir", Path(self.cache_dir))
        object.__setattr__(self, "cache_ttl", max(0, int(self.cache_ttl)))

    def with_overrides(self, **changes: Any) -> TemplateConfig:
        """Return a copy with the given fields replaced (None values ignored)."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    @classmethod
    def from_environ(cls, environ: Mapping[str, str]) -> TemplateConfig:
        """Build a config from ``CURLY_*`` variables.

        Reads CURLY_CACHE_ENABLED, CURLY_CACHE_TTL, CURLY_CACHE_DIR,
        CURLY_ENV ("development" enables development mode),
        CURLY_AUTOESCAPE and CURLY_MINIFY. Missing variables keep defaults.

        Raises:
            ValueError: If a variable is present but malformed.
        """
        kwargs: dict[str, Any] = {}
        for key, attr in (
            ("CURLY_CACHE_ENABLED", "cache_enabled"),
            ("CURLY_AUTOESCAPE", "autoescape"),
            ("CURLY_MINIFY", "minify"),
        ):
            if key in environ:
                kwargs[attr] = _parse_bool(key, environ[key])

        if "CURLY_CACHE_TTL" in environ:
            try:
                kwargs["cache_ttl"] = int(environ["CURLY_CACHE_TTL"])
            except ValueError:
                raise ValueError(
                    f"CURLY_CACHE_TTL must be an integer, got {environ['CURLY_CACHE_TTL']!r}"
                ) from None

        if environ.get("CURLY_CACHE_DIR"):
            kwargs["cache_dir"] = Path(environ["CURLY_CACHE_DIR"])

        if "CURLY_ENV" in environ:
            kwargs["development"] = environ["CURLY_ENV"].strip().lower() == "development"

        return cls(**kwargs)
