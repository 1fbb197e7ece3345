"""File-based cache of rendered template output.

One file per entry, named ``template_<key>.html``, holding the rendered
output as UTF-8. The entry's file mtime is its creation time; entries older
than the configured TTL are stale and removed the next time they are looked
up.

Keys:
    ``cache_key(path, mtime, data)`` hashes the template path, its source
    mtime and a canonical JSON serialisation of the render data. Editing the
    template changes its mtime, so every previously cached render of it is
    simply never looked up again (and ages out through the TTL).

Concurrency:
    Writes go to a temporary file in the cache directory that is then
    renamed over the entry with ``os.replace``. Readers see either the old
    file, the new file, or no file, never a partial write. Two processes
    missing the same key both render and both store; the last rename wins
    and the content is identical.

Example:
        >>> cache = TemplateCache(TemplateConfig(cache_dir=tmp_path, cache_ttl=60))
        >>> key = cache.key_for("views/page.html", 1700000000.0, {"name": "Ada"})
        >>> cache.store(key, "<p>Ada</p>")
        True
        >>> cache.get(key)
        '<p>Ada</p>'
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import tempfile
import time
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from curly.environment.config import TemplateConfig
from curly.environment.exceptions import CacheError, CacheMissError

logger = logging.getLogger(__name__)

ENTRY_PREFIX = "template_"
ENTRY_SUFFIX = ".html"


def _normalise(value: Any) -> Any:
    """Rewrite ``value`` into a JSON-safe shape with a stable ordering.

    Mapping keys become ``"<type>:<key>"`` strings, so ``{1: ..}`` and
    ``{"1": ..}`` stay distinct and mixed key types sort. Sets become lists
    sorted by their serialised form, which does not depend on hash seeds.
    """
    if isinstance(value, Mapping):
        items = [(f"{type(k).__name__}:{k}", _normalise(v)) for k, v in value.items()]
        return dict(sorted(items, key=lambda item: item[0]))
    if isinstance(value, (set, frozenset)):
        return sorted((_normalise(v) for v in value), key=_canonical_json)
    if isinstance(value, (list, tuple)):
        return [_normalise(v) for v in value]
    return value


def _canonical_json(data: Any) -> str:
    # Non-JSON values (dates, Decimals, objects) hash by repr
    return json.dumps(data, separators=(",", ":"), default=repr, ensure_ascii=False)


def cache_key(path: str | os.PathLike[str], mtime: float | None, data: Any) -> str:
    """Deterministic key for one (template, source version, data) triple.

    Equal inputs always give equal keys; any change to the path, the mtime
    or the data gives a different key.

    Raises:
        ValueError: If ``data`` nests too deeply or refers to itself
    """
    try:
        canonical = _canonical_json(_normalise(data))
    except RecursionError as e:
        raise ValueError("render data is recursive or too deeply nested") from e
    data_hash = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
    material = f"{os.fspath(path)}\x00{mtime!r}\x00{data_hash}"
    return hashlib.sha256(material.encode("utf-8")).hexdigest()


class TemplateCache:
    """Rendered-output cache stored as files in ``config.cache_dir``.

    Args:
        config: Supplies ``cache_dir``, ``cache_ttl`` (0 = never expire) and
            ``development`` (clear all entries on construction)

    Raises:
        CacheError: If the directory cannot be created or is not writable
    """

    __slots__ = ("_dir", "_hits", "_misses", "_stores", "_ttl")

    def __init__(self, config: TemplateConfig | None = None):
        config = config or TemplateConfig()
        self._dir = Path(config.cache_dir)
        self._ttl = config.cache_ttl
        self._hits = 0
        self._misses = 0
        self._stores = 0

        try:
            self._dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheError(f"Unable to create template cache directory: {self._dir} ({e})") from e
        if not os.access(self._dir, os.W_OK):
            raise CacheError(f"Template cache directory is not writable: {self._dir}")

        if config.development:
            self.clear()

    @property
    def directory(self) -> Path:
        return self._dir

    @property
    def ttl(self) -> int:
        return self._ttl

    def key_for(self, path: str | os.PathLike[str], mtime: float | None, data: Any) -> str:
        return cache_key(path, mtime, data)

    def path_for(self, key: str) -> Path:
        """Location of the entry file for ``key``."""
        return self._dir / f"{ENTRY_PREFIX}{key}{ENTRY_SUFFIX}"

    def _is_fresh(self, entry: Path) -> bool:
        if self._ttl == 0:
            return True
        return time.time() - entry.stat().st_mtime < self._ttl

    def has_valid(self, key: str) -> bool:
        """True if an entry exists for ``key`` and has not expired.

        A stale entry is deleted as a side effect.
        """
        entry = self.path_for(key)
        try:
            if self._is_fresh(entry):
                return True
        except FileNotFoundError:
            return False

        logger.debug(f"Removing stale cache entry {entry.name}")
        try:
            entry.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Failed to delete stale cache file {entry}: {e}")
        return False

    def get(self, key: str) -> str:
        """Return the cached content for ``key``.

        An entry that is not valid UTF-8 is deleted and reported as a miss.

        Raises:
            CacheMissError: If no valid entry exists
            OSError: If the entry exists but cannot be read
        """
        if not self.has_valid(key):
            self._misses += 1
            logger.debug(f"Cache miss {key[:12]}")
            raise CacheMissError(key)
        entry = self.path_for(key)
        try:
            content = entry.read_text(encoding="utf-8")
        except FileNotFoundError:
            # Removed between the validity check and the read
            self._misses += 1
            raise CacheMissError(key) from None
        except UnicodeDecodeError as e:
            logger.warning(f"Discarding corrupt cache entry {entry.name}: {e}")
            entry.unlink(missing_ok=True)
            self._misses += 1
            raise CacheMissError(key) from e
        self._hits += 1
        logger.debug(f"Cache hit {key[:12]}")
        return content

    def store(self, key: str, content: str) -> bool:
        """Write ``content`` for ``key`` atomically.

        Returns:
            True on success, False if the write failed (the failure is logged)
        """
        entry = self.path_for(key)
        tmp_name: str | None = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{ENTRY_PREFIX}", suffix=".tmp", dir=self._dir
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_name, entry)
        except OSError as e:
            logger.error(f"Failed to write template cache {entry}: {e}")
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            return False
        self._stores += 1
        return True

    def _entries(self) -> list[Path]:
        try:
            return [p for p in self._dir.glob(f"{ENTRY_PREFIX}*") if p.is_file()]
        except OSError as e:
            logger.error(f"Failed to list template cache {self._dir}: {e}")
            return []

    def clear(self) -> bool:
        """Delete every cache entry.

        Returns:
            True if all entries were removed, False if any removal failed
        """
        success = True
        for entry in self._entries():
            try:
                entry.unlink(missing_ok=True)
            except OSError as e:
                logger.error(f"Failed to delete cache file {entry}: {e}")
                success = False
        return success

    def stats(self) -> dict[str, int]:
        """Counters for this instance plus the current on-disk footprint."""
        file_count = 0
        total_bytes = 0
        for entry in self._entries():
            try:
                total_bytes += entry.stat().st_size
            except FileNotFoundError:
                continue
            file_count += 1
        return {
            "hits": self._hits,
            "misses": self._misses,
            "stores": self._stores,
            "file_count": file_count,
            "total_bytes": total_bytes,
        }

    def __repr__(self) -> str:
        return f"<TemplateCache {self._dir} ttl={self._ttl}>"
