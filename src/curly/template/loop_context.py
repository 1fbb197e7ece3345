"""Loop iteration metadata for curly ``{% foreach %}`` and ``{% for %}`` blocks."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any


class LoopContext(Mapping[str, Any]):
    """Loop iteration metadata bound as ``loop`` inside loop bodies.

    Path resolution only descends into mappings, so the metadata is exposed
    as a read-only Mapping computed on access.

    Keys:
        index: 1-based iteration count (1, 2, 3, ...)
        index0: 0-based iteration count (0, 1, 2, ...)
        first: True on the first iteration
        last: True on the final iteration
        length: Total number of items
        revindex: Reverse 1-based index (counts down to 1)
        revindex0: Reverse 0-based index (counts down to 0)

    Example:
            ```html
            {% foreach items as item %}
              <li>{loop.index}/{loop.length}: {item}{% if loop.last %}.{% endif %}</li>
            {% endforeach %}
            ```
    """

    __slots__ = ("_index", "_length")

    _KEYS = ("index", "index0", "first", "last", "length", "revindex", "revindex0")

    def __init__(self, length: int) -> None:
        self._length = length
        self._index = 0

    def advance(self, index: int) -> None:
        """Move to the given 0-based iteration."""
        self._index = index

    def __getitem__(self, key: str) -> Any:
        if key == "index":
            return self._index + 1
        if key == "index0":
            return self._index
        if key == "first":
            return self._index == 0
        if key == "last":
            return self._index == self._length - 1
        if key == "length":
            return self._length
        if key == "revindex":
            return self._length - self._index
        if key == "revindex0":
            return self._length - self._index - 1
        raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self._KEYS)

    def __len__(self) -> int:
        return len(self._KEYS)

    def __repr__(self) -> str:
        return f"<LoopContext {self._index + 1}/{self._length}>"
