"""Copy-on-write filter table exposed as ``Environment.filters``."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping, MutableMapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from curly.environment.core import Environment

FilterFunc = Callable[[Any], Any]


def _check_callable(name: str, func: object) -> None:
    if not callable(func):
        raise TypeError(f"Filter '{name}' must be callable, got {type(func).__name__}")


class FilterRegistry(MutableMapping[str, FilterFunc]):
    """Mutable mapping view over an environment's filter table.

    Every write replaces the environment's dict with a modified copy, so a
    Template keeps exactly the filters it was parsed against and the
    environment can tell a stale parse by dict identity.

    Example:
            >>> env.filters["shout"] = lambda v: str(v).upper() + "!"
            >>> "shout" in env.filters
            True
    """

    __slots__ = ("_attr", "_env")

    def __init__(self, env: Environment, attr: str):
        self._env = env
        self._attr = attr

    @property
    def _table(self) -> dict[str, FilterFunc]:
        return getattr(self._env, self._attr)

    def _replace(self, table: dict[str, FilterFunc]) -> None:
        setattr(self._env, self._attr, table)

    def __getitem__(self, name: str) -> FilterFunc:
        return self._table[name]

    def __setitem__(self, name: str, func: FilterFunc) -> None:
        _check_callable(name, func)
        self._replace({**self._table, name: func})

    def __delitem__(self, name: str) -> None:
        table = dict(self._table)
        del table[name]
        self._replace(table)

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def update(  # type: ignore[override]
        self, other: Mapping[str, FilterFunc] | None = None, /, **kwargs: FilterFunc
    ) -> None:
        """Add several filters with a single copy."""
        added = {**(other or {}), **kwargs}
        for name, func in added.items():
            _check_callable(name, func)
        self._replace({**self._table, **added})

    def __repr__(self) -> str:
        return f"<FilterRegistry {sorted(self._table)}>"
