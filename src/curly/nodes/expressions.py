"""Expression nodes used by output expressions and conditions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from curly.nodes.base import Node


@dataclass(frozen=True, slots=True)
class Expr(Node):
    """Base class for expressions."""


@dataclass(frozen=True, slots=True)
class Const(Expr):
    """Literal value in a condition: 'text', 42, 1.5, true, false, none."""

    value: str | int | float | bool | None


@dataclass(frozen=True, slots=True)
class Path(Expr):
    """Dotted path into the render data: {user.profile.age}"""

    segments: tuple[str, ...]

    @property
    def dotted(self) -> str:
        return ".".join(self.segments)


@dataclass(frozen=True, slots=True)
class Filter(Expr):
    """Filter application: value|name"""

    value: Expr
    name: str


@dataclass(frozen=True, slots=True)
class Not(Expr):
    """Negated condition: not logged_in"""

    operand: Expr


@dataclass(frozen=True, slots=True)
class Compare(Expr):
    """Equality comparison: left == right, left != right"""

    left: Expr
    op: Literal["==", "!="]
    right: Expr
