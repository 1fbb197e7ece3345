"""Output nodes for the curly node tree."""

from __future__ import annotations

from dataclasses import dataclass

from curly.nodes.base import Node
from curly.nodes.expressions import Expr


@dataclass(frozen=True, slots=True)
class Output(Node):
    """Output expression: {path|filter}

    ``source`` keeps the raw fragment for runtime error messages.
    """

    expr: Expr
    source: str = ""
    escape: bool = True


@dataclass(frozen=True, slots=True)
class Data(Node):
    """Raw text between template constructs."""

    value: str
