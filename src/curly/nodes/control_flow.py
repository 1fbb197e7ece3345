"""Control flow nodes for the curly node tree."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from curly.nodes.base import Node
from curly.nodes.expressions import Expr, Path


@dataclass(frozen=True, slots=True)
class If(Node):
    """Conditional: {% if cond %}...{% elseif cond %}...{% else %}...{% endif %}"""

    test: Expr
    body: Sequence[Node]
    elif_: Sequence[tuple[Expr, Sequence[Node]]] = ()
    else_: Sequence[Node] = ()

    @property
    def branches(self) -> tuple[tuple[Expr, Sequence[Node]], ...]:
        """All (condition, body) pairs in evaluation order."""
        return ((self.test, self.body), *self.elif_)


@dataclass(frozen=True, slots=True)
class Foreach(Node):
    """Sequence loop: {% foreach items as item %}...{% endforeach %}"""

    collection: Path
    alias: str
    body: Sequence[Node]


@dataclass(frozen=True, slots=True)
class For(Node):
    """Inclusive integer range loop: {% for i in 1..5 %}...{% endfor %}"""

    var: str
    start: int
    end: int
    body: Sequence[Node]
