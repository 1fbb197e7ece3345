"""Root node for a parsed template."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from curly.nodes.base import Node


@dataclass(frozen=True, slots=True)
class Template(Node):
    """Root node: the top-level body of one template source."""

    body: Sequence[Node]
    name: str | None = None
