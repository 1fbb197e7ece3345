"""Node tree for curly templates.

Nodes are frozen dataclasses produced by the parser and walked by the
renderer. Each node owns its children exclusively; the tree mirrors the
nesting of the source.
"""

from curly.nodes.base import Node
from curly.nodes.control_flow import For, Foreach, If
from curly.nodes.expressions import Compare, Const, Expr, Filter, Not, Path
from curly.nodes.output import Data, Output
from curly.nodes.structure import Template

__all__ = [
    "Compare",
    "Const",
    "Data",
    "Expr",
    "Filter",
    "For",
    "Foreach",
    "If",
    "Node",
    "Not",
    "Output",
    "Path",
    "Template",
]
