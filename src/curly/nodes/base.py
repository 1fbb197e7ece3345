"""Common base for every node in a parsed curly template."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Node:
    """A node remembers where in the source it started.

    Frozen, so one parsed tree serves any number of concurrent renders.
    """

    lineno: int
    col_offset: int
