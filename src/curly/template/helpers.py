"""Pure runtime helpers used by the renderer.

Value model:
    Render data is a nested structure of scalars, sequences and mappings.
    Resolution walks it with plain key/index access (no attribute
    reflection) and yields ``UNDEFINED`` the first time a segment is
    missing.

Thread-Safety:
All functions are stateless and safe for concurrent use.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any, Final


class _Undefined:
    """Sentinel for a path that did not resolve.

    Falsy, stringifies to the empty string, and equal only to itself.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __str__(self) -> str:
        return ""

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED: Final = _Undefined()


def is_sequence(value: Any) -> bool:
    """True for ordered sequences that loops iterate (not str/bytes)."""
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def lookup_scope(ctx: Mapping[str, Any], scope_stack: list[dict[str, Any]], name: str) -> Any:
    """Look up a root name in the scope stack (innermost first), then ctx.

    Loop-local names shadow outer names. Returns UNDEFINED if not found.
    """
    for scope in reversed(scope_stack):
        if name in scope:
            return scope[name]
    if name in ctx:
        return ctx[name]
    return UNDEFINED


def get_segment(value: Any, segment: str) -> Any:
    """Descend one path segment into a mapping or sequence."""
    if isinstance(value, Mapping):
        if segment in value:
            return value[segment]
        # Mappings keyed by int (e.g. {1: "first"})
        if segment.isdigit() and int(segment) in value:
            return value[int(segment)]
        return UNDEFINED
    if is_sequence(value) and segment.isdigit():
        index = int(segment)
        if index < len(value):
            return value[index]
    return UNDEFINED


def resolve(
    segments: Sequence[str],
    ctx: Mapping[str, Any],
    scope_stack: list[dict[str, Any]] | None = None,
) -> Any:
    """Resolve a dotted path left to right.

    The first segment is looked up through the scope stack then ``ctx``;
    later segments descend strictly within the resolved value.

    Example:
            >>> resolve(("a", "b", "c"), {"a": {"b": {"c": "Y"}}})
            'Y'
            >>> resolve(("a", "b", "c"), {"a": {}})
            UNDEFINED
    """
    value = lookup_scope(ctx, scope_stack or [], segments[0])
    for segment in segments[1:]:
        if value is UNDEFINED:
            break
        value = get_segment(value, segment)
    return value


def apply_filters(
    value: Any,
    names: Sequence[str],
    filters: Mapping[str, Callable[[Any], Any]],
) -> Any:
    """Apply named filters left to right.

    UNDEFINED input short-circuits the pipeline and stays UNDEFINED, so a
    missing value renders as the empty string rather than failing.

    Raises:
        KeyError: If a name is not registered (the parser rejects these
            before rendering).
    """
    for name in names:
        if value is UNDEFINED:
            return UNDEFINED
        value = filters[name](value)
    return value


def is_truthy(value: Any) -> bool:
    """Boolean coercion for conditions.

    Empty string, False, 0, None, empty collections and UNDEFINED are falsy.
    """
    return bool(value)


def to_str(value: Any) -> str:
    """Stringify a value for output.

    UNDEFINED and None render as "", booleans as "true"/"false".
    """
    if value is UNDEFINED or value is None:
        return ""
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, str):
        return value
    return str(value)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def values_equal(left: Any, right: Any) -> bool:
    """Equality used by ``==`` in conditions.

    Values compare with Python equality, except that a string compared with
    a number compares by string form (``"3" == 3``). UNDEFINED equals only
    UNDEFINED.
    """
    if left is UNDEFINED or right is UNDEFINED:
        return left is right
    if isinstance(left, str) and _is_number(right):
        return left == to_str(right)
    if isinstance(right, str) and _is_number(left):
        return to_str(left) == right
    return bool(left == right)
