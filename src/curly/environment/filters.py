"""Built-in filters for curly templates.

Filters are pure single-argument transforms applied with ``{value|name}``.
They never see UNDEFINED (the pipeline short-circuits on it).

Available:
    length, count         Number of items (or characters)
    upper, uppercase      Upper-case text
    lower, lowercase      Lower-case text
    capitalize            First character upper, rest lower
    trim                  Strip surrounding whitespace
    title                 Title-case each word
    round                 Nearest integer, halves away from zero
    stars                 0-5 rating as ★/☆ glyphs
    raw, safe             Mark trusted HTML (skips autoescape)
"""

from __future__ import annotations

from collections.abc import Callable, Sized
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from curly.environment.exceptions import FilterValueError
from curly.template.helpers import to_str
from curly.utils.html import Markup

FILLED_STAR = "★"
EMPTY_STAR = "☆"
MAX_STARS = 5


def _filter_length(value: Any) -> int:
    if isinstance(value, Sized):
        return len(value)
    return len(to_str(value))


def _filter_upper(value: Any) -> str:
    return to_str(value).upper()


def _filter_lower(value: Any) -> str:
    return to_str(value).lower()


def _filter_capitalize(value: Any) -> str:
    return to_str(value).capitalize()


def _filter_trim(value: Any) -> str:
    return to_str(value).strip()


def _filter_title(value: Any) -> str:
    return to_str(value).title()


def round_half_away(value: Any, filter_name: str = "round") -> int:
    """Round to the nearest integer, halves away from zero (2.5 → 3, -2.5 → -3)."""
    if isinstance(value, bool):
        return int(value)
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise FilterValueError(filter_name, value, "a number") from None
    if not number.is_finite():
        raise FilterValueError(filter_name, value, "a finite number")
    # ROUND_HALF_UP in decimal rounds halves away from zero
    return int(number.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _filter_round(value: Any) -> int:
    return round_half_away(value)


def _filter_stars(value: Any) -> str:
    filled = min(max(round_half_away(value, "stars"), 0), MAX_STARS)
    return FILLED_STAR * filled + EMPTY_STAR * (MAX_STARS - filled)


def _filter_raw(value: Any) -> Markup:
    return Markup(to_str(value))


DEFAULT_FILTERS: dict[str, Callable[[Any], Any]] = {
    "length": _filter_length,
    "count": _filter_length,
    "upper": _filter_upper,
    "uppercase": _filter_upper,
    "lower": _filter_lower,
    "lowercase": _filter_lower,
    "capitalize": _filter_capitalize,
    "trim": _filter_trim,
    "title": _filter_title,
    "round": _filter_round,
    "stars": _filter_stars,
    "raw": _filter_raw,
    "safe": _filter_raw,
}
