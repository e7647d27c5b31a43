"""Parsing of single width/height tokens.

Supported forms:

* ``"120"`` / ``"120px"`` / ``120``: absolute pixels, natural numbers only
* ``"0.5x"``: factor of the real dimension
* ``"50%"`` / ``"50pc"``: percentage of the real dimension, stored as a factor
* ``{"unit": "px" | "x", "value": n}``: an already parsed dimension

``None`` and ``""`` are unspecified. Anything else is invalid.
"""
import math
from numbers import Real
from typing import Any, Mapping

from .config import DimensionGrammar
from .models import Dimension, Unit

DEFAULT_GRAMMAR = DimensionGrammar()

# Unit is a str enum, so Unit.PIXEL looks up the same entry as "px"
_UNITS = {"px": Unit.PIXEL, "x": Unit.FACTOR}


def _is_number(v: Any) -> bool:
    return isinstance(v, Real) and not isinstance(v, bool)


def _finite(value) -> bool:
    try:
        return math.isfinite(float(value))
    except (OverflowError, ValueError):
        return False


def _parse_structured(raw: Mapping) -> Dimension:
    if raw.get("value") is None:
        return Dimension.unspecified()
    unit = raw.get("unit")
    unit = _UNITS.get(unit) if isinstance(unit, str) else None
    value = raw["value"]
    if unit is None or not _is_number(value) or not _finite(value):
        return Dimension.invalid()
    return Dimension(unit, value)


def _number_token(raw: Real) -> str:
    # 100.0 reads as the pixel token "100", 0.5 stays "0.5" and fails the pixel grammar
    if isinstance(raw, float) and raw.is_integer():
        return str(int(raw))
    return str(raw)


def parse(raw: Any, grammar: DimensionGrammar = DEFAULT_GRAMMAR) -> Dimension:
    """Classify and parse ``raw`` into a :class:`Dimension`. Never raises."""
    if isinstance(raw, Dimension):
        return raw
    if raw is None or raw == "":
        return Dimension.unspecified()
    if isinstance(raw, Mapping):
        return _parse_structured(raw)
    if isinstance(raw, bool):
        return Dimension.invalid()
    if _is_number(raw):
        if not _finite(raw):
            return Dimension.invalid()
        raw = _number_token(raw)
    if not isinstance(raw, str):
        return Dimension.invalid()

    m = grammar.pixel.fullmatch(raw)
    # tokens too large for a float are invalid rather than infinite
    if m:
        return Dimension.pixel(int(m.group(1))) if _finite(m.group(1)) else Dimension.invalid()
    m = grammar.factor.fullmatch(raw)
    if m:
        return Dimension.factor(float(m.group(1))) if _finite(m.group(1)) else Dimension.invalid()
    m = grammar.percent.fullmatch(raw)
    if m:
        return Dimension.factor(float(m.group(1)) / 100) if _finite(m.group(1)) else Dimension.invalid()
    return Dimension.invalid()
