"""Per-family formula sets behind the closed :class:`Family` enumeration."""

from __future__ import annotations

from types import MappingProxyType

from .base import Family, FormulaSet
from .continuous import CONTINUOUS_FAMILIES
from .discrete import DISCRETE_FAMILIES

FAMILIES: MappingProxyType[Family, FormulaSet] = MappingProxyType(
    {formulas.family: formulas for formulas in CONTINUOUS_FAMILIES + DISCRETE_FAMILIES}
)


def get_family(family: Family | str) -> FormulaSet:
    """Return the formula set of ``family`` (enum member or its string value)."""
    try:
        key = Family(family.lower() if isinstance(family, str) else family)
    except ValueError as exc:
        raise KeyError(f"Unknown family '{family}'.") from exc
    return FAMILIES[key]


__all__ = ["FAMILIES", "Family", "FormulaSet", "get_family"]
