"""Top-level package exports for distlab."""

from __future__ import annotations

from importlib import metadata

__version__ = "0.1.0"

try:
    __version__ = metadata.version("distlab")
except metadata.PackageNotFoundError:  # pragma: no cover - local dev fallback
    pass

from . import core as core  # noqa: F401
from . import distributions as distributions  # noqa: F401
from . import families as families  # noqa: F401
from . import special as special  # noqa: F401
from .core import Curve, QuantitySummary  # noqa: F401
from .distributions import (  # noqa: F401
    Distribution,
    Parameter,
    Parametrization,
    get_distribution,
    get_parametrization,
    list_distributions,
)
from .families import Family, FormulaSet, get_family  # noqa: F401

__all__ = [
    "__version__",
    "core",
    "distributions",
    "families",
    "special",
    "Curve",
    "QuantitySummary",
    "Distribution",
    "Parameter",
    "Parametrization",
    "get_distribution",
    "get_parametrization",
    "list_distributions",
    "Family",
    "FormulaSet",
    "get_family",
]
