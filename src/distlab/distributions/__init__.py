"""Read-only catalog of distributions, parametrizations and parameters."""

from __future__ import annotations

from .base import (
    Distribution,
    Interval,
    Parameter,
    Parametrization,
    Quantity,
    Reference,
    get_distribution,
    iter_distributions,
    list_distributions,
    load_catalog_metadata,
    register_distribution,
)
from .catalog import build_catalog

__all__ = [
    "Distribution",
    "Interval",
    "Parameter",
    "Parametrization",
    "Quantity",
    "Reference",
    "get_distribution",
    "get_parametrization",
    "iter_distributions",
    "list_distributions",
    "load_catalog_metadata",
]


def get_parametrization(distribution: str, name: str | None = None) -> Parametrization:
    """Shortcut for ``get_distribution(distribution).get_parametrization(name)``."""
    return get_distribution(distribution).get_parametrization(name)


def _register_builtin() -> None:
    for dist in build_catalog(load_catalog_metadata()):
        register_distribution(dist)


_register_builtin()
