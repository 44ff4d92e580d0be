"""Parameter, parametrization and distribution descriptors plus the catalog registry."""

from __future__ import annotations

import logging
import math
import os
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any

import numpy as np
import yaml

from ..core import (
    QUANTITY_NAMES,
    ArrayLike,
    CurveKind,
    ParameterValues,
    QuantitySummary,
    ValueKind,
)

logger = logging.getLogger(__name__)

METADATA_RESOURCE = "catalog.yaml"

Interval = tuple[float, float]


@dataclass(frozen=True, slots=True)
class Parameter:
    """One scalar input of a distribution family, with its slider metadata."""

    name: str
    label: str
    legal_range: Interval
    interactive_range: Interval
    log_scale: bool
    default: float
    kind: ValueKind = "continuous"
    conjugate_prior: str | None = None
    description: str = ""

    def __post_init__(self) -> None:
        low, high = self.interactive_range
        if not (math.isfinite(low) and math.isfinite(high)) or low > high:
            raise ValueError(
                f"Parameter '{self.name}' needs a finite interactive range, got {self.interactive_range}."
            )
        if self.log_scale and low <= 0:
            raise ValueError(
                f"Parameter '{self.name}' is log-scaled but its interactive range starts at {low}."
            )
        if not low <= self.default <= high:
            raise ValueError(
                f"Default {self.default} of parameter '{self.name}' lies outside {self.interactive_range}."
            )

    def from_slider(self, position: float, steps: int = 100) -> float:
        """Map a slider position in ``[0, steps]`` to a parameter value."""
        low, high = self.interactive_range
        fraction = position / steps
        if self.log_scale:
            return math.exp(math.log(low) + fraction * (math.log(high) - math.log(low)))
        return low + fraction * (high - low)

    def to_slider(self, value: float, steps: int = 100) -> float:
        """Inverse of :meth:`from_slider`."""
        low, high = self.interactive_range
        if high == low:
            return 0.0
        if self.log_scale:
            fraction = (math.log(value) - math.log(low)) / (math.log(high) - math.log(low))
        else:
            fraction = (value - low) / (high - low)
        return fraction * steps


@dataclass(frozen=True, slots=True)
class Quantity:
    """Derived quantity: a callable over the parameter vector plus its typeset form."""

    fun: Callable[..., float | None]
    display: str = ""


@dataclass(frozen=True, slots=True)
class Parametrization:
    """One coordinate system of a distribution family.

    ``density`` and ``cdf`` take ``(x, *values)`` with one value per declared parameter
    in order; ``validity`` and ``bounds`` take ``*values``.
    """

    name: str
    parameters: tuple[Parameter, ...]
    density: Callable[..., np.ndarray | float]
    cdf: Callable[..., np.ndarray | float]
    validity: Callable[..., bool]
    bounds: Callable[..., Interval]
    kind: ValueKind
    support: Interval = (-math.inf, math.inf)
    quantities: Mapping[str, Quantity] = field(default_factory=dict)
    conjugate_prior: str | None = None
    density_display: str = ""
    support_display: str = ""
    note: str | None = None

    def __post_init__(self) -> None:
        names = [param.name for param in self.parameters]
        if len(names) != len(set(names)):
            raise ValueError(f"Parametrization '{self.name}' repeats a parameter name: {names}.")
        object.__setattr__(self, "parameters", tuple(self.parameters))
        object.__setattr__(self, "quantities", MappingProxyType(dict(self.quantities)))

    @property
    def parameter_names(self) -> tuple[str, ...]:
        return tuple(param.name for param in self.parameters)

    def get_parameter(self, name: str) -> Parameter:
        for param in self.parameters:
            if param.name == name:
                return param
        raise KeyError(f"Unknown parameter '{name}' for parametrization '{self.name}'.")

    def defaults(self) -> tuple[float, ...]:
        return tuple(float(param.default) for param in self.parameters)

    def resolve(self, values: ParameterValues) -> tuple[float, ...]:
        """Return ``values`` as a positional vector in declared order.

        Accepts either a sequence with one value per parameter or a mapping keyed by
        parameter name.
        """
        names = self.parameter_names
        if isinstance(values, Mapping):
            missing = [name for name in names if name not in values]
            unknown = sorted(set(values) - set(names))
            if missing or unknown:
                raise ValueError(
                    f"Parametrization '{self.name}' expects parameters {list(names)}; "
                    f"missing={missing}, unknown={unknown}."
                )
            return tuple(float(values[name]) for name in names)
        vector = tuple(float(value) for value in values)
        if len(vector) != len(names):
            raise ValueError(
                f"Parametrization '{self.name}' expects {len(names)} values "
                f"{list(names)}, got {len(vector)}."
            )
        return vector

    def is_valid(self, values: ParameterValues) -> bool:
        """True iff every value is finite and the family's constraints hold."""
        vector = self.resolve(values)
        return all(math.isfinite(value) for value in vector) and bool(self.validity(*vector))

    def evaluate(
        self, x: ArrayLike | float, values: ParameterValues, kind: CurveKind = "pdf"
    ) -> np.ndarray | float:
        """Evaluate the density (``kind="pdf"``) or the CDF at ``x``."""
        vector = self.resolve(values)
        if kind == "pdf":
            return self.density(x, *vector)
        if kind == "cdf":
            return self.cdf(x, *vector)
        raise ValueError(f"Unknown curve kind '{kind}'. Expected 'pdf' or 'cdf'.")

    def plot_range(self, values: ParameterValues) -> Interval:
        low, high = self.bounds(*self.resolve(values))
        return float(low), float(high)

    def evaluate_quantity(self, name: str, values: ParameterValues) -> float | None:
        """Evaluate a declared quantity; ``None`` means undefined for these values."""
        if name not in self.quantities:
            raise KeyError(
                f"Parametrization '{self.name}' has no quantity '{name}'. "
                f"Available: {list(self.quantities)}."
            )
        return self.quantities[name].fun(*self.resolve(values))

    def summarize(self, values: ParameterValues, distribution: str = "") -> QuantitySummary:
        vector = self.resolve(values)
        ordered = [name for name in QUANTITY_NAMES if name in self.quantities]
        ordered += [name for name in self.quantities if name not in QUANTITY_NAMES]
        return QuantitySummary(
            distribution=distribution,
            parametrization=self.name,
            parameters=dict(zip(self.parameter_names, vector, strict=True)),
            quantities={name: self.quantities[name].fun(*vector) for name in ordered},
        )


@dataclass(frozen=True, slots=True)
class Reference:
    name: str
    link: str


@dataclass(frozen=True, slots=True)
class Distribution:
    """A family grouping the parametrizations that describe it."""

    name: str
    label: str
    kind: ValueKind
    parametrizations: tuple[Parametrization, ...]
    description: str | None = None
    reference: Reference | None = None

    def __post_init__(self) -> None:
        if not self.parametrizations:
            raise ValueError(f"Distribution '{self.name}' needs at least one parametrization.")
        object.__setattr__(self, "parametrizations", tuple(self.parametrizations))
        for parametrization in self.parametrizations:
            if parametrization.kind != self.kind:
                raise ValueError(
                    f"Parametrization '{parametrization.name}' of '{self.name}' is "
                    f"{parametrization.kind}, expected {self.kind}."
                )
        names = [p.name for p in self.parametrizations]
        if len(names) != len(set(names)):
            raise ValueError(f"Distribution '{self.name}' repeats a parametrization name.")

    @property
    def discrete(self) -> bool:
        return self.kind == "discrete"

    def list_parametrizations(self) -> list[str]:
        return [p.name for p in self.parametrizations]

    def get_parametrization(self, name: str | None = None) -> Parametrization:
        """Return the named parametrization, or the first one when ``name`` is ``None``."""
        if name is None:
            return self.parametrizations[0]
        for parametrization in self.parametrizations:
            if parametrization.name == name:
                return parametrization
        raise KeyError(
            f"Unknown parametrization '{name}' for distribution '{self.name}'. "
            f"Available: {self.list_parametrizations()}."
        )


_REGISTRY: dict[str, Distribution] = {}


def list_distributions() -> Iterable[str]:
    """Return catalogued distribution names in catalog order."""
    return list(_REGISTRY.keys())


def iter_distributions() -> Iterable[Distribution]:
    return list(_REGISTRY.values())


def get_distribution(name: str) -> Distribution:
    """Retrieve a distribution by name."""
    key = name.lower()
    if key not in _REGISTRY:
        raise KeyError(f"Unknown distribution '{name}'.")
    return _REGISTRY[key]


def register_distribution(distribution: Distribution) -> None:
    """Add a distribution to the catalog; names are unique."""
    key = distribution.name.lower()
    if key in _REGISTRY:
        raise ValueError(f"Distribution '{distribution.name}' already registered.")
    _REGISTRY[key] = distribution


def load_catalog_metadata(path: str | os.PathLike[str] | None = None) -> dict[str, dict[str, Any]]:
    """Load labels, prose and reference links keyed by distribution name.

    Without ``path`` the metadata file shipped with the package is read.
    """
    if path is None:
        source = resources.files(__package__).joinpath(METADATA_RESOURCE)
        text = source.read_text(encoding="utf-8")
        origin = f"{__package__}/{METADATA_RESOURCE}"
    else:
        text = Path(path).read_text(encoding="utf-8")
        origin = str(path)
    data = yaml.safe_load(text) or {}
    entries = data.get("distributions", {}) if isinstance(data, Mapping) else data
    if not isinstance(entries, Mapping):
        raise ValueError(f"Catalog metadata {origin} must map distribution names to entries.")
    logger.debug("Loaded catalog metadata for %d distributions from %s", len(entries), origin)
    return {str(name).lower(): dict(entry or {}) for name, entry in entries.items()}


__all__ = [
    "Distribution",
    "Interval",
    "Parameter",
    "Parametrization",
    "Quantity",
    "Reference",
    "get_distribution",
    "iter_distributions",
    "list_distributions",
    "load_catalog_metadata",
    "register_distribution",
]
