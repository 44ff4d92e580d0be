"""Core dataclasses and shared type aliases for distlab modules."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal, TypeAlias

import numpy as np
import pandas as pd

ArrayLike: TypeAlias = np.ndarray | Sequence[float]
ParameterValues: TypeAlias = Sequence[float] | Mapping[str, float]
ValueKind: TypeAlias = Literal["discrete", "continuous"]
CurveKind: TypeAlias = Literal["pdf", "cdf"]

QUANTITY_NAMES = ("mean", "variance", "median", "mode")


@dataclass(slots=True)
class Curve:
    """Sampled density or cumulative curve ready for plotting."""

    x: np.ndarray
    y: np.ndarray
    kind: CurveKind
    discrete: bool
    label: str | None = None

    def to_frame(self) -> pd.DataFrame:
        """Return the curve as a two-column data frame (``x`` and the curve kind)."""
        return pd.DataFrame({"x": self.x, self.kind: self.y})


@dataclass(slots=True)
class QuantitySummary:
    """Derived quantities of one parameter vector; ``None`` marks undefined values."""

    distribution: str
    parametrization: str
    parameters: dict[str, float]
    quantities: dict[str, float | None] = field(default_factory=dict)

    def defined(self) -> dict[str, float]:
        return {name: value for name, value in self.quantities.items() if value is not None}

    def to_frame(self) -> pd.DataFrame:
        """Return a tidy frame with one row per quantity."""
        records: list[dict[str, Any]] = []
        for name, value in self.quantities.items():
            records.append(
                {
                    "distribution": self.distribution,
                    "parametrization": self.parametrization,
                    "quantity": name,
                    "value": np.nan if value is None else value,
                    "defined": value is not None,
                }
            )
        return pd.DataFrame.from_records(
            records,
            columns=["distribution", "parametrization", "quantity", "value", "defined"],
        )


def round_value(value: float | None, digits: int = 4) -> float | None:
    """Round for display; ``None`` (undefined) and non-finite values pass through."""
    if value is None or not np.isfinite(value):
        return value
    return round(float(value), digits)


__all__ = [
    "ArrayLike",
    "ParameterValues",
    "ValueKind",
    "CurveKind",
    "QUANTITY_NAMES",
    "Curve",
    "QuantitySummary",
    "round_value",
]
