"""Formula-set record shared by every distribution family."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

import numpy as np

from ..core import ArrayLike, ValueKind

Evaluator = Callable[..., "np.ndarray | float"]
QuantityFn = Callable[..., "float | None"]

ERRSTATE = {"divide": "ignore", "invalid": "ignore", "over": "ignore", "under": "ignore"}


class Family(str, Enum):
    """Closed set of implemented distribution families."""

    NORMAL = "normal"
    GAMMA = "gamma"
    STUDENT_T = "studentt"
    CHI_SQUARED = "chisquare"
    BETA = "beta"
    LOG_NORMAL = "lognormal"
    WEIBULL = "weibull"
    BINOMIAL = "binomial"
    POISSON = "poisson"
    NEGATIVE_BINOMIAL = "negativebinomial"


@dataclass(frozen=True, slots=True)
class FormulaSet:
    """Density, cumulative and closed-form summary functions of one family.

    ``pdf`` and ``cdf`` take ``(x, *theta)``; the quantity functions take ``theta`` only
    and return ``None`` where the closed form does not hold. A quantity without any
    closed form for the family is left as ``None`` on the record itself.
    """

    family: Family
    kind: ValueKind
    parameters: tuple[str, ...]
    pdf: Evaluator
    cdf: Evaluator
    mean: QuantityFn | None = None
    variance: QuantityFn | None = None
    median: QuantityFn | None = None
    mode: QuantityFn | None = None

    def quantities(self) -> dict[str, QuantityFn]:
        """Return the quantity functions this family defines, keyed by name."""
        candidates = {
            "mean": self.mean,
            "variance": self.variance,
            "median": self.median,
            "mode": self.mode,
        }
        return {name: fn for name, fn in candidates.items() if fn is not None}


def as_array(x: ArrayLike | float) -> np.ndarray:
    return np.asarray(x, dtype=float)


def like_input(values: np.ndarray, x: ArrayLike | float) -> np.ndarray | float:
    """Return a float for scalar ``x`` and an array otherwise."""
    if np.ndim(x) == 0:
        return float(values)
    return values


def masked(arr: np.ndarray, mask: np.ndarray, values: np.ndarray, fill: float = 0.0) -> np.ndarray:
    """Keep ``values`` where ``mask`` holds and ``fill`` elsewhere."""
    return np.where(mask, np.broadcast_to(values, arr.shape), fill).astype(float)


__all__ = [
    "ERRSTATE",
    "Evaluator",
    "Family",
    "FormulaSet",
    "QuantityFn",
    "as_array",
    "like_input",
    "masked",
]
