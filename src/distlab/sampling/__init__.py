"""Curve sampling for plotting consumers of the distribution catalog."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from ..core import Curve, CurveKind, ParameterValues
from ..distributions import Parametrization, get_distribution

__all__ = [
    "SamplingConfig",
    "sample_grid",
    "sample_curve",
    "sample_parametrization",
    "compare_curves",
]


@dataclass(slots=True)
class SamplingConfig:
    """Configuration controlling how plot curves are sampled."""

    points: int = 200
    skip_zero_mass: bool = True


def sample_grid(low: float, high: float, *, discrete: bool, points: int = 200) -> np.ndarray:
    """Evaluation grid over ``[low, high]``: integers when discrete, evenly spaced otherwise."""
    if discrete:
        return np.arange(math.floor(low), math.ceil(high) + 1, dtype=float)
    if points < 2:
        raise ValueError("Continuous curves need at least two sample points.")
    return np.linspace(low, high, points)


def sample_parametrization(
    parametrization: Parametrization,
    values: ParameterValues,
    *,
    kind: CurveKind = "pdf",
    config: SamplingConfig | None = None,
    label: str | None = None,
) -> Curve:
    """Sample the pdf or cdf of ``parametrization`` over its plot range."""
    cfg = config or SamplingConfig()
    discrete = parametrization.kind == "discrete"
    low, high = parametrization.plot_range(values)
    xs = sample_grid(low, high, discrete=discrete, points=cfg.points)
    ys = np.asarray(parametrization.evaluate(xs, values, kind=kind), dtype=float)
    if discrete and kind == "pdf" and cfg.skip_zero_mass:
        keep = ys > 0
        xs, ys = xs[keep], ys[keep]
    return Curve(x=xs, y=ys, kind=kind, discrete=discrete, label=label or parametrization.name)


def sample_curve(
    distribution: str,
    values: ParameterValues,
    *,
    parametrization: str | None = None,
    kind: CurveKind = "pdf",
    config: SamplingConfig | None = None,
) -> Curve:
    """Sample a catalogued distribution by name."""
    dist = get_distribution(distribution)
    chosen = dist.get_parametrization(parametrization)
    return sample_parametrization(
        chosen, values, kind=kind, config=config, label=f"{dist.label} ({chosen.name})"
    )


def compare_curves(
    left: tuple[str, str | None, ParameterValues],
    right: tuple[str, str | None, ParameterValues],
    *,
    kind: CurveKind = "pdf",
    config: SamplingConfig | None = None,
) -> tuple[Curve, Curve]:
    """Sample two ``(distribution, parametrization, values)`` selections side by side."""
    curves = []
    for distribution, parametrization, values in (left, right):
        curves.append(
            sample_curve(
                distribution, values, parametrization=parametrization, kind=kind, config=config
            )
        )
    return curves[0], curves[1]
