"""Discrete families: binomial, Poisson and negative binomial.

Mass functions are zero off the non-negative integers. Cumulative functions are running
sums of the mass function over ``0 .. floor(x)``. Masses are computed in log space so that
large counts and rates neither overflow nor underflow into ``nan``.
"""

from __future__ import annotations

import math
from collections.abc import Callable

import numpy as np

from ..core import ArrayLike
from ..special import log_gamma
from .base import ERRSTATE, Family, FormulaSet, as_array, like_input

ScalarMass = Callable[..., float]

RUNNING_SUM_MAX_TERMS = 1_000_000
_EPSILON = float(np.finfo(float).eps)


def _is_count(x: float, upper: float = math.inf) -> bool:
    return math.isfinite(x) and 0 <= x <= upper and x == math.floor(x)


def _pointwise(mass: ScalarMass, x: ArrayLike | float, *theta: float) -> np.ndarray | float:
    if np.ndim(x) == 0:
        return mass(float(x), *theta)
    arr = as_array(x)
    values = [mass(float(value), *theta) for value in arr.ravel()]
    return np.asarray(values, dtype=float).reshape(arr.shape)


def _running_sum(mass: ScalarMass, x: ArrayLike | float, *theta: float) -> np.ndarray:
    """Sum ``mass(0..floor(x))`` for every element of ``x``.

    The masses are summed once up to the largest requested point and indexed per
    element, so a whole plotting grid costs one pass. Summation stops early once the
    next mass is below machine epsilon relative to the running total (or after
    ``RUNNING_SUM_MAX_TERMS`` terms); larger ``x`` then reads the converged total.
    """
    arr = as_array(x)
    countable = np.isfinite(arr) & (arr >= 0)
    floors = np.floor(np.where(countable, arr, 0.0))
    top = min(float(floors.max()) if floors.size else 0.0, RUNNING_SUM_MAX_TERMS - 1.0)
    masses: list[float] = []
    total = 0.0
    for i in range(int(top) + 1):
        value = mass(float(i), *theta)
        masses.append(value)
        if math.isnan(value):
            break
        total += value
        if total > 0 and value <= _EPSILON * total:
            break
    running = np.cumsum(np.asarray(masses, dtype=float))
    index = np.minimum(floors, len(running) - 1).astype(np.int64)
    result = np.where(countable, running[index], 0.0)
    result = np.where(np.isposinf(arr), 1.0, result)
    return np.where(np.isnan(arr), np.nan, result)


def _xlogy(x: float, y: float) -> float:
    """``x * log(y)`` with ``0 * log(0) == 0``."""
    if x == 0:
        return 0.0
    with np.errstate(**ERRSTATE):
        return float(x * np.log(np.float64(y)))


def _xlog1py(x: float, y: float) -> float:
    """``x * log1p(y)`` with ``0 * log1p(-1) == 0``."""
    if x == 0:
        return 0.0
    with np.errstate(**ERRSTATE):
        return float(x * np.log1p(np.float64(y)))


# Binomial (trials N, success probability p) ----------------------------------------------


def _binomial_mass(x: float, n: float, p: float) -> float:
    if not _is_count(x, n):
        return 0.0
    log_mass = (
        log_gamma(n + 1.0)
        - log_gamma(x + 1.0)
        - log_gamma(n - x + 1.0)
        + _xlogy(x, p)
        + _xlog1py(n - x, -p)
    )
    with np.errstate(**ERRSTATE):
        return float(np.exp(np.float64(log_mass)))


def binomial_pdf(x: ArrayLike | float, n: float, p: float) -> np.ndarray | float:
    return _pointwise(_binomial_mass, x, n, p)


def binomial_cdf(x: ArrayLike | float, n: float, p: float) -> np.ndarray | float:
    """Binomial CDF; exactly 1 from ``x >= N`` on."""
    arr = as_array(x)
    clipped = np.where(arr >= n, 0.0, arr)
    result = np.where(arr >= n, 1.0, _running_sum(_binomial_mass, clipped, n, p))
    return like_input(result, x)


def binomial_mean(n: float, p: float) -> float:
    return float(np.float64(n) * p)


def binomial_variance(n: float, p: float) -> float:
    return float(np.float64(n) * p * (1.0 - p))


def binomial_mode(n: float, p: float) -> float:
    with np.errstate(**ERRSTATE):
        return float(np.floor((np.float64(n) + 1.0) * p))


# Poisson (rate lambda) ---------------------------------------------------------------------


def _poisson_mass(x: float, rate: float) -> float:
    if not _is_count(x):
        return 0.0
    log_mass = _xlogy(x, rate) - rate - log_gamma(x + 1.0)
    with np.errstate(**ERRSTATE):
        return float(np.exp(np.float64(log_mass)))


def poisson_pdf(x: ArrayLike | float, rate: float) -> np.ndarray | float:
    return _pointwise(_poisson_mass, x, rate)


def poisson_cdf(x: ArrayLike | float, rate: float) -> np.ndarray | float:
    return like_input(_running_sum(_poisson_mass, x, rate), x)


def poisson_mean(rate: float) -> float:
    return float(rate)


def poisson_mode(rate: float) -> float:
    return float(np.floor(np.float64(rate)))


# Negative binomial (successes r, per-trial failure probability p) --------------------------
# x counts the outcomes of probability p observed before the r-th outcome of probability 1 - p.


def _negative_binomial_mass(x: float, r: float, p: float) -> float:
    if not _is_count(x):
        return 0.0
    # log of binom(x + r - 1, x) * p**x * (1 - p)**r
    log_mass = (
        log_gamma(x + r)
        - log_gamma(x + 1.0)
        - log_gamma(r)
        + _xlogy(x, p)
        + _xlog1py(r, -p)
    )
    with np.errstate(**ERRSTATE):
        return float(np.exp(np.float64(log_mass)))


def negative_binomial_pdf(x: ArrayLike | float, r: float, p: float) -> np.ndarray | float:
    return _pointwise(_negative_binomial_mass, x, r, p)


def negative_binomial_cdf(x: ArrayLike | float, r: float, p: float) -> np.ndarray | float:
    return like_input(_running_sum(_negative_binomial_mass, x, r, p), x)


def negative_binomial_mean(r: float, p: float) -> float:
    with np.errstate(**ERRSTATE):
        return float(np.float64(p) * r / (1.0 - np.float64(p)))


def negative_binomial_variance(r: float, p: float) -> float:
    with np.errstate(**ERRSTATE):
        failure = 1.0 - np.float64(p)
        return float(np.float64(p) * r / (failure * failure))


def negative_binomial_mode(r: float, p: float) -> float:
    if r <= 1:
        return 0.0
    with np.errstate(**ERRSTATE):
        return float(np.floor((r - 1.0) * np.float64(p) / (1.0 - np.float64(p))))


BINOMIAL = FormulaSet(
    family=Family.BINOMIAL,
    kind="discrete",
    parameters=("N", "p"),
    pdf=binomial_pdf,
    cdf=binomial_cdf,
    mean=binomial_mean,
    variance=binomial_variance,
    mode=binomial_mode,
)

POISSON = FormulaSet(
    family=Family.POISSON,
    kind="discrete",
    parameters=("lambda",),
    pdf=poisson_pdf,
    cdf=poisson_cdf,
    mean=poisson_mean,
    variance=poisson_mean,
    mode=poisson_mode,
)

NEGATIVE_BINOMIAL = FormulaSet(
    family=Family.NEGATIVE_BINOMIAL,
    kind="discrete",
    parameters=("r", "p"),
    pdf=negative_binomial_pdf,
    cdf=negative_binomial_cdf,
    mean=negative_binomial_mean,
    variance=negative_binomial_variance,
    mode=negative_binomial_mode,
)

DISCRETE_FAMILIES = (BINOMIAL, POISSON, NEGATIVE_BINOMIAL)

__all__ = [
    "DISCRETE_FAMILIES",
    "BINOMIAL",
    "POISSON",
    "NEGATIVE_BINOMIAL",
    "binomial_pdf",
    "binomial_cdf",
    "poisson_pdf",
    "poisson_cdf",
    "negative_binomial_pdf",
    "negative_binomial_cdf",
]
