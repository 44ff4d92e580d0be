"""Continuous families: normal, gamma, Student's t, chi-squared, beta, log-normal, Weibull."""

from __future__ import annotations

import numpy as np

from ..core import ArrayLike
from ..special import beta as beta_fn
from ..special import gamma as gamma_fn
from ..special import (
    incomplete_beta,
    log_gamma,
    lower_regularized_gamma,
    standard_normal_cdf,
    standard_normal_pdf,
)
from .base import ERRSTATE, Family, FormulaSet, as_array, like_input, masked

STUDENT_T_NORMAL_CUTOVER = 30


# Normal -----------------------------------------------------------------------------------


def normal_pdf(x: ArrayLike | float, mu: float, sigma: float) -> np.ndarray | float:
    arr = as_array(x)
    with np.errstate(**ERRSTATE):
        result = as_array(standard_normal_pdf((arr - mu) / sigma)) / sigma
    return like_input(result, x)


def normal_cdf(x: ArrayLike | float, mu: float, sigma: float) -> np.ndarray | float:
    arr = as_array(x)
    with np.errstate(**ERRSTATE):
        result = as_array(standard_normal_cdf((arr - mu) / sigma))
    return like_input(result, x)


def normal_mean(mu: float, sigma: float) -> float:
    return float(mu)


def normal_variance(mu: float, sigma: float) -> float:
    return float(np.float64(sigma) * sigma)


# Gamma (shape k, scale s) -----------------------------------------------------------------


def gamma_pdf(x: ArrayLike | float, shape: float, scale: float) -> np.ndarray | float:
    """Gamma density; zero for ``x <= 0``."""
    arr = as_array(x)
    with np.errstate(**ERRSTATE):
        body = (
            np.power(arr, shape - 1.0)
            * np.exp(-arr / scale)
            / (np.power(np.float64(scale), shape) * gamma_fn(shape))
        )
    return like_input(masked(arr, arr > 0, body), x)


def gamma_cdf(x: ArrayLike | float, shape: float, scale: float) -> np.ndarray | float:
    """Gamma CDF through the incomplete gamma series; zero for ``x <= 0``."""
    arr = as_array(x)
    positive = arr > 0
    with np.errstate(**ERRSTATE):
        t = np.where(positive, arr / scale, 0.0)
        body = as_array(lower_regularized_gamma(shape, t))
    result = masked(arr, positive, body)
    result = np.where(np.isposinf(arr), 1.0, result)
    return like_input(result, x)


def gamma_mean(shape: float, scale: float) -> float:
    return float(np.float64(shape) * scale)


def gamma_variance(shape: float, scale: float) -> float:
    return float(np.float64(shape) * scale * scale)


def gamma_mode(shape: float, scale: float) -> float:
    return float((np.float64(shape) - 1.0) * scale) if shape >= 1 else 0.0


# Student's t (degrees of freedom nu, location mu, scale sigma) ----------------------------


def student_t_pdf(
    x: ArrayLike | float, nu: float, mu: float = 0.0, sigma: float = 1.0
) -> np.ndarray | float:
    arr = as_array(x)
    with np.errstate(**ERRSTATE):
        z = (arr - mu) / sigma
        # gamma((nu+1)/2) / gamma(nu/2) overflows separately past nu ~ 340
        ratio = np.exp(np.float64(log_gamma((nu + 1.0) / 2.0) - log_gamma(nu / 2.0)))
        kernel = np.power(1.0 + z * z / nu, -(nu + 1.0) / 2.0)
        result = ratio / (np.sqrt(np.pi * nu) * sigma) * kernel
    return like_input(result, x)


def student_t_cdf(
    x: ArrayLike | float, nu: float, mu: float = 0.0, sigma: float = 1.0
) -> np.ndarray | float:
    """Approximate Student-t CDF.

    Above 30 degrees of freedom the standard normal CDF is used; below that the
    arctangent form ``0.5 + atan(z / sqrt(nu)) / pi``, which is exact only for
    ``nu == 1``.
    """
    arr = as_array(x)
    with np.errstate(**ERRSTATE):
        z = (arr - mu) / sigma
        if nu > STUDENT_T_NORMAL_CUTOVER:
            result = as_array(standard_normal_cdf(z))
        else:
            result = 0.5 + np.arctan(z / np.sqrt(nu)) / np.pi
    return like_input(result, x)


def student_t_mean(nu: float, mu: float = 0.0, sigma: float = 1.0) -> float | None:
    return float(mu) if nu > 1 else None


def student_t_variance(nu: float, mu: float = 0.0, sigma: float = 1.0) -> float | None:
    if nu <= 2:
        return None
    return float(np.float64(nu) / (nu - 2.0) * sigma * sigma)


def student_t_median(nu: float, mu: float = 0.0, sigma: float = 1.0) -> float:
    return float(mu)


# Scaled chi-squared (degrees of freedom nu, scale sigma) == Gamma(nu / 2, 2 sigma) --------


def chi_squared_pdf(x: ArrayLike | float, nu: float, sigma: float = 1.0) -> np.ndarray | float:
    return gamma_pdf(x, nu / 2.0, 2.0 * sigma)


def chi_squared_cdf(x: ArrayLike | float, nu: float, sigma: float = 1.0) -> np.ndarray | float:
    return gamma_cdf(x, nu / 2.0, 2.0 * sigma)


def chi_squared_mean(nu: float, sigma: float = 1.0) -> float:
    return float(np.float64(nu) * sigma)


def chi_squared_variance(nu: float, sigma: float = 1.0) -> float:
    return float(2.0 * np.float64(nu) * sigma * sigma)


def chi_squared_mode(nu: float, sigma: float = 1.0) -> float:
    return gamma_mode(nu / 2.0, 2.0 * sigma)


# Beta (shapes a, b) -----------------------------------------------------------------------


def beta_pdf(x: ArrayLike | float, a: float, b: float) -> np.ndarray | float:
    """Beta density; zero outside the open unit interval."""
    arr = as_array(x)
    inside = (arr > 0) & (arr < 1)
    with np.errstate(**ERRSTATE):
        body = np.power(arr, a - 1.0) * np.power(1.0 - arr, b - 1.0) / beta_fn(a, b)
    return like_input(masked(arr, inside, body), x)


def beta_cdf(x: ArrayLike | float, a: float, b: float) -> np.ndarray | float:
    """Beta CDF from the coarse :func:`~distlab.special.incomplete_beta` approximation."""
    arr = as_array(x)
    inside = (arr > 0) & (arr < 1)
    body = as_array(incomplete_beta(np.where(inside, arr, 0.5), a, b))
    result = np.where(arr >= 1, 1.0, masked(arr, inside, body))
    return like_input(result, x)


def beta_mean(a: float, b: float) -> float:
    with np.errstate(**ERRSTATE):
        return float(np.float64(a) / (np.float64(a) + b))


def beta_variance(a: float, b: float) -> float:
    with np.errstate(**ERRSTATE):
        total = np.float64(a) + b
        return float(a * b / (total * total * (total + 1.0)))


def beta_median(a: float, b: float) -> float:
    """No closed form; the mean stands in for it."""
    return beta_mean(a, b)


def beta_mode(a: float, b: float) -> float | None:
    if a > 1 and b > 1:
        return float((np.float64(a) - 1.0) / (a + b - 2.0))
    return None


# Log-normal (log-mean mu, log-sd sigma) ---------------------------------------------------


def log_normal_pdf(x: ArrayLike | float, mu: float, sigma: float) -> np.ndarray | float:
    arr = as_array(x)
    positive = arr > 0
    with np.errstate(**ERRSTATE):
        safe = np.where(positive, arr, 1.0)
        body = as_array(normal_pdf(np.log(safe), mu, sigma)) / safe
    return like_input(masked(arr, positive, body), x)


def log_normal_cdf(x: ArrayLike | float, mu: float, sigma: float) -> np.ndarray | float:
    arr = as_array(x)
    positive = arr > 0
    with np.errstate(**ERRSTATE):
        safe = np.where(positive, arr, 1.0)
        body = as_array(normal_cdf(np.log(safe), mu, sigma))
    return like_input(masked(arr, positive, body), x)


def log_normal_mean(mu: float, sigma: float) -> float:
    with np.errstate(**ERRSTATE):
        return float(np.exp(mu + np.float64(sigma) * sigma / 2.0))


def log_normal_variance(mu: float, sigma: float) -> float:
    with np.errstate(**ERRSTATE):
        sigma2 = np.float64(sigma) * sigma
        return float((np.exp(sigma2) - 1.0) * np.exp(2.0 * mu + sigma2))


def log_normal_median(mu: float, sigma: float) -> float:
    with np.errstate(**ERRSTATE):
        return float(np.exp(np.float64(mu)))


def log_normal_mode(mu: float, sigma: float) -> float:
    with np.errstate(**ERRSTATE):
        return float(np.exp(mu - np.float64(sigma) * sigma))


# Three-parameter Weibull (shift x0, scale s, shape k) -------------------------------------


def weibull_pdf(x: ArrayLike | float, x0: float, scale: float, shape: float) -> np.ndarray | float:
    """Weibull density; zero for ``x <= x0``."""
    arr = as_array(x)
    above = arr > x0
    with np.errstate(**ERRSTATE):
        z = np.where(above, (arr - x0) / scale, 1.0)
        body = (np.float64(shape) / scale) * np.power(z, shape - 1.0) * np.exp(-np.power(z, shape))
    return like_input(masked(arr, above, body), x)


def weibull_cdf(x: ArrayLike | float, x0: float, scale: float, shape: float) -> np.ndarray | float:
    arr = as_array(x)
    above = arr > x0
    with np.errstate(**ERRSTATE):
        z = np.where(above, (arr - x0) / scale, 0.0)
        body = 1.0 - np.exp(-np.power(z, shape))
    return like_input(masked(arr, above, body), x)


def weibull_mean(x0: float, scale: float, shape: float) -> float:
    with np.errstate(**ERRSTATE):
        return float(x0 + np.float64(scale) * gamma_fn(1.0 + np.float64(1.0) / shape))


def weibull_variance(x0: float, scale: float, shape: float) -> float:
    with np.errstate(**ERRSTATE):
        first = np.float64(gamma_fn(1.0 + np.float64(1.0) / shape))
        second = np.float64(gamma_fn(1.0 + np.float64(2.0) / shape))
        return float(np.float64(scale) * scale * (second - first * first))


def weibull_median(x0: float, scale: float, shape: float) -> float:
    with np.errstate(**ERRSTATE):
        return float(x0 + np.float64(scale) * np.power(np.log(2.0), np.float64(1.0) / shape))


def weibull_mode(x0: float, scale: float, shape: float) -> float:
    if shape <= 1:
        return float(x0)
    with np.errstate(**ERRSTATE):
        return float(x0 + np.float64(scale) * np.power((shape - 1.0) / shape, 1.0 / shape))


NORMAL = FormulaSet(
    family=Family.NORMAL,
    kind="continuous",
    parameters=("mu", "sigma"),
    pdf=normal_pdf,
    cdf=normal_cdf,
    mean=normal_mean,
    variance=normal_variance,
    median=normal_mean,
    mode=normal_mean,
)

GAMMA = FormulaSet(
    family=Family.GAMMA,
    kind="continuous",
    parameters=("k", "s"),
    pdf=gamma_pdf,
    cdf=gamma_cdf,
    mean=gamma_mean,
    variance=gamma_variance,
    mode=gamma_mode,
)

STUDENT_T = FormulaSet(
    family=Family.STUDENT_T,
    kind="continuous",
    parameters=("nu", "mu", "sigma"),
    pdf=student_t_pdf,
    cdf=student_t_cdf,
    mean=student_t_mean,
    variance=student_t_variance,
    median=student_t_median,
    mode=student_t_median,
)

CHI_SQUARED = FormulaSet(
    family=Family.CHI_SQUARED,
    kind="continuous",
    parameters=("nu", "sigma"),
    pdf=chi_squared_pdf,
    cdf=chi_squared_cdf,
    mean=chi_squared_mean,
    variance=chi_squared_variance,
    mode=chi_squared_mode,
)

BETA = FormulaSet(
    family=Family.BETA,
    kind="continuous",
    parameters=("a", "b"),
    pdf=beta_pdf,
    cdf=beta_cdf,
    mean=beta_mean,
    variance=beta_variance,
    median=beta_median,
    mode=beta_mode,
)

LOG_NORMAL = FormulaSet(
    family=Family.LOG_NORMAL,
    kind="continuous",
    parameters=("mu", "sigma"),
    pdf=log_normal_pdf,
    cdf=log_normal_cdf,
    mean=log_normal_mean,
    variance=log_normal_variance,
    median=log_normal_median,
    mode=log_normal_mode,
)

WEIBULL = FormulaSet(
    family=Family.WEIBULL,
    kind="continuous",
    parameters=("x0", "s", "k"),
    pdf=weibull_pdf,
    cdf=weibull_cdf,
    mean=weibull_mean,
    variance=weibull_variance,
    median=weibull_median,
    mode=weibull_mode,
)

CONTINUOUS_FAMILIES = (NORMAL, GAMMA, STUDENT_T, CHI_SQUARED, BETA, LOG_NORMAL, WEIBULL)

__all__ = [
    "CONTINUOUS_FAMILIES",
    "NORMAL",
    "GAMMA",
    "STUDENT_T",
    "CHI_SQUARED",
    "BETA",
    "LOG_NORMAL",
    "WEIBULL",
    "normal_pdf",
    "normal_cdf",
    "gamma_pdf",
    "gamma_cdf",
    "student_t_pdf",
    "student_t_cdf",
    "chi_squared_pdf",
    "chi_squared_cdf",
    "beta_pdf",
    "beta_cdf",
    "log_normal_pdf",
    "log_normal_cdf",
    "weibull_pdf",
    "weibull_cdf",
]
