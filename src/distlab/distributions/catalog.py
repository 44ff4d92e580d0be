"""Built-in catalog: parameters and parametrizations of the ten supported families."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Mapping
from typing import Any

import numpy as np

from ..families import Family, FormulaSet, get_family
from .base import Distribution, Interval, Parameter, Parametrization, Quantity, Reference

logger = logging.getLogger(__name__)

INF = math.inf

Transform = Callable[..., tuple[float, ...]]


def _identity(*values: float) -> tuple[float, ...]:
    return values


def _variance_to_sd(mu: float, sigma2: float) -> tuple[float, float]:
    return mu, _sqrt(sigma2)


def _sqrt(value: float) -> float:
    with np.errstate(invalid="ignore"):
        return float(np.sqrt(value))


def _is_whole(value: float) -> bool:
    return math.isfinite(value) and value == math.floor(value)


def _compose(fn: Callable[..., Any], transform: Transform) -> Callable[..., Any]:
    def composed(*values: float) -> Any:
        return fn(*transform(*values))

    composed.__name__ = getattr(fn, "__name__", "quantity")
    return composed


def _parametrization(
    name: str,
    formulas: FormulaSet,
    parameters: tuple[Parameter, ...],
    *,
    validity: Callable[..., bool],
    bounds: Callable[..., Interval],
    support: Interval,
    displays: Mapping[str, str],
    density_display: str,
    support_display: str,
    transform: Transform = _identity,
    conjugate_prior: str | None = None,
    note: str | None = None,
) -> Parametrization:
    """Bind a formula set to ``parameters``, routing values through ``transform``."""

    def density(x, *values):
        return formulas.pdf(x, *transform(*values))

    def cdf(x, *values):
        return formulas.cdf(x, *transform(*values))

    quantities = {
        qname: Quantity(fun=_compose(fn, transform), display=displays.get(qname, ""))
        for qname, fn in formulas.quantities().items()
    }
    return Parametrization(
        name=name,
        parameters=parameters,
        density=density,
        cdf=cdf,
        validity=validity,
        bounds=bounds,
        kind=formulas.kind,
        support=support,
        quantities=quantities,
        conjugate_prior=conjugate_prior,
        density_display=density_display,
        support_display=support_display,
        note=note,
    )


# Parameters -------------------------------------------------------------------------------

NORMAL_MEAN = Parameter(
    "mu", r"\mu", (-INF, INF), (-5.0, 5.0), False, 0.0, "continuous", "normal", "location"
)
NORMAL_SD = Parameter(
    "sigma", r"\sigma", (0.0, INF), (0.1, 10.0), True, 1.0,
    "continuous", None, "standard deviation",
)
NORMAL_VARIANCE = Parameter(
    "sigma2", r"\sigma^2", (0.0, INF), (0.1, 10.0), True, 1.0,
    "continuous", "inversegamma", "variance",
)

GAMMA_SHAPE = Parameter("k", "k", (0.0, INF), (0.1, 10.0), True, 1.0, "continuous", None, "shape")
GAMMA_SCALE = Parameter(
    "s", "s", (0.0, INF), (0.1, 10.0), True, 1.0, "continuous", "inversegamma", "scale"
)

T_DOF = Parameter(
    "nu", r"\nu", (0.0, INF), (1.0, 50.0), False, 5.0, "discrete", None, "degrees of freedom"
)
T_LOCATION = Parameter(
    "mu", r"\mu", (-INF, INF), (-8.0, 8.0), False, 0.0, "continuous", None, "location"
)
T_SCALE = Parameter(
    "sigma", r"\sigma", (0.0, INF), (0.1, 10.0), True, 1.0, "continuous", None, "scale"
)

CHI_SQUARED_DOF = Parameter(
    "nu", r"\nu", (0.0, INF), (1.0, 10.0), False, 3.0, "discrete", None, "degrees of freedom"
)
CHI_SQUARED_SCALE = Parameter(
    "sigma", r"\sigma", (0.0, INF), (0.1, 10.0), True, 1.0, "continuous", None, "scale"
)

BETA_A = Parameter("a", "a", (0.0, INF), (0.1, 10.0), True, 1.0, "continuous", None, "shape")
BETA_B = Parameter("b", "b", (0.0, INF), (0.1, 10.0), True, 1.0, "continuous", None, "shape")

LOG_NORMAL_MEAN = Parameter(
    "mu", r"\mu", (-INF, INF), (-2.0, 2.0), False, 1.0, "continuous", "normal", "log-scale"
)
LOG_NORMAL_VARIANCE = Parameter(
    "sigma2", r"\sigma^2", (0.0, INF), (0.1, 10.0), True, 1.0,
    "continuous", "inversegamma", "shape",
)

WEIBULL_SHIFT = Parameter(
    "x0", "x_0", (-INF, INF), (-3.0, 5.0), False, 0.0, "continuous", None, "shift"
)
WEIBULL_SCALE = Parameter(
    "s", "s", (0.0, INF), (0.1, 10.0), True, 1.0, "continuous", "inversegamma", "scale"
)
WEIBULL_SHAPE = Parameter("k", "k", (0.0, INF), (0.1, 10.0), True, 1.0, "continuous", None, "shape")

BINOMIAL_TRIALS = Parameter(
    "N", "N", (0.0, INF), (1.0, 100.0), False, 20.0, "discrete", None, "sample size"
)
BINOMIAL_PROBABILITY = Parameter(
    "p", "p", (0.0, 1.0), (0.0, 1.0), False, 0.5, "continuous", "beta", "probability of success"
)

POISSON_RATE = Parameter(
    "lambda", r"\lambda", (0.0, INF), (0.1, 10.0), True, 1.0, "continuous", None, "rate"
)

NEGATIVE_BINOMIAL_SUCCESSES = Parameter(
    "r", "r", (0.0, INF), (1.0, 50.0), False, 20.0,
    "discrete", None, "number of successes required",
)
NEGATIVE_BINOMIAL_PROBABILITY = Parameter(
    "p", "p", (0.0, 1.0), (0.0, 1.0), False, 0.2, "continuous", "beta", "probability of failure"
)


# Parametrizations -------------------------------------------------------------------------

_NORMAL_DENSITY = (
    r"\left(2\pi\sigma^2\right)^{-\frac{1}{2}}"
    r"\exp\left\{-\frac{1}{2\sigma^2}\left(x-\mu\right)^2\right\}"
)
_NORMAL_DISPLAYS = {"mean": r"\mu", "variance": r"\sigma^2", "median": r"\mu", "mode": r"\mu"}


def _build_parametrizations() -> dict[Family, tuple[Parametrization, ...]]:
    normal = get_family(Family.NORMAL)
    gamma = get_family(Family.GAMMA)
    student_t = get_family(Family.STUDENT_T)
    chi_squared = get_family(Family.CHI_SQUARED)
    beta = get_family(Family.BETA)
    log_normal = get_family(Family.LOG_NORMAL)
    weibull = get_family(Family.WEIBULL)
    binomial = get_family(Family.BINOMIAL)
    poisson = get_family(Family.POISSON)
    negative_binomial = get_family(Family.NEGATIVE_BINOMIAL)

    return {
        Family.NORMAL: (
            _parametrization(
                "mean/standard deviation",
                normal,
                (NORMAL_MEAN, NORMAL_SD),
                validity=lambda mu, sigma: sigma > 0,
                bounds=lambda mu, sigma: (mu - 4.0 * sigma, mu + 4.0 * sigma),
                support=(-INF, INF),
                displays=_NORMAL_DISPLAYS,
                density_display=_NORMAL_DENSITY,
                support_display=r"(-\infty,\infty)",
            ),
            _parametrization(
                "mean/variance",
                normal,
                (NORMAL_MEAN, NORMAL_VARIANCE),
                transform=_variance_to_sd,
                validity=lambda mu, sigma2: sigma2 > 0,
                bounds=lambda mu, sigma2: (mu - 4.0 * _sqrt(sigma2), mu + 4.0 * _sqrt(sigma2)),
                support=(-INF, INF),
                displays=_NORMAL_DISPLAYS,
                density_display=_NORMAL_DENSITY,
                support_display=r"(-\infty,\infty)",
                conjugate_prior="normalinversegamma",
            ),
        ),
        Family.GAMMA: (
            _parametrization(
                "shape/scale",
                gamma,
                (GAMMA_SHAPE, GAMMA_SCALE),
                validity=lambda k, s: k > 0 and s > 0,
                bounds=lambda k, s: (0.01, k * s + 4.0 * _sqrt(k * s * s)),
                support=(0.0, INF),
                displays={"mean": "ks", "variance": "ks^2", "mode": r"(k-1)s, k\geq 1"},
                density_display=r"\frac{1}{\Gamma(k)s^{k}} x^{k - 1} \exp\left\{-\frac{x}{s}\right\}",
                support_display=r"(0,\infty)",
            ),
        ),
        Family.STUDENT_T: (
            _parametrization(
                "location/scale",
                student_t,
                (T_DOF, T_LOCATION, T_SCALE),
                validity=lambda nu, mu, sigma: sigma > 0 and nu > 0,
                bounds=lambda nu, mu, sigma: (mu - 10.0, mu + 10.0),
                support=(-INF, INF),
                displays={
                    "mean": r"\mu, \nu>1",
                    "variance": r"\frac{\nu}{\nu-2}\sigma^2, \nu>2",
                    "median": r"\mu",
                    "mode": r"\mu",
                },
                density_display=(
                    r"\frac{\Gamma\left(\frac{\nu+1}{2}\right)}"
                    r"{\sqrt{\pi\nu\sigma^2}\Gamma\left(\frac{\nu}{2}\right)}"
                    r"\left(1+\frac{(x-\mu)^2}{\nu\sigma^2}\right)^{-\frac{\nu+1}{2}}"
                ),
                support_display=r"(-\infty,\infty)",
            ),
        ),
        Family.CHI_SQUARED: (
            _parametrization(
                "scaled",
                chi_squared,
                (CHI_SQUARED_DOF, CHI_SQUARED_SCALE),
                validity=lambda nu, sigma: sigma > 0 and nu > 0,
                bounds=lambda nu, sigma: (0.0, 40.0),
                support=(0.0, INF),
                displays={
                    "mean": r"\sigma\nu",
                    "variance": r"2\nu\sigma^2",
                    "mode": r"(\nu-2)\sigma, \nu\geq 2",
                },
                density_display=(
                    r"\frac{1}{(2\sigma)^\frac{\nu}{2}\Gamma\left(\frac{\nu}{2}\right)}"
                    r"x^{\frac{\nu}{2}-1}\exp\left\{-\frac{x}{2\sigma}\right\}"
                ),
                support_display=r"[0,\infty)",
            ),
        ),
        Family.BETA: (
            _parametrization(
                "a/b",
                beta,
                (BETA_A, BETA_B),
                validity=lambda a, b: a > 0 and b > 0,
                bounds=lambda a, b: (0.0, 1.0),
                support=(0.0, 1.0),
                displays={
                    "mean": r"\frac{a}{a+b}",
                    "variance": r"\frac{ab}{(a+b)^2(a+b+1)}",
                    "median": "no closed form",
                    "mode": r"\frac{a-1}{a+b-2}, a>1, b>1",
                },
                density_display=r"\frac{1}{B(a,b)} x^{a-1} (1-x)^{b-1}",
                support_display="(0,1)",
            ),
        ),
        Family.LOG_NORMAL: (
            _parametrization(
                "mu/sigma2",
                log_normal,
                (LOG_NORMAL_MEAN, LOG_NORMAL_VARIANCE),
                transform=_variance_to_sd,
                validity=lambda mu, sigma2: sigma2 > 0,
                bounds=lambda mu, sigma2: (0.0, 15.0),
                support=(0.0, INF),
                displays={
                    "mean": r"\exp\left\{\mu + \frac{\sigma^2}{2}\right\}",
                    "variance": r"\left(e^{\sigma^2}-1\right)\exp\left\{2\mu + \sigma^2\right\}",
                    "median": r"e^\mu",
                    "mode": r"\exp\left\{\mu-\sigma^2\right\}",
                },
                density_display=(
                    r"\left(2\pi\sigma^2x^2\right)^{-\frac{1}{2}}"
                    r"\exp\left\{-\frac{1}{2\sigma^2}\left(\log(x)-\mu\right)^2\right\}"
                ),
                support_display=r"(0,\infty)",
                conjugate_prior="normalinversegamma",
            ),
        ),
        Family.WEIBULL: (
            _parametrization(
                "shift/scale/shape",
                weibull,
                (WEIBULL_SHIFT, WEIBULL_SCALE, WEIBULL_SHAPE),
                validity=lambda x0, s, k: s > 0 and k > 0,
                bounds=lambda x0, s, k: (x0, x0 + 10.0),
                support=(0.0, INF),
                displays={
                    "mean": r"x_0 + s\Gamma\left(1+\frac{1}{k}\right)",
                    "variance": (
                        r"s^2\left(\Gamma\left(1+\frac{2}{k}\right)"
                        r" - \Gamma\left(1+\frac{1}{k}\right)^2\right)"
                    ),
                    "median": r"x_0 + s\left(\log(2)\right)^{\frac{1}{k}}",
                    "mode": r"x_0 + s\left(\frac{k-1}{k}\right)^{\frac{1}{k}}, k > 1",
                },
                density_display=(
                    r"\frac{k}{s}\left(\frac{x-x_0}{s}\right)^{k-1}"
                    r" \exp\left\{-\left(\frac{x-x_0}{s}\right)^k\right\}"
                ),
                support_display=r"(x_0,\infty)",
            ),
        ),
        Family.BINOMIAL: (
            _parametrization(
                "probability",
                binomial,
                (BINOMIAL_TRIALS, BINOMIAL_PROBABILITY),
                validity=lambda n, p: n > 0 and _is_whole(n) and 0 < p < 1,
                bounds=lambda n, p: (0.0, n),
                support=(0.0, INF),
                displays={
                    "mean": "Np",
                    "variance": "Np(1-p)",
                    "mode": r"\lfloor (N+1)p \rfloor",
                },
                density_display=r"\binom{N}{x} p^x (1-p)^{N-x}",
                support_display="[0,N]",
                conjugate_prior="beta",
            ),
        ),
        Family.POISSON: (
            _parametrization(
                "rate",
                poisson,
                (POISSON_RATE,),
                validity=lambda rate: rate > 0,
                bounds=lambda rate: (0.0, 25.0),
                support=(0.0, INF),
                displays={
                    "mean": r"\lambda",
                    "variance": r"\lambda",
                    "mode": r"\lfloor\lambda\rfloor",
                },
                density_display=r"\frac{\lambda^x}{x!} \exp\left\{-\lambda\right\}",
                support_display=r"[0,\infty)",
                conjugate_prior="gamma",
            ),
        ),
        Family.NEGATIVE_BINOMIAL: (
            _parametrization(
                "probability",
                negative_binomial,
                (NEGATIVE_BINOMIAL_SUCCESSES, NEGATIVE_BINOMIAL_PROBABILITY),
                validity=lambda r, p: r > 0 and _is_whole(r) and 0 < p < 1,
                bounds=lambda r, p: (0.0, 50.0),
                support=(0.0, INF),
                displays={
                    "mean": r"\frac{rp}{1-p}",
                    "variance": r"\frac{rp}{(1-p)^2}",
                    "mode": r"\left\lfloor\frac{(r-1)p}{1-p}\right\rfloor, r>1",
                },
                density_display=r"\binom{x+r-1}{x} p^x (1-p)^{r}",
                support_display=r"[0,\infty)",
                conjugate_prior="beta",
            ),
        ),
    }


def build_catalog(metadata: Mapping[str, Mapping[str, Any]]) -> list[Distribution]:
    """Assemble the built-in distributions, decorated with ``metadata`` entries."""
    distributions: list[Distribution] = []
    for family, parametrizations in _build_parametrizations().items():
        entry = metadata.get(family.value)
        if entry is None:
            logger.warning(
                "No catalog metadata for distribution '%s'; using its name.", family.value
            )
            entry = {}
        reference = entry.get("reference")
        distributions.append(
            Distribution(
                name=family.value,
                label=str(entry.get("label", family.value)),
                kind=parametrizations[0].kind,
                parametrizations=parametrizations,
                description=entry.get("description"),
                reference=Reference(str(reference["name"]), str(reference["link"]))
                if reference
                else None,
            )
        )
    return distributions


__all__ = ["build_catalog"]
