import math

import numpy as np
import pytest
from scipy import stats

from distlab.families import FAMILIES, Family, get_family
from distlab.families import continuous, discrete


def _trapezoid(x: np.ndarray, y: np.ndarray) -> float:
    return float(np.sum((y[1:] + y[:-1]) * np.diff(x) / 2.0))


CONTINUOUS_CASES = [
    (Family.NORMAL, (0.5, 2.0), np.linspace(-8.0, 8.0, 101)),
    (Family.GAMMA, (2.0, 1.5), np.linspace(-1.0, 12.0, 101)),
    (Family.STUDENT_T, (4.0, 1.0, 2.0), np.linspace(-10.0, 10.0, 101)),
    (Family.CHI_SQUARED, (3.0, 1.0), np.linspace(0.0, 30.0, 101)),
    (Family.LOG_NORMAL, (0.0, 0.5), np.linspace(-1.0, 10.0, 101)),
    (Family.WEIBULL, (1.0, 2.0, 1.5), np.linspace(-1.0, 12.0, 101)),
]

DISCRETE_CASES = [
    (Family.BINOMIAL, (20.0, 0.3), np.arange(-2.0, 25.0)),
    (Family.POISSON, (4.0,), np.arange(-2.0, 30.0)),
    (Family.NEGATIVE_BINOMIAL, (5.0, 0.3), np.arange(-2.0, 40.0)),
]


def test_every_family_has_a_formula_set() -> None:
    assert set(FAMILIES) == set(Family)
    for family, formulas in FAMILIES.items():
        assert formulas.family is family
    assert get_family("Poisson") is discrete.POISSON
    assert get_family(Family.BETA) is continuous.BETA


def test_unknown_family_raises_key_error() -> None:
    with pytest.raises(KeyError, match="Unknown family"):
        get_family("cauchy")


@pytest.mark.parametrize("family,theta,grid", CONTINUOUS_CASES + DISCRETE_CASES)
def test_density_is_non_negative(family: Family, theta: tuple[float, ...], grid: np.ndarray) -> None:
    values = get_family(family).pdf(grid, *theta)
    assert values.shape == grid.shape
    assert np.all(values >= 0)


@pytest.mark.parametrize("family,theta,grid", CONTINUOUS_CASES + DISCRETE_CASES)
def test_cdf_is_monotone_within_unit_interval(
    family: Family, theta: tuple[float, ...], grid: np.ndarray
) -> None:
    values = get_family(family).cdf(grid, *theta)
    assert np.all(np.diff(values) >= -1e-12)
    assert np.all((values >= 0) & (values <= 1 + 1e-9))


@pytest.mark.parametrize(
    "family,theta",
    [(case[0], case[1]) for case in CONTINUOUS_CASES if case[0] is not Family.STUDENT_T]
    + [(case[0], case[1]) for case in DISCRETE_CASES],
)
def test_cdf_limits(family: Family, theta: tuple[float, ...]) -> None:
    formulas = get_family(family)
    assert formulas.cdf(-math.inf, *theta) == pytest.approx(0.0, abs=1e-12)
    assert formulas.cdf(math.inf, *theta) == pytest.approx(1.0, abs=1e-12)


def test_density_is_zero_outside_support() -> None:
    assert continuous.gamma_pdf(-1.0, 2.0, 1.0) == 0.0
    assert continuous.gamma_pdf(0.0, 2.0, 1.0) == 0.0
    assert continuous.weibull_pdf(3.0, 3.0, 1.0, 2.0) == 0.0
    assert continuous.beta_pdf(1.5, 2.0, 2.0) == 0.0
    assert continuous.log_normal_pdf(0.0, 0.0, 1.0) == 0.0
    assert discrete.binomial_pdf(2.5, 10.0, 0.5) == 0.0
    assert discrete.binomial_pdf(11.0, 10.0, 0.5) == 0.0
    assert discrete.poisson_pdf(-1.0, 3.0) == 0.0


def test_normal_scenario() -> None:
    assert continuous.normal_pdf(0.0, 0.0, 1.0) == pytest.approx(0.3989, abs=1e-4)
    assert continuous.normal_cdf(0.0, 0.0, 1.0) == 0.5
    assert continuous.normal_cdf(1.96, 0.0, 1.0) == pytest.approx(0.975, abs=1e-3)


def test_normal_cdf_is_half_at_location() -> None:
    for mu, sigma in [(-3.0, 0.5), (0.0, 1.0), (2.5, 4.0)]:
        assert continuous.normal_cdf(mu, mu, sigma) == 0.5


@pytest.mark.parametrize(
    "pdf,theta,grid",
    [
        (continuous.normal_pdf, (1.0, 2.0), np.linspace(-15.0, 17.0, 4001)),
        (continuous.gamma_pdf, (3.0, 2.0), np.linspace(0.0, 80.0, 8001)),
        (continuous.weibull_pdf, (1.0, 2.0, 1.5), np.linspace(1.0, 30.0, 4001)),
        (continuous.log_normal_pdf, (0.0, 0.5), np.linspace(1e-6, 40.0, 8001)),
    ],
)
def test_continuous_density_integrates_to_one(pdf, theta, grid) -> None:
    assert _trapezoid(grid, pdf(grid, *theta)) == pytest.approx(1.0, abs=1e-3)


def test_densities_match_scipy() -> None:
    x = np.linspace(0.1, 6.0, 25)
    assert np.allclose(continuous.gamma_pdf(x, 2.5, 1.5), stats.gamma.pdf(x, 2.5, scale=1.5))
    assert np.allclose(
        continuous.student_t_pdf(x, 4.0, 1.0, 2.0), stats.t.pdf(x, 4.0, loc=1.0, scale=2.0)
    )
    assert np.allclose(
        continuous.log_normal_pdf(x, 0.3, 0.8), stats.lognorm.pdf(x, 0.8, scale=math.exp(0.3))
    )
    assert np.allclose(
        continuous.weibull_pdf(x, 0.0, 2.0, 1.5), stats.weibull_min.pdf(x, 1.5, scale=2.0)
    )
    assert np.allclose(
        continuous.chi_squared_pdf(x, 3.0, 1.0), stats.chi2.pdf(x, 3.0)
    )
    unit = np.linspace(0.05, 0.95, 19)
    assert np.allclose(continuous.beta_pdf(unit, 2.0, 5.0), stats.beta.pdf(unit, 2.0, 5.0))


def test_gamma_cdf_matches_scipy_for_moderate_arguments() -> None:
    x = np.array([0.5, 1.0, 2.0, 5.0, 10.0])
    assert np.allclose(
        continuous.gamma_cdf(x, 2.0, 1.5), stats.gamma.cdf(x, 2.0, scale=1.5), atol=1e-8
    )
    assert np.allclose(continuous.chi_squared_cdf(x, 4.0), stats.chi2.cdf(x, 4.0), atol=1e-8)


def test_weibull_cdf_closed_form() -> None:
    x = np.array([0.5, 1.0, 3.0])
    expected = 1.0 - np.exp(-np.power((x - 0.5) / 2.0, 1.5))
    expected[0] = 0.0
    assert np.allclose(continuous.weibull_cdf(x, 0.5, 2.0, 1.5), expected)


def test_student_t_cdf_switches_to_normal_above_cutover() -> None:
    z = 1.2
    assert continuous.student_t_cdf(z, 40.0) == pytest.approx(continuous.normal_cdf(z, 0.0, 1.0))
    assert continuous.student_t_cdf(z, 1.0) == pytest.approx(stats.cauchy.cdf(z))
    assert continuous.student_t_cdf(0.0, 5.0) == 0.5


def test_student_t_undefined_quantities() -> None:
    assert continuous.student_t_mean(1.0, 3.0, 1.0) is None
    assert continuous.student_t_mean(2.0, 3.0, 1.0) == 3.0
    assert continuous.student_t_variance(2.0, 0.0, 1.0) is None
    assert continuous.student_t_variance(4.0, 0.0, 2.0) == pytest.approx(8.0)


def test_beta_quantities() -> None:
    assert continuous.beta_mode(0.5, 0.5) is None
    assert continuous.beta_mode(2.0, 4.0) == pytest.approx(0.25)
    assert continuous.beta_mean(2.0, 6.0) == pytest.approx(0.25)
    assert continuous.beta_median(2.0, 6.0) == continuous.beta_mean(2.0, 6.0)
    assert continuous.beta_variance(2.0, 2.0) == pytest.approx(0.05)
    assert continuous.beta_cdf(0.0, 2.0, 2.0) == 0.0
    assert continuous.beta_cdf(1.0, 2.0, 2.0) == 1.0


def test_weibull_quantities() -> None:
    assert continuous.weibull_mean(2.0, 3.0, 1.0) == pytest.approx(5.0)
    # variance ignores the shift
    assert continuous.weibull_variance(2.0, 3.0, 1.0) == pytest.approx(9.0)
    assert continuous.weibull_variance(2.0, 3.0, 1.0) == pytest.approx(
        continuous.weibull_variance(0.0, 3.0, 1.0)
    )
    assert continuous.weibull_median(0.0, 1.0, 1.0) == pytest.approx(math.log(2.0))
    assert continuous.weibull_mode(1.0, 2.0, 0.8) == 1.0


def test_gamma_and_log_normal_quantities() -> None:
    assert continuous.gamma_mean(3.0, 2.0) == 6.0
    assert continuous.gamma_variance(3.0, 2.0) == 12.0
    assert continuous.gamma_mode(3.0, 2.0) == 4.0
    assert continuous.gamma_mode(0.5, 2.0) == 0.0
    assert continuous.log_normal_median(1.0, 0.5) == pytest.approx(math.e)
    assert continuous.log_normal_mean(0.0, 1.0) == pytest.approx(math.exp(0.5))
    assert continuous.log_normal_mode(0.0, 1.0) == pytest.approx(math.exp(-1.0))


def test_degenerate_parameters_do_not_raise() -> None:
    assert isinstance(continuous.weibull_mean(0.0, 1.0, 0.0), float)
    assert math.isnan(continuous.normal_pdf(0.0, 0.0, 0.0))


def test_discrete_mass_matches_scipy() -> None:
    x = np.arange(0.0, 21.0)
    assert np.allclose(discrete.binomial_pdf(x, 20.0, 0.3), stats.binom.pmf(x, 20, 0.3))
    assert np.allclose(discrete.poisson_pdf(x, 4.0), stats.poisson.pmf(x, 4.0))
    assert np.allclose(
        discrete.negative_binomial_pdf(x, 5.0, 0.3), stats.nbinom.pmf(x, 5, 0.7)
    )


def test_poisson_scenario() -> None:
    assert discrete.poisson_pdf(4.0, 4.0) == pytest.approx(0.1954, abs=1e-4)
    assert discrete.poisson_mean(4.0) == 4.0
    assert discrete.POISSON.variance(4.0) == 4.0
    assert discrete.poisson_mode(4.7) == 4.0


def test_binomial_scenario() -> None:
    assert discrete.binomial_mean(20.0, 0.5) == 10.0
    assert discrete.binomial_variance(20.0, 0.5) == 5.0
    assert discrete.binomial_cdf(10.0, 20.0, 0.5) == pytest.approx(0.588, abs=1e-3)
    assert discrete.binomial_mode(20.0, 0.3) == 6.0


def test_binomial_cdf_is_exactly_one_from_trials_on() -> None:
    assert discrete.binomial_cdf(20.0, 20.0, 0.3) == 1.0
    assert discrete.binomial_cdf(35.0, 20.0, 0.3) == 1.0
    assert np.all(discrete.binomial_cdf(np.array([20.0, 21.5]), 20.0, 0.3) == 1.0)


def test_discrete_cdf_is_running_sum_of_mass() -> None:
    for x in (0.0, 3.0, 7.5, 12.0):
        expected = sum(discrete.poisson_pdf(float(i), 3.0) for i in range(int(math.floor(x)) + 1))
        assert discrete.poisson_cdf(x, 3.0) == pytest.approx(expected, abs=1e-9)
    assert discrete.poisson_cdf(-0.5, 3.0) == 0.0
    assert math.isnan(discrete.poisson_cdf(math.nan, 3.0))


def test_negative_binomial_quantities() -> None:
    assert discrete.negative_binomial_mean(20.0, 0.2) == pytest.approx(5.0)
    assert discrete.negative_binomial_variance(20.0, 0.2) == pytest.approx(6.25)
    assert discrete.negative_binomial_mode(20.0, 0.2) == 4.0
    assert discrete.negative_binomial_mode(1.0, 0.2) == 0.0
    assert discrete.negative_binomial_cdf(200.0, 20.0, 0.2) == pytest.approx(1.0, abs=1e-9)


def test_scalar_input_returns_float_and_array_input_returns_array() -> None:
    assert isinstance(continuous.normal_pdf(0.0, 0.0, 1.0), float)
    assert isinstance(discrete.poisson_cdf(2.0, 1.0), float)
    assert isinstance(continuous.gamma_cdf([1.0, 2.0], 2.0, 1.0), np.ndarray)
    assert isinstance(discrete.binomial_pdf([1.0, 2.0], 5.0, 0.5), np.ndarray)


def test_discrete_cdf_beyond_integer_range() -> None:
    assert discrete.poisson_cdf(1e20, 4.0) == pytest.approx(1.0, abs=1e-12)
    assert discrete.poisson_cdf(2.0**63, 4.0) == pytest.approx(1.0, abs=1e-12)
    assert discrete.negative_binomial_cdf(1e20, 20.0, 0.2) == pytest.approx(1.0, abs=1e-12)
    values = discrete.poisson_cdf(np.array([3.0, 1e20]), 4.0)
    assert values[0] == pytest.approx(stats.poisson.cdf(3, 4.0))
    assert values[1] == pytest.approx(1.0, abs=1e-12)


def test_large_counts_stay_finite() -> None:
    assert discrete.poisson_pdf(200.0, 100.0) == pytest.approx(
        stats.poisson.pmf(200, 100.0), rel=1e-8
    )
    mass = discrete.binomial_pdf(1000.0, 2000.0, 0.5)
    assert 0 < mass <= 1
    assert mass == pytest.approx(stats.binom.pmf(1000, 2000, 0.5), rel=1e-8)
    assert discrete.negative_binomial_pdf(500.0, 200.0, 0.7) == pytest.approx(
        stats.nbinom.pmf(500, 200, 0.3), rel=1e-8
    )
    assert discrete.poisson_cdf(150.0, 100.0) == pytest.approx(
        stats.poisson.cdf(150, 100.0), abs=1e-9
    )


def test_student_t_density_for_many_degrees_of_freedom() -> None:
    for nu in (400.0, 5000.0):
        value = continuous.student_t_pdf(0.0, nu)
        assert math.isfinite(value)
        assert value == pytest.approx(stats.t.pdf(0.0, nu), rel=1e-8)


def test_chi_squared_cdf_collapses_for_large_series_argument() -> None:
    # chi-squared(3, 0.1) is gamma(1.5, 0.2): x / 0.2 passes the series' working range
    values = continuous.chi_squared_cdf(np.array([5.0, 10.0, 40.0]), 3.0, 0.1)
    assert values[0] == pytest.approx(1.0, abs=1e-8)
    assert values[1] == pytest.approx(1.0, abs=1e-8)
    assert values[2] < 1e-10
