"""
Tests for fit(): maximum likelihood estimation of APGW families.

Closed-form checks use the exponential submodel (φ = γ = κ = 1), where
the MLE of the rate is d / Σt and the observed information for log λ
is d. Larger models are checked for parameter recovery on simulated data
with tolerances of several standard errors.
"""

import warnings

import numpy as np
import pytest
from numpy.testing import assert_allclose

from apgwsurv.core.exceptions import (
    ConfigurationError,
    DimensionError,
    ValidationError,
)
from apgwsurv.survival import ParametricSolution, fit, simulate


EXPONENTIAL_FIXED = {"phi": 1.0, "gamma": 1.0, "kappa": 1.0}


@pytest.fixture(scope="module")
def exponential_data():
    return simulate("apgw", 2000, {"phi": 1.0, "lam": 2.0, "gamma": 1.0, "kappa": 1.0},
                    censor_rate=0.5, seed=1)


@pytest.fixture(scope="module")
def exponential_fit(exponential_data):
    return fit(exponential_data.time, exponential_data.event,
               fixed=EXPONENTIAL_FIXED)


# ═══════════════════════════════════════════════════════════════════════
# Closed-form exponential
# ═══════════════════════════════════════════════════════════════════════


class TestExponentialClosedForm:
    """One free parameter with an explicit MLE."""

    def test_rate(self, exponential_data, exponential_fit):
        d = exponential_data.event.sum()
        total = exponential_data.time.sum()
        assert isinstance(exponential_fit, ParametricSolution)
        assert exponential_fit.converged
        assert_allclose(exponential_fit.parameters["lam"], d / total, rtol=1e-5)

    def test_fixed_parameters_reported(self, exponential_fit):
        p = exponential_fit.parameters
        assert p["phi"] == 1.0
        assert p["gamma"] == 1.0
        assert p["kappa"] == 1.0
        assert exponential_fit.fixed == (True, False, True, True)
        assert np.isnan(exponential_fit.standard_errors[0])
        assert exponential_fit.n_free == 1

    def test_standard_error(self, exponential_data, exponential_fit):
        d = exponential_data.event.sum()
        lam = exponential_fit.parameters["lam"]
        assert_allclose(exponential_fit.standard_errors[1], lam / np.sqrt(d), rtol=1e-3)
        assert_allclose(exponential_fit.cov, [[1.0 / d]], rtol=1e-3)

    def test_confidence_interval(self, exponential_data, exponential_fit):
        d = exponential_data.event.sum()
        lam = exponential_fit.parameters["lam"]
        half = 1.959963984540054 / np.sqrt(d)
        assert_allclose(exponential_fit.ci_lower[1], lam * np.exp(-half), rtol=1e-3)
        assert_allclose(exponential_fit.ci_upper[1], lam * np.exp(half), rtol=1e-3)

    def test_loglik_and_information_criteria(self, exponential_data, exponential_fit):
        d = exponential_data.event.sum()
        total = exponential_data.time.sum()
        lam = d / total
        loglik = d * np.log(lam) - lam * total
        assert_allclose(exponential_fit.loglik, loglik, rtol=1e-9)
        assert_allclose(exponential_fit.aic, -2 * loglik + 2, rtol=1e-9)
        assert_allclose(exponential_fit.bic, -2 * loglik + np.log(2000), rtol=1e-9)

    def test_fitted_curves(self, exponential_fit):
        lam = exponential_fit.parameters["lam"]
        t = np.array([0.5, 1.0, 3.0])
        assert_allclose(exponential_fit.hazard(t), lam, rtol=1e-10)
        assert_allclose(exponential_fit.cumulative_hazard(t), lam * t, rtol=1e-10)
        assert_allclose(exponential_fit.survival(t), np.exp(-lam * t), rtol=1e-10)
        assert_allclose(exponential_fit.density(t), lam * np.exp(-lam * t), rtol=1e-10)

    def test_result_metadata(self, exponential_fit):
        assert exponential_fit.backend_name == "cpu_mle"
        assert exponential_fit.info["location"] == "lam"
        assert exponential_fit.info["method"] == "Nelder-Mead"
        assert exponential_fit.info["polish_method"] == "BFGS"
        for key in ("initial_values", "optimization", "hessian", "total_seconds"):
            assert key in exponential_fit.timing
        assert exponential_fit.n_observations == 2000

    def test_no_polish(self, exponential_data):
        sol = fit(exponential_data.time, exponential_data.event,
                  fixed=EXPONENTIAL_FIXED, polish=False)
        assert sol.info["polish_method"] is None
        assert "polish" not in sol.timing
        d = exponential_data.event.sum()
        assert_allclose(sol.parameters["lam"], d / exponential_data.time.sum(), rtol=1e-5)


# ═══════════════════════════════════════════════════════════════════════
# Covariates
# ═══════════════════════════════════════════════════════════════════════


class TestCovariates:
    """Covariates act on the location parameter's working scale."""

    @pytest.fixture(scope="class")
    def grouped(self):
        n = 3000
        X = np.repeat([0.0, 1.0], n // 2)
        data = simulate("apgw", n, {"phi": 1.0, "lam": 1.0, "gamma": 1.0, "kappa": 1.0},
                        X=X, beta=[np.log(2.0)], censor_rate=0.3, seed=12)
        sol = fit(data.time, data.event, X, fixed=EXPONENTIAL_FIXED, names=["treated"])
        return data, sol

    def test_closed_form(self, grouped):
        data, sol = grouped
        g = data.X[:, 0] == 1
        rate0 = data.event[~g].sum() / data.time[~g].sum()
        rate1 = data.event[g].sum() / data.time[g].sum()
        assert_allclose(sol.parameters["lam"], rate0, rtol=1e-4)
        assert_allclose(sol.coefficients, [np.log(rate1 / rate0)], rtol=1e-4, atol=1e-6)

    def test_recovers_effect(self, grouped):
        _, sol = grouped
        assert abs(sol.coefficients[0] - np.log(2.0)) < 4 * sol.coefficient_se[0]
        assert sol.n_free == 2
        assert sol.covariate_names == ("treated",)

    def test_hazard_at_covariate(self, grouped):
        _, sol = grouped
        lam = sol.parameters["lam"]
        assert_allclose(sol.hazard(1.0, x=[1.0]), lam * np.exp(sol.coefficients[0]),
                        rtol=1e-10)
        assert_allclose(sol.hazard(1.0, x=[0.0]), lam, rtol=1e-10)
        both = sol.cumulative_hazard(2.0, x=[[0.0], [1.0]])
        assert both.shape == (2,)

    def test_bad_covariate_shape(self, grouped):
        _, sol = grouped
        with pytest.raises(DimensionError):
            sol.hazard(1.0, x=[1.0, 2.0])

    def test_covariate_on_model_without_covariates(self, exponential_fit):
        with pytest.raises(ValidationError, match="without covariates"):
            exponential_fit.hazard(1.0, x=[1.0])

    def test_summary(self, grouped):
        _, sol = grouped
        text = sol.summary()
        assert "apgw" in text
        assert "treated" in text
        assert "(fixed)" in text
        assert "Covariates act on lam through its log scale" in text
        assert "AIC" in text


# ═══════════════════════════════════════════════════════════════════════
# Parameter recovery
# ═══════════════════════════════════════════════════════════════════════


class TestRecovery:
    """Estimates land near the generating values on large samples."""

    def test_weibull(self):
        data = simulate("apgw", 3000, {"phi": 1.0, "lam": 0.5, "gamma": 1.8, "kappa": 1.0},
                        censor_rate=0.2, seed=21)
        sol = fit(data.time, data.event, fixed={"phi": 1.0, "kappa": 1.0})
        assert sol.converged
        assert_allclose(sol.parameters["lam"], 0.5, rtol=0.15)
        assert_allclose(sol.parameters["gamma"], 1.8, rtol=0.1)
        assert np.all(sol.ci_lower[1:3] < sol.estimates[1:3])
        assert np.all(sol.ci_upper[1:3] > sol.estimates[1:3])

    @pytest.mark.filterwarnings("ignore::RuntimeWarning")
    def test_full_model_improves_on_nested_weibull(self):
        data = simulate("apgw", 2000, {"phi": 1.0, "lam": 5.0, "gamma": 2.0, "kappa": -0.2},
                        censor_time=3.0, seed=22)
        weibull = fit(data.time, data.event, fixed={"phi": 1.0, "kappa": 1.0})
        full = fit(data.time, data.event, init={**weibull.parameters})
        assert full.loglik >= weibull.loglik - 1e-8
        assert full.n_free == 4
        assert full.aic == pytest.approx(-2 * full.loglik + 8)

    def test_tilt_theta(self):
        base = {"phi": 1.0, "lam": 2.0, "gamma": 1.5, "kappa": 0.5}
        data = simulate("po", 3000, {**base, "theta": 3.0}, censor_rate=0.2, seed=23)
        sol = fit(data.time, data.event, family="apgw_tilt", fixed=base)
        assert sol.family.name == "apgw_tilt"
        assert_allclose(sol.parameters["theta"], 3.0, rtol=0.2)

    def test_reverse_tilt_theta(self):
        base = {"phi": 1.0, "lam": 2.0, "gamma": 1.5, "kappa": 0.5}
        data = simulate("pgt", 3000, {**base, "theta": 0.5}, censor_rate=0.2, seed=24)
        sol = fit(data.time, data.event, family="pgt", fixed=base)
        assert_allclose(sol.parameters["theta"], 0.5, rtol=0.2)


# ═══════════════════════════════════════════════════════════════════════
# Options, warnings and errors
# ═══════════════════════════════════════════════════════════════════════


class TestFitOptions:
    """Argument validation and diagnostics."""

    def test_non_convergence_warns(self, exponential_data):
        with pytest.warns(RuntimeWarning, match="did not converge"):
            sol = fit(exponential_data.time, exponential_data.event, max_iter=1)
        assert not sol.converged
        assert "optimizer did not converge" in sol.summary()

    def test_verbose(self, exponential_data, capsys):
        fit(exponential_data.time, exponential_data.event,
            fixed=EXPONENTIAL_FIXED, verbose=True)
        out = capsys.readouterr().out
        assert "fit: family=apgw" in out
        assert "loglik=" in out

    def test_converged_fit_is_silent(self, exponential_data):
        with warnings.catch_warnings():
            warnings.simplefilter("error", RuntimeWarning)
            fit(exponential_data.time, exponential_data.event, fixed=EXPONENTIAL_FIXED)

    def test_all_fixed(self):
        with pytest.raises(ValidationError, match="nothing to estimate"):
            fit([1.0, 2.0], fixed={"phi": 1, "lam": 1, "gamma": 1, "kappa": 1})

    def test_unknown_fixed_parameter(self):
        with pytest.raises(ValidationError, match="no parameter 'theta'"):
            fit([1.0, 2.0], fixed={"theta": 1.0})

    def test_unknown_family(self):
        with pytest.raises(ConfigurationError):
            fit([1.0, 2.0], family="lognormal")

    @pytest.mark.parametrize("conf_level", [0.0, 1.0])
    def test_invalid_conf_level(self, conf_level):
        with pytest.raises(ValidationError):
            fit([1.0, 2.0], conf_level=conf_level)

    def test_invalid_max_iter(self):
        with pytest.raises(ValidationError, match="max_iter"):
            fit([1.0, 2.0], max_iter=0)

    def test_undefined_start(self):
        with pytest.raises(ValidationError, match="undefined at the starting values"):
            fit([1.0, 1e3], init={"gamma": 1e4})

    def test_repr(self, exponential_fit):
        assert repr(exponential_fit).startswith("ParametricSolution(family='apgw'")
