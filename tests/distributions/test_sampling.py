"""
Tests for inversion samplers.

Validates:
    - Samples follow 1 - exp(-H(t)) (Kolmogorov-Smirnov) for the base
      family and every variant
    - Kernel density of a large sample tracks h(t) exp(-H(t))
    - Defective distributions return +inf for the cured fraction
    - Seed handling and argument validation
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal
from scipy import stats

from apgwsurv.core.exceptions import (
    ConfigurationError,
    DimensionError,
    DomainError,
    ValidationError,
)
from apgwsurv.distributions import apgw
from apgwsurv.distributions.sampling import (
    sample,
    sample_apgw,
    sample_frailty,
    sample_reverse_tilt,
    sample_scale,
    sample_tilt,
)
from apgwsurv.distributions.variants import resolve_variant


BASE = (1.0, 2.0, 1.5, 0.5)


# ═══════════════════════════════════════════════════════════════════════
# Distributional checks
# ═══════════════════════════════════════════════════════════════════════


class TestBaseSampler:
    """sample_apgw draws from the APGW distribution."""

    PARAMS = (1.0, 5.0, 2.0, -0.2)

    def test_kolmogorov_smirnov(self):
        t = sample_apgw(5000, *self.PARAMS, seed=42)
        assert t.shape == (5000,)
        assert np.all(np.isfinite(t))
        cdf = lambda x: -np.expm1(-apgw.cumulative_hazard(x, *self.PARAMS))
        assert stats.kstest(t, cdf).pvalue > 1e-3

    def test_kernel_density_matches_density(self):
        t = sample_apgw(5000, *self.PARAMS, seed=42)
        kde = stats.gaussian_kde(t)
        grid = np.quantile(t, np.linspace(0.1, 0.9, 9))
        assert_allclose(kde(grid), apgw.density(grid, *self.PARAMS), atol=0.2)

    def test_empirical_cumulative_hazard(self):
        t = np.sort(sample_apgw(5000, *self.PARAMS, seed=7))
        q = np.quantile(t, [0.25, 0.5, 0.75, 0.9])
        empirical = -np.log1p(-np.searchsorted(t, q, side='right') / len(t))
        assert_allclose(empirical, apgw.cumulative_hazard(q, *self.PARAMS),
                        rtol=0.1)

    def test_defective_cure_fraction(self, defective_params):
        # P(T = inf) = exp(-sup H) = exp(-0.5)
        t = sample_apgw(4000, *defective_params, seed=3)
        cured = np.mean(np.isinf(t))
        assert abs(cured - np.exp(-0.5)) < 0.03
        assert np.all(t >= 0)


class TestVariantSamplers:
    """Each variant sampler draws from its own cumulative hazard."""

    @pytest.mark.parametrize("name,sampler", [
        ("scale", sample_scale),
        ("frailty", sample_frailty),
        ("tilt", sample_tilt),
        ("reverse_tilt", sample_reverse_tilt),
    ])
    @pytest.mark.parametrize("theta", [0.4, 2.0])
    def test_kolmogorov_smirnov(self, name, sampler, theta):
        variant = resolve_variant(name)
        t = sampler(4000, *BASE, theta, seed=11)
        cdf = lambda x: -np.expm1(-variant.cumulative_hazard(x, *BASE, theta))
        assert stats.kstest(t, cdf).pvalue > 1e-3

    def test_tilt_and_reverse_tilt_differ(self):
        a = sample_tilt(4000, *BASE, 3.0, seed=5)
        b = sample_reverse_tilt(4000, *BASE, 3.0, seed=6)
        assert stats.ks_2samp(a, b).pvalue < 1e-3

    def test_theta_one_reduces_to_base(self):
        base = sample_apgw(100, *BASE, seed=9)
        for sampler in (sample_scale, sample_frailty, sample_tilt, sample_reverse_tilt):
            assert_allclose(sampler(100, *BASE, 1.0, seed=9), base, rtol=1e-12)

    def test_per_subject_parameters(self):
        lam = np.repeat([0.5, 4.0], 2000)
        t = sample_apgw(4000, 1.0, lam, 1.0, 1.0, seed=2)
        # exponential with rate lam
        assert_allclose(t[:2000].mean(), 2.0, rtol=0.1)
        assert_allclose(t[2000:].mean(), 0.25, rtol=0.1)


# ═══════════════════════════════════════════════════════════════════════
# Dispatcher
# ═══════════════════════════════════════════════════════════════════════


class TestSampleDispatch:
    """sample() routes names to samplers."""

    def test_base(self):
        assert_array_equal(sample("base", 50, *BASE, seed=1),
                           sample_apgw(50, *BASE, seed=1))

    @pytest.mark.parametrize("name,sampler", [
        ("aft", sample_scale),
        ("ph", sample_frailty),
        ("po", sample_tilt),
        ("pgt", sample_reverse_tilt),
    ])
    def test_aliases(self, name, sampler):
        assert_array_equal(sample(name, 50, *BASE, 2.0, seed=1),
                           sampler(50, *BASE, 2.0, seed=1))

    def test_theta_required_for_variant(self):
        with pytest.raises(ValidationError, match="theta is required"):
            sample("tilt", 10, *BASE)

    def test_theta_rejected_for_base(self):
        with pytest.raises(ValidationError, match="not a parameter"):
            sample("apgw", 10, *BASE, 2.0)

    def test_unknown_variant(self):
        with pytest.raises(ConfigurationError):
            sample("gompertz", 10, *BASE, 2.0)


# ═══════════════════════════════════════════════════════════════════════
# Seeds and validation
# ═══════════════════════════════════════════════════════════════════════


class TestValidation:
    """Arguments are checked before any random numbers are drawn."""

    def test_same_seed_same_sample(self):
        assert_array_equal(sample_apgw(20, *BASE, seed=123),
                           sample_apgw(20, *BASE, seed=123))

    def test_generator_is_advanced(self, rng):
        a = sample_apgw(20, *BASE, seed=rng)
        b = sample_apgw(20, *BASE, seed=rng)
        assert not np.array_equal(a, b)

    def test_zero_draws(self):
        t = sample_apgw(0, *BASE, seed=1)
        assert t.shape == (0,)

    @pytest.mark.parametrize("n", [-1, 2.5, True, "10"])
    def test_invalid_n(self, n):
        with pytest.raises(ValidationError):
            sample_apgw(n, *BASE)

    def test_invalid_kappa(self):
        with pytest.raises(DomainError) as info:
            sample_apgw(10, 1.0, 1.0, 1.0, -1.0)
        assert info.value.parameter == "kappa"

    def test_invalid_theta(self):
        with pytest.raises(DomainError):
            sample_tilt(10, *BASE, -2.0)

    def test_parameter_shape_mismatch(self):
        with pytest.raises(DimensionError, match="lam"):
            sample_apgw(10, 1.0, np.ones(11), 1.0, 1.0)

    def test_parameter_shape_must_not_enlarge(self):
        with pytest.raises(DimensionError):
            sample_apgw(10, 1.0, np.ones((2, 10)), 1.0, 1.0)
