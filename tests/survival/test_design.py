"""
Tests for SurvivalDesign input validation.
"""

import numpy as np
import pytest
from numpy.testing import assert_array_equal

from apgwsurv.core.exceptions import DimensionError, ValidationError
from apgwsurv.survival.design import SurvivalDesign


class TestForSurvival:
    """SurvivalDesign.for_survival() validates and normalizes inputs."""

    def test_defaults(self):
        d = SurvivalDesign.for_survival([1, 2, 3])
        assert d.time.dtype == np.float64
        assert_array_equal(d.event, [1.0, 1.0, 1.0])
        assert d.X is None
        assert d.covariate_names == ()
        assert d.n == 3
        assert d.p == 0
        assert d.n_events == 3

    def test_boolean_event(self):
        d = SurvivalDesign.for_survival([1.0, 2.0], [True, False])
        assert_array_equal(d.event, [1.0, 0.0])
        assert d.n_events == 1

    def test_one_dimensional_covariate(self):
        d = SurvivalDesign.for_survival([1.0, 2.0, 3.0], None, [0, 1, 0])
        assert d.X.shape == (3, 1)
        assert d.covariate_names == ("x0",)

    def test_covariate_names(self):
        X = np.zeros((3, 2))
        d = SurvivalDesign.for_survival([1.0, 2.0, 3.0], None, X, names=["age", "sex"])
        assert d.covariate_names == ("age", "sex")
        assert d.p == 2

    @pytest.mark.parametrize("time", [[0.0, 1.0], [-1.0, 2.0]])
    def test_nonpositive_time(self, time):
        with pytest.raises(ValidationError, match="strictly positive"):
            SurvivalDesign.for_survival(time)

    def test_infinite_time(self):
        with pytest.raises(ValidationError, match="non-finite"):
            SurvivalDesign.for_survival([1.0, np.inf])

    def test_empty(self):
        with pytest.raises(ValidationError):
            SurvivalDesign.for_survival([])

    def test_event_values(self):
        with pytest.raises(ValidationError, match="only 0 and 1"):
            SurvivalDesign.for_survival([1.0, 2.0], [1, 2])

    def test_event_length(self):
        with pytest.raises(DimensionError):
            SurvivalDesign.for_survival([1.0, 2.0], [1, 0, 1])

    def test_covariate_length(self):
        with pytest.raises(DimensionError):
            SurvivalDesign.for_survival([1.0, 2.0], None, np.zeros((3, 1)))

    def test_covariate_nan(self):
        with pytest.raises(ValidationError, match="non-finite"):
            SurvivalDesign.for_survival([1.0, 2.0], None, [0.0, np.nan])

    def test_names_length(self):
        with pytest.raises(ValidationError, match="names must have 2"):
            SurvivalDesign.for_survival([1.0, 2.0], None, np.zeros((2, 2)), names=["a"])

    def test_names_without_covariates(self):
        with pytest.raises(ValidationError, match="without covariates"):
            SurvivalDesign.for_survival([1.0, 2.0], names=["a"])

    def test_three_dimensional_covariates(self):
        with pytest.raises(ValidationError, match="1D or 2D"):
            SurvivalDesign.for_survival([1.0, 2.0], None, np.zeros((2, 1, 1)))

    def test_frozen(self):
        d = SurvivalDesign.for_survival([1.0])
        with pytest.raises(AttributeError):
            d.time = np.array([2.0])
