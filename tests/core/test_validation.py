"""
Tests for input validation utilities.

Validates core/validation.py:
    - check_array: conversion, dtype coercion, object rejection
    - check_finite / check_1d / check_2d / check_consistent_length
    - check_min_samples
    - check_greater_than / check_positive / check_nonnegative: DomainError
      with parameter name, offending value and bound
"""

import numpy as np
import pytest

from apgwsurv.core.exceptions import DimensionError, DomainError, ValidationError
from apgwsurv.core.validation import (
    check_1d,
    check_2d,
    check_array,
    check_consistent_length,
    check_finite,
    check_greater_than,
    check_min_samples,
    check_nonnegative,
    check_positive,
)


# ═══════════════════════════════════════════════════════════════════════
# Array checks
# ═══════════════════════════════════════════════════════════════════════


class TestCheckArray:
    """check_array converts to ndarray and rejects non-numeric data."""

    def test_list_to_float_array(self):
        result = check_array([1, 2, 3], "time")
        assert result.dtype == np.float64

    def test_bool_to_float(self):
        result = check_array([True, False], "event")
        np.testing.assert_array_equal(result, [1.0, 0.0])

    def test_float32_preserved(self):
        result = check_array(np.array([1.0], dtype=np.float32), "x")
        assert result.dtype == np.float32

    def test_object_rejected(self):
        with pytest.raises(ValidationError, match="object dtype"):
            check_array([1, "a", None], "time")

    def test_string_rejected(self):
        with pytest.raises(ValidationError, match="non-numeric"):
            check_array(np.array(["a", "b"]), "time")


class TestShapeChecks:
    """Finite, dimensionality and length checks."""

    def test_finite_passes(self):
        check_finite(np.array([1.0, 2.0]), "x")

    def test_nan_rejected(self):
        with pytest.raises(ValidationError, match="1 NaN"):
            check_finite(np.array([1.0, np.nan]), "x")

    def test_check_1d_rejects_2d(self):
        with pytest.raises(DimensionError, match="expected 1D"):
            check_1d(np.zeros((2, 2)), "time")

    def test_check_2d_rejects_1d(self):
        with pytest.raises(DimensionError, match="expected 2D"):
            check_2d(np.zeros(3), "X")

    def test_consistent_length(self):
        check_consistent_length(np.zeros(3), np.zeros((3, 2)), names=("t", "X"))

    def test_inconsistent_length(self):
        with pytest.raises(DimensionError, match="t=3, d=4"):
            check_consistent_length(np.zeros(3), np.zeros(4), names=("t", "d"))

    def test_names_mismatch(self):
        with pytest.raises(ValueError):
            check_consistent_length(np.zeros(3), names=("a", "b"))

    def test_min_samples(self):
        with pytest.raises(ValidationError, match="at least 1"):
            check_min_samples(np.array([]), 1, "time")


# ═══════════════════════════════════════════════════════════════════════
# Domain checks
# ═══════════════════════════════════════════════════════════════════════


class TestDomainChecks:
    """Parameter domain checks raise DomainError with diagnostics."""

    def test_greater_than_returns_array(self):
        out = check_greater_than(0.5, -1.0, "kappa")
        assert isinstance(out, np.ndarray)
        assert out.ndim == 0
        assert float(out) == 0.5

    def test_greater_than_boundary_rejected(self):
        with pytest.raises(DomainError) as info:
            check_greater_than(-1.0, -1.0, "kappa")
        assert info.value.parameter == "kappa"
        assert info.value.value == -1.0
        assert info.value.bound == "> -1"

    def test_reports_first_violation(self):
        with pytest.raises(DomainError) as info:
            check_positive([1.0, -2.0, -3.0], "phi")
        assert info.value.value == -2.0

    def test_nan_rejected(self):
        with pytest.raises(DomainError):
            check_positive(np.nan, "lam")

    def test_inf_accepted(self):
        assert np.isinf(check_positive(np.inf, "lam"))

    def test_nonnegative_accepts_zero(self):
        out = check_nonnegative([0.0, 1.0], "t")
        np.testing.assert_array_equal(out, [0.0, 1.0])

    def test_nonnegative_rejects_negative(self):
        with pytest.raises(DomainError, match="t must be >= 0"):
            check_nonnegative(-0.1, "t")

    def test_non_numeric_is_domain_error(self):
        with pytest.raises(DomainError):
            check_positive("abc", "phi")

    def test_domain_error_caught_as_validation_error(self):
        with pytest.raises(ValidationError):
            check_positive(0.0, "gamma")
