"""
Link functions and parameter transforms.

Two kinds of maps live here.

The log generalized-logistic link

    g_θ(z) = log(1 + θ(e^z - 1)),   θ > 0, z >= 0

turns a baseline cumulative hazard into a proportional-odds one. It fixes
0, is increasing, satisfies g_1(z) = z, and its inverse is the same link
with the reciprocal parameter: g_θ⁻¹ = g_{1/θ}.

Parameter transforms map a constrained parameter onto the real line so
that unconstrained optimizers can search freely. Each transform defines:
- transform(x) → y  (constrained → working scale)
- inverse(y) → x   (working scale → constrained)
- d inverse / dy   (for delta-method standard errors)
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np
from numpy.typing import ArrayLike, NDArray

from apgwsurv.core.exceptions import DomainError
from apgwsurv.core.settings import LINK_BRANCH_POINT
from apgwsurv.core.validation import check_nonnegative, check_positive


# =====================================================================
# Log generalized-logistic link
# =====================================================================

def log_generalized_logistic(z: ArrayLike, theta) -> NDArray:
    """g_θ(z) = log(1 + θ(e^z - 1)).

    Evaluated as log1p(θ·expm1(z)) for small z and as
    z + log(θ + (1 - θ)e^(-z)) for large z, so neither branch overflows.
    """
    z = check_nonnegative(z, "z")
    theta = check_positive(theta, "theta")
    with np.errstate(over="ignore", invalid="ignore"):
        small = np.log1p(theta * np.expm1(np.minimum(z, LINK_BRANCH_POINT)))
        large = z + np.log(theta + (1.0 - theta) * np.exp(-z))
    return np.where(z > LINK_BRANCH_POINT, large, small)[()]


def inverse_log_generalized_logistic(y: ArrayLike, theta) -> NDArray:
    """g_θ⁻¹(y) = g_{1/θ}(y)."""
    theta = check_positive(theta, "theta")
    return log_generalized_logistic(y, 1.0 / theta)


def log_generalized_logistic_derivative(z: ArrayLike, theta) -> NDArray:
    """dg_θ/dz = θe^z / (1 + θ(e^z - 1)) = θ / (θ + (1 - θ)e^(-z))."""
    z = check_nonnegative(z, "z")
    theta = check_positive(theta, "theta")
    return (theta / (theta + (1.0 - theta) * np.exp(-z)))[()]


def log_log_generalized_logistic_derivative(z: ArrayLike, theta) -> NDArray:
    """log(dg_θ/dz), used by log-likelihood evaluations."""
    z = check_nonnegative(z, "z")
    theta = check_positive(theta, "theta")
    return (np.log(theta) - np.log(theta + (1.0 - theta) * np.exp(-z)))[()]


# =====================================================================
# Parameter transforms
# =====================================================================

class ParameterTransform(ABC):
    """Bijection between a parameter's domain and the real line."""

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @property
    @abstractmethod
    def lower(self) -> float:
        """Open lower bound of the parameter domain."""
        ...

    @abstractmethod
    def transform(self, x: ArrayLike) -> NDArray:
        """Constrained value → working (unconstrained) value."""
        ...

    @abstractmethod
    def inverse(self, y: ArrayLike) -> NDArray:
        """Working value → constrained value."""
        ...

    @abstractmethod
    def inverse_derivative(self, y: ArrayLike) -> NDArray:
        """d inverse(y) / dy."""
        ...

    def contains(self, x: ArrayLike) -> bool:
        """True when every element of x lies inside the domain."""
        return bool(np.all(np.asarray(x, dtype=np.float64) > self.lower))

    def _check_domain(self, x: ArrayLike) -> NDArray:
        arr = np.asarray(x, dtype=np.float64)
        if not self.contains(arr):
            bad = arr[~(arr > self.lower)].flat[0] if arr.ndim else arr
            raise DomainError(
                f"{self.name} transform requires x > {self.lower:g}, got {float(bad)!r}",
                value=float(bad),
                bound=f"> {self.lower:g}",
            )
        return arr

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class LogTransform(ParameterTransform):
    """y = log(x) on x > 0. Used for every strictly positive parameter."""

    @property
    def name(self) -> str:
        return 'log'

    @property
    def lower(self) -> float:
        return 0.0

    def transform(self, x: ArrayLike) -> NDArray:
        return np.log(self._check_domain(x))[()]

    def inverse(self, y: ArrayLike) -> NDArray:
        with np.errstate(over="ignore"):
            return np.exp(np.asarray(y, dtype=np.float64))[()]

    def inverse_derivative(self, y: ArrayLike) -> NDArray:
        return self.inverse(y)


class ShiftedLogTransform(ParameterTransform):
    """y = log(x + 1) on x > -1. Used for κ."""

    @property
    def name(self) -> str:
        return 'log(x+1)'

    @property
    def lower(self) -> float:
        return -1.0

    def transform(self, x: ArrayLike) -> NDArray:
        return np.log1p(self._check_domain(x))[()]

    def inverse(self, y: ArrayLike) -> NDArray:
        with np.errstate(over="ignore"):
            return np.expm1(np.asarray(y, dtype=np.float64))[()]

    def inverse_derivative(self, y: ArrayLike) -> NDArray:
        with np.errstate(over="ignore"):
            return np.exp(np.asarray(y, dtype=np.float64))[()]


LOG = LogTransform()
SHIFTED_LOG = ShiftedLogTransform()
