"""
Additive Power Generalized Weibull (APGW) hazard family.

With u = (φt)^γ the family is defined by its hazard and cumulative hazard

    h(t) = λ γ φ^γ t^(γ-1) (1 + u/(κ+1))^(κ-1)
    H(t) = λ (κ+1)/κ · ((1 + u/(κ+1))^κ - 1)

for φ, λ, γ > 0 and κ > -1. κ = 1 gives the Weibull hazard λ(φt)^γ,
κ = 1 with γ = 1 the exponential with rate λφ, and κ → 0 the limit
λ·log(1 + u). For -1 < κ < 0 the cumulative hazard is bounded by
λ(κ+1)/(-κ), so the distribution is defective (a cure fraction
exp(-sup H) never experiences the event).

Evaluation policy:
    - everything is computed on the log scale, with
      log(1 + u/(κ+1)) = logaddexp(0, γ log(φt) - log(κ+1)), so large φt
      does not overflow before the final exponentiation
    - (1+x)^κ - 1 is evaluated as expm1(κ log1p(x)), accurate for every
      non-zero κ however small; an exact κ == 0 takes the limiting
      branch λ log1p(u)
    - parameters outside their domain raise DomainError, in-domain
      evaluations that still overflow at t > 0 raise
      NumericalInstabilityError; nothing is clamped or coerced

All functions broadcast over t and every parameter. 0-d inputs give
numpy scalars back.

References:
    Dimitrakopoulou, T., Adamidis, K., & Loukas, S. (2007). A lifetime
        distribution with an upside-down bathtub-shaped hazard function.
        IEEE Transactions on Reliability, 56(2), 308-311.
    Burke, K., & MacKenzie, G. (2017). Multi-parameter regression
        survival modeling. Biometrics, 73(2), 678-686.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray

from apgwsurv.core.exceptions import NumericalInstabilityError
from apgwsurv.core.settings import KAPPA_ZERO
from apgwsurv.core.validation import (
    check_greater_than,
    check_nonnegative,
    check_positive,
)

__all__ = [
    "check_parameters",
    "raise_if_nonfinite",
    "log_hazard",
    "hazard",
    "cumulative_hazard",
    "inverse_cumulative_hazard",
    "cumulative_hazard_supremum",
    "survival",
    "density",
]


def check_parameters(phi, lam, gamma, kappa) -> tuple[NDArray, NDArray, NDArray, NDArray]:
    """Validate APGW shape parameters and return them as float arrays.

    Raises
    ------
    DomainError
        If φ, λ or γ is not strictly positive, or κ <= -1.
    """
    return (
        check_positive(phi, "phi"),
        check_positive(lam, "lam"),
        check_positive(gamma, "gamma"),
        check_greater_than(kappa, -1.0, "kappa"),
    )


def raise_if_nonfinite(values: NDArray, where: NDArray, quantity: str) -> None:
    bad = ~np.isfinite(values) & where
    if np.any(bad):
        n_bad = int(np.sum(bad))
        raise NumericalInstabilityError(
            f"{quantity}: {n_bad} non-finite value(s) at t > 0; "
            f"parameters are in-domain but the evaluation overflowed",
            quantity=quantity,
            n_nonfinite=n_bad,
        )


def _log1p_ratio(t, phi, gamma, kappa) -> NDArray:
    """log(1 + (φt)^γ/(κ+1)), finite for every finite t."""
    with np.errstate(divide="ignore"):
        log_u = gamma * np.log(phi * t)
    return np.logaddexp(0.0, log_u - np.log1p(kappa))


def _expm1_over_kappa(a: NDArray, kappa: NDArray) -> NDArray:
    """expm1(κ·a)/κ, replaced by its limit a at κ == 0."""
    at_zero = kappa == KAPPA_ZERO
    safe_kappa = np.where(at_zero, 1.0, kappa)
    with np.errstate(over="ignore"):
        general = np.expm1(safe_kappa * a) / safe_kappa
    return np.where(at_zero, a, general)


def _log_expm1(a: NDArray) -> NDArray:
    """log(e^a - 1) for a >= 0 without overflow for large a."""
    with np.errstate(divide="ignore", over="ignore", invalid="ignore"):
        small = np.log(np.expm1(np.minimum(a, 30.0)))
        large = a + np.log1p(-np.exp(-a))
    return np.where(a > 30.0, large, small)


def log_hazard(t: ArrayLike, phi, lam, gamma, kappa) -> NDArray:
    """Log hazard log h(t).

    Equal to +inf at t = 0 when γ < 1 and -inf at t = 0 when γ > 1.
    """
    t = check_nonnegative(t, "t")
    phi, lam, gamma, kappa = check_parameters(phi, lam, gamma, kappa)

    with np.errstate(divide="ignore", invalid="ignore"):
        log_phit = np.log(phi * t)
        power_term = np.where(gamma == 1.0, 0.0, (gamma - 1.0) * log_phit)
    out = (
        np.log(lam) + np.log(gamma) + np.log(phi)
        + power_term
        + (kappa - 1.0) * _log1p_ratio(t, phi, gamma, kappa)
    )
    raise_if_nonfinite(out, t > 0, "log_hazard")
    return out[()]


def hazard(t: ArrayLike, phi, lam, gamma, kappa) -> NDArray:
    """Hazard h(t) = λγφ^γ t^(γ-1) (1 + (φt)^γ/(κ+1))^(κ-1)."""
    log_h = log_hazard(t, phi, lam, gamma, kappa)
    with np.errstate(over="ignore"):
        out = np.exp(log_h)
    raise_if_nonfinite(np.asarray(out), np.asarray(t) > 0, "hazard")
    return out


def cumulative_hazard(t: ArrayLike, phi, lam, gamma, kappa) -> NDArray:
    """Cumulative hazard H(t) = λ(κ+1)/κ ((1 + (φt)^γ/(κ+1))^κ - 1).

    H(0) = 0 and H is non-decreasing in t.
    """
    t = check_nonnegative(t, "t")
    phi, lam, gamma, kappa = check_parameters(phi, lam, gamma, kappa)

    a = _log1p_ratio(t, phi, gamma, kappa)
    with np.errstate(over="ignore", invalid="ignore"):
        out = lam * (1.0 + kappa) * _expm1_over_kappa(a, kappa)
    raise_if_nonfinite(out, t > 0, "cumulative_hazard")
    return out[()]


def cumulative_hazard_supremum(phi, lam, gamma, kappa) -> NDArray:
    """lim H(t) as t → ∞: λ(κ+1)/(-κ) when κ < 0, otherwise +inf."""
    phi, lam, gamma, kappa = check_parameters(phi, lam, gamma, kappa)
    negative = kappa < 0
    safe_kappa = np.where(negative, kappa, -1.0)
    out = np.where(negative, lam * (1.0 + kappa) / -safe_kappa, np.inf)
    return np.broadcast_to(out, np.broadcast_shapes(
        phi.shape, lam.shape, gamma.shape, kappa.shape))[()]


def inverse_cumulative_hazard(v: ArrayLike, phi, lam, gamma, kappa) -> NDArray:
    """Solve H(t) = v for t.

    t = (1/φ) ((κ+1)((1 + κv/(λ(κ+1)))^(1/κ) - 1))^(1/γ)

    For κ < 0, values v at or above the supremum of H map to t = +inf
    (the event never occurs).
    """
    v = check_nonnegative(v, "v")
    phi, lam, gamma, kappa = check_parameters(phi, lam, gamma, kappa)

    sup = cumulative_hazard_supremum(phi, lam, gamma, kappa)
    never = v >= sup

    at_zero = kappa == KAPPA_ZERO
    safe_kappa = np.where(at_zero, 1.0, kappa)
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        x = safe_kappa * v / (lam * (1.0 + kappa))
        a = np.where(at_zero, v / lam, np.log1p(x) / safe_kappa)
        a = np.where(never, 0.0, a)
        log_t = (np.log1p(kappa) + _log_expm1(a)) / gamma - np.log(phi)
        out = np.exp(log_t)
    out = np.where(never, np.inf, out)
    raise_if_nonfinite(out, (v > 0) & ~never, "inverse_cumulative_hazard")
    return out[()]


def survival(t: ArrayLike, phi, lam, gamma, kappa) -> NDArray:
    """Survival function S(t) = exp(-H(t))."""
    return np.exp(-cumulative_hazard(t, phi, lam, gamma, kappa))


def density(t: ArrayLike, phi, lam, gamma, kappa) -> NDArray:
    """Density f(t) = h(t) exp(-H(t)), evaluated on the log scale."""
    log_f = log_hazard(t, phi, lam, gamma, kappa) - cumulative_hazard(
        t, phi, lam, gamma, kappa
    )
    return np.exp(log_f)
