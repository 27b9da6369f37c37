"""
Random event times by inversion of the cumulative hazard.

If V ~ Exp(1) then H⁻¹(V) has cumulative hazard H, because
P(H⁻¹(V) > t) = P(V > H(t)) = exp(-H(t)). Every sampler below draws unit
exponentials and pushes them through the (possibly linked) inverse
cumulative hazard:

    base          H⁻¹(V)
    scale         base sampler with φθ
    frailty       base sampler with λθ
    tilt          H⁻¹(g_{1/θ}(V))       link first, then inversion
    reverse tilt  g_{1/θ}(H⁻¹(V))       inversion first, then the link
                                        applied on the time scale

Parameters may be scalars or arrays broadcastable to (n,), which lets a
simulation study give every subject its own location parameter. Invalid
parameters fail before any random numbers are drawn. With -1 < κ < 0 the
distribution is defective and samples beyond the cure threshold are +inf.
"""

from __future__ import annotations

import numbers

import numpy as np
from numpy.typing import NDArray

from apgwsurv.core.exceptions import DimensionError, ValidationError
from apgwsurv.core.validation import check_positive
from apgwsurv.distributions import apgw
from apgwsurv.distributions.links import inverse_log_generalized_logistic
from apgwsurv.distributions.variants import VARIANT_NAMES, resolve_variant

__all__ = [
    "sample_apgw",
    "sample_scale",
    "sample_frailty",
    "sample_tilt",
    "sample_reverse_tilt",
    "sample",
]

SeedLike = int | np.random.Generator | None


def _check_n(n) -> int:
    if isinstance(n, bool) or not isinstance(n, numbers.Integral):
        raise ValidationError(f"n must be an integer, got {type(n).__name__}")
    if n < 0:
        raise ValidationError(f"n must be >= 0, got {n}")
    return int(n)


def _check_shapes(n: int, **params) -> None:
    """Every parameter must broadcast to (n,) without enlarging it."""
    for name, value in params.items():
        shape = np.shape(value)
        try:
            combined = np.broadcast_shapes((n,), shape)
        except ValueError:
            combined = None
        if combined != (n,):
            raise DimensionError(
                f"{name}: shape {shape} does not broadcast to ({n},)"
            )


def _unit_exponentials(n: int, seed: SeedLike) -> NDArray:
    rng = np.random.default_rng(seed)
    return rng.standard_exponential(n)


def sample_apgw(n: int, phi, lam, gamma, kappa, *, seed: SeedLike = None) -> NDArray:
    """Draw n event times from APGW(φ, λ, γ, κ).

    Parameters
    ----------
    n : int
        Number of draws.
    phi, lam, gamma, kappa : float or array-like
        Shape parameters, scalars or broadcastable to (n,).
    seed : int, Generator or None
        Source of randomness.

    Returns
    -------
    NDArray
        (n,) non-negative event times (+inf for cured draws when κ < 0).
    """
    n = _check_n(n)
    phi, lam, gamma, kappa = apgw.check_parameters(phi, lam, gamma, kappa)
    _check_shapes(n, phi=phi, lam=lam, gamma=gamma, kappa=kappa)
    v = _unit_exponentials(n, seed)
    return np.asarray(apgw.inverse_cumulative_hazard(v, phi, lam, gamma, kappa))


def sample_scale(n: int, phi, lam, gamma, kappa, theta, *, seed: SeedLike = None) -> NDArray:
    """Draw from the scale (AFT) variant: APGW(φθ, λ, γ, κ)."""
    theta = check_positive(theta, "theta")
    phi = check_positive(phi, "phi")
    return sample_apgw(n, phi * theta, lam, gamma, kappa, seed=seed)


def sample_frailty(n: int, phi, lam, gamma, kappa, theta, *, seed: SeedLike = None) -> NDArray:
    """Draw from the frailty (PH) variant: APGW(φ, λθ, γ, κ)."""
    theta = check_positive(theta, "theta")
    lam = check_positive(lam, "lam")
    return sample_apgw(n, phi, lam * theta, gamma, kappa, seed=seed)


def sample_tilt(n: int, phi, lam, gamma, kappa, theta, *, seed: SeedLike = None) -> NDArray:
    """Draw from the tilt (PO) variant.

    v ~ Exp(1), x = log(1 + (e^v - 1)/θ), t = H⁻¹(x).
    """
    n = _check_n(n)
    phi, lam, gamma, kappa = apgw.check_parameters(phi, lam, gamma, kappa)
    theta = check_positive(theta, "theta")
    _check_shapes(n, phi=phi, lam=lam, gamma=gamma, kappa=kappa, theta=theta)
    v = _unit_exponentials(n, seed)
    x = inverse_log_generalized_logistic(v, theta)
    return np.asarray(apgw.inverse_cumulative_hazard(x, phi, lam, gamma, kappa))


def sample_reverse_tilt(n: int, phi, lam, gamma, kappa, theta, *, seed: SeedLike = None) -> NDArray:
    """Draw from the reverse-tilt (PGT) variant.

    t ~ APGW(φ, λ, γ, κ), returned as log(1 + (e^t - 1)/θ).
    """
    theta = check_positive(theta, "theta")
    n = _check_n(n)
    _check_shapes(n, theta=theta)
    t = sample_apgw(n, phi, lam, gamma, kappa, seed=seed)
    return np.asarray(inverse_log_generalized_logistic(t, theta))


_SAMPLERS = {
    'scale': sample_scale,
    'frailty': sample_frailty,
    'tilt': sample_tilt,
    'reverse_tilt': sample_reverse_tilt,
}


def sample(variant: str, n: int, phi, lam, gamma, kappa, theta=None, *, seed: SeedLike = None) -> NDArray:
    """Draw n event times from the base family or a named variant.

    Parameters
    ----------
    variant : str
        'base' (or 'apgw'), or one of the variant names accepted by
        resolve_variant: 'scale'/'aft', 'frailty'/'ph', 'tilt'/'po',
        'reverse_tilt'/'reverse-tilt'/'pgt'.
    theta : float or array-like or None
        Link parameter. Required for the variants, must be None for base.

    Raises
    ------
    ConfigurationError
        If variant is not a known name.
    ValidationError
        If theta is missing for a variant or given for the base family.
    """
    if isinstance(variant, str) and variant.lower() in ('base', 'apgw'):
        if theta is not None:
            raise ValidationError("theta is not a parameter of the base APGW family")
        return sample_apgw(n, phi, lam, gamma, kappa, seed=seed)

    resolved = resolve_variant(variant)
    if theta is None:
        raise ValidationError(
            f"theta is required for the {resolved.name} variant "
            f"(one of {', '.join(VARIANT_NAMES)})"
        )
    return _SAMPLERS[resolved.name](n, phi, lam, gamma, kappa, theta, seed=seed)
