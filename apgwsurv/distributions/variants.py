"""
Regression submodels of the APGW family.

Each variant adds one parameter θ > 0 and composes it with the base
hazard in a different place:

    scale (AFT)          H(t; φθ, λ, γ, κ)       θ rescales time
    frailty (PH)         H(t; φ, λθ, γ, κ)       θ multiplies the hazard
    tilt (PO)            g_θ(H(t))               link after the base CHF
    reverse_tilt (PGT)   H(g_θ(t))               link before the base CHF

where g_θ(z) = log(1 + θ(e^z - 1)) is the log generalized-logistic link.
Tilt and reverse tilt are not interchangeable: tilt transforms the output
of the cumulative hazard, reverse tilt transforms its time argument.

Hazards follow by differentiation:

    h_tilt(t) = θ h(t) e^H / e^{g_θ(H)} = θ h(t) / (θ + (1-θ)e^{-H(t)})
    h_rt(t)   = h(g_θ(t)) · θ / (θ + (1-θ)e^{-t})

and the inverse cumulative hazards, used for sampling, by inverting the
compositions with g_θ⁻¹ = g_{1/θ}. At θ = 1 every variant is the base
distribution.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import numpy as np
from numpy.typing import ArrayLike, NDArray

from apgwsurv.core.exceptions import ConfigurationError
from apgwsurv.core.validation import check_positive
from apgwsurv.distributions import apgw
from apgwsurv.distributions.links import (
    inverse_log_generalized_logistic,
    log_generalized_logistic,
    log_log_generalized_logistic_derivative,
)


# =====================================================================
# Scale (accelerated failure time)
# =====================================================================

def scale_log_hazard(t: ArrayLike, phi, lam, gamma, kappa, theta) -> NDArray:
    theta = check_positive(theta, "theta")
    return apgw.log_hazard(t, phi * theta, lam, gamma, kappa)


def scale_hazard(t: ArrayLike, phi, lam, gamma, kappa, theta) -> NDArray:
    """h(t; φθ, λ, γ, κ)."""
    theta = check_positive(theta, "theta")
    return apgw.hazard(t, phi * theta, lam, gamma, kappa)


def scale_cumulative_hazard(t: ArrayLike, phi, lam, gamma, kappa, theta) -> NDArray:
    """H(t; φθ, λ, γ, κ)."""
    theta = check_positive(theta, "theta")
    return apgw.cumulative_hazard(t, phi * theta, lam, gamma, kappa)


def scale_inverse_cumulative_hazard(v: ArrayLike, phi, lam, gamma, kappa, theta) -> NDArray:
    theta = check_positive(theta, "theta")
    return apgw.inverse_cumulative_hazard(v, phi * theta, lam, gamma, kappa)


# =====================================================================
# Frailty (proportional hazards)
# =====================================================================

def frailty_log_hazard(t: ArrayLike, phi, lam, gamma, kappa, theta) -> NDArray:
    theta = check_positive(theta, "theta")
    return apgw.log_hazard(t, phi, lam * theta, gamma, kappa)


def frailty_hazard(t: ArrayLike, phi, lam, gamma, kappa, theta) -> NDArray:
    """h(t; φ, λθ, γ, κ) = θ h(t; φ, λ, γ, κ)."""
    theta = check_positive(theta, "theta")
    return apgw.hazard(t, phi, lam * theta, gamma, kappa)


def frailty_cumulative_hazard(t: ArrayLike, phi, lam, gamma, kappa, theta) -> NDArray:
    """H(t; φ, λθ, γ, κ)."""
    theta = check_positive(theta, "theta")
    return apgw.cumulative_hazard(t, phi, lam * theta, gamma, kappa)


def frailty_inverse_cumulative_hazard(v: ArrayLike, phi, lam, gamma, kappa, theta) -> NDArray:
    theta = check_positive(theta, "theta")
    return apgw.inverse_cumulative_hazard(v, phi, lam * theta, gamma, kappa)


# =====================================================================
# Tilt (proportional odds)
# =====================================================================

def tilt_log_hazard(t: ArrayLike, phi, lam, gamma, kappa, theta) -> NDArray:
    theta = check_positive(theta, "theta")
    H = apgw.cumulative_hazard(t, phi, lam, gamma, kappa)
    return (
        apgw.log_hazard(t, phi, lam, gamma, kappa)
        + log_log_generalized_logistic_derivative(H, theta)
    )


def tilt_hazard(t: ArrayLike, phi, lam, gamma, kappa, theta) -> NDArray:
    """θ h(t) e^{H(t)} / e^{g_θ(H(t))}."""
    return np.exp(tilt_log_hazard(t, phi, lam, gamma, kappa, theta))


def tilt_cumulative_hazard(t: ArrayLike, phi, lam, gamma, kappa, theta) -> NDArray:
    """g_θ(H(t))."""
    theta = check_positive(theta, "theta")
    H = apgw.cumulative_hazard(t, phi, lam, gamma, kappa)
    return log_generalized_logistic(H, theta)


def tilt_inverse_cumulative_hazard(v: ArrayLike, phi, lam, gamma, kappa, theta) -> NDArray:
    """H⁻¹(g_{1/θ}(v))."""
    x = inverse_log_generalized_logistic(v, theta)
    return apgw.inverse_cumulative_hazard(x, phi, lam, gamma, kappa)


# =====================================================================
# Reverse tilt (proportional generalized tilt)
# =====================================================================

def reverse_tilt_log_hazard(t: ArrayLike, phi, lam, gamma, kappa, theta) -> NDArray:
    s = log_generalized_logistic(t, theta)
    return (
        apgw.log_hazard(s, phi, lam, gamma, kappa)
        + log_log_generalized_logistic_derivative(t, theta)
    )


def reverse_tilt_hazard(t: ArrayLike, phi, lam, gamma, kappa, theta) -> NDArray:
    """h(g_θ(t)) · g_θ'(t)."""
    return np.exp(reverse_tilt_log_hazard(t, phi, lam, gamma, kappa, theta))


def reverse_tilt_cumulative_hazard(t: ArrayLike, phi, lam, gamma, kappa, theta) -> NDArray:
    """H(g_θ(t))."""
    s = log_generalized_logistic(t, theta)
    return apgw.cumulative_hazard(s, phi, lam, gamma, kappa)


def reverse_tilt_inverse_cumulative_hazard(v: ArrayLike, phi, lam, gamma, kappa, theta) -> NDArray:
    """g_{1/θ}(H⁻¹(v))."""
    theta = check_positive(theta, "theta")
    s = apgw.inverse_cumulative_hazard(v, phi, lam, gamma, kappa)
    return inverse_log_generalized_logistic(s, theta)


# =====================================================================
# Variant name → functions
# =====================================================================

@dataclass(frozen=True)
class Variant:
    """The four evaluation functions of one regression submodel."""
    name: str
    model: str
    log_hazard: Callable[..., NDArray]
    hazard: Callable[..., NDArray]
    cumulative_hazard: Callable[..., NDArray]
    inverse_cumulative_hazard: Callable[..., NDArray]


SCALE = Variant(
    'scale', 'AFT',
    scale_log_hazard, scale_hazard,
    scale_cumulative_hazard, scale_inverse_cumulative_hazard,
)
FRAILTY = Variant(
    'frailty', 'PH',
    frailty_log_hazard, frailty_hazard,
    frailty_cumulative_hazard, frailty_inverse_cumulative_hazard,
)
TILT = Variant(
    'tilt', 'PO',
    tilt_log_hazard, tilt_hazard,
    tilt_cumulative_hazard, tilt_inverse_cumulative_hazard,
)
REVERSE_TILT = Variant(
    'reverse_tilt', 'PGT',
    reverse_tilt_log_hazard, reverse_tilt_hazard,
    reverse_tilt_cumulative_hazard, reverse_tilt_inverse_cumulative_hazard,
)

_VARIANTS: dict[str, Variant] = {
    'scale': SCALE,
    'aft': SCALE,
    'frailty': FRAILTY,
    'ph': FRAILTY,
    'tilt': TILT,
    'po': TILT,
    'reverse_tilt': REVERSE_TILT,
    'reverse-tilt': REVERSE_TILT,
    'pgt': REVERSE_TILT,
}

VARIANT_NAMES = ('scale', 'frailty', 'tilt', 'reverse_tilt')


def resolve_variant(variant: str | Variant) -> Variant:
    """Resolve a variant name (or alias) to its Variant record.

    Raises:
        ConfigurationError: If the name is not a known variant.
        TypeError: If variant is neither str nor Variant.
    """
    if isinstance(variant, Variant):
        return variant
    if isinstance(variant, str):
        found = _VARIANTS.get(variant.lower())
        if found is None:
            raise ConfigurationError(
                f"Unknown variant: {variant!r}. "
                f"Valid variants: {', '.join(VARIANT_NAMES)}",
                requested=variant,
                valid=VARIANT_NAMES,
            )
        return found
    raise TypeError(f"variant must be str or Variant, got {type(variant).__name__}")


def linked_hazard(variant: str | Variant, t: ArrayLike, phi, lam, gamma, kappa, theta) -> NDArray:
    """Hazard of the named variant."""
    return resolve_variant(variant).hazard(t, phi, lam, gamma, kappa, theta)


def linked_cumulative_hazard(variant: str | Variant, t: ArrayLike, phi, lam, gamma, kappa, theta) -> NDArray:
    """Cumulative hazard of the named variant."""
    return resolve_variant(variant).cumulative_hazard(t, phi, lam, gamma, kappa, theta)


def linked_inverse_cumulative_hazard(variant: str | Variant, v: ArrayLike, phi, lam, gamma, kappa, theta) -> NDArray:
    """Inverse cumulative hazard of the named variant."""
    return resolve_variant(variant).inverse_cumulative_hazard(v, phi, lam, gamma, kappa, theta)
