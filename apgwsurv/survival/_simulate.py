"""
Synthetic survival data for simulation studies.

Event times come from a family's sampler with the location parameter
shifted per subject by a linear predictor on its working scale (the same
regression structure the fitter estimates). Right censoring is
independent: exponential censoring times, an administrative cut-off, or
both.
"""

from __future__ import annotations

from typing import Mapping

import numpy as np

from apgwsurv.core.exceptions import ValidationError
from apgwsurv.core.validation import (
    check_2d,
    check_array,
    check_consistent_length,
    check_finite,
    check_positive,
)
from apgwsurv.distributions.families import DistributionFamily
from apgwsurv.survival._common import SimulatedData


def simulate_data(
    family: DistributionFamily,
    n: int,
    params: Mapping[str, float],
    *,
    X=None,
    beta=None,
    censor_rate: float | None = None,
    censor_time: float | None = None,
    seed=None,
) -> SimulatedData:
    """Draw a right-censored sample from a family.

    Parameters
    ----------
    family : DistributionFamily
        Generating family.
    n : int
        Number of subjects.
    params : mapping
        Baseline parameter values by name.
    X : array-like or None
        (n, p) covariates acting on the location parameter.
    beta : array-like or None
        (p,) coefficients on the location's working scale.
    censor_rate : float or None
        Rate of independent exponential censoring times.
    censor_time : float or None
        Administrative censoring time.
    seed : int, Generator or None
        Source of randomness.

    Raises
    ------
    ValidationError
        If X and beta are not given together, have mismatched shapes, or
        a defective distribution leaves infinite times uncensored.
    """
    rng = np.random.default_rng(seed)
    p = family.bind(**params)

    X_arr = None
    if (X is None) != (beta is None):
        raise ValidationError("X and beta must be given together")
    if X is not None:
        X_arr = check_array(X, "X")
        if X_arr.ndim == 1:
            X_arr = X_arr.reshape(-1, 1)
        check_2d(X_arr, "X")
        check_finite(X_arr, "X")
        beta_arr = check_array(beta, "beta").ravel()
        if X_arr.shape != (n, len(beta_arr)):
            raise ValidationError(
                f"X must have shape ({n}, {len(beta_arr)}) to match n and beta, "
                f"got {X_arr.shape}"
            )
        loc = family.location
        eta = family.transform(loc, p[loc]) + X_arr @ beta_arr
        p[loc] = family.inverse_transform(loc, eta)

    event_time = family.sample(n, seed=rng, **p)

    censor = np.full(n, np.inf)
    if censor_rate is not None:
        rate = float(check_positive(censor_rate, "censor_rate"))
        censor = rng.exponential(1.0 / rate, size=n)
    if censor_time is not None:
        cutoff = float(check_positive(censor_time, "censor_time"))
        censor = np.minimum(censor, cutoff)

    time = np.minimum(event_time, censor)
    event = (event_time <= censor).astype(np.float64)

    n_infinite = int(np.sum(~np.isfinite(time)))
    if n_infinite:
        raise ValidationError(
            f"{n_infinite} subject(s) never experience the event (defective "
            f"distribution, kappa < 0) and are not censored; "
            f"supply censor_rate or censor_time"
        )

    check_consistent_length(time, event, names=("time", "event"))
    return SimulatedData(time=time, event=event, X=X_arr, event_time=event_time)
