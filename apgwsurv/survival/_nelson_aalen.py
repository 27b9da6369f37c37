"""
Nelson-Aalen estimator of the cumulative hazard.

The nonparametric reference curve for fitted APGW cumulative hazards:

    H(t) = Σ_{t_j <= t} d_j / n_j
    Var(H(t)) = Σ_{t_j <= t} d_j / n_j²          (Aalen)

Confidence limits use the log transformation, H·exp(±z·se/H), which
keeps the lower limit positive.

References:
    Nelson, W. (1972). Theory and applications of hazard plotting for
        censored failure data. Technometrics, 14(4), 945-966.
    Aalen, O. (1978). Nonparametric inference for a family of counting
        processes. Annals of Statistics, 6(4), 701-726.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray
from scipy import stats

from apgwsurv.survival._common import NelsonAalenParams


def nelson_aalen_fit(
    time: NDArray,
    event: NDArray,
    conf_level: float,
) -> NelsonAalenParams:
    """Compute the Nelson-Aalen cumulative hazard.

    Parameters
    ----------
    time : NDArray
        (n,) time to event or censoring.
    event : NDArray
        (n,) event indicator (1=event, 0=censored).
    conf_level : float
        Confidence level for the pointwise limits.

    Returns
    -------
    NelsonAalenParams
    """
    n_total = len(time)
    order = np.argsort(time, kind='stable')
    t_sorted = time[order]
    e_sorted = event[order]

    event_times, d = np.unique(t_sorted[e_sorted == 1], return_counts=True)

    if len(event_times) == 0:
        empty = np.array([], dtype=np.float64)
        return NelsonAalenParams(
            time=empty,
            cumulative_hazard=empty,
            variance=empty,
            n_risk=empty,
            n_events=empty,
            ci_lower=empty,
            ci_upper=empty,
            conf_level=conf_level,
            n_observations=n_total,
            n_events_total=0,
        )

    d = d.astype(np.float64)
    # At risk just before t_j: everyone whose time is >= t_j
    n_risk = (n_total - np.searchsorted(t_sorted, event_times, side='left')).astype(np.float64)

    cumhaz = np.cumsum(d / n_risk)
    variance = np.cumsum(d / n_risk ** 2)

    z = stats.norm.ppf(0.5 + conf_level / 2.0)
    se_log = np.sqrt(variance) / cumhaz
    ci_lower = cumhaz * np.exp(-z * se_log)
    ci_upper = cumhaz * np.exp(z * se_log)

    return NelsonAalenParams(
        time=event_times.astype(np.float64),
        cumulative_hazard=cumhaz,
        variance=variance,
        n_risk=n_risk,
        n_events=d,
        ci_lower=ci_lower,
        ci_upper=ci_upper,
        conf_level=conf_level,
        n_observations=n_total,
        n_events_total=int(d.sum()),
    )
