"""
Public API for parametric survival analysis.

    fit(time, event, X, family=...) → ParametricSolution
    nelson_aalen(time, event) → NelsonAalenSolution
    simulate(family, n, params) → SimulatedData

Each function validates inputs, creates a SurvivalDesign where data is
involved, dispatches to the computation module, and wraps the Result in
a Solution.
"""

from __future__ import annotations

import warnings
from typing import Literal, Mapping

from apgwsurv.core.compute.timing import Timer
from apgwsurv.core.exceptions import ValidationError
from apgwsurv.core.result import Result
from apgwsurv.core.settings import DEFAULT_CONF_LEVEL, DEFAULT_OPTIMIZER
from apgwsurv.distributions.families import DistributionFamily, resolve_family
from apgwsurv.survival._common import SimulatedData
from apgwsurv.survival._nelson_aalen import nelson_aalen_fit
from apgwsurv.survival._parametric import parametric_fit
from apgwsurv.survival._simulate import simulate_data
from apgwsurv.survival.design import SurvivalDesign
from apgwsurv.survival.solution import NelsonAalenSolution, ParametricSolution


def _check_conf_level(conf_level: float) -> None:
    if conf_level <= 0 or conf_level >= 1:
        raise ValidationError(
            f"conf_level must be in (0, 1), got {conf_level}"
        )


def fit(
    time,
    event=None,
    X=None,
    *,
    family: str | DistributionFamily = 'apgw',
    names=None,
    fixed: Mapping[str, float] | None = None,
    init: Mapping[str, float] | None = None,
    method: Literal['Nelder-Mead', 'BFGS', 'L-BFGS-B', 'Powell'] = DEFAULT_OPTIMIZER.method,
    polish: bool = True,
    tol: float | None = None,
    max_iter: int | None = None,
    conf_level: float = DEFAULT_CONF_LEVEL,
    verbose: bool = False,
) -> ParametricSolution:
    """Fit an APGW family to right-censored data by maximum likelihood.

    Matches the structure of R's flexsurv::flexsurvreg(): covariates act
    on the family's location parameter through its transformed scale.

    Parameters
    ----------
    time : array-like
        Time to event or censoring (strictly positive).
    event : array-like or None
        Event indicator (1=event, 0=censored). None means no censoring.
    X : array-like or None
        Covariate matrix (n, p), no intercept column.
    family : str or DistributionFamily
        'apgw' (default), 'apgw_scale', 'apgw_frailty', 'apgw_tilt',
        'apgw_reverse_tilt', or an alias such as 'ph', 'po', 'aft'.
    names : sequence of str or None
        Covariate names for summary().
    fixed : mapping or None
        Parameters held at the given values, e.g. {'kappa': 0.0}.
    init : mapping or None
        Starting values overriding the family's initial guess.
    method : str
        scipy.optimize.minimize method for the main search.
    polish : bool
        Re-run the optimum through a BFGS polish before the Hessian.
    tol : float or None
        Optimizer tolerance. Defaults to DEFAULT_OPTIMIZER.tol.
    max_iter : int or None
        Optimizer iteration limit. Defaults to DEFAULT_OPTIMIZER.max_iter.
    conf_level : float
        Confidence level of the Wald intervals.
    verbose : bool
        Print progress information.

    Returns
    -------
    ParametricSolution
    """
    fam = resolve_family(family)
    design = SurvivalDesign.for_survival(time, event, X, names=names)
    _check_conf_level(conf_level)

    settings = DEFAULT_OPTIMIZER
    tol = settings.tol if tol is None else tol
    max_iter = settings.max_iter if max_iter is None else max_iter
    if max_iter < 1:
        raise ValidationError(f"max_iter must be >= 1, got {max_iter}")

    if verbose:
        print(
            f"fit: family={fam.name}, n={design.n}, events={design.n_events}, "
            f"covariates={design.p}"
        )
        print(f"  method={method}, polish={settings.polish_method if polish else None}")

    result = parametric_fit(
        design, fam,
        fixed=fixed,
        init=init,
        method=method,
        polish_method=settings.polish_method if polish else None,
        tol=tol,
        max_iter=max_iter,
        hessian_step=settings.hessian_step,
        conf_level=conf_level,
    )

    for msg in result.warnings:
        warnings.warn(msg, RuntimeWarning, stacklevel=2)

    if verbose:
        p = result.params
        print(
            f"  loglik={p.loglik:.6f}, converged={p.converged}, "
            f"iterations={p.n_iter}, "
            f"function evals={result.info['n_function_evals']}"
        )

    return ParametricSolution(_result=result, _family=fam)


def nelson_aalen(
    time,
    event=None,
    *,
    conf_level: float = DEFAULT_CONF_LEVEL,
) -> NelsonAalenSolution:
    """Nelson-Aalen cumulative hazard estimate.

    Matches R's survival::survfit(Surv(time, event) ~ 1, ctype=1)$cumhaz.

    Parameters
    ----------
    time : array-like
        Time to event or censoring.
    event : array-like or None
        Event indicator (1=event, 0=censored). None means no censoring.
    conf_level : float
        Confidence level for CI (default 0.95).

    Returns
    -------
    NelsonAalenSolution
    """
    design = SurvivalDesign.for_survival(time, event)
    _check_conf_level(conf_level)

    timer = Timer()
    timer.start()

    params = nelson_aalen_fit(
        design.time, design.event,
        conf_level=conf_level,
    )

    timer.stop()

    result = Result(
        params=params,
        info={"method": "Nelson-Aalen"},
        timing=timer.result(),
        backend_name="cpu_nelson_aalen",
        warnings=(),
    )

    return NelsonAalenSolution(_result=result)


def simulate(
    family: str | DistributionFamily,
    n: int,
    params: Mapping[str, float],
    *,
    X=None,
    beta=None,
    censor_rate: float | None = None,
    censor_time: float | None = None,
    seed=None,
) -> SimulatedData:
    """Simulate right-censored data from an APGW family.

    Parameters
    ----------
    family : str or DistributionFamily
        Generating family (same names as fit()).
    n : int
        Number of subjects.
    params : mapping
        Baseline parameter values by name.
    X, beta : array-like or None
        Covariates (n, p) and their effects on the location's
        transformed scale. Give both or neither.
    censor_rate : float or None
        Rate of independent exponential censoring.
    censor_time : float or None
        Administrative censoring time.
    seed : int, Generator or None
        Source of randomness.

    Returns
    -------
    SimulatedData
    """
    fam = resolve_family(family)
    return simulate_data(
        fam, n, params,
        X=X,
        beta=beta,
        censor_rate=censor_rate,
        censor_time=censor_time,
        seed=seed,
    )
