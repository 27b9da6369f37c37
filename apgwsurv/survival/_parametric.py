"""
Maximum likelihood fitting of APGW families to right-censored data.

For observations (t_i, d_i) the log-likelihood is

    ℓ = Σ d_i log h(t_i) - Σ H(t_i)

with h and H taken from a DistributionFamily evaluated on untransformed
parameter values. The optimizer works on the transformed (working) scale
of every parameter, so any real vector is a valid trial point. Covariates
enter the location parameter on its working scale:

    loc_i = inv(transform(loc) + x_iᵀβ)

Trial points at which the family raises DomainError or a NumericalError,
or returns a non-finite log-likelihood, get objective value +inf; the
optimizer retreats from them instead of failing.

Standard errors come from the observed information (a central-difference
Hessian of -ℓ on the working scale). Natural-scale SEs use the delta
method; Wald intervals are formed on the working scale and mapped back,
so they always respect the parameter domain.

References:
    Jackson, C. (2016). flexsurv: A platform for parametric survival
        modeling in R. Journal of Statistical Software, 70(8).
"""

from __future__ import annotations

from typing import Any, Mapping

import numpy as np
from numpy.typing import NDArray
from scipy import stats
from scipy.optimize import minimize

from apgwsurv.core.compute.timing import Timer
from apgwsurv.core.exceptions import (
    DomainError,
    NumericalError,
    ValidationError,
)
from apgwsurv.core.result import Result
from apgwsurv.distributions.families import DistributionFamily
from apgwsurv.survival._common import ParametricParams
from apgwsurv.survival.design import SurvivalDesign


class ParametricObjective:
    """Negative log-likelihood of a family on the working scale.

    The working vector holds the transformed values of the free (not
    fixed) family parameters, in family order, followed by the p
    regression coefficients.
    """

    def __init__(
        self,
        family: DistributionFamily,
        design: SurvivalDesign,
        fixed: Mapping[str, float] | None = None,
    ):
        fixed = dict(fixed or {})
        for name in fixed:
            family.index(name)
        self.family = family
        self.design = design
        self.fixed_working = {
            name: float(family.transform(name, value))
            for name, value in fixed.items()
        }
        self.free = tuple(n for n in family.parameters if n not in fixed)
        self.n_free = len(self.free) + design.p

    def split(self, theta: NDArray) -> tuple[NDArray, NDArray]:
        """Working vector → (all k family working values, β)."""
        theta = np.asarray(theta, dtype=np.float64)
        if theta.shape != (self.n_free,):
            raise ValidationError(
                f"expected {self.n_free} working values, got shape {theta.shape}"
            )
        free_values = dict(zip(self.free, theta[:len(self.free)]))
        working = np.array([
            self.fixed_working[name] if name in self.fixed_working else free_values[name]
            for name in self.family.parameters
        ])
        return working, theta[len(self.free):]

    def natural(self, theta: NDArray) -> dict[str, Any]:
        """Untransformed parameters, location per observation if covariates."""
        working, beta = self.split(theta)
        params = {}
        for name, tr, w in zip(self.family.parameters, self.family.transforms, working):
            if name == self.family.location and self.design.X is not None:
                w = w + self.design.X @ beta
            params[name] = tr.inverse(w)
        return params

    def log_likelihood(self, theta: NDArray) -> float:
        """ℓ(θ). Raises the family's DomainError / NumericalError."""
        p = self.natural(theta)
        log_h = self.family.log_hazard(self.design.time, **p)
        H = self.family.cumulative_hazard(self.design.time, **p)
        return float(np.sum(self.design.event * log_h) - np.sum(H))

    def __call__(self, theta: NDArray) -> float:
        try:
            with np.errstate(over='ignore', invalid='ignore', divide='ignore'):
                ll = self.log_likelihood(theta)
        except (DomainError, NumericalError):
            return np.inf
        if not np.isfinite(ll):
            return np.inf
        return -ll


def numerical_hessian(f, x: NDArray, step: float) -> NDArray:
    """Central-difference Hessian of a scalar function.

    Step sizes are relative: h_j = step * max(|x_j|, 1).
    """
    x = np.asarray(x, dtype=np.float64)
    k = len(x)
    h = step * np.maximum(np.abs(x), 1.0)
    f0 = f(x)

    f_plus = np.zeros(k)
    f_minus = np.zeros(k)
    for j in range(k):
        xp = x.copy()
        xp[j] += h[j]
        f_plus[j] = f(xp)
        xm = x.copy()
        xm[j] -= h[j]
        f_minus[j] = f(xm)

    H = np.zeros((k, k), dtype=np.float64)
    for j in range(k):
        H[j, j] = (f_plus[j] - 2.0 * f0 + f_minus[j]) / (h[j] ** 2)

    for j in range(k):
        for l in range(j + 1, k):
            def perturbed(dj, dl):
                xx = x.copy()
                xx[j] += dj
                xx[l] += dl
                return f(xx)

            f_pp = perturbed(h[j], h[l])
            f_pm = perturbed(h[j], -h[l])
            f_mp = perturbed(-h[j], h[l])
            f_mm = perturbed(-h[j], -h[l])
            H[j, l] = (f_pp - f_pm - f_mp + f_mm) / (4.0 * h[j] * h[l])
            H[l, j] = H[j, l]

    return H


def _covariance(hessian: NDArray, warnings_list: list[str]) -> NDArray:
    """Invert the observed information, falling back to a pseudo-inverse."""
    k = hessian.shape[0]
    if k == 0:
        return np.zeros((0, 0))
    if not np.all(np.isfinite(hessian)):
        warnings_list.append(
            "Hessian contains non-finite values; standard errors unavailable"
        )
        return np.full((k, k), np.nan)
    try:
        cov = np.linalg.inv(hessian)
    except np.linalg.LinAlgError:
        warnings_list.append("Hessian is singular; using pseudo-inverse")
        return np.linalg.pinv(hessian)
    if np.any(np.diag(cov) <= 0):
        warnings_list.append(
            "Hessian is not positive definite at the optimum; "
            "standard errors may be unreliable"
        )
    return cov


def _start_values(
    family: DistributionFamily,
    design: SurvivalDesign,
    init: Mapping[str, float] | None,
    fixed: Mapping[str, float],
) -> dict[str, float]:
    start = dict(zip(family.parameters, family.initial_guess(design.time)))
    for source in (init or {}), fixed:
        for name, value in source.items():
            family.index(name)
            start[name] = float(value)
    return start


def parametric_fit(
    design: SurvivalDesign,
    family: DistributionFamily,
    *,
    fixed: Mapping[str, float] | None,
    init: Mapping[str, float] | None,
    method: str,
    polish_method: str | None,
    tol: float,
    max_iter: int,
    hessian_step: float,
    conf_level: float,
) -> Result[ParametricParams]:
    """Fit a family by maximum likelihood.

    Parameters
    ----------
    design : SurvivalDesign
        Validated data.
    family : DistributionFamily
        Family to fit.
    fixed : mapping or None
        Parameters held at the given (natural-scale) values.
    init : mapping or None
        Starting values overriding family.initial_guess().
    method : str
        scipy.optimize.minimize method for the main search.
    polish_method : str or None
        Second minimize() run started from the first optimum; skipped
        when None or equal to method.
    tol, max_iter : float, int
        Passed to minimize().
    hessian_step : float
        Relative step of the finite-difference Hessian.
    conf_level : float
        Confidence level of the Wald intervals.

    Returns
    -------
    Result[ParametricParams]
    """
    timer = Timer()
    timer.start()
    warnings_list: list[str] = []
    fixed = dict(fixed or {})

    with timer.section('initial_values'):
        objective = ParametricObjective(family, design, fixed)
        if objective.n_free == 0:
            raise ValidationError(
                f"every parameter of {family.name} is fixed; nothing to estimate"
            )
        start = _start_values(family, design, init, fixed)
        theta0 = np.concatenate([
            [float(family.transform(name, start[name])) for name in objective.free],
            np.zeros(design.p),
        ])
        if not np.isfinite(objective(theta0)):
            raise ValidationError(
                f"log-likelihood of {family.name} is undefined at the starting "
                f"values {start}; supply init="
            )

    options: dict[str, Any] = {'maxiter': max_iter}
    if method == 'Nelder-Mead':
        options['adaptive'] = True

    with timer.section('optimization'):
        opt = minimize(objective, theta0, method=method, tol=tol, options=options)

    x_hat = opt.x
    fun = float(opt.fun)
    converged = bool(opt.success)
    n_iter = int(getattr(opt, 'nit', 0))
    n_fev = int(getattr(opt, 'nfev', 0))
    message = str(getattr(opt, 'message', ''))

    if polish_method is not None and polish_method != method:
        with timer.section('polish'):
            with np.errstate(over='ignore', invalid='ignore'):
                polished = minimize(
                    objective, x_hat, method=polish_method, tol=tol,
                    options={'maxiter': max_iter},
                )
        n_fev += int(getattr(polished, 'nfev', 0))
        if np.all(np.isfinite(polished.x)) and np.isfinite(polished.fun) \
                and polished.fun <= fun:
            x_hat = polished.x
            fun = float(polished.fun)
            n_iter += int(getattr(polished, 'nit', 0))
            converged = converged or bool(polished.success)

    if not converged:
        warnings_list.append(
            f"Optimizer did not converge after {n_iter} iterations: {message}"
        )

    with timer.section('hessian'):
        hessian = numerical_hessian(objective, x_hat, hessian_step)
        cov = _covariance(hessian, warnings_list)

    z = stats.norm.ppf(0.5 + conf_level / 2.0)
    with np.errstate(invalid='ignore'):
        se_working = np.sqrt(np.diag(cov))

    working, beta = objective.split(x_hat)
    k = family.n_parameters
    estimates = np.empty(k)
    se = np.full(k, np.nan)
    lower = np.full(k, np.nan)
    upper = np.full(k, np.nan)
    for i, (name, tr) in enumerate(zip(family.parameters, family.transforms)):
        w = working[i]
        estimates[i] = fixed[name] if name in fixed else tr.inverse(w)
        if name in objective.free:
            j = objective.free.index(name)
            s = se_working[j]
            se[i] = s * abs(float(tr.inverse_derivative(w)))
            lower[i] = tr.inverse(w - z * s)
            upper[i] = tr.inverse(w + z * s)

    n_shape = len(objective.free)
    beta_se = se_working[n_shape:]

    timer.stop()

    params = ParametricParams(
        family=family.name,
        parameter_names=family.parameters,
        estimates=estimates,
        working_estimates=working,
        standard_errors=se,
        ci_lower=lower,
        ci_upper=upper,
        fixed=tuple(name in fixed for name in family.parameters),
        covariate_names=design.covariate_names,
        coefficients=np.asarray(beta, dtype=np.float64),
        coefficient_se=beta_se,
        coefficient_ci_lower=beta - z * beta_se,
        coefficient_ci_upper=beta + z * beta_se,
        cov=cov,
        loglik=-fun,
        n_free=objective.n_free,
        n_observations=design.n,
        n_events=design.n_events,
        n_iter=n_iter,
        converged=converged,
        conf_level=conf_level,
    )

    return Result(
        params=params,
        info={
            'method': method,
            'polish_method': polish_method,
            'objective_value': fun,
            'n_function_evals': n_fev,
            'message': message,
            'location': family.location,
        },
        timing=timer.result(),
        backend_name='cpu_mle',
        warnings=tuple(warnings_list),
    )
