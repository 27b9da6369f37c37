"""
Solution wrappers for survival results.

Each Solution wraps a Result[Params] and exposes user-friendly properties
with R-style summary() methods.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from apgwsurv.core.exceptions import DimensionError, ValidationError
from apgwsurv.core.result import Result
from apgwsurv.distributions.families import DistributionFamily
from apgwsurv.survival._common import NelsonAalenParams, ParametricParams


class ParametricSolution:
    """Maximum likelihood fit of an APGW family.

    Properties mirror R's flexsurvreg() output. The fitted hazard,
    cumulative hazard and survival can be evaluated at any covariate
    value for plotting against nonparametric estimates.
    """

    __slots__ = ('_result', '_family')

    def __init__(self, _result: Result[ParametricParams], _family: DistributionFamily) -> None:
        self._result = _result
        self._family = _family

    # -- Properties delegating to ParametricParams --

    @property
    def family(self) -> DistributionFamily:
        return self._family

    @property
    def parameter_names(self) -> tuple[str, ...]:
        return self._result.params.parameter_names

    @property
    def estimates(self) -> NDArray:
        """Natural-scale estimates at baseline (covariates zero)."""
        return self._result.params.estimates

    @property
    def parameters(self) -> dict[str, float]:
        """Estimates keyed by parameter name."""
        return {
            name: float(value)
            for name, value in zip(self.parameter_names, self.estimates)
        }

    @property
    def working_estimates(self) -> NDArray:
        return self._result.params.working_estimates

    @property
    def standard_errors(self) -> NDArray:
        return self._result.params.standard_errors

    @property
    def ci_lower(self) -> NDArray:
        return self._result.params.ci_lower

    @property
    def ci_upper(self) -> NDArray:
        return self._result.params.ci_upper

    @property
    def fixed(self) -> tuple[bool, ...]:
        return self._result.params.fixed

    @property
    def covariate_names(self) -> tuple[str, ...]:
        return self._result.params.covariate_names

    @property
    def coefficients(self) -> NDArray:
        """Covariate effects on the working scale of the location parameter."""
        return self._result.params.coefficients

    @property
    def coefficient_se(self) -> NDArray:
        return self._result.params.coefficient_se

    @property
    def cov(self) -> NDArray:
        """Working-scale covariance of the free parameters and coefficients."""
        return self._result.params.cov

    @property
    def loglik(self) -> float:
        return self._result.params.loglik

    @property
    def n_free(self) -> int:
        return self._result.params.n_free

    @property
    def aic(self) -> float:
        """AIC = -2 loglik + 2k."""
        return -2.0 * self.loglik + 2.0 * self.n_free

    @property
    def bic(self) -> float:
        """BIC = -2 loglik + k log(n)."""
        return -2.0 * self.loglik + self.n_free * np.log(self.n_observations)

    @property
    def n_observations(self) -> int:
        return self._result.params.n_observations

    @property
    def n_events(self) -> int:
        return self._result.params.n_events

    @property
    def n_iter(self) -> int:
        return self._result.params.n_iter

    @property
    def converged(self) -> bool:
        return self._result.params.converged

    @property
    def conf_level(self) -> float:
        return self._result.params.conf_level

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def timing(self):
        return self._result.timing

    # -- Fitted curves --

    def parameters_at(self, x: ArrayLike | None = None) -> dict[str, Any]:
        """Natural-scale parameters for covariate value(s) x.

        x may be a single covariate vector (p,) or a matrix (m, p); in
        the latter case the location parameter is an (m,) array.
        """
        fam = self._family
        p = len(self.coefficients)
        shift = 0.0
        if x is not None:
            if p == 0:
                raise ValidationError("model was fitted without covariates")
            x = np.asarray(x, dtype=np.float64)
            if x.shape[-1:] != (p,) or x.ndim > 2:
                raise DimensionError(
                    f"x must have shape ({p},) or (m, {p}), got {x.shape}"
                )
            shift = x @ self.coefficients

        out = {}
        for name, tr, w in zip(fam.parameters, fam.transforms, self.working_estimates):
            if name == fam.location:
                w = w + shift
            out[name] = tr.inverse(w)
        return out

    def hazard(self, t: ArrayLike, x: ArrayLike | None = None) -> NDArray:
        """Fitted hazard at times t."""
        return self._family.hazard(t, **self.parameters_at(x))

    def cumulative_hazard(self, t: ArrayLike, x: ArrayLike | None = None) -> NDArray:
        """Fitted cumulative hazard at times t."""
        return self._family.cumulative_hazard(t, **self.parameters_at(x))

    def survival(self, t: ArrayLike, x: ArrayLike | None = None) -> NDArray:
        """Fitted survival function at times t."""
        return self._family.survival(t, **self.parameters_at(x))

    def density(self, t: ArrayLike, x: ArrayLike | None = None) -> NDArray:
        return self._family.density(t, **self.parameters_at(x))

    def summary(self) -> str:
        """R-style summary of the fit."""
        lines = []
        lines.append(f"Call: fit(family='{self._family.name}')")
        lines.append("")
        lines.append(
            f"  n= {self.n_observations}, "
            f"number of events= {self.n_events}"
        )
        lines.append("")

        ci_pct = f"{self.conf_level * 100:g}%"
        lines.append(
            f"  {'':>10s}  {'est':>12s}  {'L' + ci_pct:>12s}  "
            f"{'U' + ci_pct:>12s}  {'se':>12s}"
        )
        for i, name in enumerate(self.parameter_names):
            marker = " (fixed)" if self.fixed[i] else ""
            lines.append(
                f"  {name:>10s}  {self.estimates[i]:12.6g}  "
                f"{self.ci_lower[i]:12.6g}  {self.ci_upper[i]:12.6g}  "
                f"{self.standard_errors[i]:12.6g}{marker}"
            )
        params = self._result.params
        for j, name in enumerate(self.covariate_names):
            lines.append(
                f"  {name:>10s}  {self.coefficients[j]:12.6g}  "
                f"{params.coefficient_ci_lower[j]:12.6g}  "
                f"{params.coefficient_ci_upper[j]:12.6g}  "
                f"{self.coefficient_se[j]:12.6g}"
            )
        if self.covariate_names:
            lines.append("")
            lines.append(
                f"  Covariates act on {self._family.location} "
                f"through its {self._family.transforms[self._family.location_index].name} scale"
            )

        lines.append("")
        lines.append(
            f"  Log-likelihood = {self.loglik:.4f}, df = {self.n_free}, "
            f"AIC = {self.aic:.4f}"
        )
        if not self.converged:
            lines.append("  WARNING: optimizer did not converge")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"ParametricSolution(family={self._family.name!r}, "
            f"loglik={self.loglik:.4f}, aic={self.aic:.4f})"
        )


class NelsonAalenSolution:
    """Nelson-Aalen cumulative hazard solution."""

    __slots__ = ('_result',)

    def __init__(self, _result: Result[NelsonAalenParams]) -> None:
        self._result = _result

    @property
    def time(self):
        """Unique event times."""
        return self._result.params.time

    @property
    def cumulative_hazard(self):
        """H(t) at each event time."""
        return self._result.params.cumulative_hazard

    @property
    def variance(self):
        return self._result.params.variance

    @property
    def se(self):
        return np.sqrt(self._result.params.variance)

    @property
    def n_risk(self):
        return self._result.params.n_risk

    @property
    def n_events(self):
        return self._result.params.n_events

    @property
    def ci_lower(self):
        return self._result.params.ci_lower

    @property
    def ci_upper(self):
        return self._result.params.ci_upper

    @property
    def conf_level(self) -> float:
        return self._result.params.conf_level

    @property
    def n_observations(self) -> int:
        return self._result.params.n_observations

    @property
    def n_events_total(self) -> int:
        return self._result.params.n_events_total

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def timing(self):
        return self._result.timing

    def at(self, t: ArrayLike) -> NDArray:
        """Step-function value of H at arbitrary times (0 before the first event)."""
        t = np.asarray(t, dtype=np.float64)
        idx = np.searchsorted(self.time, t, side='right')
        padded = np.concatenate([[0.0], self.cumulative_hazard])
        return padded[idx]

    def summary(self) -> str:
        lines = []
        lines.append("Call: nelson_aalen()")
        lines.append("")
        lines.append(
            f"  n={self.n_observations}, "
            f"events={self.n_events_total}"
        )
        lines.append("")
        ci_pct = int(self.conf_level * 100)
        lines.append(
            f"  {'time':>8s}  {'n.risk':>8s}  {'n.event':>8s}  "
            f"{'cumhaz':>10s}  {'se':>10s}  "
            f"{'lower ' + str(ci_pct) + '%':>10s}  {'upper ' + str(ci_pct) + '%':>10s}"
        )
        m = len(self.time)
        show = min(m, 20)
        se = self.se
        for i in range(show):
            lines.append(
                f"  {self.time[i]:8.4g}  {self.n_risk[i]:8.0f}  "
                f"{self.n_events[i]:8.0f}  "
                f"{self.cumulative_hazard[i]:10.6f}  {se[i]:10.6f}  "
                f"{self.ci_lower[i]:10.6f}  {self.ci_upper[i]:10.6f}"
            )
        if m > 20:
            lines.append(f"  ... ({m - 20} more rows)")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"NelsonAalenSolution(n={self.n_observations}, "
            f"events={self.n_events_total})"
        )
