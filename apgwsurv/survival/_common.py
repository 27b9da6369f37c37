"""
Parameter payloads for survival results.

Each dataclass is a frozen payload carried inside a Result[P] envelope.
"""

from __future__ import annotations

from dataclasses import dataclass

from numpy.typing import NDArray


@dataclass(frozen=True)
class ParametricParams:
    """Maximum likelihood fit of an APGW family.

    Distribution parameters are reported on their natural scale at
    baseline (all covariates zero). Regression coefficients act on the
    working (transformed) scale of the location parameter.
    """

    family: str                       # registered family name
    parameter_names: tuple[str, ...]  # family parameters, in order
    estimates: NDArray                # (k,) natural-scale estimates
    working_estimates: NDArray        # (k,) transformed-scale estimates
    standard_errors: NDArray          # (k,) delta-method SEs (nan if fixed)
    ci_lower: NDArray                 # (k,) lower Wald limit, natural scale
    ci_upper: NDArray                 # (k,) upper Wald limit, natural scale
    fixed: tuple[bool, ...]           # (k,) held fixed during fitting
    covariate_names: tuple[str, ...]  # (p,)
    coefficients: NDArray             # (p,) effects on the location's working scale
    coefficient_se: NDArray           # (p,)
    coefficient_ci_lower: NDArray     # (p,)
    coefficient_ci_upper: NDArray     # (p,)
    cov: NDArray                      # (f, f) working-scale covariance of free values
    loglik: float
    n_free: int                       # free parameters incl. coefficients
    n_observations: int
    n_events: int
    n_iter: int
    converged: bool
    conf_level: float


@dataclass(frozen=True)
class NelsonAalenParams:
    """Nelson-Aalen cumulative hazard estimate.

    Matches R's survival::survfit(..., ctype=1) cumulative hazard.
    """

    time: NDArray                # (m,) unique event times
    cumulative_hazard: NDArray   # (m,) H(t) at each event time
    variance: NDArray            # (m,) Aalen variance of H(t)
    n_risk: NDArray              # (m,) number at risk just before each time
    n_events: NDArray            # (m,) events at each time
    ci_lower: NDArray            # (m,) log-transformed lower limit
    ci_upper: NDArray            # (m,) log-transformed upper limit
    conf_level: float
    n_observations: int
    n_events_total: int


@dataclass(frozen=True)
class SimulatedData:
    """Synthetic right-censored survival data."""

    time: NDArray                # (n,) observed time min(T, C)
    event: NDArray               # (n,) 1 if T <= C
    X: NDArray | None            # (n, p) covariates used for the location
    event_time: NDArray          # (n,) latent event times T (may be inf)

    @property
    def n(self) -> int:
        return len(self.time)

    @property
    def censored_fraction(self) -> float:
        return float(1.0 - self.event.mean()) if self.n else 0.0
