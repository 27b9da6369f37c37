"""
Configuration constants for apgwsurv.

Settings are frozen dataclasses so a configuration cannot drift after it
has been handed to a solver. Callers override individual fields through
keyword arguments on the public functions; these objects only supply the
defaults.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class OptimizerSettings:
    """Defaults for maximum likelihood fitting."""
    method: str
    polish_method: str
    tol: float
    max_iter: int
    hessian_step: float
    name: str
    description: str


# Nelder-Mead tolerates +inf objective values at out-of-range trial points;
# the BFGS polish sharpens the optimum for the Hessian.
DEFAULT_OPTIMIZER = OptimizerSettings(
    method='Nelder-Mead',
    polish_method='BFGS',
    tol=1e-8,
    max_iter=20_000,
    hessian_step=1e-4,
    name='nelder_mead_bfgs',
    description='Derivative-free search followed by a quasi-Newton polish',
)

# kappa == 0 is a removable singularity of the APGW cumulative hazard.
# Only an exact zero takes the limiting branch; expm1/log1p keep the
# general formula accurate for any non-zero kappa.
KAPPA_ZERO = 0.0

# Switch point of the two evaluation branches of the log generalized
# logistic link: log1p(theta * expm1(z)) below, z + log(...) above.
LINK_BRANCH_POINT = 1.0

# Default confidence level for Wald intervals and Nelson-Aalen bands.
DEFAULT_CONF_LEVEL = 0.95
