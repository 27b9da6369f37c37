"""
apgwsurv: the Adapted Power Generalized Weibull family for survival analysis.

Hazard, cumulative hazard, inverse cumulative hazard and samplers for the
APGW distribution and its four regression submodels (scale, frailty,
tilt, reverse tilt), with maximum likelihood fitting of right-censored
data.

Submodules:
    distributions: APGW functions, links, samplers and family descriptors
    survival: Maximum likelihood fitting, Nelson-Aalen, simulation
"""

__version__ = "0.1.0"

from apgwsurv import distributions
from apgwsurv import survival

__all__ = [
    "__version__",
    "distributions",
    "survival",
]
