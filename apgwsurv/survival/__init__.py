"""
Parametric survival analysis with APGW families.

Public API:
    fit(time, event, X, family=...) -> ParametricSolution
    nelson_aalen(time, event) -> NelsonAalenSolution
    simulate(family, n, params) -> SimulatedData
"""

from apgwsurv.survival.solvers import fit, nelson_aalen, simulate
from apgwsurv.survival.solution import NelsonAalenSolution, ParametricSolution
from apgwsurv.survival.design import SurvivalDesign
from apgwsurv.survival._common import SimulatedData

__all__ = [
    "fit",
    "nelson_aalen",
    "simulate",
    "ParametricSolution",
    "NelsonAalenSolution",
    "SurvivalDesign",
    "SimulatedData",
]
