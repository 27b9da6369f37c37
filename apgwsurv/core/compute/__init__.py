"""
Shared compute infrastructure for apgwsurv.

Submodules:
    timing: Execution timing utilities
"""

from apgwsurv.core.compute.timing import Timer, timed

__all__ = [
    "Timer",
    "timed",
]
