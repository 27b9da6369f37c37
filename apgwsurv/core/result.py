"""
Generic result container for apgwsurv computations.

Every fit returns its domain payload inside this envelope so that timing,
warnings and provenance are recorded the same way for maximum likelihood
fits and nonparametric estimates alike.
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


def _default_provenance() -> dict[str, str]:
    """Library versions used to produce a result."""
    import numpy
    import scipy
    from apgwsurv import __version__

    return {
        'apgwsurv_version': __version__,
        'numpy_version': numpy.__version__,
        'scipy_version': scipy.__version__,
    }


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope.

    Attributes:
        params: Domain-specific payload (estimates, curves, ...)
        info: Structured metadata (method, convergence, diagnostics)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the code path that produced this result
        warnings: Non-fatal issues encountered during computation
        provenance: Library versions at the time of computation

    Examples:
        >>> Result(
        ...     params=ParametricParams(...),
        ...     info={'method': 'Nelder-Mead', 'converged': True},
        ...     timing={'total_seconds': 0.4, 'optimization': 0.35},
        ...     backend_name='cpu_mle'
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)
    provenance: dict[str, str] = field(default_factory=_default_provenance)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)
