"""
Exception hierarchy for apgwsurv.

All exceptions inherit from ApgwError so callers can catch any
library-specific failure with a single clause. The hierarchy separates
the three ways a hazard evaluation can fail:

    - DomainError: a parameter or argument lies outside the region where
      the APGW family is defined (kappa <= -1, phi <= 0, ...)
    - NumericalInstabilityError: inputs are in-domain but floating point
      overflowed (e.g. huge phi*t with large gamma)
    - ConfigurationError: an unknown family or variant name was requested

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class ApgwError(Exception):
    """Base exception for all apgwsurv errors."""
    pass


class ValidationError(ApgwError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.
    """
    pass


class DomainError(ValidationError):
    """
    A parameter or argument lies outside its mathematical domain.

    Optimizers probing trial points outside the parameter space receive
    this instead of a silent NaN, so an undefined objective can be told
    apart from a minimum on the boundary.

    Attributes:
        parameter: Name of the offending parameter ('kappa', 't', ...)
        value: The offending value (first violating element for arrays)
        bound: Human-readable description of the valid region
    """

    def __init__(
        self,
        message: str,
        parameter: str | None = None,
        value: float | None = None,
        bound: str | None = None,
    ):
        super().__init__(message)
        self.parameter = parameter
        self.value = value
        self.bound = bound


class ConfigurationError(ApgwError):
    """
    A requested family, variant or option does not exist.

    Attributes:
        requested: The name that was asked for
        valid: Names that would have been accepted
    """

    def __init__(
        self,
        message: str,
        requested: str | None = None,
        valid: tuple[str, ...] | None = None,
    ):
        super().__init__(message)
        self.requested = requested
        self.valid = valid


class NumericalError(ApgwError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class NumericalInstabilityError(NumericalError):
    """
    An in-domain evaluation produced a non-finite result.

    Attributes:
        quantity: What was being computed ('hazard', 'cumulative_hazard', ...)
        n_nonfinite: Number of non-finite entries in the output
    """

    def __init__(
        self,
        message: str,
        quantity: str | None = None,
        n_nonfinite: int | None = None,
    ):
        super().__init__(message)
        self.quantity = quantity
        self.n_nonfinite = n_nonfinite
