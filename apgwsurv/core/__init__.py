"""
Core infrastructure for apgwsurv.

Key components:
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input and parameter-domain validators
    settings: Frozen configuration defaults
    compute: Timing utilities
"""

from apgwsurv.core.result import Result
from apgwsurv.core.exceptions import (
    ApgwError,
    ValidationError,
    DimensionError,
    DomainError,
    ConfigurationError,
    NumericalError,
    NumericalInstabilityError,
)

__all__ = [
    # Result
    "Result",
    # Exceptions
    "ApgwError",
    "ValidationError",
    "DimensionError",
    "DomainError",
    "ConfigurationError",
    "NumericalError",
    "NumericalInstabilityError",
]
