"""
Input validation utilities for apgwsurv.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or clamping values.

Two families of checks live here:
    - array checks (check_array, check_finite, check_1d, ...) used on data
      such as observed times and covariates; they raise ValidationError
      or DimensionError
    - domain checks (check_greater_than, check_positive, check_nonnegative)
      used on distribution parameters and arguments; they raise DomainError
      so that optimizers can recognise an out-of-domain trial point
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray
from typing import Any

from apgwsurv.core.exceptions import DimensionError, DomainError, ValidationError


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to a floating point numpy array.

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with floating dtype

    Raises:
        ValidationError: If input cannot be converted to a numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    if result.dtype == np.bool_:
        return result.astype(np.float64)

    if not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    if not np.issubdtype(result.dtype, np.floating):
        result = result.astype(np.float64)

    return result


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Raises:
        ValidationError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_ndim(array: NDArray[np.floating[Any]], ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.

    Raises:
        DimensionError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_1d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 1-dimensional."""
    check_ndim(array, 1, name)


def check_2d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 2-dimensional."""
    check_ndim(array, 2, name)


def check_consistent_length(
    *arrays: NDArray[np.floating[Any]],
    names: tuple[str, ...]
) -> None:
    """
    Verify all arrays have the same length (first dimension).

    Raises:
        ValueError: If number of names doesn't match number of arrays
        DimensionError: If arrays have inconsistent lengths
    """
    if len(arrays) != len(names):
        raise ValueError(
            f"Number of arrays ({len(arrays)}) must match number of names ({len(names)})"
        )

    if len(arrays) < 2:
        return

    lengths = [arr.shape[0] for arr in arrays]
    if len(set(lengths)) > 1:
        details = ", ".join(f"{name}={length}" for name, length in zip(names, lengths))
        raise DimensionError(f"Inconsistent lengths: {details}")


def check_min_samples(array: NDArray[np.floating[Any]], min_samples: int, name: str) -> None:
    """
    Verify array has at least the minimum number of samples.

    Raises:
        ValidationError: If array has fewer than min_samples
    """
    n = array.shape[0]
    if n < min_samples:
        raise ValidationError(
            f"{name}: requires at least {min_samples} samples, got {n}"
        )


# =====================================================================
# Domain checks for distribution parameters
# =====================================================================

def _as_float_array(value: ArrayLike, name: str) -> NDArray[np.floating[Any]]:
    try:
        arr = np.asarray(value, dtype=np.float64)
    except (ValueError, TypeError) as e:
        raise DomainError(
            f"{name}: cannot convert to a real number: {e}", parameter=name
        ) from e
    return arr


def check_greater_than(
    value: ArrayLike,
    lower: float,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Verify every element of value is strictly greater than lower.

    NaN never satisfies the bound.

    Returns:
        value as a float64 ndarray (0-d for scalars)

    Raises:
        DomainError: naming the parameter and the first violating value
    """
    arr = _as_float_array(value, name)
    ok = arr > lower
    if not np.all(ok):
        bad = float(arr[~ok].flat[0]) if arr.ndim else float(arr)
        raise DomainError(
            f"{name} must be > {lower:g}, got {bad!r}",
            parameter=name,
            value=bad,
            bound=f"> {lower:g}",
        )
    return arr


def check_positive(value: ArrayLike, name: str) -> NDArray[np.floating[Any]]:
    """Verify every element of value is strictly positive."""
    return check_greater_than(value, 0.0, name)


def check_nonnegative(value: ArrayLike, name: str) -> NDArray[np.floating[Any]]:
    """
    Verify every element of value is >= 0 (NaN rejected).

    Raises:
        DomainError: naming the parameter and the first violating value
    """
    arr = _as_float_array(value, name)
    ok = arr >= 0
    if not np.all(ok):
        bad = float(arr[~ok].flat[0]) if arr.ndim else float(arr)
        raise DomainError(
            f"{name} must be >= 0, got {bad!r}",
            parameter=name,
            value=bad,
            bound=">= 0",
        )
    return arr
