"""
SurvivalDesign: immutable container for time-to-event data.

Wraps time, event indicator and optional covariates. Validates inputs at
construction time. Downstream code trusts clean data.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from apgwsurv.core.exceptions import ValidationError
from apgwsurv.core.validation import (
    check_1d,
    check_array,
    check_consistent_length,
    check_finite,
    check_min_samples,
)


@dataclass(frozen=True)
class SurvivalDesign:
    """Immutable survival data container.

    Parameters
    ----------
    time : NDArray
        (n,) time to event or censoring. Strictly positive and finite.
    event : NDArray
        (n,) event indicator: 1 = event observed, 0 = right-censored.
    X : NDArray or None
        (n, p) covariate matrix, no intercept column.
    covariate_names : tuple of str
        One name per column of X (empty without covariates).
    """

    time: NDArray
    event: NDArray
    X: NDArray | None
    covariate_names: tuple[str, ...]

    @classmethod
    def for_survival(
        cls,
        time,
        event=None,
        X=None,
        *,
        names=None,
    ) -> SurvivalDesign:
        """Create and validate survival data.

        Parameters
        ----------
        time : array-like
            Time to event or censoring.
        event : array-like or None
            Event indicator (0/1). None means every time is an event.
        X : array-like or None
            Optional covariate matrix; a 1D array is one covariate.
        names : sequence of str or None
            Covariate names. Defaults to x0, x1, ...

        Raises
        ------
        ValidationError
            If inputs are invalid.
        """
        time = check_array(time, "time").ravel()
        check_min_samples(time, 1, "time")
        check_finite(time, "time")
        if np.any(time <= 0):
            raise ValidationError("time must be strictly positive")

        n = len(time)

        if event is None:
            event = np.ones(n, dtype=np.float64)
        else:
            event = check_array(event, "event").ravel()
            check_consistent_length(time, event, names=("time", "event"))
            unique_events = np.unique(event)
            if not np.all(np.isin(unique_events, [0.0, 1.0])):
                raise ValidationError(
                    f"event must contain only 0 and 1, "
                    f"got unique values: {unique_events}"
                )
            event = event.astype(np.float64)

        X_arr = None
        covariate_names: tuple[str, ...] = ()
        if X is not None:
            X_arr = check_array(X, "X").astype(np.float64)
            if X_arr.ndim == 1:
                X_arr = X_arr.reshape(-1, 1)
            if X_arr.ndim != 2:
                raise ValidationError(f"X must be 1D or 2D, got {X_arr.ndim}D")
            check_consistent_length(time, X_arr, names=("time", "X"))
            check_finite(X_arr, "X")

            p = X_arr.shape[1]
            if names is None:
                covariate_names = tuple(f"x{j}" for j in range(p))
            else:
                covariate_names = tuple(str(name) for name in names)
                if len(covariate_names) != p:
                    raise ValidationError(
                        f"names must have {p} entries to match X, "
                        f"got {len(covariate_names)}"
                    )
        elif names is not None:
            raise ValidationError("names given without covariates X")

        check_1d(time, "time")

        return cls(
            time=time,
            event=event,
            X=X_arr,
            covariate_names=covariate_names,
        )

    @property
    def n(self) -> int:
        """Number of observations."""
        return len(self.time)

    @property
    def p(self) -> int:
        """Number of covariates (0 without covariates)."""
        return self.X.shape[1] if self.X is not None else 0

    @property
    def n_events(self) -> int:
        """Number of observed events."""
        return int(np.sum(self.event))
