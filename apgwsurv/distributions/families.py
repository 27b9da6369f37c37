"""
Distribution family descriptors.

A DistributionFamily bundles everything a likelihood-based fitter needs to
treat an APGW submodel as a pluggable distribution:

- the ordered parameter names and the designated location parameter
  (the one a linear predictor on covariates is attached to)
- one ParameterTransform per parameter, mapping it to the real line
- hazard / cumulative hazard / inverse cumulative hazard evaluations on
  untransformed parameter values
- a sampler and an initializer that seeds optimisation from raw times

Parameters are always bound by name (see DistributionFamily.bind), so
positional calls are checked against the family's own ordering instead of
silently trusting it.

The five families are constructed once, at import, and exposed through
the read-only FAMILIES mapping. resolve_family() accepts names, aliases or
instances.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Any, Callable, Mapping

import numpy as np
from numpy.typing import ArrayLike, NDArray

from apgwsurv.core.exceptions import ConfigurationError, ValidationError
from apgwsurv.core.validation import (
    check_1d,
    check_array,
    check_finite,
    check_min_samples,
)
from apgwsurv.distributions import apgw, sampling, variants
from apgwsurv.distributions.links import LOG, SHIFTED_LOG, ParameterTransform


BASE_PARAMETERS = ('phi', 'lam', 'gamma', 'kappa')
LINKED_PARAMETERS = BASE_PARAMETERS + ('theta',)


def exponential_rate_from_median(times: ArrayLike) -> float:
    """Rate of the exponential distribution with the sample median of times.

    For Exp(rate), median = log(2)/rate, so rate = log(2)/median(t).
    """
    t = check_array(times, "times")
    check_1d(t, "times")
    check_finite(t, "times")
    t = t[t > 0]
    check_min_samples(t, 1, "positive times")
    return float(np.log(2.0) / np.median(t))


# =====================================================================
# Family base class
# =====================================================================

class DistributionFamily(ABC):
    """
    APGW family description for likelihood-based fitting.

    Subclasses provide the name, parameter list, location parameter and
    the evaluation functions; everything else (binding, transforms,
    descriptor export) is shared.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @property
    @abstractmethod
    def parameters(self) -> tuple[str, ...]:
        ...

    @property
    @abstractmethod
    def location(self) -> str:
        ...

    @property
    @abstractmethod
    def transforms(self) -> tuple[ParameterTransform, ...]:
        ...

    @abstractmethod
    def _log_hazard(self, t: NDArray, p: dict[str, Any]) -> NDArray:
        ...

    @abstractmethod
    def _cumulative_hazard(self, t: NDArray, p: dict[str, Any]) -> NDArray:
        ...

    @abstractmethod
    def _inverse_cumulative_hazard(self, v: NDArray, p: dict[str, Any]) -> NDArray:
        ...

    @abstractmethod
    def _sample(self, n: int, p: dict[str, Any], seed) -> NDArray:
        ...

    @abstractmethod
    def _initial_values(self, rate: float) -> dict[str, float]:
        """Starting values given the exponential rate of the data."""
        ...

    # -- parameter binding ---------------------------------------------

    @property
    def n_parameters(self) -> int:
        return len(self.parameters)

    @property
    def location_index(self) -> int:
        return self.parameters.index(self.location)

    def index(self, which: int | str) -> int:
        """Position of a parameter given its name or position."""
        if isinstance(which, str):
            if which not in self.parameters:
                raise ValidationError(
                    f"{self.name} has no parameter {which!r}; "
                    f"parameters are {', '.join(self.parameters)}"
                )
            return self.parameters.index(which)
        if not 0 <= which < self.n_parameters:
            raise ValidationError(
                f"parameter index {which} out of range for {self.name} "
                f"({self.n_parameters} parameters)"
            )
        return int(which)

    def bind(self, *values, **named) -> dict[str, Any]:
        """Map positional and keyword arguments onto parameter names.

        Positional values are taken in the order of self.parameters.

        Raises:
            ValidationError: On too many, missing, duplicated or unknown
                parameters.
        """
        if len(values) > self.n_parameters:
            raise ValidationError(
                f"{self.name} takes {self.n_parameters} parameters "
                f"({', '.join(self.parameters)}), got {len(values)} positional"
            )
        bound = dict(zip(self.parameters, values))
        for key, value in named.items():
            if key not in self.parameters:
                raise ValidationError(
                    f"{self.name} has no parameter {key!r}; "
                    f"parameters are {', '.join(self.parameters)}"
                )
            if key in bound:
                raise ValidationError(f"{self.name}: parameter {key!r} given twice")
            bound[key] = value
        missing = [k for k in self.parameters if k not in bound]
        if missing:
            raise ValidationError(
                f"{self.name}: missing parameter(s) {', '.join(missing)}"
            )
        return {k: bound[k] for k in self.parameters}

    # -- evaluation ----------------------------------------------------

    def log_hazard(self, t: ArrayLike, *values, **named) -> NDArray:
        return self._log_hazard(t, self.bind(*values, **named))

    def hazard(self, t: ArrayLike, *values, **named) -> NDArray:
        """Hazard at t for untransformed parameter values."""
        log_h = self.log_hazard(t, *values, **named)
        with np.errstate(over="ignore"):
            out = np.exp(log_h)
        apgw.raise_if_nonfinite(np.asarray(out), np.asarray(t) > 0, "hazard")
        return out

    def cumulative_hazard(self, t: ArrayLike, *values, **named) -> NDArray:
        """Cumulative hazard at t for untransformed parameter values."""
        return self._cumulative_hazard(t, self.bind(*values, **named))

    def inverse_cumulative_hazard(self, v: ArrayLike, *values, **named) -> NDArray:
        return self._inverse_cumulative_hazard(v, self.bind(*values, **named))

    def survival(self, t: ArrayLike, *values, **named) -> NDArray:
        return np.exp(-self.cumulative_hazard(t, *values, **named))

    def density(self, t: ArrayLike, *values, **named) -> NDArray:
        p = self.bind(*values, **named)
        return np.exp(self._log_hazard(t, p) - self._cumulative_hazard(t, p))

    def sample(self, n: int, *values, seed=None, **named) -> NDArray:
        """Draw n event times."""
        return self._sample(n, self.bind(*values, **named), seed)

    # -- transforms ----------------------------------------------------

    def transform(self, which: int | str, x: ArrayLike) -> NDArray:
        """Map one parameter value to the working (real-line) scale."""
        return self.transforms[self.index(which)].transform(x)

    def inverse_transform(self, which: int | str, y: ArrayLike) -> NDArray:
        """Map one working value back to the parameter's domain."""
        return self.transforms[self.index(which)].inverse(y)

    def to_working(self, *values, **named) -> NDArray:
        """Whole parameter vector → working scale, in parameter order."""
        p = self.bind(*values, **named)
        return np.array([
            float(tr.transform(p[name]))
            for name, tr in zip(self.parameters, self.transforms)
        ])

    def from_working(self, working: ArrayLike) -> dict[str, Any]:
        """Working vector → named, untransformed parameters."""
        working = np.asarray(working, dtype=np.float64)
        if working.shape != (self.n_parameters,):
            raise ValidationError(
                f"{self.name}: expected {self.n_parameters} working values, "
                f"got shape {working.shape}"
            )
        return {
            name: float(tr.inverse(w))
            for name, tr, w in zip(self.parameters, self.transforms, working)
        }

    # -- initial values ------------------------------------------------

    def initial_guess(self, times: ArrayLike) -> NDArray:
        """Starting parameter vector computed from observed times only.

        Shape parameters start at 1 (φ = γ = κ = 1 makes APGW exponential),
        θ starts at 1 (the identity link), and the rate-type parameter is
        seeded with log(2)/median(t).
        """
        start = self._initial_values(exponential_rate_from_median(times))
        return np.array([start[name] for name in self.parameters], dtype=np.float64)

    # -- descriptor ----------------------------------------------------

    def descriptor(self) -> dict[str, Any]:
        """Plain-record form of this family for custom-distribution fitters.

        Keys: name, pars, location, transforms, inv.transforms, inits.
        """
        return {
            'name': self.name,
            'pars': list(self.parameters),
            'location': self.location,
            'transforms': [tr.transform for tr in self.transforms],
            'inv.transforms': [tr.inverse for tr in self.transforms],
            'inits': self.initial_guess,
        }

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(parameters={self.parameters!r}, "
            f"location={self.location!r})"
        )


# =====================================================================
# Concrete families
# =====================================================================

class APGW(DistributionFamily):
    """Base APGW family. Location: λ."""

    @property
    def name(self) -> str:
        return 'apgw'

    @property
    def parameters(self) -> tuple[str, ...]:
        return BASE_PARAMETERS

    @property
    def location(self) -> str:
        return 'lam'

    @property
    def transforms(self) -> tuple[ParameterTransform, ...]:
        return (LOG, LOG, LOG, SHIFTED_LOG)

    def _log_hazard(self, t, p):
        return apgw.log_hazard(t, p['phi'], p['lam'], p['gamma'], p['kappa'])

    def _cumulative_hazard(self, t, p):
        return apgw.cumulative_hazard(t, p['phi'], p['lam'], p['gamma'], p['kappa'])

    def _inverse_cumulative_hazard(self, v, p):
        return apgw.inverse_cumulative_hazard(v, p['phi'], p['lam'], p['gamma'], p['kappa'])

    def _sample(self, n, p, seed):
        return sampling.sample_apgw(n, p['phi'], p['lam'], p['gamma'], p['kappa'], seed=seed)

    def _initial_values(self, rate):
        return {'phi': 1.0, 'lam': rate, 'gamma': 1.0, 'kappa': 1.0}


class LinkedFamily(DistributionFamily):
    """APGW composed with one link parameter θ."""

    _variant: variants.Variant
    _sampler: Callable[..., NDArray]

    @property
    def variant(self) -> variants.Variant:
        return self._variant

    @property
    def name(self) -> str:
        return f'apgw_{self._variant.name}'

    @property
    def parameters(self) -> tuple[str, ...]:
        return LINKED_PARAMETERS

    @property
    def transforms(self) -> tuple[ParameterTransform, ...]:
        return (LOG, LOG, LOG, SHIFTED_LOG, LOG)

    def _args(self, p):
        return p['phi'], p['lam'], p['gamma'], p['kappa'], p['theta']

    def _log_hazard(self, t, p):
        return self._variant.log_hazard(t, *self._args(p))

    def _cumulative_hazard(self, t, p):
        return self._variant.cumulative_hazard(t, *self._args(p))

    def _inverse_cumulative_hazard(self, v, p):
        return self._variant.inverse_cumulative_hazard(v, *self._args(p))

    def _sample(self, n, p, seed):
        return type(self)._sampler(n, *self._args(p), seed=seed)

    def _initial_values(self, rate):
        return {'phi': 1.0, 'lam': rate, 'gamma': 1.0, 'kappa': 1.0, 'theta': 1.0}


class APGWScale(LinkedFamily):
    """Accelerated failure time: θ rescales time. Location: θ."""

    _variant = variants.SCALE
    _sampler = sampling.sample_scale

    @property
    def location(self) -> str:
        return 'theta'

    def _initial_values(self, rate):
        # H = λφθt when γ = κ = 1, so θ carries the rate.
        return {'phi': 1.0, 'lam': 1.0, 'gamma': 1.0, 'kappa': 1.0, 'theta': rate}


class APGWFrailty(LinkedFamily):
    """Proportional hazards: θ multiplies the hazard. Location: λ."""

    _variant = variants.FRAILTY
    _sampler = sampling.sample_frailty

    @property
    def location(self) -> str:
        return 'lam'


class APGWTilt(LinkedFamily):
    """Proportional odds: H_tilt = g_θ(H). Location: θ."""

    _variant = variants.TILT
    _sampler = sampling.sample_tilt

    @property
    def location(self) -> str:
        return 'theta'


class APGWReverseTilt(LinkedFamily):
    """Proportional generalized tilt: H_rt = H(g_θ(t)). Location: θ."""

    _variant = variants.REVERSE_TILT
    _sampler = sampling.sample_reverse_tilt

    @property
    def location(self) -> str:
        return 'theta'


# =====================================================================
# Registry + resolver
# =====================================================================

FAMILIES: Mapping[str, DistributionFamily] = MappingProxyType({
    family.name: family
    for family in (APGW(), APGWScale(), APGWFrailty(), APGWTilt(), APGWReverseTilt())
})

_ALIASES: dict[str, str] = {
    'base': 'apgw',
    'scale': 'apgw_scale',
    'aft': 'apgw_scale',
    'frailty': 'apgw_frailty',
    'ph': 'apgw_frailty',
    'tilt': 'apgw_tilt',
    'po': 'apgw_tilt',
    'reverse_tilt': 'apgw_reverse_tilt',
    'reverse-tilt': 'apgw_reverse_tilt',
    'pgt': 'apgw_reverse_tilt',
}


def resolve_family(family: str | DistributionFamily) -> DistributionFamily:
    """Resolve a family argument to a registered DistributionFamily.

    Args:
        family: A registered name ('apgw', 'apgw_scale', 'apgw_frailty',
                'apgw_tilt', 'apgw_reverse_tilt'), an alias ('base',
                'aft', 'ph', 'po', 'pgt', ...) or a DistributionFamily
                instance (passed through).

    Raises:
        ConfigurationError: If the string name is not recognized.
        TypeError: If argument is neither string nor DistributionFamily.
    """
    if isinstance(family, DistributionFamily):
        return family
    if isinstance(family, str):
        key = family.lower()
        key = _ALIASES.get(key, key)
        found = FAMILIES.get(key)
        if found is None:
            valid = tuple(FAMILIES.keys())
            raise ConfigurationError(
                f"Unknown family: {family!r}. Valid families: {', '.join(valid)}",
                requested=family,
                valid=valid,
            )
        return found
    raise TypeError(
        f"family must be str or DistributionFamily, got {type(family).__name__}"
    )
