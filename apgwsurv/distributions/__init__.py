"""
The APGW distribution family and its regression submodels.

Public API:
    hazard, cumulative_hazard, inverse_cumulative_hazard, ...  (base APGW)
    scale_* / frailty_* / tilt_* / reverse_tilt_*              (variants)
    sample_apgw, sample_scale, ..., sample                     (samplers)
    FAMILIES, resolve_family, DistributionFamily               (descriptors)
    LogTransform, ShiftedLogTransform, log_generalized_logistic
"""

from apgwsurv.distributions.apgw import (
    cumulative_hazard,
    cumulative_hazard_supremum,
    density,
    hazard,
    inverse_cumulative_hazard,
    log_hazard,
    survival,
)
from apgwsurv.distributions.links import (
    LogTransform,
    ParameterTransform,
    ShiftedLogTransform,
    inverse_log_generalized_logistic,
    log_generalized_logistic,
)
from apgwsurv.distributions.variants import (
    frailty_cumulative_hazard,
    frailty_hazard,
    linked_cumulative_hazard,
    linked_hazard,
    linked_inverse_cumulative_hazard,
    resolve_variant,
    reverse_tilt_cumulative_hazard,
    reverse_tilt_hazard,
    scale_cumulative_hazard,
    scale_hazard,
    tilt_cumulative_hazard,
    tilt_hazard,
)
from apgwsurv.distributions.sampling import (
    sample,
    sample_apgw,
    sample_frailty,
    sample_reverse_tilt,
    sample_scale,
    sample_tilt,
)
from apgwsurv.distributions.families import (
    FAMILIES,
    APGW,
    APGWFrailty,
    APGWReverseTilt,
    APGWScale,
    APGWTilt,
    DistributionFamily,
    resolve_family,
)

__all__ = [
    # base
    "hazard",
    "log_hazard",
    "cumulative_hazard",
    "inverse_cumulative_hazard",
    "cumulative_hazard_supremum",
    "survival",
    "density",
    # links
    "log_generalized_logistic",
    "inverse_log_generalized_logistic",
    "ParameterTransform",
    "LogTransform",
    "ShiftedLogTransform",
    # variants
    "scale_hazard",
    "scale_cumulative_hazard",
    "frailty_hazard",
    "frailty_cumulative_hazard",
    "tilt_hazard",
    "tilt_cumulative_hazard",
    "reverse_tilt_hazard",
    "reverse_tilt_cumulative_hazard",
    "linked_hazard",
    "linked_cumulative_hazard",
    "linked_inverse_cumulative_hazard",
    "resolve_variant",
    # samplers
    "sample",
    "sample_apgw",
    "sample_scale",
    "sample_frailty",
    "sample_tilt",
    "sample_reverse_tilt",
    # families
    "FAMILIES",
    "DistributionFamily",
    "APGW",
    "APGWScale",
    "APGWFrailty",
    "APGWTilt",
    "APGWReverseTilt",
    "resolve_family",
]
