"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def apgw_params():
    """A non-degenerate APGW parameter set (phi, lam, gamma, kappa)."""
    return 1.0, 2.0, 1.5, 0.5


@pytest.fixture
def defective_params():
    """-1 < kappa < 0: cumulative hazard bounded by lam(kappa+1)/(-kappa) = 0.5."""
    return 1.0, 0.5, 1.5, -0.5
