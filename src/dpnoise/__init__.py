"""Noise-addition mechanisms and privacy-loss accounting for differential privacy."""

from __future__ import annotations

from .cdp import (
    GaussianMechanism,
    LaplaceMechanism,
    gaussian_mechanism,
    laplace_mechanism,
)
from .core import (
    LockedPrivacyAccountant,
    MechanismError,
    NumericDomainError,
    NumpySampler,
    BaseSampler,
    PrivacyAccountant,
    ValidationError,
)

__version__ = "0.1.0"

__all__: list[str] = [
    "GaussianMechanism",
    "LaplaceMechanism",
    "gaussian_mechanism",
    "laplace_mechanism",
    "LockedPrivacyAccountant",
    "MechanismError",
    "NumericDomainError",
    "NumpySampler",
    "BaseSampler",
    "PrivacyAccountant",
    "ValidationError",
]
