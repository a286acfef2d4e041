"""Entry point for the core library components."""

from __future__ import annotations

from .privacy import (
    BaseMechanism,
    CalibrationError,
    LockedPrivacyAccountant,
    MechanismError,
    NotCalibratedError,
    NumericDomainError,
    PrivacyAccountant,
    PrivacyBudget,
    PrivacyEvent,
    ValidationError,
)
from .utils import (
    BaseSampler,
    NumpySampler,
    ParamValidationError,
    RuntimeConfig,
    configure,
    get_config,
    get_logger,
    make_sampler,
)

__all__: list[str] = [
    "BaseMechanism",
    "CalibrationError",
    "LockedPrivacyAccountant",
    "MechanismError",
    "NotCalibratedError",
    "NumericDomainError",
    "PrivacyAccountant",
    "PrivacyBudget",
    "PrivacyEvent",
    "ValidationError",
    "BaseSampler",
    "NumpySampler",
    "ParamValidationError",
    "RuntimeConfig",
    "configure",
    "get_config",
    "get_logger",
    "make_sampler",
]
