"""Core privacy abstractions and shared exceptions."""
from .base_mechanism import (
    BaseMechanism,
    MechanismError,
    ValidationError,
    NumericDomainError,
    CalibrationError,
    NotCalibratedError,
)
from .privacy_accountant import (
    LockedPrivacyAccountant,
    PrivacyAccountant,
    PrivacyBudget,
    PrivacyEvent,
)

__all__ = [
    "BaseMechanism",
    "MechanismError",
    "ValidationError",
    "NumericDomainError",
    "CalibrationError",
    "NotCalibratedError",
    "LockedPrivacyAccountant",
    "PrivacyAccountant",
    "PrivacyBudget",
    "PrivacyEvent",
]
