"""Shared utility helpers used across the core library."""

from .random import (
    BaseSampler,
    NumpySampler,
    create_rng,
    make_sampler,
    reseed_rng,
    split_rng,
)
from .config import (
    RuntimeConfig,
    get_config,
    configure,
)
from .logging import (
    PrivacyFilter,
    get_logger,
    configure_logging,
)
from .param_validation import (
    ensure,
    ensure_finite_real,
    ensure_type,
    ParamValidationError,
)

__all__ = [
    "BaseSampler",
    "NumpySampler",
    "create_rng",
    "make_sampler",
    "reseed_rng",
    "split_rng",
    "RuntimeConfig",
    "get_config",
    "configure",
    "PrivacyFilter",
    "get_logger",
    "configure_logging",
    "ensure",
    "ensure_finite_real",
    "ensure_type",
    "ParamValidationError",
]
