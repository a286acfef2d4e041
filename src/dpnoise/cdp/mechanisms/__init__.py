"""Centralised differential privacy mechanisms."""
from .laplace import LaplaceMechanism, laplace_mechanism, laplace_noise_from_uniform
from .gaussian import GaussianMechanism, gaussian_mechanism, gaussian_sigma

__all__ = [
    "LaplaceMechanism",
    "laplace_mechanism",
    "laplace_noise_from_uniform",
    "GaussianMechanism",
    "gaussian_mechanism",
    "gaussian_sigma",
]
