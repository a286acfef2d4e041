"""Entry point for the Centralised Differential Privacy (CDP) package."""

from __future__ import annotations

from .mechanisms import (
    GaussianMechanism,
    LaplaceMechanism,
    gaussian_mechanism,
    laplace_mechanism,
)

__all__: list[str] = [
    "GaussianMechanism",
    "LaplaceMechanism",
    "gaussian_mechanism",
    "laplace_mechanism",
]
