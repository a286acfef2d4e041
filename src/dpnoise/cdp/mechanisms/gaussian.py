"""
Gaussian noise mechanism.

Responsibilities:
    * calibrate sigma from epsilon and sensitivity (optionally delta)
    * add Gaussian noise to scalars and arrays
    * record calibration metadata for reporting

Calibration note:
    The default ``"log-epsilon"`` calibration uses
    ``sigma = sqrt(2 * sensitivity**2 / |ln(epsilon)|)``. It ignores delta and
    differs from the textbook Gaussian mechanism, so it does NOT deliver a
    verified (epsilon, delta)-DP guarantee. ``calibration="classic"`` selects
    ``sigma = sensitivity * sqrt(2 ln(1.25/delta)) / epsilon`` instead, which is
    the standard bound for epsilon < 1.

    Unlike the Laplace mechanism, releases here are not charged to any
    accountant; callers that need accounting must record the spend themselves.
"""
# 说明：高斯噪声机制。
# 职责：
# - 基于 epsilon、sensitivity（classic 模式下还包括 delta）标定噪声标准差 sigma
# - 对标量与数组逐元素加入独立同分布高斯噪声
# - 默认的 log-epsilon 公式不使用 delta，不构成经过验证的 (ε, δ)-DP 保证
# - 本机制不更新记账器

from __future__ import annotations

import math
from typing import Any, Dict, Optional

import numpy as np

from dpnoise.core.privacy.base_mechanism import (
    BaseMechanism,
    CalibrationError,
    ValidationError,
)
from dpnoise.core.utils.logging import get_logger
from dpnoise.core.utils.param_validation import ensure

logger = get_logger(__name__)

LOG_EPSILON = "log-epsilon"
CLASSIC = "classic"
CALIBRATIONS = (LOG_EPSILON, CLASSIC)


def gaussian_sigma(sensitivity: float, epsilon: float, delta: float, calibration: str = LOG_EPSILON) -> float:
    """Noise standard deviation for the given calibration rule."""
    if calibration == LOG_EPSILON:
        log_eps = abs(math.log(epsilon))
        ensure(log_eps > 0.0, "epsilon must differ from 1.0 (|ln(epsilon)| is zero)", error=ValidationError)
        # s * sqrt(2/|ln ε|)，避免先平方 sensitivity 导致上溢或下溢
        sigma = sensitivity * math.sqrt(2.0 / log_eps)
    elif calibration == CLASSIC:
        ensure(delta > 0.0, "delta must be strictly positive for classic calibration", error=ValidationError)
        sigma = sensitivity * math.sqrt(2.0 * math.log(1.25 / delta)) / epsilon
    else:
        raise ValidationError(f"unknown calibration '{calibration}'; expected one of {CALIBRATIONS}")
    ensure(math.isfinite(sigma) and sigma > 0.0, "calibrated sigma must be finite and positive", error=ValidationError)
    return sigma


class GaussianMechanism(BaseMechanism):
    """Gaussian mechanism; see the module docstring for the calibration caveat."""

    def __init__(
        self,
        epsilon: float = 0.5,
        delta: float = 1e-5,
        sensitivity: float = 1.0,
        sampler: Optional[Any] = None,
        name: Optional[str] = None,
        calibration: str = LOG_EPSILON,
    ):
        super().__init__(epsilon=epsilon, delta=delta, sampler=sampler, name=name)
        self.sensitivity = self._validate_sensitivity(sensitivity)
        self.calibration = calibration
        # 构造时即完成一次试算，使非法组合（如 epsilon == 1）在调用边界快速失败
        gaussian_sigma(self.sensitivity, self.epsilon, self.delta, self.calibration)
        self.sigma: Optional[float] = None

    def _calibrate_parameters(
        self,
        *,
        sensitivity: Optional[float],
        delta: Optional[float] = None,
        **kwargs: Any,
    ) -> None:
        """Update sensitivity/delta as needed and compute sigma for the noise."""
        del kwargs
        new_sensitivity = self.sensitivity if sensitivity is None else sensitivity
        new_delta = self.delta if delta is None else self._validate_delta(delta)
        # 先完成计算再写回，失败时保持原有参数不变
        sigma = gaussian_sigma(new_sensitivity, self.epsilon, new_delta, self.calibration)
        self.sensitivity = new_sensitivity
        self.delta = new_delta
        self.sigma = sigma
        self._meta["distribution"] = "gaussian"
        self._meta["calibration"] = self.calibration
        if self.calibration == LOG_EPSILON:
            logger.debug("%s calibrated: sigma=%g (delta=%g not used by log-epsilon rule)", self.name, sigma, self.delta)
        else:
            logger.debug("%s calibrated: sigma=%g", self.name, sigma)

    def randomise(self, value: Any) -> Any:
        """Inject i.i.d. Gaussian noise into scalars, vectors, or numpy arrays."""
        self.require_calibrated()
        if self.sigma is None:
            raise CalibrationError("Gaussian mechanism missing sigma; call calibrate()")
        arr, was_scalar = self._coerce_numeric(value)
        size = None if was_scalar else arr.shape
        noise = np.asarray(self._sampler.draw_normal(self.sigma, size), dtype=float)
        result = arr + noise
        return self._restore_numeric_like(value, result, was_scalar)

    def serialize(self) -> Dict[str, Any]:
        base = super().serialize()
        base.update(
            {
                "sensitivity": self.sensitivity,
                "sigma": self.sigma,
                "calibration": self.calibration,
            }
        )
        return base


def gaussian_mechanism(
    value: Any,
    sensitivity: float,
    epsilon: float,
    delta: float,
    *,
    sampler: Optional[Any] = None,
) -> Any:
    """
    Release ``value`` with Gaussian noise of ``sigma = sqrt(2 * sensitivity**2 / |ln(epsilon)|)``.

    ``delta`` is validated to lie in ``[0, 1)`` but does not enter the
    calibration, and no accountant is updated.

    Raises:
        ValidationError: non-positive sensitivity or epsilon, ``epsilon == 1``,
            or delta outside ``[0, 1)``.
    """
    mechanism = GaussianMechanism(
        epsilon=epsilon,
        delta=delta,
        sensitivity=sensitivity,
        sampler=sampler,
    )
    return mechanism.calibrate().randomise(value)
