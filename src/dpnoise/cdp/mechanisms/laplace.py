"""
Laplace mechanism for pure differential privacy.

Responsibilities:
    * calibrate Laplace scale from epsilon and sensitivity
    * add Laplace noise to scalars, sequences, and arrays via the inverse CDF
    * charge (epsilon, 0) to an attached accountant once per release
"""
# 说明：实现纯 (ε, 0)-DP 的拉普拉斯机制。
# 主要职责：
# 1) 由 epsilon 与全局敏感度 sensitivity 计算拉普拉斯噪声尺度 scale = sensitivity / epsilon
# 2) 从采样器取开区间 (-0.5, 0.5) 的均匀变量 u，经逆 CDF 变换得到噪声：
#    noise = -scale * sign(u) * ln(1 - 2|u|)
# 3) 每次发布向记账器登记一次 (epsilon, 0)

from __future__ import annotations

import math
from typing import Any, Dict, Optional

import numpy as np

from dpnoise.core.privacy.base_mechanism import (
    BaseMechanism,
    CalibrationError,
    NumericDomainError,
    ValidationError,
)
from dpnoise.core.privacy.privacy_accountant import PrivacyAccountant
from dpnoise.core.utils.logging import get_logger
from dpnoise.core.utils.param_validation import ensure, ensure_type

logger = get_logger(__name__)


def laplace_noise_from_uniform(uniform: Any, scale: float) -> np.ndarray:
    """
    Map uniform deviate(s) on (-0.5, 0.5) to zero-centred Laplace noise.

    This is the exact inverse CDF of Laplace(0, scale). ``log1p`` is used for
    ``ln(1 - 2|u|)`` so small deviates keep full precision.

    Raises:
        NumericDomainError: if any deviate lies outside the open interval
            (the logarithm would be undefined at ``|u| = 0.5``).
    """
    u = np.asarray(uniform, dtype=float)
    # NaN 比较结果为 False，同样会被拦截
    if not np.all(np.abs(u) < 0.5):
        raise NumericDomainError("uniform deviate must lie strictly inside (-0.5, 0.5)")
    return -scale * np.sign(u) * np.log1p(-2.0 * np.abs(u))


class LaplaceMechanism(BaseMechanism):
    """Pure (epsilon, 0)-DP Laplace mechanism."""

    def __init__(
        self,
        epsilon: float = 1.0,
        sensitivity: float = 1.0,
        sampler: Optional[Any] = None,
        name: Optional[str] = None,
        accountant: Optional[PrivacyAccountant] = None,
    ):
        super().__init__(epsilon=epsilon, sampler=sampler, name=name)
        self.sensitivity = self._validate_sensitivity(sensitivity)
        self.scale: Optional[float] = None
        if accountant is not None:
            ensure_type(accountant, (PrivacyAccountant,), label="accountant", error=ValidationError)
        self.accountant = accountant

    def _calibrate_parameters(self, *, sensitivity: Optional[float], **kwargs: Any) -> None:
        """Refresh the global sensitivity (if provided) and compute the Laplace scale."""
        del kwargs
        if sensitivity is not None:
            self.sensitivity = sensitivity
        scale = self.sensitivity / self.epsilon
        ensure(math.isfinite(scale), "sensitivity / epsilon overflows", error=ValidationError)
        self.scale = scale
        self._meta["distribution"] = "laplace"
        logger.debug("%s calibrated: scale=%g", self.name, scale)

    def randomise(self, value: Any) -> Any:
        """Add Laplace noise element-wise to numeric inputs."""
        # 加噪主入口：
        # 1) 确保已完成校准（scale 已就绪）
        # 2) 将输入统一为 ndarray，并记录是否为标量以便后续还原类型
        # 3) 采样并加噪成功后才向记账器登记，失败时记账器保持不变
        self.require_calibrated()
        if self.scale is None:
            raise CalibrationError("Laplace mechanism missing scale; call calibrate()")
        arr, was_scalar = self._coerce_numeric(value)
        size = None if was_scalar else arr.shape
        noise = laplace_noise_from_uniform(self._sampler.draw_uniform(size), self.scale)
        result = arr + noise
        if self.accountant is not None:
            self.accountant.update(self.epsilon, 0.0, mechanism=self.mechanism_id)
        return self._restore_numeric_like(value, result, was_scalar)

    def serialize(self) -> Dict[str, Any]:
        base = super().serialize()
        base.update({"sensitivity": self.sensitivity, "scale": self.scale})
        return base


def laplace_mechanism(
    value: Any,
    sensitivity: float,
    epsilon: float,
    accountant: PrivacyAccountant,
    *,
    sampler: Optional[Any] = None,
) -> Any:
    """
    Release ``value`` with Laplace noise of scale ``sensitivity / epsilon``.

    The accountant is charged ``(epsilon, 0.0)`` exactly once, after the noise
    has been drawn. Invalid parameters raise ``ValidationError`` before the
    accountant is touched.

    Args:
        value: Query answer to perturb (scalar, sequence, or ndarray).
        sensitivity: Global sensitivity of the query, must be positive.
        epsilon: Privacy budget spent by this release, must be positive.
        accountant: Accountant recording the spend.
        sampler: Optional sampler, seed, or numpy Generator.

    Returns:
        The noisy value, in the same container type as ``value``.
    """
    ensure_type(accountant, (PrivacyAccountant,), label="accountant", error=ValidationError)
    mechanism = LaplaceMechanism(
        epsilon=epsilon,
        sensitivity=sensitivity,
        sampler=sampler,
        accountant=accountant,
    )
    return mechanism.calibrate().randomise(value)
