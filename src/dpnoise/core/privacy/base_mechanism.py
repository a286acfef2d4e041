"""
Core abstractions shared by every mechanism implementation.

Responsibilities:
    * common parameter validation and sampler management
    * consistent calibration lifecycle
    * snapshot helpers for logging and reporting
    * purpose specific exceptions
"""
# 说明：定义本库所有机制共享的抽象基类与通用工具。
# 职责：
# - 通用参数校验（epsilon / delta / sensitivity）与采样器（Sampler）管理
# - 统一的校准生命周期
# - 状态快照（serialize / to_json），用于日志与报告
# - 特定用途的异常类型

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

import numpy as np

from dpnoise.core.utils.config import get_config
from dpnoise.core.utils.param_validation import (
    ParamValidationError,
    ensure,
    ensure_finite_real,
)
from dpnoise.core.utils.random import BaseSampler, make_sampler


# Exceptions -----------------------------------------------------------------
class MechanismError(Exception):
    """Base exception for mechanism errors."""


class ValidationError(MechanismError, ParamValidationError):
    """Raised when input parameters are invalid."""


class NumericDomainError(MechanismError):
    """Raised when a sampled deviate falls outside the domain of the noise transform."""


class CalibrationError(MechanismError):
    """Raised when calibration fails or is inconsistent."""


class NotCalibratedError(MechanismError):
    """Raised when an operation requires prior calibration."""


# Base abstraction ------------------------------------------------------------
# 所有机制的抽象基类：
#  - 负责 epsilon/delta 校验与采样器管理
#  - 约定统一的校准生命周期（calibrate/require_calibrated）
#  - 提供数值输入的类型与形状规整工具
class BaseMechanism(ABC):
    """Abstract base class for all mechanisms."""

    def __init__(
        self,
        epsilon: float,
        delta: float = 0.0,
        sampler: Optional[Any] = None,
        name: Optional[str] = None,
    ):
        self.epsilon: float = self._validate_epsilon(epsilon)
        self.delta: float = self._validate_delta(delta)
        self.name: str = name or self.__class__.__name__
        self._sampler: BaseSampler = make_sampler(sampler)
        self._calibrated: bool = False
        self._meta: Dict[str, Any] = {}

    # Validation helpers ------------------------------------------------------
    @staticmethod
    def _validate_epsilon(eps: Any) -> float:
        value = ensure_finite_real(eps, label="epsilon", error=ValidationError)
        ensure(value > 0, "epsilon must be a positive real number", error=ValidationError)
        return value

    @staticmethod
    def _validate_delta(delta: Any) -> float:
        value = ensure_finite_real(delta, label="delta", error=ValidationError)
        ensure(0.0 <= value < 1.0, "delta must lie in [0, 1)", error=ValidationError)
        return value

    @staticmethod
    def _validate_sensitivity(sensitivity: Any) -> float:
        value = ensure_finite_real(sensitivity, label="sensitivity", error=ValidationError)
        ensure(value > 0, "sensitivity must be a positive real number", error=ValidationError)
        return value

    # Calibration lifecycle ---------------------------------------------------
    # 对外统一的校准入口：可选择性传入 sensitivity 或机制特定参数。
    # 成功后会将 _calibrated 置为 True，用于运行期保护。
    def calibrate(self, sensitivity: Optional[float] = None, **kwargs: Any) -> "BaseMechanism":
        """
        Common calibration entry point.
        - Args:
            - sensitivity: Optional numeric sensitivity override.
            - **kwargs: Mechanism specific calibration kwargs.
        - Returns:
            - self (allows chaining).
        """
        if sensitivity is not None:
            sensitivity = self._validate_sensitivity(sensitivity)
        # 子类成功应用参数后才切换生命周期标志位
        self._calibrate_parameters(sensitivity=sensitivity, **kwargs)
        self._calibrated = True
        return self

    @abstractmethod
    def _calibrate_parameters(self, *, sensitivity: Optional[float], **kwargs: Any) -> None:
        """Subclasses map epsilon, delta and sensitivity to their noise parameters."""

    @abstractmethod
    def randomise(self, value: Any) -> Any:
        """Add mechanism specific noise to the provided value."""

    def add_noise(self, value: Any) -> Any:
        """Alias for randomise."""
        return self.randomise(value)

    @property
    def calibrated(self) -> bool:
        return self._calibrated

    def require_calibrated(self) -> None:
        if not self._calibrated:
            raise NotCalibratedError("mechanism not calibrated; call calibrate() first")

    # Sampler -----------------------------------------------------------------
    @property
    def sampler(self) -> BaseSampler:
        return self._sampler

    def reseed(self, seed: Optional[Any]) -> None:
        """Replace the sampler with one constructed from `seed` (or `seed` itself if it is a sampler)."""
        self._sampler = make_sampler(seed)

    # Snapshot ----------------------------------------------------------------
    def serialize(self) -> Dict[str, Any]:
        """Return a JSON serialisable snapshot of the mechanism."""
        return {
            "class": f"{self.__class__.__module__}.{self.__class__.__qualname__}",
            "mechanism": self.mechanism_id,
            "name": self.name,
            "epsilon": self.epsilon,
            "delta": self.delta,
            "calibrated": bool(self._calibrated),
            "meta": dict(self._meta),
        }

    def to_json(self) -> str:
        return json.dumps(self.serialize(), default=str)

    @property
    def mechanism_id(self) -> str:
        """Stable identifier used in snapshots and accountant events."""
        lowered = self.__class__.__name__.lower()
        suffix = "mechanism"
        if lowered.endswith(suffix):
            return lowered[: -len(suffix)] or lowered
        return lowered

    # Shared numeric helpers --------------------------------------------------
    # 把任意数值/序列转为 np.ndarray[float]，同时记录是否源自标量，便于还原类型。
    @staticmethod
    def _coerce_numeric(value: Any) -> Tuple[np.ndarray, bool]:
        if isinstance(value, (str, bytes)):
            raise ValidationError("value must be numeric, sequence, or ndarray")
        try:
            arr = np.asarray(value, dtype=float)
        except (TypeError, ValueError) as exc:
            raise ValidationError("value must be numeric, sequence, or ndarray") from exc
        if get_config().strict_validation and not np.all(np.isfinite(arr)):
            raise ValidationError("value must be finite")
        return arr, arr.ndim == 0

    @staticmethod
    def _restore_numeric_like(original: Any, value: np.ndarray, was_scalar: bool) -> Any:
        if was_scalar:
            return float(value)
        if isinstance(original, np.ndarray):
            return value
        if isinstance(original, tuple):
            return tuple(value.tolist())
        if isinstance(original, list):
            return value.tolist()
        return value

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} name={self.name} "
            f"eps={self.epsilon} delta={self.delta} calibrated={self._calibrated}>"
        )
