"""
Privacy-loss tracking under sequential composition.

Provides an accountant that records the (ε, δ) spent by each mechanism
invocation and sums them linearly. The configured budget is informational:
it is reported alongside the spend but never enforced as a ceiling.
"""
# 说明：隐私损失记账工具，按朴素顺序组合（线性相加）累计 (ε, δ) 花费。
# 职责：
# - PrivacyBudget：封装不可变的 (epsilon, delta) 对，并支持加减与字典导出
# - PrivacyEvent：记录单次隐私花费事件及其审计信息（机制、描述）
# - PrivacyAccountant：维护配置预算（仅作信息展示）、累计花费与事件列表，提供只读快照
# - LockedPrivacyAccountant：以可重入锁保护 update，供多线程共享同一记账器时使用
# 约定：
# - 累计花费只能通过 update 单调递增；没有 reset，新会话请新建实例
# - 本模块不做持久化，serialize 仅用于进程内报告

from __future__ import annotations

import json
import math
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from dpnoise.core.utils.logging import get_logger

from .base_mechanism import ValidationError

logger = get_logger(__name__)


def _validate_budget_value(value: Any, label: str, *, allow_infinite: bool = False) -> float:
    """Ensure epsilon/delta components are non-negative and, unless allowed, finite."""
    if isinstance(value, bool):
        raise ValidationError(f"{label} must be a real number")
    try:
        numeric = float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{label} must be convertible to float") from exc
    if math.isnan(numeric):
        raise ValidationError(f"{label} must not be NaN")
    if not allow_infinite and math.isinf(numeric):
        raise ValidationError(f"{label} must be finite")
    if numeric < 0:
        raise ValidationError(f"{label} must be non-negative")
    return numeric


@dataclass(frozen=True)
class PrivacyBudget:
    """Simple container for epsilon/delta pairs; ``inf`` denotes an unbounded component."""

    epsilon: float = 0.0
    delta: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "epsilon", _validate_budget_value(self.epsilon, "epsilon", allow_infinite=True))
        object.__setattr__(self, "delta", _validate_budget_value(self.delta, "delta", allow_infinite=True))

    def __add__(self, other: "PrivacyBudget") -> "PrivacyBudget":
        return PrivacyBudget(self.epsilon + other.epsilon, self.delta + other.delta)

    def __sub__(self, other: "PrivacyBudget") -> "PrivacyBudget":
        # 减法结果下限为 0，避免出现负预算
        return PrivacyBudget(
            max(self.epsilon - other.epsilon, 0.0),
            max(self.delta - other.delta, 0.0),
        )

    def as_tuple(self) -> Tuple[float, float]:
        return (self.epsilon, self.delta)

    def to_dict(self) -> Dict[str, float]:
        return {"epsilon": float(self.epsilon), "delta": float(self.delta)}


@dataclass(frozen=True)
class PrivacyEvent:
    """Record for a single privacy spend."""

    epsilon: float
    delta: float = 0.0
    mechanism: Optional[str] = None
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "epsilon": float(self.epsilon),
            "delta": float(self.delta),
            "mechanism": self.mechanism,
            "description": self.description,
        }


class PrivacyAccountant:
    """
    Track cumulative privacy loss across mechanism invocations.

    Composition is naive sequential composition: the totals are the plain
    sums of every (ε, δ) passed to :meth:`update`. This is a valid upper
    bound, not the tightest achievable one.

    The accountant is not thread-safe; share one across threads only through
    :class:`LockedPrivacyAccountant`.
    """

    def __init__(self, epsilon: float = 0.0, delta: float = 0.0, *, name: Optional[str] = None):
        """
        Args:
            epsilon: Configured epsilon budget, stored for reporting only.
                ``float("inf")`` marks an unbounded budget.
            delta: Configured delta budget, stored for reporting only.
            name: Optional identifier used in logs and snapshots.
        """
        self.name = name or "PrivacyAccountant"
        self.configured_budget = PrivacyBudget(epsilon, delta)
        self._spent = PrivacyBudget(0.0, 0.0)
        self._events: List[PrivacyEvent] = []

    # --------------------------------------------------------------------- queries
    @property
    def configured_epsilon(self) -> float:
        return self.configured_budget.epsilon

    @property
    def configured_delta(self) -> float:
        return self.configured_budget.delta

    @property
    def total_epsilon(self) -> float:
        return self._spent.epsilon

    @property
    def total_delta(self) -> float:
        return self._spent.delta

    @property
    def spent(self) -> PrivacyBudget:
        """Return the cumulative spending so far."""
        return self._spent

    @property
    def remaining(self) -> PrivacyBudget:
        """Configured budget minus spend, floored at zero. Informational only."""
        return self.configured_budget - self._spent

    @property
    def events(self) -> Tuple[PrivacyEvent, ...]:
        return tuple(self._events)

    def get_privacy_loss(self) -> Tuple[float, float]:
        """Return ``(total_epsilon, total_delta)`` without mutating state."""
        # _spent 为不可变对象，单次读取即得到一致的快照
        spent = self._spent
        return (spent.epsilon, spent.delta)

    # ----------------------------------------------------------------- mutations
    def update(
        self,
        epsilon: float,
        delta: float = 0.0,
        *,
        mechanism: Optional[str] = None,
        description: Optional[str] = None,
    ) -> PrivacyEvent:
        """
        Add ``(epsilon, delta)`` to the running totals and record an event.

        Negative or non-finite inputs raise ``ValidationError`` and leave the
        totals unchanged.
        """
        epsilon = _validate_budget_value(epsilon, "epsilon")
        delta = _validate_budget_value(delta, "delta")
        event = PrivacyEvent(epsilon=epsilon, delta=delta, mechanism=mechanism, description=description)
        self._events.append(event)
        self._spent = PrivacyBudget(self._spent.epsilon + epsilon, self._spent.delta + delta)
        logger.debug(
            "%s spent eps=%g delta=%g via %s (total eps=%g delta=%g)",
            self.name,
            epsilon,
            delta,
            mechanism or "direct update",
            self._spent.epsilon,
            self._spent.delta,
        )
        return event

    # -------------------------------------------------------------- snapshots
    def serialize(self) -> Dict[str, Any]:
        """Return a JSON-friendly snapshot of the accountant state."""
        return {
            "name": self.name,
            "configured_budget": self.configured_budget.to_dict(),
            "spent": self._spent.to_dict(),
            "events": [event.to_dict() for event in self._events],
        }

    def to_json(self) -> str:
        return json.dumps(self.serialize())

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} name={self.name!r} "
            f"configured={self.configured_budget.to_dict()} spent={self._spent.to_dict()} "
            f"events={len(self._events)}>"
        )


class LockedPrivacyAccountant(PrivacyAccountant):
    """PrivacyAccountant whose updates and snapshots are serialised by a re-entrant lock."""

    def __init__(self, epsilon: float = 0.0, delta: float = 0.0, *, name: Optional[str] = None):
        super().__init__(epsilon, delta, name=name)
        self._lock = threading.RLock()

    def update(
        self,
        epsilon: float,
        delta: float = 0.0,
        *,
        mechanism: Optional[str] = None,
        description: Optional[str] = None,
    ) -> PrivacyEvent:
        with self._lock:
            return super().update(epsilon, delta, mechanism=mechanism, description=description)

    @property
    def events(self) -> Tuple[PrivacyEvent, ...]:
        with self._lock:
            return tuple(self._events)

    def serialize(self) -> Dict[str, Any]:
        with self._lock:
            return super().serialize()
