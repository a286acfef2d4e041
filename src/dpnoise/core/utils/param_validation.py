"""
Reusable validation helpers.
"""
# 说明：参数验证相关的辅助函数，用于在库内部统一进行轻量级参数检查。
# 职责：
# - ParamValidationError：专门用于参数校验失败的异常类型
# - ensure：基于布尔条件触发参数校验错误的轻量断言工具
# - ensure_type：检查参数是否属于指定类型集合，并在失败时给出带 label 的错误提示
# - ensure_finite_real：检查参数为有限实数（排除 bool、NaN、±Inf）并返回 float

from __future__ import annotations

import math
import numbers
from typing import Any, Tuple, Type


class ParamValidationError(ValueError):
    """Raised when parameter validation fails."""


def ensure(condition: bool, message: str, *, error: Type[Exception] = ParamValidationError) -> None:
    if not condition:
        raise error(message)


def ensure_type(
    value: Any,
    expected: Tuple[type, ...],
    *,
    label: str = "value",
    error: Type[Exception] = ParamValidationError,
) -> None:
    # 检查 value 是否为 expected 集合中的任意类型，否则抛出带字段标签的错误
    if not isinstance(value, expected):
        names = ", ".join(t.__name__ for t in expected)
        raise error(f"{label} must be instance of {names}")


def ensure_finite_real(
    value: Any,
    *,
    label: str = "value",
    error: Type[Exception] = ParamValidationError,
) -> float:
    """Return ``value`` as a float, rejecting bools, NaN and infinities."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise error(f"{label} must be a real number")
    numeric = float(value)
    if not math.isfinite(numeric):
        raise error(f"{label} must be finite")
    return numeric
