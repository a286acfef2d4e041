"""
Unit tests for validation helpers.
"""
# 说明：参数验证工具（ensure / ensure_type / ensure_finite_real）的单元测试。

import math

import pytest

from dpnoise.core.utils import ParamValidationError, ensure, ensure_finite_real, ensure_type


class _CustomError(Exception):
    pass


def test_ensure_passes_and_fails() -> None:
    ensure(True, "should not raise")
    with pytest.raises(ParamValidationError):
        ensure(False, "error")
    with pytest.raises(_CustomError):
        ensure(False, "error", error=_CustomError)


def test_ensure_type_checks() -> None:
    ensure_type(5, (int,), label="value")
    with pytest.raises(ParamValidationError, match="count must be instance of int"):
        ensure_type("text", (int,), label="count")


@pytest.mark.parametrize("value", [1, 2.5, -3.0, 0])
def test_ensure_finite_real_accepts_numbers(value) -> None:
    assert ensure_finite_real(value) == float(value)


@pytest.mark.parametrize("value", [True, "1.0", None, math.nan, math.inf, -math.inf])
def test_ensure_finite_real_rejects(value) -> None:
    with pytest.raises(ParamValidationError):
        ensure_finite_real(value, label="epsilon")
