"""
Unit tests for the Gaussian mechanism.

Covers:
    * log-epsilon and classic sigma calibration
    * degenerate epsilon and delta domain validation
    * noise addition for scalars and arrays
"""
# 说明：对高斯机制进行单元测试。
# 覆盖：
# - 默认 log-epsilon 公式 σ = sqrt(2Δ² / |ln ε|) 与 classic 公式
# - ε == 1、ε ≤ 0、δ ∉ [0, 1) 等非法参数的 ValidationError 分支
# - 标量与数组加噪时的返回类型与形状保持

import math

import numpy as np
import pytest

from dpnoise.cdp.mechanisms.gaussian import (
    GaussianMechanism,
    gaussian_mechanism,
    gaussian_sigma,
)
from dpnoise.core.privacy.base_mechanism import NotCalibratedError, ValidationError


@pytest.fixture
def gaussian() -> GaussianMechanism:
    return GaussianMechanism(epsilon=0.5, delta=1e-5, sensitivity=2.0, sampler=0)


def test_calibrate_sets_log_epsilon_sigma(gaussian: GaussianMechanism) -> None:
    gaussian.calibrate()
    expected = math.sqrt(2.0 * 2.0 ** 2 / abs(math.log(0.5)))
    assert gaussian.sigma == pytest.approx(expected)
    assert gaussian._meta.get("distribution") == "gaussian"
    assert gaussian._meta.get("calibration") == "log-epsilon"


def test_log_epsilon_sigma_ignores_delta() -> None:
    assert gaussian_sigma(1.0, 0.5, 1e-9) == gaussian_sigma(1.0, 0.5, 0.5)
    assert gaussian_sigma(1.0, 0.5, 0.0) == pytest.approx(math.sqrt(2.0 / math.log(2.0)))


def test_epsilon_above_one_uses_absolute_log() -> None:
    assert gaussian_sigma(1.0, math.e, 0.0) == pytest.approx(math.sqrt(2.0))


@pytest.mark.parametrize("sensitivity", [1e200, 1e-200])
def test_log_epsilon_sigma_extreme_sensitivity(sensitivity: float) -> None:
    sigma = gaussian_sigma(sensitivity, 0.5, 1e-5)
    assert math.isfinite(sigma) and sigma > 0.0
    assert sigma == pytest.approx(sensitivity * math.sqrt(2.0 / math.log(2.0)))
    assert math.isfinite(gaussian_mechanism(0.0, sensitivity, 0.5, 1e-5, sampler=0))


def test_classic_calibration_formula() -> None:
    mech = GaussianMechanism(epsilon=0.5, delta=1e-4, sensitivity=2.0, calibration="classic").calibrate()
    expected = 2.0 * math.sqrt(2.0 * math.log(1.25 / 1e-4)) / 0.5
    assert mech.sigma == pytest.approx(expected)


def test_classic_calibration_requires_positive_delta() -> None:
    with pytest.raises(ValidationError):
        GaussianMechanism(epsilon=0.5, delta=0.0, calibration="classic")


def test_unknown_calibration_rejected() -> None:
    with pytest.raises(ValidationError):
        GaussianMechanism(calibration="analytic")


def test_gaussian_mechanism_uses_injected_sampler(scripted_sampler) -> None:
    sampler = scripted_sampler(normals=[1.0])
    noisy = gaussian_mechanism(10.0, 1.0, 0.5, 1e-5, sampler=sampler)
    sigma = math.sqrt(2.0 / math.log(2.0))
    assert sampler.sigmas == [pytest.approx(sigma)]
    assert noisy == pytest.approx(10.0 + sigma)


def test_gaussian_mechanism_returns_finite_value() -> None:
    noisy = gaussian_mechanism(10.0, 1.0, 0.5, 1e-5)
    assert math.isfinite(noisy)


def test_epsilon_of_one_is_degenerate() -> None:
    with pytest.raises(ValidationError):
        gaussian_mechanism(1.0, 1.0, 1.0, 1e-5)


@pytest.mark.parametrize("epsilon", [0.0, -0.5])
def test_non_positive_epsilon_rejected(epsilon: float) -> None:
    with pytest.raises(ValidationError):
        gaussian_mechanism(1.0, 1.0, epsilon, 1e-5)


@pytest.mark.parametrize("delta", [-1e-6, 1.0, 1.5])
def test_delta_outside_unit_interval_rejected(delta: float) -> None:
    with pytest.raises(ValidationError):
        gaussian_mechanism(1.0, 1.0, 0.5, delta)


def test_delta_zero_is_accepted() -> None:
    assert math.isfinite(gaussian_mechanism(1.0, 1.0, 0.5, 0.0, sampler=3))


def test_non_positive_sensitivity_rejected() -> None:
    with pytest.raises(ValidationError):
        gaussian_mechanism(1.0, 0.0, 0.5, 1e-5)


def test_calibrate_with_delta_override(gaussian: GaussianMechanism) -> None:
    gaussian.calibrate(delta=1e-3)
    assert gaussian.delta == 1e-3


def test_invalid_delta_override_keeps_state(gaussian: GaussianMechanism) -> None:
    gaussian.calibrate()
    sigma = gaussian.sigma
    with pytest.raises(ValidationError):
        gaussian.calibrate(delta=2.0)
    assert gaussian.delta == 1e-5
    assert gaussian.sigma == sigma


def test_randomise_without_calibration(gaussian: GaussianMechanism) -> None:
    with pytest.raises(NotCalibratedError):
        gaussian.randomise(1.0)


def test_randomise_scalar_and_array(gaussian: GaussianMechanism) -> None:
    gaussian.calibrate()
    assert isinstance(gaussian.randomise(0.0), float)
    arr = np.zeros((4,))
    result = gaussian.randomise(arr)
    assert isinstance(result, np.ndarray)
    assert result.shape == arr.shape


def test_empirical_std_matches_sigma() -> None:
    mech = GaussianMechanism(epsilon=0.5, delta=1e-5, sensitivity=1.0, sampler=99).calibrate()
    samples = mech.randomise(np.zeros(50_000))
    assert abs(float(np.mean(samples))) < 0.05
    assert float(np.std(samples)) == pytest.approx(mech.sigma, rel=0.02)


def test_serialize_reports_calibration(gaussian: GaussianMechanism) -> None:
    gaussian.calibrate()
    data = gaussian.serialize()
    assert data["mechanism"] == "gaussian"
    assert data["calibration"] == "log-epsilon"
    assert data["sigma"] == gaussian.sigma
