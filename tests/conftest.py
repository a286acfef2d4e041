"""Shared pytest configuration, path setup and sampler doubles for test modules."""

import sys
from pathlib import Path

import numpy as np
import pytest

# Ensure repo root and src/ are on sys.path for all tests
_ROOT = Path(__file__).resolve().parents[1]
_SRC = _ROOT / "src"
for p in (str(_ROOT), str(_SRC)):
    if p not in sys.path:
        sys.path.insert(0, p)

from dpnoise.core.utils.config import get_config  # noqa: E402
from dpnoise.core.utils.random import BaseSampler  # noqa: E402


class ScriptedSampler(BaseSampler):
    """Deterministic sampler replaying fixed uniform and normal deviates."""
    # 测试替身：按顺序回放预设的均匀/正态变量，并记录 draw_normal 收到的 sigma

    def __init__(self, uniforms=(), normals=()):
        self.uniforms = list(uniforms)
        self.normals = list(normals)
        self.sigmas = []

    def draw_uniform(self, size=None):
        if size is None:
            return self.uniforms.pop(0)
        count = int(np.prod(size))
        values = [self.uniforms.pop(0) for _ in range(count)]
        return np.asarray(values, dtype=float).reshape(size)

    def draw_normal(self, sigma, size=None):
        self.sigmas.append(sigma)
        if size is None:
            return self.normals.pop(0) * sigma
        count = int(np.prod(size))
        values = [self.normals.pop(0) * sigma for _ in range(count)]
        return np.asarray(values, dtype=float).reshape(size)


@pytest.fixture
def scripted_sampler():
    """Factory fixture building ScriptedSampler instances."""
    return ScriptedSampler


@pytest.fixture
def runtime_config():
    """Yield the global RuntimeConfig and restore its fields afterwards."""
    # 测试结束后恢复全局配置，避免 configure(...) 在测试之间泄漏
    config = get_config()
    snapshot = dict(vars(config))
    yield config
    for key, value in snapshot.items():
        setattr(config, key, value)
