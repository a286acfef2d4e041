"""
Random number generation helpers and variate samplers.

Responsibilities
  - Centralize RNG creation and seeding.
  - Provide reproducible splits for per-thread or per-session samplers.
  - Define the sampler interface the mechanisms draw their deviates from.

Usage Context
  - Mechanisms accept any ``BaseSampler``; tests inject deterministic ones.
  - ``NumpySampler`` is the default and wraps a numpy ``Generator``.

Limitations
  - Relies on numpy Generator behavior for reproducibility.
  - A sampler instance is not safe to share between threads; spawn one per thread.
"""
# 说明：随机数生成与变量采样工具，用于在库中统一管理 RNG 的创建、复用与注入。
# 职责：
# - create_rng / reseed_rng：集中封装 numpy Generator 的创建与重置逻辑，支持显式种子与已有生成器
# - split_rng：从单一 RNG 派生出多个独立生成器，便于每线程/每会话各持一个采样器
# - BaseSampler：机制依赖的采样接口（开区间 (-0.5, 0.5) 均匀变量、零均值正态变量）
# - NumpySampler：基于 numpy Generator 的默认实现
# - make_sampler：将 None / 种子 / Generator / 采样器统一规范化为采样器

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence, Union

import numpy as np

from .config import get_config

Size = Optional[Union[int, Sequence[int]]]


def create_rng(seed: Optional[Any] = None) -> np.random.Generator:
    """Create a numpy Generator from a seed, SeedSequence, or existing generator."""
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)


def reseed_rng(rng: np.random.Generator, seed: Optional[Any]) -> np.random.Generator:
    """Replace RNG state with a new seed; returns the generator for chaining."""
    # 用新的种子生成状态并替换给定 rng 的内部状态，保持对象标识不变
    rng.bit_generator.state = create_rng(seed).bit_generator.state
    return rng


def split_rng(rng: np.random.Generator, num: int) -> List[np.random.Generator]:
    """Split an RNG into `num` independent generators."""
    if num <= 0:
        raise ValueError("num must be positive")
    return list(rng.spawn(num))


class BaseSampler(ABC):
    """
    Source of the random deviates consumed by the noise mechanisms.

    Implementations must honour two contracts:

    - ``draw_uniform`` returns values strictly inside ``(-0.5, 0.5)``.
    - ``draw_normal`` returns values with mean 0 and standard deviation ``sigma``.

    With ``size=None`` a Python float is returned, otherwise an ndarray of
    the requested shape.
    """

    @abstractmethod
    def draw_uniform(self, size: Size = None) -> Any:
        """Uniform deviate(s) on the open interval (-0.5, 0.5)."""

    @abstractmethod
    def draw_normal(self, sigma: float, size: Size = None) -> Any:
        """Normal deviate(s) with mean 0 and standard deviation ``sigma``."""


class NumpySampler(BaseSampler):
    """Default sampler backed by ``numpy.random.Generator``."""

    def __init__(self, seed: Optional[Any] = None):
        self._rng = create_rng(seed)

    @property
    def rng(self) -> np.random.Generator:
        return self._rng

    def draw_uniform(self, size: Size = None) -> Any:
        # Generator.random() 取值于 [0, 1)，平移后为 [-0.5, 0.5)；
        # 上端点天然排除，下端点 -0.5 需重新抽样
        if size is None:
            sample = self._rng.random() - 0.5
            while sample <= -0.5:
                sample = self._rng.random() - 0.5
            return float(sample)
        sample = self._rng.random(size) - 0.5
        bad = sample <= -0.5
        while np.any(bad):
            sample[bad] = self._rng.random(int(bad.sum())) - 0.5
            bad = sample <= -0.5
        return sample

    def draw_normal(self, sigma: float, size: Size = None) -> Any:
        noise = self._rng.normal(0.0, sigma, size=size)
        return float(noise) if size is None else noise

    def reseed(self, seed: Optional[Any]) -> "NumpySampler":
        reseed_rng(self._rng, seed)
        return self

    def spawn(self, num: int) -> List["NumpySampler"]:
        """Derive `num` independent samplers, e.g. one per worker thread."""
        return [NumpySampler(child) for child in split_rng(self._rng, num)]

    def __repr__(self) -> str:
        return f"<NumpySampler bit_generator={type(self._rng.bit_generator).__name__}>"


def make_sampler(source: Optional[Any] = None) -> BaseSampler:
    """
    Normalise ``source`` into a sampler.

    ``None`` yields a fresh ``NumpySampler`` seeded from ``RuntimeConfig.rng_seed``
    (entropy from the OS when that is unset); seeds and numpy Generators are
    wrapped; existing samplers are returned unchanged.
    """
    if isinstance(source, BaseSampler):
        return source
    if source is None:
        return NumpySampler(get_config().rng_seed)
    return NumpySampler(source)
