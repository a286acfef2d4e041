"""
Unit tests for runtime configuration utilities.
"""
# 说明：RuntimeConfig（运行时配置）及全局配置访问辅助函数的单元测试。
# 覆盖：
# - configure(...)：通过关键字参数更新全局配置实例字段，未知键报错
# - RuntimeConfig.load_from_env(...)：从 DPNOISE_ 前缀环境变量加载并覆写配置选项
# - get_config()：返回全局 RuntimeConfig 单例

import pytest

from dpnoise.core.utils import RuntimeConfig, configure, get_config


def test_configure_updates_values(runtime_config) -> None:
    cfg = configure(strict_validation=False, rng_seed=5)
    assert cfg is runtime_config
    assert cfg.strict_validation is False
    assert cfg.rng_seed == 5


def test_configure_rejects_unknown_option(runtime_config) -> None:
    with pytest.raises(AttributeError):
        configure(default_dtype="float32")
    with pytest.raises(AttributeError):
        configure(extra={"backend": "numpy"})
    assert not hasattr(runtime_config, "extra")


def test_runtime_config_env_override(monkeypatch) -> None:
    cfg = RuntimeConfig()
    monkeypatch.setenv("DPNOISE_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("DPNOISE_STRICT_VALIDATION", "false")
    monkeypatch.setenv("DPNOISE_MASK_SENSITIVE_FIELDS", "no")
    monkeypatch.setenv("DPNOISE_RNG_SEED", "17")
    cfg.load_from_env()
    assert cfg.log_level == "DEBUG"
    assert cfg.strict_validation is False
    assert cfg.mask_sensitive_fields is False
    assert cfg.rng_seed == 17


def test_env_absent_keeps_defaults(monkeypatch) -> None:
    monkeypatch.delenv("DPNOISE_RNG_SEED", raising=False)
    monkeypatch.delenv("DPNOISE_STRICT_VALIDATION", raising=False)
    cfg = RuntimeConfig()
    cfg.load_from_env()
    assert cfg.rng_seed is None
    assert cfg.strict_validation is True


def test_get_config_returns_singleton(runtime_config) -> None:
    cfg = get_config()
    cfg.strict_validation = True
    assert get_config() is cfg
    assert get_config().strict_validation is True
