"""
Lightweight logging helpers with privacy-aware defaults.
"""
# 说明：轻量级日志工具，提供隐私友好的默认配置与统一的 logger 获取入口。
# 职责：
# - PrivacyFilter：根据运行时配置对日志记录中的敏感字段（原始查询值等）进行脱敏
# - configure_logging(...)：初始化 logging 基本配置并为根 logger 挂载隐私过滤器
# - get_logger(...)：按名称获取 logger，必要时自动完成日志系统初始化
# 约定：
# - 日志级别优先级：显式参数 level > 环境变量 DPNOISE_LOG_LEVEL > 运行时配置的 log_level

from __future__ import annotations

import logging
import os
from typing import Optional

from .config import get_config

SENSITIVE_RECORD_FIELDS = ("value", "user_id", "payload")


class PrivacyFilter(logging.Filter):
    """Filter that masks raw query values and other sensitive fields if configured."""

    def filter(self, record: logging.LogRecord) -> bool:
        config = get_config()
        if not config.mask_sensitive_fields:
            return True
        # 保留字段结构但隐藏具体内容；加噪后的输出不属于敏感字段
        for attr in SENSITIVE_RECORD_FIELDS:
            if hasattr(record, attr):
                setattr(record, attr, "***")
        return True


def configure_logging(level: Optional[str] = None) -> None:
    log_level = level or os.environ.get("DPNOISE_LOG_LEVEL", get_config().log_level)
    logging.basicConfig(
        level=log_level,
        format="[%(levelname)s] %(name)s %(asctime)s | %(message)s",
    )
    root = logging.getLogger()
    if not any(isinstance(f, PrivacyFilter) for f in root.filters):
        root.addFilter(PrivacyFilter())


def get_logger(name: str) -> logging.Logger:
    # 获取指定名称的 logger；若根 logger 尚无 handler，则懒加载初始化日志系统
    logger = logging.getLogger(name)
    if not logging.getLogger().handlers:
        configure_logging()
    # 根 logger 上的过滤器不作用于子 logger 直接产生的记录，因此在此处同样挂载
    if not any(isinstance(f, PrivacyFilter) for f in logger.filters):
        logger.addFilter(PrivacyFilter())
    return logger
