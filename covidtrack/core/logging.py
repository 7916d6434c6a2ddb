"""
CovidTrack 日志系统

基于 loguru 的统一日志管理
"""

import sys
from typing import Optional

from loguru import logger

from .config import AppSettings, get_config

# 全局标记，避免重复初始化
_logging_initialized = False

LOG_FILE_NAME = "covidtrack.log"


def setup_logging(config: Optional[AppSettings] = None, force: bool = False) -> None:
    """
    配置日志系统

    Args:
        config: 应用配置，默认读取全局配置
        force: 已初始化时是否重新配置
    """
    global _logging_initialized

    if _logging_initialized and not force:
        return

    config = config or get_config()

    # 移除默认handler
    logger.remove()

    # 控制台输出 - 带颜色
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=config.log_level,
        colorize=True,
        diagnose=config.debug,
    )

    if config.log_to_file:
        config.log_dir.mkdir(parents=True, exist_ok=True)

        # 导入线程并发写日志，enqueue 保证行不交错
        logger.add(
            config.log_dir / LOG_FILE_NAME,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            level=config.log_level,
            rotation=config.log_rotation,
            retention=config.log_retention,
            enqueue=True,
        )

    _logging_initialized = True
    logger.bind(name=__name__).debug(
        f"Logging initialized - Level: {config.log_level}, File output: {config.log_to_file}"
    )


def get_logger(name: str):
    """
    获取logger实例

    Args:
        name: logger名称，通常使用 __name__

    Returns:
        绑定了名称的logger实例
    """
    if not _logging_initialized:
        setup_logging()
    return logger.bind(name=name)
