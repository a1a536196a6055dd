"""
日志配置模块
控制台 + 轮转文件输出，文件位置和大小均由 Settings 决定
"""

import sys
import time
import asyncio
import multiprocessing
from functools import wraps
from pathlib import Path
from typing import Optional
from loguru import logger

from devinn.core.config import Settings, settings as default_settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"


def _is_access_record(record) -> bool:
    return "API" in record["message"] or "访问" in record["message"]


def setup_logging(settings: Optional[Settings] = None):
    """按配置重建 loguru 的输出目标"""
    settings = settings or default_settings
    logger.remove()

    log_file = Path(settings.LOG_FILE)
    log_dir = log_file.parent
    log_dir.mkdir(parents=True, exist_ok=True)

    if settings.LOG_TO_CONSOLE:
        logger.add(
            sys.stdout,
            format=CONSOLE_FORMAT,
            level=settings.LOG_LEVEL,
            colorize=True,
            backtrace=True,
            diagnose=settings.DEBUG,
        )

    if settings.LOG_TO_FILE:
        # (路径, 级别, 轮转大小, 保留数量, 过滤器)
        file_sinks = [
            (log_file, settings.LOG_LEVEL, settings.LOG_MAX_SIZE, settings.LOG_RETENTION, None),
            (log_dir / "error.log", "ERROR", "5 MB", 3, None),
            (log_dir / "access.log", "INFO", "10 MB", 3, _is_access_record),
        ]
        for path, level, rotation, retention, record_filter in file_sinks:
            logger.add(
                str(path),
                format=FILE_FORMAT,
                level=level,
                rotation=rotation,
                retention=retention,
                compression=settings.LOG_COMPRESSION,
                filter=record_filter,
                backtrace=True,
                diagnose=settings.DEBUG,
                encoding="utf-8",
            )

    # 多进程 worker 不重复打印启动信息
    if multiprocessing.current_process().name == "MainProcess":
        logger.info(f"🚀 日志系统已启动: 目录 {log_dir.absolute()}, 级别 {settings.LOG_LEVEL}")

    return logger


def log_function_call(func):
    """记录函数调用结果，同步和异步函数均可使用"""
    def succeeded():
        logger.debug(f"✅ {func.__name__} 完成")

    def failed(error: Exception):
        logger.error(f"❌ {func.__name__} 失败: {error}")

    if asyncio.iscoroutinefunction(func):
        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                failed(e)
                raise
            succeeded()
            return result
        return async_wrapper

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            failed(e)
            raise
        succeeded()
        return result
    return wrapper


def _duration_suffix(duration: Optional[float]) -> str:
    return f" ({duration:.2f}ms)" if duration else ""


def log_api_access(method: str, path: str, status_code: int, duration: Optional[float] = None):
    """记录API访问日志"""
    logger.info(f"🌐 API访问: {method} {path} -> {status_code}{_duration_suffix(duration)}")


def log_external_api_call(service: str, endpoint: str, status: str, duration: Optional[float] = None):
    """记录外部API调用日志"""
    logger.info(f"🔗 外部API调用: {service} {endpoint} -> {status}{_duration_suffix(duration)}")


def elapsed_ms(start: float) -> float:
    """从 time.perf_counter() 起点计算耗时（毫秒）"""
    return (time.perf_counter() - start) * 1000


__all__ = [
    "setup_logging",
    "log_function_call",
    "log_api_access",
    "log_external_api_call",
    "elapsed_ms",
]
