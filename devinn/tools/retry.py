"""
通用重试工具

固定次数重试，第 N 次失败后等待 N * delay 秒，全部失败时抛出最后一次的异常。
"""

import asyncio
from functools import wraps
from typing import Any, Awaitable, Callable, Optional, TypeVar
from loguru import logger

T = TypeVar("T")


async def retry(
    func: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    delay: float = 1.0,
    giveup: Optional[Callable[[Exception], bool]] = None,
) -> T:
    """
    重试执行异步函数

    Args:
        func: 无参异步函数
        max_attempts: 最大尝试次数
        delay: 基础等待秒数
        giveup: 返回 True 的异常不再重试，直接抛出
    """
    last_exception: Optional[Exception] = None

    for attempt in range(1, max_attempts + 1):
        try:
            return await func()
        except Exception as e:
            last_exception = e
            if giveup and giveup(e):
                raise
            if attempt < max_attempts:
                wait = delay * attempt
                logger.warning(f"第{attempt}次调用失败: {e}, {wait:.1f}秒后重试")
                await asyncio.sleep(wait)
            else:
                logger.error(f"重试{max_attempts}次后仍然失败: {e}")

    raise last_exception


def retry_with_backoff(
    max_attempts: int = 3,
    delay: float = 1.0,
    giveup: Optional[Callable[[Exception], bool]] = None,
):
    """重试装饰器，语义同 retry()"""
    def decorator(func: Callable[..., Awaitable[Any]]):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            return await retry(
                lambda: func(*args, **kwargs),
                max_attempts=max_attempts,
                delay=delay,
                giveup=giveup,
            )
        return wrapper
    return decorator
