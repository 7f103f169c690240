# -*- coding: utf-8 -*-
"""
策略执行器：并发运行所有可用策略，单个策略失败不影响其他策略
"""

import asyncio
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence

from astrbot.api import logger

from multi_compress.blob import Blob
from multi_compress.compression.config import Constraints
from multi_compress.compression.strategy import CompressionStrategy


@dataclass(frozen=True)
class Attempt:
    """单个策略的执行结果

    Attributes:
        tool: 策略名
        blob: 压缩结果，失败时为原图
        success: 是否成功
        duration_ms: 耗时（毫秒）
        error: 失败原因
    """

    tool: str
    blob: Blob
    success: bool
    duration_ms: float
    error: Optional[str] = None

    @property
    def size(self) -> int:
        return self.blob.size


async def run_attempt(
    strategy: CompressionStrategy, blob: Blob, constraints: Constraints
) -> Attempt:
    """
    执行单个策略，任何异常都转换为失败的Attempt

    Args:
        strategy: 压缩策略
        blob: 原始图片
        constraints: 压缩约束

    Returns:
        执行结果
    """
    start = time.perf_counter()
    try:
        result = await strategy.compress(blob, constraints)
    except Exception as e:
        duration_ms = (time.perf_counter() - start) * 1000
        logger.warning(f"策略 {strategy.name} 执行失败: {e}")
        return Attempt(
            tool=strategy.name,
            blob=blob,
            success=False,
            duration_ms=duration_ms,
            error=str(e) or type(e).__name__,
        )

    duration_ms = (time.perf_counter() - start) * 1000
    logger.debug(f"策略 {strategy.name}: {blob.size} -> {result.size} 字节, 耗时 {duration_ms:.1f} ms")
    return Attempt(tool=strategy.name, blob=result, success=True, duration_ms=duration_ms)


async def execute_all(
    strategies: Sequence[CompressionStrategy], blob: Blob, constraints: Constraints
) -> List[Attempt]:
    """
    并发执行所有策略并等待全部完成

    Args:
        strategies: 可用策略（候选顺序）
        blob: 原始图片
        constraints: 压缩约束

    Returns:
        与策略一一对应的执行结果，顺序与输入一致
    """
    attempts = await asyncio.gather(
        *(run_attempt(strategy, blob, constraints) for strategy in strategies)
    )
    failed = sum(1 for attempt in attempts if not attempt.success)
    if failed:
        logger.debug(f"{failed}/{len(attempts)} 个策略执行失败")
    return list(attempts)
