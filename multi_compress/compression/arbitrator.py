# -*- coding: utf-8 -*-
"""
仲裁模块：从所有执行结果中选出最优结果
"""

from dataclasses import dataclass
from typing import Sequence

from astrbot.api import logger

from multi_compress.blob import Blob
from multi_compress.compression.config import ArbitrationPolicy
from multi_compress.compression.executor import Attempt

ORIGINAL = "original"


@dataclass(frozen=True)
class Selection:
    """仲裁结果"""

    blob: Blob
    tool: str


def select_best(
    attempts: Sequence[Attempt],
    original: Blob,
    quality: float,
    policy: ArbitrationPolicy,
) -> Selection:
    """
    选出最小的成功结果

    全部失败时返回原图；最优结果几乎没有变小且调用方要求高质量时，
    同样返回原图。耗时不参与选择。

    Args:
        attempts: 候选顺序排列的执行结果
        original: 原图
        quality: 请求的压缩质量
        policy: 防回退策略

    Returns:
        选中的图片及其策略名
    """
    successes = [attempt for attempt in attempts if attempt.success]
    if not successes:
        logger.warning("所有压缩策略均失败，返回原图")
        return Selection(blob=original, tool=ORIGINAL)

    # min 在大小相同时保留最先出现的，即候选优先级更高者
    best = min(successes, key=lambda attempt: attempt.size)

    if policy.rejects(best.size, original.size, quality):
        logger.info(
            f"最优结果 {best.tool} ({best.size} 字节) 未明显小于原图 ({original.size} 字节)，"
            f"质量 {quality} 要求较高，返回原图"
        )
        return Selection(blob=original, tool=ORIGINAL)

    logger.info(f"选中策略 {best.tool}: {original.size} -> {best.size} 字节")
    return Selection(blob=best.blob, tool=best.tool)
