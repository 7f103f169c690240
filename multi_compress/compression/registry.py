# -*- coding: utf-8 -*-
"""
策略注册表：媒体类别到候选策略的静态映射，以及按约束过滤候选策略
"""

from typing import Dict, List, Mapping, Tuple

from astrbot.api import logger

from multi_compress.compression.format import MediaCategory
from multi_compress.compression.strategy import (
    GIF_OPTIMIZE,
    LOSSY_REENCODE,
    PILLOW_OPTIMIZE,
    RERASTERIZE,
    CompressionStrategy,
    GifOptimizeStrategy,
    LossyReencodeStrategy,
    PillowOptimizeStrategy,
    RerasterizeStrategy,
)
from multi_compress.exceptions import NoEligibleStrategyError

# 进程级只读策略表
STRATEGIES: Dict[str, CompressionStrategy] = {
    PILLOW_OPTIMIZE: PillowOptimizeStrategy(),
    LOSSY_REENCODE: LossyReencodeStrategy(),
    GIF_OPTIMIZE: GifOptimizeStrategy(),
    RERASTERIZE: RerasterizeStrategy(),
}

# 候选顺序只影响结果报告的排列和同大小时的取舍
CAPABILITY_TABLE: Dict[MediaCategory, Tuple[str, ...]] = {
    MediaCategory.PNG: (PILLOW_OPTIMIZE, RERASTERIZE),
    MediaCategory.GIF: (GIF_OPTIMIZE,),
    MediaCategory.WEBP: (RERASTERIZE, PILLOW_OPTIMIZE),
    MediaCategory.OTHER: (PILLOW_OPTIMIZE, LOSSY_REENCODE, RERASTERIZE),
}


def candidates_for(category: MediaCategory) -> Tuple[str, ...]:
    """获取媒体类别的候选策略（按优先级排列）"""
    return CAPABILITY_TABLE[category]


def filter_eligible(
    category: MediaCategory,
    preserve_exif: bool,
    strategies: Mapping[str, CompressionStrategy] = STRATEGIES,
) -> List[CompressionStrategy]:
    """
    按约束过滤候选策略

    Args:
        category: 媒体类别
        preserve_exif: 是否要求保留EXIF
        strategies: 策略表

    Returns:
        可用策略列表，保持候选顺序

    Raises:
        NoEligibleStrategyError: 过滤后没有可用策略
    """
    eligible = []
    for name in candidates_for(category):
        strategy = strategies.get(name)
        if strategy is None or not strategy.supports(category):
            continue
        if preserve_exif and not strategy.supports_exif:
            logger.debug(f"策略 {name} 不支持保留EXIF，已排除")
            continue
        eligible.append(strategy)

    if not eligible:
        if preserve_exif:
            raise NoEligibleStrategyError(
                f"No EXIF-supporting tools available for {category.value} files"
            )
        raise NoEligibleStrategyError(f"No compression tools available for {category.value} files")

    logger.debug(f"{category.value} 可用策略: {[s.name for s in eligible]}")
    return eligible
