# -*- coding: utf-8 -*-
"""
压缩约束配置模块
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from multi_compress.compression.convert import Representation
from multi_compress.config import CompressOptions
from multi_compress.exceptions import InvalidOptionsError


class CompressMode(Enum):
    """压缩模式"""

    KEEP_SIZE = "keepSize"  # 尺寸不变，只调整编码
    KEEP_QUALITY = "keepQuality"  # 允许按目标/最大尺寸缩放


@dataclass(frozen=True)
class ArbitrationPolicy:
    """防回退策略参数

    最优结果不小于原图 size_ratio 倍，且请求质量高于 quality_threshold 时，
    放弃压缩结果返回原图。两个阈值为经验值，尚未在样本集上校准。
    """

    size_ratio: float = 0.98
    quality_threshold: float = 0.85

    def rejects(self, best_size: int, original_size: int, quality: float) -> bool:
        """判断最优结果是否应被放弃"""
        return best_size >= original_size * self.size_ratio and quality > self.quality_threshold


@dataclass(frozen=True)
class Constraints:
    """单次压缩请求的约束（只读，被各策略并发读取）"""

    quality: float = 0.6
    mode: CompressMode = CompressMode.KEEP_SIZE
    target_width: Optional[int] = None
    target_height: Optional[int] = None
    max_width: Optional[int] = None
    max_height: Optional[int] = None
    preserve_exif: bool = False
    result_type: Representation = Representation.BLOB
    return_all_results: bool = False
    policy: ArbitrationPolicy = field(default_factory=ArbitrationPolicy)

    @property
    def keep_size(self) -> bool:
        return self.mode is CompressMode.KEEP_SIZE

    @staticmethod
    def from_options(
        options: CompressOptions, policy: Optional[ArbitrationPolicy] = None
    ) -> "Constraints":
        """
        从调用参数创建压缩约束

        Args:
            options: 调用参数对象
            policy: 默认防回退策略，参数中的 guard_* 优先

        Returns:
            压缩约束对象

        Raises:
            InvalidOptionsError: 质量越界或模式无法识别
            UnsupportedRepresentationError: 结果类型无法识别
        """
        quality = options.quality
        if isinstance(quality, bool) or not isinstance(quality, (int, float)):
            raise InvalidOptionsError(f"quality must be a number, got {quality!r}")
        if not 0 <= quality <= 1:
            raise InvalidOptionsError(f"quality must be 0-1, got {quality}")

        try:
            mode = CompressMode(options.mode)
        except ValueError:
            raise InvalidOptionsError(
                f"mode must be 'keepSize' or 'keepQuality', got {options.mode!r}"
            ) from None

        policy = policy or ArbitrationPolicy()
        if options.guard_size_ratio is not None or options.guard_quality is not None:
            policy = ArbitrationPolicy(
                size_ratio=options.get("guard_size_ratio", policy.size_ratio),
                quality_threshold=options.get("guard_quality", policy.quality_threshold),
            )

        return Constraints(
            quality=float(quality),
            mode=mode,
            target_width=options.target_width,
            target_height=options.target_height,
            max_width=options.max_width,
            max_height=options.max_height,
            preserve_exif=bool(options.preserve_exif),
            result_type=Representation.parse(options.result_type),
            return_all_results=bool(options.return_all_results),
            policy=policy,
        )
