# -*- coding: utf-8 -*-
"""
压缩参数管理模块
"""

from typing import Any, Dict, Optional

# 兼容调用方传入的驼峰写法
_CAMEL_ALIASES = {
    "targetWidth": "target_width",
    "targetHeight": "target_height",
    "maxWidth": "max_width",
    "maxHeight": "max_height",
    "preserveExif": "preserve_exif",
    "returnAllResults": "return_all_results",
    "guardSizeRatio": "guard_size_ratio",
    "guardQuality": "guard_quality",
}


class CompressOptions:
    """压缩参数包装类，提供统一的参数访问接口"""

    def __init__(self, options: Optional[Dict[str, Any]] = None):
        """
        初始化参数

        Args:
            options: 调用方传入的参数字典
        """
        options = options if options is not None else {}
        self.options = {_CAMEL_ALIASES.get(key, key): value for key, value in options.items()}

    @classmethod
    def legacy(cls, quality: float, result_type: str = "blob") -> "CompressOptions":
        """
        旧版调用方式 compress(input, quality, type)

        Args:
            quality: 压缩质量
            result_type: 结果类型

        Returns:
            等价的参数对象
        """
        return cls({"quality": quality, "mode": "keepSize", "type": result_type})

    def get(self, key: str, default: Any = None) -> Any:
        """
        获取参数值

        Args:
            key: 参数键
            default: 默认值

        Returns:
            参数值，未设置或为None时返回默认值
        """
        value = self.options.get(key)
        return default if value is None else value

    @property
    def quality(self) -> float:
        """压缩质量 (0-1)"""
        return self.get("quality", 0.6)

    @property
    def mode(self) -> str:
        """压缩模式: keepSize(保持尺寸), keepQuality(保持质量)"""
        return self.get("mode", "keepSize")

    @property
    def target_width(self) -> Optional[int]:
        """目标宽度（仅keepQuality模式）"""
        return self.get("target_width")

    @property
    def target_height(self) -> Optional[int]:
        """目标高度（仅keepQuality模式）"""
        return self.get("target_height")

    @property
    def max_width(self) -> Optional[int]:
        """最大宽度（仅keepQuality模式）"""
        return self.get("max_width")

    @property
    def max_height(self) -> Optional[int]:
        """最大高度（仅keepQuality模式）"""
        return self.get("max_height")

    @property
    def preserve_exif(self) -> bool:
        """是否保留EXIF信息"""
        return self.get("preserve_exif", False)

    @property
    def return_all_results(self) -> bool:
        """是否返回所有策略的压缩结果"""
        return self.get("return_all_results", False)

    @property
    def result_type(self) -> str:
        """结果类型: blob, file, base64, arrayBuffer"""
        return self.get("type", "blob")

    @property
    def guard_size_ratio(self) -> Optional[float]:
        """防回退阈值：最优结果不小于原图该比例时放弃"""
        return self.get("guard_size_ratio")

    @property
    def guard_quality(self) -> Optional[float]:
        """防回退阈值：质量高于该值时启用"""
        return self.get("guard_quality")
