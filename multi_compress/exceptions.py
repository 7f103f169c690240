# -*- coding: utf-8 -*-
"""
多策略压缩异常定义
"""


class ImageCompressError(Exception):
    """压缩库基础异常类"""
    pass


class StrategyError(ImageCompressError):
    """单个压缩策略执行失败（由执行器吸收，不会抛给调用方）"""
    pass


class NoEligibleStrategyError(ImageCompressError):
    """约束过滤后没有可用的压缩策略"""
    pass


class UnsupportedRepresentationError(ImageCompressError):
    """不支持的结果表示类型"""
    pass


class InvalidOptionsError(ImageCompressError, ValueError):
    """压缩参数非法"""
    pass
