"""
多策略图片压缩
"""

from multi_compress.blob import Blob, File
from multi_compress.config import CompressOptions
from multi_compress.exceptions import (
    ImageCompressError,
    StrategyError,
    NoEligibleStrategyError,
    UnsupportedRepresentationError,
    InvalidOptionsError,
)
from multi_compress.compression import CompressionManager, CompressionReport, compress

__all__ = [
    "Blob",
    "File",
    "CompressOptions",
    "ImageCompressError",
    "StrategyError",
    "NoEligibleStrategyError",
    "UnsupportedRepresentationError",
    "InvalidOptionsError",
    "CompressionManager",
    "CompressionReport",
    "compress",
]
