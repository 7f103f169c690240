# -*- coding: utf-8 -*-
"""
多策略压缩模块

对同一张图片并发运行多个可替换的压缩策略，选出最小的可接受结果。
"""

from multi_compress.compression.arbitrator import ORIGINAL, Selection, select_best
from multi_compress.compression.config import ArbitrationPolicy, CompressMode, Constraints
from multi_compress.compression.convert import Representation, convert_blob, read_file
from multi_compress.compression.executor import Attempt, execute_all
from multi_compress.compression.format import MediaCategory, classify
from multi_compress.compression.manager import CompressionManager, compress
from multi_compress.compression.registry import CAPABILITY_TABLE, STRATEGIES, filter_eligible
from multi_compress.compression.result import AttemptSummary, CompressionReport
from multi_compress.compression.strategy import CompressionStrategy

__all__ = [
    "ORIGINAL",
    "Selection",
    "select_best",
    "ArbitrationPolicy",
    "CompressMode",
    "Constraints",
    "Representation",
    "convert_blob",
    "read_file",
    "Attempt",
    "execute_all",
    "MediaCategory",
    "classify",
    "CompressionManager",
    "compress",
    "CAPABILITY_TABLE",
    "STRATEGIES",
    "filter_eligible",
    "AttemptSummary",
    "CompressionReport",
    "CompressionStrategy",
]
