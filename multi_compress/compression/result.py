# -*- coding: utf-8 -*-
"""
压缩结果报告模块
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from multi_compress.compression.arbitrator import Selection
from multi_compress.compression.convert import ConvertedResult, Representation, convert_blob
from multi_compress.compression.executor import Attempt


@dataclass
class AttemptSummary:
    """单个策略的压缩统计

    Attributes:
        tool: 策略名
        result: 转换为请求表示形式的结果（失败时为原图）
        original_size: 原图大小（字节）
        compressed_size: 结果大小（字节）
        compression_ratio: 压缩率（百分比，可能为负）
        duration_ms: 耗时（毫秒）
        success: 是否成功
        error: 失败原因
    """

    tool: str
    result: ConvertedResult
    original_size: int
    compressed_size: int
    compression_ratio: float
    duration_ms: float
    success: bool
    error: Optional[str] = None


@dataclass
class CompressionReport:
    """多策略对比报告

    Attributes:
        best_result: 最优结果（已转换）
        best_tool: 最优策略名，未采用任何压缩结果时为 "original"
        all_results: 各策略统计，按候选顺序排列
        total_duration_ms: 总耗时（毫秒）
    """

    best_result: ConvertedResult
    best_tool: str
    all_results: List[AttemptSummary]
    total_duration_ms: float

    @property
    def successful_results(self) -> List[AttemptSummary]:
        return [summary for summary in self.all_results if summary.success]


def compression_ratio(original_size: int, compressed_size: int) -> float:
    """压缩率 = (原大小 - 压缩后大小) / 原大小 * 100"""
    if original_size <= 0:
        return 0.0
    return (original_size - compressed_size) / original_size * 100


def compose_report(
    selection: Selection,
    attempts: Sequence[Attempt],
    original_size: int,
    representation: Representation,
    total_duration_ms: float,
    original_name: Optional[str] = None,
) -> CompressionReport:
    """
    组装对比报告

    Args:
        selection: 仲裁结果
        attempts: 所有执行结果
        original_size: 原图大小
        representation: 结果表示类型
        total_duration_ms: 总耗时
        original_name: 原始文件名

    Returns:
        对比报告
    """
    summaries = [
        AttemptSummary(
            tool=attempt.tool,
            result=convert_blob(attempt.blob, representation, original_name),
            original_size=original_size,
            compressed_size=attempt.size,
            compression_ratio=compression_ratio(original_size, attempt.size),
            duration_ms=attempt.duration_ms,
            success=attempt.success,
            error=attempt.error,
        )
        for attempt in attempts
    ]
    return CompressionReport(
        best_result=convert_blob(selection.blob, representation, original_name),
        best_tool=selection.tool,
        all_results=summaries,
        total_duration_ms=total_duration_ms,
    )
