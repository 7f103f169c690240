# -*- coding: utf-8 -*-
"""
压缩管理器模块
"""

import time
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from astrbot.api import logger

from multi_compress.blob import Blob, File
from multi_compress.compression.arbitrator import select_best
from multi_compress.compression.config import ArbitrationPolicy, Constraints
from multi_compress.compression.convert import ConvertedResult, convert_blob, read_file
from multi_compress.compression.executor import execute_all
from multi_compress.compression.format import classify
from multi_compress.compression.registry import STRATEGIES, filter_eligible
from multi_compress.compression.result import CompressionReport, compose_report
from multi_compress.compression.strategy import CompressionStrategy
from multi_compress.config import CompressOptions

CompressInput = Union[Blob, str, Path]
OptionsArg = Union[CompressOptions, Dict[str, Any], float, int, None]


class CompressionManager:
    """多策略压缩管理器"""

    def __init__(
        self,
        strategies: Optional[Mapping[str, CompressionStrategy]] = None,
        policy: Optional[ArbitrationPolicy] = None,
    ):
        """
        初始化压缩管理器

        Args:
            strategies: 策略表，默认使用内置的四种策略
            policy: 默认防回退策略
        """
        self._strategies = strategies if strategies is not None else STRATEGIES
        self._policy = policy or ArbitrationPolicy()

    async def compress(
        self,
        input: CompressInput,
        options: OptionsArg = None,
        result_type: Optional[str] = None,
    ) -> Union[ConvertedResult, CompressionReport]:
        """
        统一压缩接口

        支持两种调用方式：
        ``compress(blob, {"quality": 0.8, "type": "base64"})`` 以及旧版的
        ``compress(blob, 0.8, "file")``。

        Args:
            input: 图片（Blob/File）或文件路径
            options: 参数字典、CompressOptions，或旧版调用中的质量值
            result_type: 旧版调用中的结果类型

        Returns:
            转换后的最优结果；return_all_results 为真时返回对比报告

        Raises:
            NoEligibleStrategyError: 约束过滤后没有可用策略
            UnsupportedRepresentationError: 结果类型无法识别
            InvalidOptionsError: 参数非法
        """
        start = time.perf_counter()

        # 1. 解析参数
        constraints = Constraints.from_options(
            self._parse_options(options, result_type), self._policy
        )

        # 2. 读取输入
        blob = read_file(input) if isinstance(input, (str, Path)) else input
        original_name = blob.name if isinstance(blob, File) else None

        # 3. 划分类别并过滤策略
        category = classify(blob.mime_type)
        logger.debug(f"媒体类型: {blob.mime_type or 'unknown'}, 类别: {category.value}, 大小: {blob.size} 字节")
        eligible = filter_eligible(category, constraints.preserve_exif, self._strategies)

        # 4. 并发执行
        attempts = await execute_all(eligible, blob, constraints)

        # 5. 选出最优结果
        selection = select_best(attempts, blob, constraints.quality, constraints.policy)
        total_duration_ms = (time.perf_counter() - start) * 1000

        if constraints.return_all_results:
            return compose_report(
                selection,
                attempts,
                blob.size,
                constraints.result_type,
                total_duration_ms,
                original_name,
            )
        return convert_blob(selection.blob, constraints.result_type, original_name)

    def _parse_options(
        self, options: OptionsArg, result_type: Optional[str]
    ) -> CompressOptions:
        """统一两种调用方式的参数"""
        if isinstance(options, (int, float)) and not isinstance(options, bool):
            return CompressOptions.legacy(options, result_type or "blob")
        if isinstance(options, CompressOptions):
            options = options.options
        parsed = CompressOptions(options)
        if result_type is not None:
            parsed.options["type"] = result_type
        return parsed


_default_manager = CompressionManager()


async def compress(
    input: CompressInput,
    options: OptionsArg = None,
    result_type: Optional[str] = None,
) -> Union[ConvertedResult, CompressionReport]:
    """使用内置策略压缩图片，参数同 CompressionManager.compress"""
    return await _default_manager.compress(input, options, result_type)
