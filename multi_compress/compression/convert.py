# -*- coding: utf-8 -*-
"""
结果表示转换模块（blob / file / base64 / arrayBuffer）
"""

import base64
import mimetypes
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from astrbot.api import logger

from multi_compress.blob import Blob, File
from multi_compress.compression.format import detect_format
from multi_compress.exceptions import UnsupportedRepresentationError

ConvertedResult = Union[Blob, File, str, bytes]


class Representation(Enum):
    """结果表示类型"""

    BLOB = "blob"
    FILE = "file"
    BASE64 = "base64"
    ARRAY_BUFFER = "arrayBuffer"

    @staticmethod
    def parse(value: Union[str, "Representation"]) -> "Representation":
        """
        解析结果类型

        Args:
            value: 类型名或枚举值

        Returns:
            对应的Representation

        Raises:
            UnsupportedRepresentationError: 类型无法识别
        """
        if isinstance(value, Representation):
            return value
        try:
            return Representation(value)
        except ValueError:
            raise UnsupportedRepresentationError(f"Unsupported type: {value}") from None


def convert_blob(
    blob: Blob,
    representation: Representation,
    original_name: Optional[str] = None,
) -> ConvertedResult:
    """
    将Blob转换为指定的表示形式

    Args:
        blob: 压缩结果
        representation: 目标表示类型
        original_name: 原始文件名，file类型使用

    Returns:
        Blob、File、data URL字符串或bytes
    """
    if representation is Representation.BLOB:
        return blob
    if representation is Representation.FILE:
        return File(data=blob.data, mime_type=blob.mime_type, name=original_name or "compressed")
    if representation is Representation.BASE64:
        payload = base64.b64encode(blob.data).decode("ascii")
        mime_type = blob.mime_type or "application/octet-stream"
        return f"data:{mime_type};base64,{payload}"
    if representation is Representation.ARRAY_BUFFER:
        return bytes(blob.data)
    raise UnsupportedRepresentationError(f"Unsupported type: {representation}")


def read_file(path: Union[str, Path]) -> File:
    """
    从磁盘读取图片文件

    Args:
        path: 文件路径

    Returns:
        File对象，媒体类型先按扩展名推断，失败时用Pillow嗅探内容
    """
    path = Path(path)
    data = path.read_bytes()

    mime_type, _ = mimetypes.guess_type(path.name)
    if not (mime_type and mime_type.startswith("image/")):
        format_type, _ = detect_format(data)
        mime_type = format_type.mime_type
        logger.debug(f"扩展名无法识别媒体类型: {path.name}，内容嗅探结果: {mime_type or 'unknown'}")

    return File(data=data, mime_type=mime_type, name=path.name)
