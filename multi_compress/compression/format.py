# -*- coding: utf-8 -*-
"""
媒体类别划分和图片格式检测工具
"""

from enum import Enum

import io
from PIL import Image

from astrbot.api import logger


class MediaCategory(Enum):
    """媒体类别，决定候选压缩策略"""

    PNG = "png"
    GIF = "gif"
    WEBP = "webp"
    OTHER = "other"


def classify(mime_type: str | None) -> MediaCategory:
    """
    根据声明的媒体类型划分类别

    Args:
        mime_type: 媒体类型，如 image/png

    Returns:
        对应的MediaCategory，JPEG及无法识别的类型归为OTHER
    """
    declared = (mime_type or "").lower()
    if "png" in declared:
        return MediaCategory.PNG
    if "gif" in declared:
        return MediaCategory.GIF
    if "webp" in declared:
        return MediaCategory.WEBP
    return MediaCategory.OTHER


class ImageFormat(Enum):
    """图片格式枚举"""

    JPEG = "jpeg"
    PNG = "png"
    GIF = "gif"
    WEBP = "webp"
    BMP = "bmp"
    UNKNOWN = "unknown"

    @property
    def mime_type(self) -> str:
        """对应的媒体类型，UNKNOWN返回空字符串"""
        if self is ImageFormat.UNKNOWN:
            return ""
        return f"image/{self.value}"

    @staticmethod
    def from_pil_format(pil_format: str | None) -> "ImageFormat":
        """
        从PIL格式转换为ImageFormat

        Args:
            pil_format: PIL的format属性值

        Returns:
            对应的ImageFormat枚举
        """
        if not pil_format:
            return ImageFormat.UNKNOWN

        format_map = {
            "JPEG": ImageFormat.JPEG,
            "MPO": ImageFormat.JPEG,
            "PNG": ImageFormat.PNG,
            "GIF": ImageFormat.GIF,
            "WEBP": ImageFormat.WEBP,
            "BMP": ImageFormat.BMP,
        }
        return format_map.get(pil_format.upper(), ImageFormat.UNKNOWN)


def detect_format(content: bytes) -> tuple[ImageFormat, bool]:
    """
    检测图片格式和是否为动图

    Args:
        content: 图片内容

    Returns:
        (格式类型, 是否为动图)
        检测失败时返回 (ImageFormat.UNKNOWN, False)
    """
    try:
        with Image.open(io.BytesIO(content)) as img:
            format_type = ImageFormat.from_pil_format(img.format)
            is_animated = False
            if format_type in (ImageFormat.GIF, ImageFormat.WEBP):
                is_animated = getattr(img, "n_frames", 1) > 1
            return format_type, is_animated
    except Exception as e:
        logger.debug(f"图片格式检测失败: {e}")
        return ImageFormat.UNKNOWN, False


def pil_format_for_mime(mime_type: str | None) -> str | None:
    """
    媒体类型对应的PIL保存格式

    Args:
        mime_type: 媒体类型

    Returns:
        PIL格式名，Pillow无法写出时返回None
    """
    if not mime_type:
        return None
    Image.init()
    declared = mime_type.lower()
    if declared in ("image/jpg", "image/pjpeg"):
        declared = "image/jpeg"
    for pil_format, registered_mime in Image.MIME.items():
        if registered_mime == declared and pil_format in Image.SAVE:
            return pil_format
    return None
