# -*- coding: utf-8 -*-
"""
压缩策略模块

每个策略封装一种独立的压缩手段，对外只暴露统一的
``compress(blob, constraints) -> Blob`` 接口，失败时抛出 StrategyError。
"""

import asyncio
import io
from abc import ABC, abstractmethod
from typing import FrozenSet, List, Optional, Tuple

from PIL import Image, ImageOps

from astrbot.api import logger

from multi_compress.blob import Blob
from multi_compress.compression.config import Constraints
from multi_compress.compression.format import MediaCategory, classify, pil_format_for_mime
from multi_compress.exceptions import StrategyError

PILLOW_OPTIMIZE = "pillow-optimize"
LOSSY_REENCODE = "lossy-reencode"
GIF_OPTIMIZE = "gif-optimize"
RERASTERIZE = "rerasterize"

MIN_QUALITY = 5  # 迭代压缩的质量下限 (1-100)


class CompressionStrategy(ABC):
    """压缩策略基类"""

    name: str
    categories: FrozenSet[MediaCategory] = frozenset()
    supports_exif: bool = False

    @abstractmethod
    async def compress(self, blob: Blob, constraints: Constraints) -> Blob:
        """
        执行压缩

        Args:
            blob: 原始图片（只读，可能被多个策略同时读取）
            constraints: 压缩约束

        Returns:
            压缩后的图片

        Raises:
            StrategyError: 该策略无法处理此输入
        """
        pass

    def supports(self, category: MediaCategory) -> bool:
        return category in self.categories

    def _open_image(self, blob: Blob) -> Image.Image:
        """解码图片，像素数据立即载入内存"""
        img = Image.open(io.BytesIO(blob.data))
        img.load()
        return img

    def _resize_image(
        self, img: Image.Image, max_width: int, max_height: int
    ) -> Image.Image:
        """
        调整图片尺寸（保持比例）

        Args:
            img: PIL图片对象
            max_width: 最大宽度
            max_height: 最大高度

        Returns:
            调整后的图片
        """
        if img.size[0] > max_width or img.size[1] > max_height:
            img_copy = img.copy()
            img_copy.thumbnail((max_width, max_height), Image.Resampling.LANCZOS)
            return img_copy
        return img

    def _resolve_dimensions(
        self, size: Tuple[int, int], constraints: Constraints
    ) -> Tuple[int, int]:
        """
        计算输出尺寸

        keepSize 模式保持原尺寸；keepQuality 模式下目标宽高优先，
        只给一边时按比例推算另一边，最后再受最大宽高约束。

        Args:
            size: 原始尺寸
            constraints: 压缩约束

        Returns:
            (宽, 高)
        """
        width, height = size
        if constraints.keep_size:
            return size

        target_width, target_height = constraints.target_width, constraints.target_height
        if target_width and target_height:
            new_width, new_height = target_width, target_height
        elif target_width:
            new_width, new_height = target_width, round(height * target_width / width)
        elif target_height:
            new_width, new_height = round(width * target_height / height), target_height
        else:
            new_width, new_height = width, height

        scale = min(
            1.0,
            (constraints.max_width or new_width) / new_width,
            (constraints.max_height or new_height) / new_height,
        )
        return max(1, round(new_width * scale)), max(1, round(new_height * scale))

    def _to_rgb(self, img: Image.Image) -> Image.Image:
        """转换为RGB，透明区域铺白色背景（JPEG需要）"""
        if img.mode in ("RGBA", "LA", "P"):
            if img.mode != "RGBA":
                img = img.convert("RGBA")
            background = Image.new("RGB", img.size, (255, 255, 255))
            background.paste(img, mask=img.split()[-1])
            return background
        if img.mode not in ("RGB", "L"):
            return img.convert("RGB")
        return img

    def _prepare_for(self, img: Image.Image, pil_format: str) -> Image.Image:
        """按输出格式转换色彩模式"""
        if pil_format == "JPEG":
            return self._to_rgb(img)
        if pil_format == "WEBP" and img.mode not in ("RGB", "RGBA"):
            has_alpha = img.mode in ("LA", "PA") or "transparency" in img.info
            return img.convert("RGBA" if has_alpha else "RGB")
        return img

    @staticmethod
    def _to_percent(quality: float) -> int:
        return max(1, min(100, round(quality * 100)))


class PillowOptimizeStrategy(CompressionStrategy):
    """栅格重编码策略（保持原格式，迭代降低质量直至达到目标大小）"""

    name = PILLOW_OPTIMIZE
    categories = frozenset({MediaCategory.PNG, MediaCategory.WEBP, MediaCategory.OTHER})
    supports_exif = True

    TARGET_RATIO = 0.8  # 目标大小为原图的80%

    async def compress(self, blob: Blob, constraints: Constraints) -> Blob:
        """栅格重编码（异步包装器）"""
        return await asyncio.to_thread(self._compress_sync, blob, constraints)

    def _compress_sync(self, blob: Blob, constraints: Constraints) -> Blob:
        try:
            img = self._open_image(blob)
            output_format = img.format or pil_format_for_mime(blob.mime_type) or "JPEG"
            if output_format == "MPO":
                output_format = "JPEG"

            exif = img.info.get("exif") if constraints.preserve_exif else None
            if not constraints.preserve_exif:
                img = ImageOps.exif_transpose(img)

            max_side = self._max_side(constraints)
            if max_side:
                img = self._resize_image(img, max_side, max_side)

            target_size = int(blob.size * self.TARGET_RATIO)
            if output_format == "PNG":
                data = self._encode_png(img, exif, target_size, constraints.quality)
            else:
                data = self._encode_lossy(
                    img, output_format, exif, target_size, constraints.quality
                )

            logger.debug(f"{self.name}: {blob.size} -> {len(data)} 字节 ({output_format})")
            return Blob(data=data, mime_type=Image.MIME.get(output_format, blob.mime_type))

        except Exception as e:
            logger.error(f"{self.name} 压缩失败: {e}")
            raise StrategyError(f"{self.name} 压缩失败: {e}") from e

    def _max_side(self, constraints: Constraints) -> Optional[int]:
        """最长边限制，keepSize模式或宽高未同时给出时不限制"""
        if constraints.keep_size:
            return None
        width = constraints.max_width or constraints.target_width
        height = constraints.max_height or constraints.target_height
        if width and height:
            return min(width, height)
        return None

    def _encode_lossy(
        self,
        img: Image.Image,
        output_format: str,
        exif: Optional[bytes],
        target_size: int,
        quality: float,
    ) -> bytes:
        """质量压缩（迭代压缩直到满足文件大小要求）"""
        img = self._prepare_for(img, output_format)
        current_quality = max(self._to_percent(quality), MIN_QUALITY)

        while True:
            output = io.BytesIO()
            save_params = {
                "format": output_format,
                "quality": current_quality,
                "optimize": True,
            }
            if exif:
                save_params["exif"] = exif
            img.save(output, **save_params)

            compressed_size = output.tell()
            logger.debug(
                f"压缩质量: {current_quality}, 大小: {compressed_size} 字节, 目标: {target_size} 字节"
            )
            if compressed_size <= target_size or current_quality <= MIN_QUALITY:
                return output.getvalue()

            current_quality = max(current_quality - 10, MIN_QUALITY)

    def _encode_png(
        self,
        img: Image.Image,
        exif: Optional[bytes],
        target_size: int,
        quality: float,
    ) -> bytes:
        """PNG无损压缩，仍过大时尝试调色板量化"""
        save_params = {"format": "PNG", "optimize": True}
        if exif:
            save_params["exif"] = exif

        output = io.BytesIO()
        img.save(output, **save_params)
        lossless = output.getvalue()
        if len(lossless) <= target_size:
            return lossless

        colors = max(16, round(256 * quality))
        logger.debug(f"PNG无损压缩后仍过大，尝试量化为 {colors} 色")
        source = img if img.mode in ("RGB", "RGBA") else img.convert("RGBA")
        quantized = source.quantize(colors=colors, method=Image.Quantize.FASTOCTREE)

        output = io.BytesIO()
        quantized.save(output, **save_params)
        lossy = output.getvalue()
        return lossy if len(lossy) < len(lossless) else lossless


class LossyReencodeStrategy(CompressionStrategy):
    """通用有损重编码策略（仅JPEG，单次按指定质量编码）"""

    name = LOSSY_REENCODE
    categories = frozenset({MediaCategory.OTHER})
    supports_exif = True

    async def compress(self, blob: Blob, constraints: Constraints) -> Blob:
        return await asyncio.to_thread(self._compress_sync, blob, constraints)

    def _compress_sync(self, blob: Blob, constraints: Constraints) -> Blob:
        declared = blob.mime_type.lower()
        if "jpeg" not in declared and "jpg" not in declared:
            raise StrategyError(f"{self.name} 仅支持JPEG格式，收到: {blob.mime_type or 'unknown'}")

        try:
            img = self._open_image(blob)
            exif = img.info.get("exif") if constraints.preserve_exif else None
            if not constraints.preserve_exif:
                img = ImageOps.exif_transpose(img)

            size = self._resolve_dimensions(img.size, constraints)
            if size != img.size:
                img = img.resize(size, Image.Resampling.LANCZOS)

            save_params = {
                "format": "JPEG",
                "quality": self._to_percent(constraints.quality),
                "optimize": True,
            }
            if exif:
                save_params["exif"] = exif

            output = io.BytesIO()
            self._to_rgb(img).save(output, **save_params)
            return Blob(data=output.getvalue(), mime_type="image/jpeg")

        except Exception as e:
            logger.error(f"{self.name} 压缩失败: {e}")
            raise StrategyError(f"{self.name} 压缩失败: {e}") from e


class GifOptimizeStrategy(CompressionStrategy):
    """GIF动图重优化策略"""

    name = GIF_OPTIMIZE
    categories = frozenset({MediaCategory.GIF})

    DEFAULT_FRAME_DURATION = 100  # 毫秒
    MAX_FIT_SIZE = 9999

    async def compress(self, blob: Blob, constraints: Constraints) -> Blob:
        """压缩GIF动图（异步包装器）"""
        return await asyncio.to_thread(self._compress_sync, blob, constraints)

    def _compress_sync(self, blob: Blob, constraints: Constraints) -> Blob:
        if "gif" not in blob.mime_type.lower():
            raise StrategyError(f"{self.name} 仅支持GIF格式，收到: {blob.mime_type or 'unknown'}")

        try:
            img = self._open_image(blob)
            frames, durations = self._read_frames(img)
            logger.debug(f"GIF动图帧数: {len(frames)}")

            if constraints.keep_size:
                lossy = round((1 - constraints.quality) * 100)
                if lossy > 0:
                    colors = max(16, round(256 * (100 - lossy) / 100))
                    logger.debug(f"尝试颜色深度: {colors}")
                    frames = [
                        frame.quantize(colors=colors, method=Image.Quantize.FASTOCTREE)
                        for frame in frames
                    ]
            else:
                frames = self._resize_frames(frames, constraints)

            output = io.BytesIO()
            save_params = {
                "format": "GIF",
                "save_all": True,
                "append_images": frames[1:],
                "optimize": True,
                "disposal": 2,
                "duration": durations if len(durations) > 1 else durations[0],
            }
            if "loop" in img.info:
                save_params["loop"] = img.info["loop"]
            frames[0].save(output, **save_params)

            logger.debug(f"{self.name}: {blob.size} -> {output.tell()} 字节")
            return Blob(data=output.getvalue(), mime_type="image/gif")

        except Exception as e:
            logger.error(f"GIF压缩失败: {e}")
            raise StrategyError(f"GIF压缩失败: {e}") from e

    def _read_frames(self, img: Image.Image) -> Tuple[List[Image.Image], List[int]]:
        """逐帧读取，统一转为RGBA"""
        frames = []
        durations = []
        frame_count = 0
        try:
            while True:
                img.seek(frame_count)
                frames.append(img.convert("RGBA"))
                durations.append(img.info.get("duration", self.DEFAULT_FRAME_DURATION))
                frame_count += 1
        except EOFError:
            pass
        return frames, durations

    def _resize_frames(
        self, frames: List[Image.Image], constraints: Constraints
    ) -> List[Image.Image]:
        """按目标尺寸缩放；未同时给出目标宽高时按最大尺寸等比适配"""
        if constraints.target_width and constraints.target_height:
            size = (constraints.target_width, constraints.target_height)
            logger.debug(f"GIF缩放至 {size[0]}x{size[1]}")
            return [frame.resize(size, Image.Resampling.LANCZOS) for frame in frames]

        if constraints.max_width or constraints.max_height:
            fit = min(
                constraints.max_width or self.MAX_FIT_SIZE,
                constraints.max_height or self.MAX_FIT_SIZE,
            )
            logger.debug(f"GIF等比适配至 {fit}x{fit}")
            return [self._resize_image(frame, fit, fit) for frame in frames]

        return frames


class RerasterizeStrategy(CompressionStrategy):
    """重新栅格化策略（绘制到新画布后重新编码，结果不理想时返回原图）"""

    name = RERASTERIZE
    categories = frozenset({MediaCategory.PNG, MediaCategory.WEBP, MediaCategory.OTHER})

    SMALL_FILE_BYTES = 100 * 1024

    async def compress(self, blob: Blob, constraints: Constraints) -> Blob:
        return await asyncio.to_thread(self._compress_sync, blob, constraints)

    def _compress_sync(self, blob: Blob, constraints: Constraints) -> Blob:
        try:
            img = ImageOps.exif_transpose(self._open_image(blob))
            original_size = blob.size
            size = self._resolve_dimensions(img.size, constraints)

            if size == img.size and original_size < self.SMALL_FILE_BYTES:
                logger.debug(f"{self.name}: 尺寸未变化且文件较小，返回原图")
                return blob

            canvas = img.convert("RGBA")
            if size != canvas.size:
                canvas = canvas.resize(size, Image.Resampling.LANCZOS)

            quality = constraints.quality
            declared = blob.mime_type.lower()

            if classify(declared) is MediaCategory.PNG:
                return self._compress_png(blob, canvas, quality)

            if "jpeg" in declared or "jpg" in declared:
                for q in (quality, max(0.5, quality - 0.2), max(0.3, quality - 0.4)):
                    result = self._encode(canvas, "JPEG", q)
                    if result.size < original_size * 0.8:
                        return result
                return blob

            result = self._encode(canvas, pil_format_for_mime(declared) or "PNG", quality)
            if result.size >= original_size * 0.95:
                return blob
            return result

        except Exception as e:
            logger.error(f"{self.name} 压缩失败: {e}")
            raise StrategyError(f"{self.name} 压缩失败: {e}") from e

    def _compress_png(self, blob: Blob, canvas: Image.Image, quality: float) -> Blob:
        """PNG：先保持格式，低质量时再尝试JPEG，取更小者"""
        original_size = blob.size
        png_result = self._encode(canvas, "PNG")
        if png_result.size < original_size * 0.8:
            return png_result

        if quality < 0.8:
            jpeg_result = self._encode(canvas, "JPEG", max(0.7, quality))
            if jpeg_result.size < min(png_result.size, original_size * 0.9):
                return jpeg_result

        if png_result.size >= original_size * 0.95:
            return blob
        return png_result

    def _encode(
        self, canvas: Image.Image, pil_format: str, quality: Optional[float] = None
    ) -> Blob:
        img = self._prepare_for(canvas, pil_format)
        save_params = {"format": pil_format}
        if quality is not None and pil_format in ("JPEG", "WEBP"):
            save_params["quality"] = self._to_percent(quality)

        output = io.BytesIO()
        img.save(output, **save_params)
        return Blob(data=output.getvalue(), mime_type=Image.MIME.get(pil_format, ""))
