# -*- coding: utf-8 -*-
"""
二进制数据对象（Blob / File）
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Blob:
    """不可变的二进制数据，附带声明的媒体类型"""

    data: bytes
    mime_type: str = ""

    @property
    def size(self) -> int:
        """字节数"""
        return len(self.data)


@dataclass(frozen=True)
class File(Blob):
    """带文件名的Blob"""

    name: str = "compressed"
