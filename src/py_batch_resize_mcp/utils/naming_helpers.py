"""文件命名工具模块。

提供归档条目命名和归档输出路径生成功能。
"""

import itertools
from pathlib import Path

from ..models.constants import ArchiveDefaults


class EntryNamingStrategy:
    """归档条目命名策略

    条目名 = 固定前缀 + 原始标识。只要原始标识唯一，条目名就不会冲突。
    """

    def __init__(self, prefix: str = ArchiveDefaults.ENTRY_PREFIX):
        self.prefix = prefix

    def entry_name(self, identifier: str) -> str:
        """生成条目名，保留原始扩展名

        Args:
            identifier: 原始图片标识

        Returns:
            str: 归档内的条目名
        """
        return f"{self.prefix}{identifier}"


class PathResolver:
    """路径解析器"""

    @staticmethod
    def resolve_archive_path(
        output_path: Path | None,
        default_dir: Path,
        archive_name: str = ArchiveDefaults.ARCHIVE_NAME,
    ) -> Path:
        """解析归档写入路径

        Args:
            output_path: 用户指定的路径（文件或已存在的目录）
            default_dir: 未指定时使用的目录
            archive_name: 默认归档文件名

        Returns:
            Path: 归档文件路径
        """
        if output_path is None:
            return PathResolver.ensure_unique_path(default_dir / archive_name)

        if output_path.is_dir():
            return PathResolver.ensure_unique_path(output_path / archive_name)

        return output_path

    @staticmethod
    def ensure_unique_path(path: Path) -> Path:
        """确保路径唯一，如果文件已存在则添加数字后缀

        Args:
            path: 原始路径

        Returns:
            Path: 唯一的路径
        """
        if not path.exists():
            return path

        base = path.stem
        suffix = path.suffix
        parent = path.parent

        for counter in itertools.count(1):
            new_path = parent / f"{base}_{counter}{suffix}"
            if not new_path.exists():
                return new_path

        # 理论上永远不会到达这里，但为了类型检查器
        return path  # pragma: no cover
