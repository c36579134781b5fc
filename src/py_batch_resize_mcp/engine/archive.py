"""归档构建模块。

逐项累积输出图片，最后一次性序列化为 ZIP 字节。相同的条目集合和插入顺序
始终得到相同的字节。
"""

import zipfile
from io import BytesIO

from ..exceptions import ArchiveError
from ..models.constants import ArchiveDefaults
from ..models.resize_result import TranscodeResult
from ..utils.logging_helpers import get_logger
from ..utils.naming_helpers import EntryNamingStrategy


logger = get_logger()


class ArchiveBuilder:
    """ZIP 归档构建器

    只能封存一次，封存后拒绝继续添加。
    """

    def __init__(
        self,
        entry_prefix: str = ArchiveDefaults.ENTRY_PREFIX,
        compression: int = zipfile.ZIP_STORED,
    ):
        """初始化归档构建器

        Args:
            entry_prefix: 条目名前缀
            compression: ZIP 压缩方式，JPEG 本身已压缩，默认只存储
        """
        self.naming = EntryNamingStrategy(entry_prefix)
        self.compression = compression
        self._entries: dict[str, bytes] = {}
        self._finalized: bytes | None = None

    @property
    def entries(self) -> dict[str, bytes]:
        """条目副本，按插入顺序"""
        return dict(self._entries)

    @property
    def entry_names(self) -> list[str]:
        return list(self._entries)

    @property
    def is_sealed(self) -> bool:
        return self._finalized is not None

    def __len__(self) -> int:
        return len(self._entries)

    def entry_name_for(self, identifier: str) -> str:
        """由原始标识生成条目名"""
        return self.naming.entry_name(identifier)

    def add(self, entry_name: str, data: bytes) -> None:
        """添加一个条目

        Raises:
            ArchiveError: 归档已封存、条目名为空或重复
        """
        if self.is_sealed:
            raise ArchiveError(f"归档已封存，不能再添加条目: {entry_name}")
        if not entry_name:
            raise ArchiveError("条目名不能为空")
        if entry_name in self._entries:
            raise ArchiveError(f"条目名重复: {entry_name}", entry_name)

        self._entries[entry_name] = bytes(data)

    def add_result(self, result: TranscodeResult) -> str:
        """添加一个成功的转码结果，返回条目名"""
        if not result.success or result.data is None:
            raise ArchiveError(
                f"只能添加成功的转码结果: {result.identifier}", result.identifier
            )

        entry_name = self.entry_name_for(result.identifier)
        self.add(entry_name, result.data)
        return entry_name

    def finalize(self) -> bytes:
        """序列化并封存归档

        重复调用返回同一份字节。

        Raises:
            ArchiveError: 序列化失败
        """
        if self._finalized is not None:
            return self._finalized

        try:
            payload = self._serialize()
        except MemoryError as e:
            raise ArchiveError("归档序列化内存不足") from e
        except Exception as e:
            raise ArchiveError(f"归档序列化失败: {e}") from e

        self._finalized = payload
        logger.debug(f"归档已封存: {len(self._entries)} 个条目, {len(payload)} 字节")
        return payload

    def _serialize(self) -> bytes:
        buffer = BytesIO()
        with zipfile.ZipFile(buffer, mode="w", compression=self.compression) as zf:
            for entry_name, data in self._entries.items():
                info = zipfile.ZipInfo(
                    entry_name, date_time=ArchiveDefaults.ENTRY_TIMESTAMP
                )
                info.compress_type = self.compression
                info.external_attr = ArchiveDefaults.ENTRY_EXTERNAL_ATTR
                info.create_system = 3  # 固定为 Unix
                zf.writestr(info, data)
        return buffer.getvalue()
