"""本地存储

本地布局与远程源码树的相对路径一一对应，根目录为 Config.root。

写入采用 "暂存 + 提交"：stage() 在目标同目录写临时文件，
commit() 用 os.replace 原子替换到目标路径。读者永远看不到写了一半的文件，
Fetcher 也可以等依赖闭包全部成功后再提交。
"""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from lazylib.core.dep.models import normalize_path
from lazylib.core.exceptions import StorageError, ValidationError

logger = logging.getLogger(__name__)

DIR_MODE = 0o755
FILE_MODE = 0o644
STAGE_SUFFIX = ".part"

T = TypeVar("T")


class LocalStore:
    """本地源码树存储

    不做任何加锁：同一根目录只应被单进程单线程使用。
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()

    def local_path(self, path: str) -> Path:
        """相对路径 -> 本地绝对路径，拒绝逃逸出根目录的路径"""
        local = (self.root / normalize_path(path)).resolve()
        if local != self.root and self.root not in local.parents:
            raise ValidationError(f"路径超出本地根目录: {path}")
        return local

    def exists(self, path: str) -> bool:
        return self.local_path(path).exists()

    def is_dir(self, path: str) -> bool:
        return self.local_path(path).is_dir()

    def ensure_dir(self, path: str) -> Path:
        """创建目录（含所有缺失的上级目录），已存在时不做任何事"""
        local = self.local_path(path)
        self._mkdir(local)
        return local

    def ensure_parent_dir(self, path: str) -> Path:
        local = self.local_path(path)
        self._mkdir(local.parent)
        return local.parent

    def write(self, path: str, data: bytes) -> Path:
        """原子写入：暂存后立即提交"""
        return self.commit(self.stage(path, data), path)

    def stage(self, path: str, data: bytes) -> Path:
        """把内容写到目标同目录下的临时文件，返回临时文件路径"""
        parent = self.ensure_parent_dir(path)
        try:
            fd, tmp = tempfile.mkstemp(
                dir=str(parent), prefix=".", suffix=STAGE_SUFFIX,
            )
        except OSError as e:
            raise StorageError(f"无法创建临时文件: {parent} - {e}", path=path) from e
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.chmod(tmp, FILE_MODE)
        except OSError as e:
            self.discard(Path(tmp))
            raise StorageError(f"写入失败: {path} - {e}", path=path) from e
        return Path(tmp)

    def commit(self, staged: Path, path: str) -> Path:
        """把暂存文件原子移动到目标路径"""
        local = self.local_path(path)
        try:
            os.replace(staged, local)
        except OSError as e:
            self.discard(staged)
            raise StorageError(f"提交失败: {path} - {e}", path=path) from e
        logger.debug("已写入: %s", local)
        return local

    @staticmethod
    def discard(staged: Path) -> None:
        """删除暂存文件"""
        try:
            staged.unlink(missing_ok=True)
        except OSError:
            # 清理失败不掩盖调用方正在处理的异常
            logger.warning("暂存文件清理失败: %s", staged)

    def read(self, path: str) -> bytes:
        local = self.local_path(path)
        try:
            return local.read_bytes()
        except OSError as e:
            raise StorageError(f"无法读取: {local} - {e}", path=path) from e

    def load(self, path: str, executor: Callable[[Path], T] | None = None) -> T | bytes:
        """把本地文件交给宿主的加载机制；未提供 executor 时返回文件内容"""
        if executor is None:
            return self.read(path)
        return executor(self.local_path(path))

    @staticmethod
    def _mkdir(directory: Path) -> None:
        """逐级创建缺失目录，每一级都使用 DIR_MODE"""
        missing: list[Path] = []
        current = directory
        while not current.exists() and current != current.parent:
            missing.append(current)
            current = current.parent
        try:
            for level in reversed(missing):
                level.mkdir(mode=DIR_MODE, exist_ok=True)
        except OSError as e:
            raise StorageError(f"无法创建目录: {directory} - {e}", path=str(directory)) from e
        if not directory.is_dir():
            raise StorageError(f"不是目录: {directory}", path=str(directory))
