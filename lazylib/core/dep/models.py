"""依赖物化数据模型

- RelativePath: 以 '/' 分隔的相对路径（普通 str，经 normalize_path 规范化）
- ListingEntry: 目录索引中的一项
- RemoteSource: 远程源码树的地址拼接规则
- DependencyTable: 只读的 文件 -> 依赖目标 映射
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from lazylib.core.exceptions import ValidationError

LIBRARY_SEGMENT = "/library/"

# 原始工具内置的依赖表：这些文件在运行时会按名称动态加载其他类，
# 惰性解析无法感知，只能显式声明
DEFAULT_DEPENDENCIES: dict[str, str | list[str]] = {
    "Zend/Layout.php": ["Zend/Filter/Word", "Zend/Filter/StringToLower.php"],
    "Zend/View.php": "Zend/View",
    "Zend/Controller/Action.php": "Zend/Controller/Action/Helper",
}


def normalize_path(path: str) -> str:
    """规范化相对路径：统一分隔符，去掉空段、'.' 段与首尾斜杠

    Raises:
        ValidationError: 路径为空或包含 '..'
    """
    parts = [p for p in path.replace("\\", "/").split("/") if p not in ("", ".")]
    if not parts:
        raise ValidationError(f"无效的相对路径: {path!r}")
    if ".." in parts:
        raise ValidationError(f"相对路径不允许包含 '..': {path!r}")
    return "/".join(parts)


def join_path(directory: str, name: str) -> str:
    return normalize_path(f"{directory}/{name}")


def is_directory_target(name: str, extension: str) -> bool:
    """不含扩展名标记的名字视为目录（大小写不敏感）"""
    return extension.lower() not in name.lower()


@dataclass(frozen=True)
class ListingEntry:
    """目录索引中的一项"""

    name: str
    is_dir: bool


@dataclass(frozen=True)
class RemoteSource:
    """固定版本的远程源码树

    文件地址: {base_url}{version}/library/{path}
    目录索引: 同一前缀，不带文件后缀
    base_url 也可以是本地目录（无协议或 file://）。
    """

    base_url: str
    version: str

    @property
    def prefix(self) -> str:
        return f"{self.base_url}{self.version}{LIBRARY_SEGMENT}"

    def location(self, path: str) -> str:
        return self.prefix + normalize_path(path)


class DependencyTable(Mapping[str, tuple[str, ...]]):
    """只读依赖表：相对文件路径 -> 依赖目标元组（保持声明顺序）"""

    def __init__(self, data: Mapping[str, str | list[str] | tuple[str, ...]] | None = None) -> None:
        table: dict[str, tuple[str, ...]] = {}
        for key, targets in (data or {}).items():
            if isinstance(targets, str):
                targets = [targets]
            table[normalize_path(key)] = tuple(normalize_path(t) for t in targets)
        self._table = MappingProxyType(table)

    def __getitem__(self, path: str) -> tuple[str, ...]:
        return self._table[path]

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def targets(self, path: str) -> tuple[str, ...]:
        """返回 path 声明的依赖，未声明时返回空元组"""
        return self._table.get(normalize_path(path), ())

    def directory_targets(self, extension: str) -> set[str]:
        """所有被声明为目录的依赖目标"""
        return {
            t for targets in self._table.values() for t in targets
            if is_directory_target(t, extension)
        }

    @classmethod
    def default(cls) -> DependencyTable:
        return cls(DEFAULT_DEPENDENCIES)
