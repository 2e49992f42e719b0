"""依赖物化模块

- models.py: 相对路径、目录项、远程源、依赖表
- registry.py: 依赖清单加载
- fetcher.py: 单文件拉取 + 暂存提交
- mirror.py: 递归目录镜像
- resolver.py: 依赖展开
"""

from lazylib.core.dep.fetcher import Fetcher
from lazylib.core.dep.mirror import DirectoryMirror
from lazylib.core.dep.models import DependencyTable, ListingEntry, RemoteSource
from lazylib.core.dep.registry import DependencyRegistry
from lazylib.core.dep.resolver import DependencyResolver

__all__ = [
    "DependencyRegistry",
    "DependencyResolver",
    "DependencyTable",
    "DirectoryMirror",
    "Fetcher",
    "ListingEntry",
    "RemoteSource",
]
