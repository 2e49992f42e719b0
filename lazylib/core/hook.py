"""导入钩子：把 LazyLibrary 接入 sys.meta_path

适用于 Python 源码树（extension=".py", name_separator="."）。
命名空间根、本地已存在的目录、依赖表中声明为目录的名字作为命名空间包；
其余名字按命名约定物化后从本地文件加载。

每个进程同时只有一个 LibraryFinder 生效，重复 install_hook 会替换旧的。
"""

from __future__ import annotations

import importlib.util
import logging
import sys
from importlib.abc import MetaPathFinder
from importlib.machinery import ModuleSpec
from typing import TYPE_CHECKING

from lazylib.core.exceptions import FetchError, ValidationError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import ModuleType

    from lazylib.core.library import LazyLibrary

logger = logging.getLogger(__name__)


class LibraryFinder(MetaPathFinder):
    """按需物化模块的 meta path finder"""

    def __init__(self, library: LazyLibrary) -> None:
        self.library = library

    def find_spec(
        self,
        fullname: str,
        path: Sequence[str] | None = None,
        target: ModuleType | None = None,
    ) -> ModuleSpec | None:
        naming = self.library.naming
        if not naming.handles(fullname):
            return None

        try:
            directory = naming.directory_for(fullname)
            if self._is_package(fullname, directory):
                local_dir = self.library.store.ensure_dir(directory)
                spec = ModuleSpec(fullname, None, is_package=True)
                spec.submodule_search_locations = [str(local_dir)]
                return spec
            local = self.library.ensure_local(naming.resolve(fullname))
        except (FetchError, ValidationError) as e:
            logger.error("模块物化失败: %s - %s", fullname, e)
            raise ImportError(f"无法物化模块 {fullname}: {e}", name=fullname) from e

        return importlib.util.spec_from_file_location(fullname, str(local))

    def _is_package(self, fullname: str, directory: str) -> bool:
        if self.library.naming.is_root(fullname):
            return True
        if self.library.store.is_dir(directory):
            return True
        return directory in self.library.table.directory_targets(self.library.config.extension)


def install_hook(library: LazyLibrary) -> LibraryFinder:
    """注册导入钩子，prepend_hook 决定放在解析链的最前还是最后"""
    uninstall_hook()
    finder = LibraryFinder(library)
    if library.config.prepend_hook:
        sys.meta_path.insert(0, finder)
    else:
        sys.meta_path.append(finder)
    logger.info(
        "导入钩子已注册 (%s): namespace=%s",
        "prepend" if library.config.prepend_hook else "append",
        library.config.namespace,
    )
    return finder


def uninstall_hook() -> bool:
    """移除已注册的导入钩子，返回是否确实移除了"""
    before = len(sys.meta_path)
    sys.meta_path[:] = [f for f in sys.meta_path if not isinstance(f, LibraryFinder)]
    return len(sys.meta_path) != before
