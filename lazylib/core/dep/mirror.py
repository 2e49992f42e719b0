"""目录镜像

mirror_dir(dir) 递归镜像一个源码目录:
  - 远程地址本身是本地目录时，直接遍历它的子项
  - 否则拉取远程 HTML 目录索引，解析后逐项处理
子目录递归，文件交给 Fetcher.ensure_local。
正在镜像的目录会被记录，自引用的索引不会导致无限递归。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from lazylib.core.dep.models import ListingEntry, RemoteSource, join_path, normalize_path
from lazylib.utils.net import is_local_location, local_location_path

if TYPE_CHECKING:
    from lazylib.core.dep.fetcher import Fetcher
    from lazylib.core.listing import ListingParser
    from lazylib.core.store import LocalStore
    from lazylib.core.transport import Transport

logger = logging.getLogger(__name__)


class DirectoryMirror:
    """递归目录镜像"""

    def __init__(
        self,
        source: RemoteSource,
        transport: Transport,
        parser: ListingParser,
        store: LocalStore,
        fetcher: Fetcher,
    ) -> None:
        self.source = source
        self.transport = transport
        self.parser = parser
        self.store = store
        self.fetcher = fetcher
        self._active: set[str] = set()

    def mirror_dir(self, path: str) -> Path:
        """镜像整个目录子树，返回本地目录路径"""
        rel = normalize_path(path)
        local = self.store.ensure_dir(rel)
        if rel in self._active:
            logger.warning("目录索引出现自引用，跳过: %s", rel)
            return local

        self._active.add(rel)
        try:
            for entry in self._list(rel):
                child = join_path(rel, entry.name)
                if entry.is_dir:
                    self.mirror_dir(child)
                else:
                    self.fetcher.ensure_local(child)
        finally:
            self._active.discard(rel)
        return local

    def _list(self, rel: str) -> list[ListingEntry]:
        location = self.source.location(rel)
        if is_local_location(location):
            source_dir = Path(local_location_path(location))
            if source_dir.is_dir():
                logger.info("镜像本地源目录: %s", rel)
                return self.parser.parse_local(source_dir)

        logger.info("镜像远程目录: %s", rel)
        entries = self.parser.parse_html(self.transport.fetch(location), base=location)
        if not entries:
            logger.warning("目录索引为空: %s", location)
        return entries
