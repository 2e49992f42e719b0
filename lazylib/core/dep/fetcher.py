"""单文件拉取器

ensure_local(path) 的流水线:
  1. 本地已存在 -> 直接返回（按文件全有或全无缓存，不做过期判断）
  2. 拼接远程地址并拉取
  3. 中和即时加载指令
  4. 暂存到目标同目录
  5. 展开声明的依赖（同步、深度优先）
  6. 依赖闭包全部成功后才原子提交；任何失败都丢弃暂存文件

因此失败的请求不会留下被误认为已物化的半成品文件。
正在处理中的路径会被记录，互相依赖的文件不会无限递归。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from lazylib.core.dep.models import RemoteSource, normalize_path

if TYPE_CHECKING:
    from lazylib.core.dep.resolver import DependencyResolver
    from lazylib.core.patcher import ContentPatcher
    from lazylib.core.store import LocalStore
    from lazylib.core.transport import Transport

logger = logging.getLogger(__name__)


class Fetcher:
    """单文件拉取器 - 本地优先 + 远程拉取 + 依赖展开"""

    def __init__(
        self,
        source: RemoteSource,
        transport: Transport,
        patcher: ContentPatcher,
        store: LocalStore,
        dependencies: DependencyResolver | None = None,
    ) -> None:
        self.source = source
        self.transport = transport
        self.patcher = patcher
        self.store = store
        self.dependencies = dependencies
        self._pending: set[str] = set()

    def ensure_local(self, path: str) -> Path:
        """确保文件及其依赖闭包已在本地，返回本地路径

        Raises:
            TransportError: 文件本身拉取失败
            StorageError: 本地写入失败
            DependencyError: 声明的依赖无法物化
        """
        rel = normalize_path(path)
        local = self.store.local_path(rel)
        if local.exists():
            logger.debug("本地命中: %s", rel)
            return local
        if rel in self._pending:
            logger.debug("依赖回到正在拉取的文件，跳过: %s", rel)
            return local

        url = self.source.location(rel)
        logger.info("拉取: %s", rel)
        data = self.transport.fetch(url)
        staged = self.store.stage(rel, self.patcher.neutralize(data))

        self._pending.add(rel)
        try:
            if self.dependencies is not None:
                self.dependencies.resolve(rel)
        except Exception:
            self.store.discard(staged)
            raise
        finally:
            self._pending.discard(rel)

        return self.store.commit(staged, rel)
