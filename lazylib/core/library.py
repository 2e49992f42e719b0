"""物化器上下文

LazyLibrary 是宿主显式构造的唯一上下文对象，按 Config 懒加载并共享
传输、存储、补丁、解析、拉取、镜像等组件（同一实例内共享状态）。

用法:
    cfg = Config.from_file("lazylib.yml")
    library = LazyLibrary(cfg)

    library.ensure_local("Zend/View.php")      # 拉取 + 依赖闭包
    library.mirror_dir("Zend/Filter")          # 整棵目录
    content = library.load_symbol("Zend_Layout")

    install_hook(library)                      # 接入 sys.meta_path

全程同步阻塞，不加锁：多线程宿主需自行串行化对同一本地根目录的访问。
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

from lazylib.core.config import Config

if TYPE_CHECKING:
    from lazylib.core.dep.fetcher import Fetcher
    from lazylib.core.dep.mirror import DirectoryMirror
    from lazylib.core.dep.models import DependencyTable, RemoteSource
    from lazylib.core.dep.resolver import DependencyResolver
    from lazylib.core.listing import ListingParser
    from lazylib.core.naming import NameResolver
    from lazylib.core.patcher import ContentPatcher
    from lazylib.core.store import LocalStore
    from lazylib.core.transport import Transport

logger = logging.getLogger(__name__)


class LazyLibrary:
    """懒加载组件容器 + Loader 接口（ensure_local / load）

    transport 与 table 可显式注入（测试或宿主自定义），否则按配置创建。
    """

    def __init__(
        self,
        config: Config | None = None,
        transport: Transport | None = None,
        table: DependencyTable | None = None,
    ) -> None:
        self._config = config or Config()
        self._instances: dict[str, object] = {}
        if transport is not None:
            self._instances["transport"] = transport
        if table is not None:
            self._instances["table"] = table

    @property
    def config(self) -> Config:
        return self._config

    # ---- 组件 ----

    @property
    def source(self) -> RemoteSource:
        if "source" not in self._instances:
            from lazylib.core.dep.models import RemoteSource
            self._instances["source"] = RemoteSource(
                base_url=self._config.remote_base_url,
                version=self._config.source_version,
            )
        return self._instances["source"]  # type: ignore[return-value]

    @property
    def transport(self) -> Transport:
        if "transport" not in self._instances:
            from lazylib.core.transport import create_transport
            self._instances["transport"] = create_transport(self._config)
        return self._instances["transport"]  # type: ignore[return-value]

    @property
    def store(self) -> LocalStore:
        if "store" not in self._instances:
            from lazylib.core.store import LocalStore
            self._instances["store"] = LocalStore(self._config.root)
        return self._instances["store"]  # type: ignore[return-value]

    @property
    def patcher(self) -> ContentPatcher:
        if "patcher" not in self._instances:
            from lazylib.core.patcher import ContentPatcher
            self._instances["patcher"] = ContentPatcher(
                directive=self._config.directive,
                comment_marker=self._config.comment_marker,
            )
        return self._instances["patcher"]  # type: ignore[return-value]

    @property
    def parser(self) -> ListingParser:
        if "parser" not in self._instances:
            from lazylib.core.listing import ListingParser
            self._instances["parser"] = ListingParser(extension=self._config.extension)
        return self._instances["parser"]  # type: ignore[return-value]

    @property
    def naming(self) -> NameResolver:
        if "naming" not in self._instances:
            from lazylib.core.naming import NameResolver
            self._instances["naming"] = NameResolver(
                namespace=self._config.namespace,
                separator=self._config.name_separator,
                extension=self._config.extension,
            )
        return self._instances["naming"]  # type: ignore[return-value]

    @property
    def table(self) -> DependencyTable:
        if "table" not in self._instances:
            from lazylib.core.dep.registry import DependencyRegistry
            self._instances["table"] = DependencyRegistry(self._config.manifest).load()
        return self._instances["table"]  # type: ignore[return-value]

    @property
    def fetcher(self) -> Fetcher:
        self._wire()
        return self._instances["fetcher"]  # type: ignore[return-value]

    @property
    def mirror(self) -> DirectoryMirror:
        self._wire()
        return self._instances["mirror"]  # type: ignore[return-value]

    @property
    def resolver(self) -> DependencyResolver:
        self._wire()
        return self._instances["resolver"]  # type: ignore[return-value]

    def _wire(self) -> None:
        """fetcher / mirror / resolver 互相引用，一次性构造并绑定"""
        if "fetcher" in self._instances:
            return
        from lazylib.core.dep.fetcher import Fetcher
        from lazylib.core.dep.mirror import DirectoryMirror
        from lazylib.core.dep.resolver import DependencyResolver

        fetcher = Fetcher(
            source=self.source,
            transport=self.transport,
            patcher=self.patcher,
            store=self.store,
        )
        mirror = DirectoryMirror(
            source=self.source,
            transport=self.transport,
            parser=self.parser,
            store=self.store,
            fetcher=fetcher,
        )
        resolver = DependencyResolver(
            table=self.table,
            fetcher=fetcher,
            mirror=mirror,
            extension=self._config.extension,
        )
        fetcher.dependencies = resolver
        self._instances.update(fetcher=fetcher, mirror=mirror, resolver=resolver)

    # ---- Loader ----

    def ensure_local(self, path: str) -> Path:
        """确保文件及其依赖闭包已物化，返回本地路径"""
        return self.fetcher.ensure_local(path)

    def mirror_dir(self, path: str) -> Path:
        return self.mirror.mirror_dir(path)

    def load(self, path: str, executor: Callable[[Path], Any] | None = None) -> Any:
        """物化后交给宿主加载；未提供 executor 时返回文件内容"""
        self.ensure_local(path)
        return self.store.load(path, executor)

    def load_symbol(self, name: str, executor: Callable[[Path], Any] | None = None) -> Any:
        """按命名约定把符号名解析为相对路径后加载"""
        path = self.naming.resolve(name)
        logger.debug("符号解析: %s -> %s", name, path)
        return self.load(path, executor)

    def close(self) -> None:
        """关闭传输层连接（仅在已创建时）"""
        transport = self._instances.get("transport")
        if transport is not None:
            transport.close()  # type: ignore[attr-defined]
