"""依赖展开

按依赖表为刚拉取的文件展开声明的依赖：目录目标整棵镜像，文件目标单独拉取。
依赖按声明顺序处理，任一失败即中止并以 DependencyError 上抛。
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from lazylib.core.dep.models import DependencyTable, is_directory_target
from lazylib.core.exceptions import DependencyError, FetchError, ValidationError

if TYPE_CHECKING:
    from lazylib.core.dep.fetcher import Fetcher
    from lazylib.core.dep.mirror import DirectoryMirror

logger = logging.getLogger(__name__)


class DependencyResolver:
    """依赖展开器"""

    def __init__(
        self,
        table: DependencyTable,
        fetcher: Fetcher,
        mirror: DirectoryMirror,
        extension: str = ".php",
    ) -> None:
        self.table = table
        self.fetcher = fetcher
        self.mirror = mirror
        self.extension = extension

    def resolve(self, path: str) -> None:
        targets = self.table.targets(path)
        if not targets:
            return

        logger.info("展开依赖: %s -> %s", path, ", ".join(targets))
        for target in targets:
            try:
                if is_directory_target(target, self.extension):
                    self.mirror.mirror_dir(target)
                else:
                    self.fetcher.ensure_local(target)
            except (FetchError, ValidationError) as e:
                raise DependencyError(
                    f"{path} 的依赖 {target} 物化失败: {e}",
                    path=path, target=target,
                ) from e
