"""依赖清单加载

清单格式 (YAML):

    dependencies:
      Zend/Layout.php:
        - Zend/Filter/Word
        - Zend/Filter/StringToLower.php
      Zend/View.php: Zend/View

未配置清单、清单不存在或没有 dependencies 段时使用内置依赖表。
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from lazylib.core.dep.models import DependencyTable
from lazylib.core.exceptions import ConfigError, ValidationError
from lazylib.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)


class DependencyRegistry:
    """依赖清单 - 从 YAML 加载依赖声明"""

    def __init__(self, manifest_path: str | Path = "") -> None:
        self.manifest_path = Path(manifest_path) if manifest_path else None

    def load(self) -> DependencyTable:
        if self.manifest_path is None:
            return DependencyTable.default()
        if not self.manifest_path.exists():
            logger.warning("依赖清单不存在，使用内置依赖表: %s", self.manifest_path)
            return DependencyTable.default()

        try:
            data = load_yaml(self.manifest_path)
        except (yaml.YAMLError, ValueError, OSError) as e:
            raise ConfigError(f"无法读取依赖清单 {self.manifest_path}: {e}") from e

        section = data.get("dependencies")
        if not section:
            logger.warning("依赖清单没有 dependencies 段，使用内置依赖表: %s", self.manifest_path)
            return DependencyTable.default()
        if not isinstance(section, dict):
            raise ConfigError(f"dependencies 段必须是映射: {self.manifest_path}")

        invalid = [
            k for k, v in section.items()
            if not isinstance(v, (str, list)) or (isinstance(v, list) and not all(isinstance(t, str) for t in v))
        ]
        if invalid:
            raise ConfigError(
                f"依赖目标必须是字符串或字符串列表: {', '.join(map(str, invalid))}"
            )

        try:
            table = DependencyTable(section)
        except ValidationError as e:
            raise ConfigError(f"依赖清单包含无效路径: {e}") from e
        logger.info("已加载 %d 条依赖声明: %s", len(table), self.manifest_path)
        return table
