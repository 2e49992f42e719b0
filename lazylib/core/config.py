"""集中配置管理

Config 在进程启动时构建一次，之后只读（frozen dataclass）。
支持从 YAML 文件加载 + 编程式覆盖（with_overrides）。

不提供全局单例：宿主显式构造 Config 并交给 LazyLibrary，
再由 LazyLibrary 注册导入钩子。
"""

from __future__ import annotations

import copy
import dataclasses
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from lazylib.core.exceptions import ConfigError
from lazylib.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

TRANSPORT_HTTP = "http"
TRANSPORT_BASIC = "basic"
TRANSPORTS = (TRANSPORT_HTTP, TRANSPORT_BASIC)

# 未指定 local_root 时落在 lazylib 包目录下
PACKAGE_DIR = Path(__file__).resolve().parent.parent

DEFAULT_CONFIG_FILE = "lazylib.yml"


@dataclass(frozen=True)
class Config:
    """物化器配置"""

    # 本地
    local_root: str = ""
    prepend_hook: bool = True

    # 远程源码树
    source_version: str = "1.12.18"
    remote_base_url: str = "https://raw.githubusercontent.com/zendframework/zf1/release-"
    transport: str = TRANSPORT_HTTP
    verify_tls: bool = False
    strict_status: bool = False
    timeout: float | None = None

    # 内容与命名约定
    extension: str = ".php"
    directive: str = "require_once"
    comment_marker: str = "//"
    namespace: str = "Zend"
    name_separator: str = "_"

    # 依赖清单，空表示使用内置表
    manifest: str = ""

    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))
        if self.transport not in TRANSPORTS:
            raise ConfigError(
                f"未知的 transport '{self.transport}'，可选: {', '.join(TRANSPORTS)}"
            )
        if not self.extension.startswith(".") or len(self.extension) < 2:
            raise ConfigError(f"extension 必须以 '.' 开头: {self.extension!r}")
        if not self.directive:
            raise ConfigError("directive 不能为空")
        if not self.comment_marker:
            raise ConfigError("comment_marker 不能为空")
        if not self.name_separator:
            raise ConfigError("name_separator 不能为空")

    @property
    def root(self) -> Path:
        """本地根目录"""
        return Path(self.local_root) if self.local_root else PACKAGE_DIR

    @classmethod
    def from_file(cls, path: str | Path = DEFAULT_CONFIG_FILE) -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        try:
            data = load_yaml(path)
        except (yaml.YAMLError, ValueError, OSError) as e:
            raise ConfigError(f"无法读取配置文件 {path}: {e}") from e
        if not data:
            return cls()
        known = {f.name for f in dataclasses.fields(cls)}
        matched = {k: v for k, v in data.items() if k in known and k != "extra"}
        extra = {k: v for k, v in data.items() if k not in known}
        try:
            cfg = cls(**matched, extra=extra)
        except TypeError as e:
            raise ConfigError(f"配置文件 {path} 内容无效: {e}") from e
        logger.info("配置已加载: %s", path)
        return cfg

    def with_overrides(self, **overrides: Any) -> Config:
        """返回覆盖了部分字段的新配置，值为 None 的项被忽略"""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if not changes:
            return self
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict:
        data = {f.name: getattr(self, f.name) for f in dataclasses.fields(self)}
        data["extra"] = copy.deepcopy(dict(self.extra))
        return data
