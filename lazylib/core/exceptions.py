"""统一异常体系

所有业务异常继承 LazyLibError。拉取链路上的失败统一归入 FetchError 家族：

  FetchError
    ├── TransportError   网络/读取失败（无法连接、无法初始化客户端）
    ├── StorageError     本地目录创建或文件写入失败
    └── DependencyError  传递依赖展开过程中某个文件或目录无法物化

ParseError 仅在目录索引解析内部使用，对外降级为空列表。
"""

from __future__ import annotations


class LazyLibError(Exception):
    """基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(LazyLibError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class ValidationError(LazyLibError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class ParseError(LazyLibError):
    """目录索引无法解析"""

    code = "PARSE_ERROR"


class FetchError(LazyLibError):
    """物化失败的公共基类"""

    code = "FETCH_ERROR"


class TransportError(FetchError):
    """远程拉取在传输层失败"""

    code = "TRANSPORT_ERROR"

    def __init__(self, message: str, url: str = "") -> None:
        super().__init__(message)
        self.url = url


class StorageError(FetchError):
    """本地存储读写失败"""

    code = "STORAGE_ERROR"

    def __init__(self, message: str, path: str = "") -> None:
        super().__init__(message)
        self.path = path


class DependencyError(FetchError):
    """声明的依赖无法物化"""

    code = "DEPENDENCY_ERROR"

    def __init__(self, message: str, path: str = "", target: str = "") -> None:
        super().__init__(message)
        self.path = path
        self.target = target
