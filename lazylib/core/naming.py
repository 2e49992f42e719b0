"""符号名 -> 相对路径 的命名约定

Zend_View_Helper_Url -> Zend/View/Helper/Url.php  (separator="_")
lazydemo.util.text   -> lazydemo/util/text.py     (separator=".")
"""

from __future__ import annotations

from lazylib.core.dep.models import normalize_path
from lazylib.core.exceptions import ValidationError


class NameResolver:
    """命名约定解析器"""

    def __init__(self, namespace: str = "Zend", separator: str = "_", extension: str = ".php") -> None:
        self.namespace = namespace
        self.separator = separator
        self.extension = extension

    def handles(self, name: str) -> bool:
        """名字的第一段等于命名空间（大小写不敏感）时由本解析器处理"""
        if not self.namespace:
            return bool(name)
        return name.split(self.separator, 1)[0].lower() == self.namespace.lower()

    def is_root(self, name: str) -> bool:
        return bool(self.namespace) and name.lower() == self.namespace.lower()

    def directory_for(self, name: str) -> str:
        return normalize_path(name.replace(self.separator, "/"))

    def resolve(self, name: str) -> str:
        """符号名 -> 带扩展名的相对路径"""
        if not self.handles(name):
            raise ValidationError(f"名称不属于命名空间 {self.namespace!r}: {name}")
        return self.directory_for(name) + self.extension
