"""内容补丁：注释掉拉取文件中的即时加载指令

上游文件里的 require_once 之类指令会在加载时立刻引入其他文件，
绕过惰性解析。把每个出现处前面加上行注释标记，所有加载都只能
走 lazylib 自己的解析钩子。

已经紧跟在注释标记之后的出现处视为已处理，因此 neutralize 幂等。
"""

from __future__ import annotations

import re

from lazylib.core.exceptions import ValidationError


class ContentPatcher:
    """即时加载指令中和器"""

    def __init__(self, directive: str = "require_once", comment_marker: str = "//") -> None:
        if not directive or not comment_marker:
            raise ValidationError("directive 与 comment_marker 都不能为空")
        self.directive = directive.encode("utf-8")
        self.comment_marker = comment_marker.encode("utf-8")
        self._active = re.compile(
            b"(?<!" + re.escape(self.comment_marker) + b")" + re.escape(self.directive)
        )
        self._replacement = self.comment_marker + self.directive

    def neutralize(self, content: bytes) -> bytes:
        """在每个仍然生效的指令前插入注释标记，其余字节保持不变"""
        return self._active.sub(lambda _m: self._replacement, content)

    def count_active(self, content: bytes) -> int:
        """统计仍然生效的指令数量"""
        return sum(1 for _ in self._active.finditer(content))
