"""目录列表解析

两种输入:
- 远程 HTML 目录索引：宽松解析，取 <ul><li><a href> 的链接目标
- 本地目录：列出直接子项，按文件系统元数据区分目录与文件

远程内容不可信，HTML 解析失败时记录警告并返回空列表。
"""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from lazylib.core.dep.models import ListingEntry, is_directory_target
from lazylib.core.exceptions import ParseError, StorageError

logger = logging.getLogger(__name__)

PARENT_ENTRY = "../"
_IGNORED = frozenset(("", "./", "/", PARENT_ENTRY))


class ListingParser:
    """目录列表解析器"""

    def __init__(self, extension: str = ".php") -> None:
        self.extension = extension

    def is_directory(self, name: str) -> bool:
        return is_directory_target(name, self.extension)

    def parse_html(self, raw: bytes, base: str | None = None) -> list[ListingEntry]:
        """解析远程目录索引，失败时降级为空列表

        Args:
            raw: 索引页内容
            base: 索引页自身的地址。绝对链接只有指向它的直接子项时才保留，
                未提供时绝对链接一律忽略
        """
        try:
            return self._parse_html_strict(raw, base)
        except ParseError as e:
            logger.warning("目录索引无法解析，按空目录处理: %s", e)
            return []

    def _parse_html_strict(self, raw: bytes, base: str | None) -> list[ListingEntry]:
        try:
            soup = BeautifulSoup(raw, "html.parser")
            anchors = soup.select("ul > li > a")
        except (ParserRejectedMarkup, AssertionError, ValueError, TypeError) as e:
            raise ParseError(f"HTML 解析失败: {e}") from e

        entries: list[ListingEntry] = []
        for anchor in anchors:
            href = anchor.get("href")
            if not isinstance(href, str):
                continue
            href = href.strip()
            # 排序/锚点链接不是目录项
            if href in _IGNORED or href.startswith(("?", "#")):
                continue
            name = self._child_name(href, base)
            if name is None:
                continue
            entries.append(ListingEntry(name=name, is_dir=self.is_directory(name)))
        return entries

    @staticmethod
    def _child_name(href: str, base: str | None) -> str | None:
        """链接指向当前目录的直接子项时返回子项名，否则返回 None"""
        parsed = urlparse(href)
        if parsed.scheme or parsed.netloc or parsed.path.startswith("/"):
            # 绝对链接（如 Apache 的 "Parent Directory"）必须解析回当前目录之下
            if base is None:
                return None
            origin = urlparse(base)
            target = urlparse(urljoin(base.rstrip("/") + "/", href))
            if (target.scheme, target.netloc) != (origin.scheme, origin.netloc):
                return None
            parent, _, name = target.path.rstrip("/").rpartition("/")
            if parent != origin.path.rstrip("/"):
                return None
        else:
            name = parsed.path.rstrip("/")
            if "/" in name:
                return None
        if name in ("", ".", ".."):
            return None
        return name

    def parse_local(self, directory: Path) -> list[ListingEntry]:
        """列出本地目录的直接子项"""
        try:
            children = sorted(directory.iterdir())
        except OSError as e:
            raise StorageError(f"无法列出目录 {directory}: {e}", path=str(directory)) from e
        return [ListingEntry(name=child.name, is_dir=child.is_dir()) for child in children]
