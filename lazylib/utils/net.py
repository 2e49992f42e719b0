"""网络工具: 地址分类与 URL 安全校验"""

from __future__ import annotations

from urllib.parse import urlparse

from lazylib.core.exceptions import ValidationError

_ALLOWED_SCHEMES = frozenset(("http", "https"))


def is_local_location(location: str) -> bool:
    """判断地址是否指向本地文件系统（无协议、file:// 或 Windows 盘符）"""
    scheme = urlparse(location).scheme
    return scheme in ("", "file") or len(scheme) == 1


def local_location_path(location: str) -> str:
    """去掉 file:// 前缀，返回本地路径字符串"""
    if location.startswith("file://"):
        return location[len("file://"):]
    return location


def validate_url_scheme(url: str, *, context: str = "") -> None:
    """校验远程 URL 仅使用 http/https，防止 ftp:// 等非预期协议访问

    Raises:
        ValidationError: URL scheme 不在白名单内
    """
    parsed = urlparse(url)
    if parsed.scheme not in _ALLOWED_SCHEMES:
        label = f" ({context})" if context else ""
        raise ValidationError(
            f"不允许的 URL 协议 '{parsed.scheme}'{label}，"
            f"仅支持 http/https: {url}"
        )
