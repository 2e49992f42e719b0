"""共享 fixture: 内存传输层 + LazyLibrary 工厂

远程源码树用 FakeTransport 模拟：按完整 URL 返回预置字节，并记录每次调用，
测试据此断言缓存命中（零调用）和拉取顺序。
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from lazylib.core.config import Config
from lazylib.core.dep.models import DependencyTable
from lazylib.core.exceptions import TransportError
from lazylib.core.library import LazyLibrary

BASE_URL = "https://example.test/zf1/release-"
VERSION = "1.0"
PREFIX = f"{BASE_URL}{VERSION}/library/"


def remote(path: str) -> str:
    """相对路径 -> 远程地址"""
    return PREFIX + path


def index_html(*names: str) -> bytes:
    """构造一个带上级目录项的 HTML 目录索引"""
    items = "".join(f'<li><a href="{n}">{n}</a></li>' for n in ("../", *names))
    return f"<html><body><h1>Index</h1><ul>{items}</ul></body></html>".encode()


class FakeTransport:
    """内存传输层: 未预置的地址按传输失败处理"""

    name = "fake"

    def __init__(self, responses: dict[str, bytes] | None = None) -> None:
        self.responses = dict(responses or {})
        self.calls: list[str] = []
        self.closed = False

    def add_file(self, path: str, content: bytes) -> None:
        self.responses[remote(path)] = content

    def add_dir(self, path: str, *names: str) -> None:
        self.responses[remote(path)] = index_html(*names)

    def fetch(self, url: str) -> bytes:
        self.calls.append(url)
        if url not in self.responses:
            raise TransportError(f"unreachable: {url}", url=url)
        return self.responses[url]

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture()
def make_library(tmp_path: Path, transport: FakeTransport) -> Callable[..., LazyLibrary]:
    """LazyLibrary 工厂: 本地根目录落在 tmp_path/lib，传输层为 FakeTransport

    用法:
        library = make_library({"Zend/B.php": "Zend/C"}, extension=".php")
    """

    def _make(deps: dict | None = None, **overrides: object) -> LazyLibrary:
        cfg = Config(
            local_root=str(tmp_path / "lib"),
            remote_base_url=BASE_URL,
            source_version=VERSION,
        ).with_overrides(**overrides)
        return LazyLibrary(cfg, transport=transport, table=DependencyTable(deps or {}))

    return _make
