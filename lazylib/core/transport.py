"""远程拉取传输层

两种可互换策略，都只做一次阻塞拉取，不重试:

- HttpTransport (http):  requests 会话，默认不校验证书；
  只要 HTTP 交互完成就返回响应体，不论状态码（strict_status 可改为报错）
- BasicTransport (basic): urllib 直接读取字节流，打不开即报错

两种策略都能直接读取本地源码树（无协议或 file:// 地址）。
"""

from __future__ import annotations

import abc
import logging
import urllib.error
import urllib.request
from pathlib import Path

import requests
import urllib3
from urllib3.exceptions import InsecureRequestWarning

from lazylib.core.config import TRANSPORT_BASIC, TRANSPORT_HTTP, Config
from lazylib.core.exceptions import ConfigError, TransportError, ValidationError
from lazylib.utils.net import is_local_location, local_location_path, validate_url_scheme

logger = logging.getLogger(__name__)


class Transport(abc.ABC):
    """单次阻塞拉取"""

    name: str = ""

    def fetch(self, url: str) -> bytes:
        """拉取地址内容，返回原始字节

        Raises:
            TransportError: 无法连接 / 无法打开 / 协议不受支持
        """
        if is_local_location(url):
            return self._read_local(url)
        try:
            validate_url_scheme(url, context=f"{self.name} transport")
        except ValidationError as e:
            raise TransportError(str(e), url=url) from e
        logger.debug("拉取: %s", url)
        return self._fetch_remote(url)

    @abc.abstractmethod
    def _fetch_remote(self, url: str) -> bytes:
        ...

    def close(self) -> None:
        """释放底层连接"""

    @staticmethod
    def _read_local(url: str) -> bytes:
        path = Path(local_location_path(url))
        try:
            return path.read_bytes()
        except OSError as e:
            raise TransportError(f"无法读取本地源文件: {path} - {e}", url=url) from e


class HttpTransport(Transport):
    """基于 requests 的可配置 HTTP 客户端"""

    name = TRANSPORT_HTTP

    def __init__(
        self,
        verify: bool = False,
        timeout: float | None = None,
        strict_status: bool = False,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.verify = verify
        self.timeout = timeout
        self.strict_status = strict_status
        self.headers = dict(headers or {})
        self._session: requests.Session | None = None

    def _client(self) -> requests.Session:
        if self._session is None:
            try:
                session = requests.Session()
            except (requests.RequestException, OSError) as e:
                raise TransportError(f"HTTP 客户端初始化失败: {e}") from e
            session.verify = self.verify
            session.headers.update(self.headers)
            if not self.verify:
                urllib3.disable_warnings(InsecureRequestWarning)
            self._session = session
        return self._session

    def _fetch_remote(self, url: str) -> bytes:
        try:
            resp = self._client().get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"请求失败: {url} - {e}", url=url) from e

        if resp.status_code >= 400:
            if self.strict_status:
                raise TransportError(f"HTTP {resp.status_code}: {url}", url=url)
            logger.warning("HTTP %d: %s（响应体按原样返回）", resp.status_code, url)
        return resp.content

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None


class BasicTransport(Transport):
    """urllib 字节流读取"""

    name = TRANSPORT_BASIC

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = timeout

    def _fetch_remote(self, url: str) -> bytes:
        kwargs = {} if self.timeout is None else {"timeout": self.timeout}
        try:
            with urllib.request.urlopen(url, **kwargs) as resp:  # nosec B310
                return resp.read()
        except (urllib.error.URLError, OSError, ValueError) as e:
            raise TransportError(f"无法打开: {url} - {e}", url=url) from e


def create_transport(config: Config) -> Transport:
    """按配置选择传输策略"""
    if config.transport == TRANSPORT_HTTP:
        return HttpTransport(
            verify=config.verify_tls,
            timeout=config.timeout,
            strict_status=config.strict_status,
        )
    if config.transport == TRANSPORT_BASIC:
        return BasicTransport(timeout=config.timeout)
    raise ConfigError(f"未知的 transport: {config.transport}")
