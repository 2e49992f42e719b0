"""传输层测试: requests / urllib 均被 mock，不触网"""

from __future__ import annotations

import urllib.error
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

from lazylib.core.config import Config
from lazylib.core.exceptions import ConfigError, TransportError
from lazylib.core.transport import BasicTransport, HttpTransport, create_transport

URL = "https://example.test/zf1/release-1.0/library/Zend/Foo.php"


def _response(status: int, body: bytes) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.content = body
    return resp


class TestHttpTransport:
    def test_returns_body(self, monkeypatch: pytest.MonkeyPatch) -> None:
        get = MagicMock(return_value=_response(200, b"<?php"))
        monkeypatch.setattr(requests.Session, "get", get)

        assert HttpTransport().fetch(URL) == b"<?php"
        get.assert_called_once_with(URL, timeout=None)

    def test_error_status_still_returns_body(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(requests.Session, "get", MagicMock(return_value=_response(404, b"404: Not Found")))
        assert HttpTransport().fetch(URL) == b"404: Not Found"

    def test_strict_status_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(requests.Session, "get", MagicMock(return_value=_response(404, b"")))
        with pytest.raises(TransportError, match="HTTP 404"):
            HttpTransport(strict_status=True).fetch(URL)

    def test_connection_failure(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            requests.Session, "get",
            MagicMock(side_effect=requests.ConnectionError("refused")),
        )
        with pytest.raises(TransportError) as exc_info:
            HttpTransport().fetch(URL)
        assert exc_info.value.url == URL

    def test_certificate_verification_disabled_by_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(requests.Session, "get", MagicMock(return_value=_response(200, b"")))
        transport = HttpTransport()
        transport.fetch(URL)
        assert transport._session is not None
        assert transport._session.verify is False

    def test_session_reused_and_closed(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(requests.Session, "get", MagicMock(return_value=_response(200, b"")))
        transport = HttpTransport(verify=True)
        transport.fetch(URL)
        session = transport._session
        transport.fetch(URL)
        assert transport._session is session
        transport.close()
        assert transport._session is None


class TestBasicTransport:
    def test_reads_stream(self, monkeypatch: pytest.MonkeyPatch) -> None:
        stream = MagicMock()
        stream.__enter__.return_value.read.return_value = b"<?php"
        urlopen = MagicMock(return_value=stream)
        monkeypatch.setattr("urllib.request.urlopen", urlopen)

        assert BasicTransport().fetch(URL) == b"<?php"
        urlopen.assert_called_once_with(URL)

    def test_timeout_passed(self, monkeypatch: pytest.MonkeyPatch) -> None:
        stream = MagicMock()
        stream.__enter__.return_value.read.return_value = b""
        urlopen = MagicMock(return_value=stream)
        monkeypatch.setattr("urllib.request.urlopen", urlopen)

        BasicTransport(timeout=5).fetch(URL)
        urlopen.assert_called_once_with(URL, timeout=5)

    def test_cannot_open(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            "urllib.request.urlopen",
            MagicMock(side_effect=urllib.error.URLError("no route")),
        )
        with pytest.raises(TransportError, match="无法打开"):
            BasicTransport().fetch(URL)


class TestLocalAndScheme:
    @pytest.mark.parametrize("transport", [HttpTransport(), BasicTransport()])
    def test_local_path(self, transport: object, tmp_path: Path) -> None:
        f = tmp_path / "Foo.php"
        f.write_bytes(b"local")
        assert transport.fetch(str(f)) == b"local"  # type: ignore[attr-defined]
        assert transport.fetch(f"file://{f}") == b"local"  # type: ignore[attr-defined]

    def test_local_missing(self, tmp_path: Path) -> None:
        with pytest.raises(TransportError, match="无法读取本地源文件"):
            BasicTransport().fetch(str(tmp_path / "missing.php"))

    def test_unsupported_scheme(self) -> None:
        with pytest.raises(TransportError, match="不允许的 URL 协议"):
            HttpTransport().fetch("ftp://example.test/x.php")


class TestCreateTransport:
    def test_http(self) -> None:
        t = create_transport(Config(transport="http", verify_tls=True, timeout=3.0, strict_status=True))
        assert isinstance(t, HttpTransport)
        assert (t.verify, t.timeout, t.strict_status) == (True, 3.0, True)

    def test_basic(self) -> None:
        assert isinstance(create_transport(Config(transport="basic")), BasicTransport)

    def test_unknown(self) -> None:
        with pytest.raises(ConfigError):
            Config(transport="carrier-pigeon")
