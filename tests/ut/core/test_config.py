"""配置测试"""

from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest
import yaml

from lazylib.core.config import PACKAGE_DIR, Config
from lazylib.core.exceptions import ConfigError


class TestDefaults:
    def test_defaults(self) -> None:
        cfg = Config()
        assert cfg.source_version == "1.12.18"
        assert cfg.transport == "http"
        assert cfg.prepend_hook is True
        assert cfg.verify_tls is False
        assert cfg.timeout is None
        assert (cfg.extension, cfg.directive, cfg.comment_marker) == (".php", "require_once", "//")

    def test_root_defaults_to_package_dir(self) -> None:
        assert Config().root == PACKAGE_DIR
        assert (PACKAGE_DIR / "__init__.py").exists()

    def test_root_explicit(self, tmp_path: Path) -> None:
        assert Config(local_root=str(tmp_path)).root == tmp_path

    def test_immutable(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            Config().source_version = "2.0"  # type: ignore[misc]


class TestValidation:
    @pytest.mark.parametrize("kwargs", [
        {"transport": "ftp"},
        {"extension": "php"},
        {"extension": "."},
        {"directive": ""},
        {"comment_marker": ""},
        {"name_separator": ""},
    ])
    def test_invalid(self, kwargs: dict) -> None:
        with pytest.raises(ConfigError):
            Config(**kwargs)


class TestFromFile:
    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        assert Config.from_file(tmp_path / "none.yml") == Config()

    def test_load_with_extra(self, tmp_path: Path) -> None:
        p = tmp_path / "lazylib.yml"
        p.write_text(yaml.dump({
            "local_root": "/srv/lib",
            "transport": "basic",
            "source_version": "1.12.20",
            "team": "platform",
        }))
        cfg = Config.from_file(p)
        assert cfg.local_root == "/srv/lib"
        assert cfg.transport == "basic"
        assert cfg.source_version == "1.12.20"
        assert cfg.extra == {"team": "platform"}

    def test_invalid_value(self, tmp_path: Path) -> None:
        p = tmp_path / "lazylib.yml"
        p.write_text(yaml.dump({"transport": "smoke-signal"}))
        with pytest.raises(ConfigError):
            Config.from_file(p)

    def test_broken_yaml(self, tmp_path: Path) -> None:
        p = tmp_path / "lazylib.yml"
        p.write_text("transport: [unclosed")
        with pytest.raises(ConfigError, match="无法读取配置文件"):
            Config.from_file(p)


class TestOverrides:
    def test_none_ignored(self) -> None:
        cfg = Config()
        assert cfg.with_overrides(local_root=None, transport=None) is cfg

    def test_override(self) -> None:
        cfg = Config().with_overrides(source_version="1.12.20", transport="basic")
        assert (cfg.source_version, cfg.transport) == ("1.12.20", "basic")

    def test_override_is_validated(self) -> None:
        with pytest.raises(ConfigError):
            Config().with_overrides(transport="bogus")

    def test_to_dict(self) -> None:
        assert Config().to_dict()["remote_base_url"].startswith("https://")

    def test_extra_is_read_only(self) -> None:
        source = {"team": "platform"}
        cfg = Config(extra=source)
        source["team"] = "changed"
        assert cfg.extra == {"team": "platform"}
        with pytest.raises(TypeError):
            cfg.extra["team"] = "other"  # type: ignore[index]

    def test_extra_survives_overrides_and_to_dict(self) -> None:
        cfg = Config(extra={"owners": ["a"]}).with_overrides(transport="basic")
        data = cfg.to_dict()
        assert data["extra"] == {"owners": ["a"]}
        data["extra"]["owners"].append("b")
        assert cfg.extra["owners"] == ["a"]
        assert yaml.safe_load(yaml.safe_dump(data))["extra"] == {"owners": ["a"]}
