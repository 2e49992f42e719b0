"""lazylib 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import click

from lazylib import __version__
from lazylib.core.config import DEFAULT_CONFIG_FILE, TRANSPORTS, Config
from lazylib.core.exceptions import LazyLibError
from lazylib.utils.logger import setup_logging_from_env


def _config(ctx: click.Context) -> Config:
    """当前命令的生效配置"""
    return ctx.find_object(dict)["config"]


def _library(ctx: click.Context) -> Any:
    """按生效配置构造 LazyLibrary，命令结束时自动关闭"""
    from lazylib.core.library import LazyLibrary
    library = LazyLibrary(_config(ctx))
    ctx.call_on_close(library.close)
    return library


@contextmanager
def _errors() -> Iterator[None]:
    """把业务异常转换为 CLI 友好提示（非零退出码）"""
    try:
        yield
    except LazyLibError as e:
        raise click.ClickException(f"[{e.code}] {e}") from e


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", "config_path", default=DEFAULT_CONFIG_FILE,
              show_default=True, help="配置文件路径（不存在时使用默认配置）")
@click.option("--root", default=None, help="覆盖本地根目录 local_root")
@click.option("--source-version", default=None, help="覆盖远程源码版本")
@click.option("--transport", type=click.Choice(TRANSPORTS), default=None, help="覆盖传输策略")
@click.pass_context
def main(
    ctx: click.Context, config_path: str, root: str | None,
    source_version: str | None, transport: str | None,
) -> None:
    """lazylib - 按需拉取远程源码树并物化到本地"""
    setup_logging_from_env()
    with _errors():
        cfg = Config.from_file(config_path).with_overrides(
            local_root=root, source_version=source_version, transport=transport,
        )
    ctx.ensure_object(dict)["config"] = cfg


# 注册各领域子命令
from lazylib.cli.cmd_fetch import register as _reg_fetch  # noqa: E402
from lazylib.cli.cmd_misc import register as _reg_misc  # noqa: E402

_reg_fetch(main)
_reg_misc(main)
