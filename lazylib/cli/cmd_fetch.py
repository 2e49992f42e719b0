"""CLI: 拉取 / 镜像 / 加载命令"""

from __future__ import annotations

import click

from lazylib.cli import _errors, _library


def register(group: click.Group) -> None:
    group.add_command(fetch)
    group.add_command(mirror)
    group.add_command(load)


@click.command()
@click.argument("paths", nargs=-1, required=True)
@click.pass_context
def fetch(ctx: click.Context, paths: tuple[str, ...]) -> None:
    """拉取文件及其依赖闭包（本地已存在则跳过）"""
    library = _library(ctx)
    with _errors():
        for path in paths:
            local = library.ensure_local(path)
            click.echo(f"就绪: {path} -> {local}")


@click.command()
@click.argument("directories", nargs=-1, required=True)
@click.pass_context
def mirror(ctx: click.Context, directories: tuple[str, ...]) -> None:
    """递归镜像整个目录"""
    library = _library(ctx)
    with _errors():
        for directory in directories:
            local = library.mirror_dir(directory)
            click.echo(f"已镜像: {directory} -> {local}")


@click.command()
@click.argument("name")
@click.option("--show", is_flag=True, help="输出文件内容")
@click.pass_context
def load(ctx: click.Context, name: str, show: bool) -> None:
    """按命名约定解析符号名并物化"""
    library = _library(ctx)
    with _errors():
        path = library.naming.resolve(name)
        content = library.load(path)
    if show:
        click.echo(content.decode("utf-8", errors="replace"), nl=False)
    else:
        click.echo(f"{name} -> {library.store.local_path(path)}")
