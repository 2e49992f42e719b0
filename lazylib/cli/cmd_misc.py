"""CLI: 依赖表 / 补丁 / 配置查看"""

from __future__ import annotations

from pathlib import Path

import click
import yaml

from lazylib.cli import _config, _errors, _library
from lazylib.core.dep.models import is_directory_target


def register(group: click.Group) -> None:
    group.add_command(list_deps)
    group.add_command(patch)
    group.add_command(show_config)


@click.command(name="deps")
@click.pass_context
def list_deps(ctx: click.Context) -> None:
    """列出依赖表"""
    library = _library(ctx)
    with _errors():
        table = library.table
    if not table:
        click.echo("没有声明任何依赖。")
        return
    extension = library.config.extension
    for path, targets in sorted(table.items()):
        click.echo(path)
        for target in targets:
            kind = "dir " if is_directory_target(target, extension) else "file"
            click.echo(f"  [{kind}] {target}")


@click.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--check", is_flag=True, help="只检查，不修改；存在生效指令时退出码为 1")
@click.pass_context
def patch(ctx: click.Context, files: tuple[str, ...], check: bool) -> None:
    """中和本地文件中的即时加载指令"""
    patcher = _library(ctx).patcher
    found = 0
    for name in files:
        path = Path(name)
        content = path.read_bytes()
        active = patcher.count_active(content)
        found += active
        if check:
            click.echo(f"{name}: {active} 处生效指令")
        elif active:
            path.write_bytes(patcher.neutralize(content))
            click.echo(f"{name}: 已注释 {active} 处")
    if check and found:
        ctx.exit(1)


@click.command(name="config")
@click.pass_context
def show_config(ctx: click.Context) -> None:
    """输出生效配置"""
    cfg = _config(ctx)
    data = cfg.to_dict()
    data["local_root"] = str(cfg.root)
    click.echo(yaml.safe_dump(data, allow_unicode=True, sort_keys=False), nl=False)
