"""CLI：杂项命令（已安装列表、安装根目录）"""

from __future__ import annotations

import click

from crateup.cli import _manifest_path
from crateup.core.exceptions import CrateupError
from crateup.core.manifest import load_manifest
from crateup.core.models import SourceControl
from crateup.core.updater import UpdateService


def register(group: click.Group) -> None:
    group.add_command(list_installed)
    group.add_command(show_root)


@click.command(name="list")
@click.option("--git", "-g", is_flag=True, help="同时列出从 git 安装的包")
@click.option("--root", default=None, help="cargo 安装根目录（覆盖自动查找）")
def list_installed(git: bool, root: str | None) -> None:
    """列出已安装的包及其来源（不访问网络）"""
    path = _manifest_path(root)
    if not path.exists():
        click.echo(f"清单文件不存在: {path}")
        return
    try:
        records = UpdateService.select(load_manifest(path), include_git=git)
    except CrateupError as e:
        raise click.ClickException(str(e)) from e

    if not records:
        click.echo("没有已安装的包。")
        return
    width = max(len(r.name) for r in records)
    for r in records:
        src = r.provenance
        origin = f"git {src.url}#{src.commit[:10]}" if isinstance(src, SourceControl) else src.url
        click.echo(f"  {r.name.ljust(width)} {str(r.installed_version):12s} {origin}")


@click.command(name="root")
@click.option("--root", default=None, help="cargo 安装根目录（覆盖自动查找）")
def show_root(root: str | None) -> None:
    """显示解析出的安装根目录和清单路径"""
    path = _manifest_path(root)
    click.echo(f"安装根目录: {path.parent}")
    mark = "" if path.exists() else " (不存在)"
    click.echo(f"清单文件:   {path}{mark}")
