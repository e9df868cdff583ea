"""CLI：更新检查与升级"""

from __future__ import annotations

import json

import click

from crateup.cli import _manifest_path
from crateup.core.config import get_config
from crateup.core.exceptions import CrateupError
from crateup.core.index_client import IndexClient
from crateup.core.installer import Installer
from crateup.core.models import PackageRecord
from crateup.core.updater import UpdateReport, UpdateService, UpdateStatus, update_status


def register(group: click.Group) -> None:
    group.add_command(update)


_STATUS_STYLE = {
    UpdateStatus.UPDATE: {"fg": "yellow", "bold": True},
    UpdateStatus.FRESH: {},
    UpdateStatus.UNKNOWN: {"dim": True},
}


def format_update_table(records: list[PackageRecord]) -> list[str]:
    """渲染更新表格，每个元素为一行（不含换行）"""
    if not records:
        return []
    width = max(len(r.name) for r in records)
    lines = [
        f"{click.style('Status'.rjust(12), fg='green', bold=True)} "
        f"{click.style('Package'.ljust(width), bold=True)} "
        f"{click.style('Version'.ljust(12), bold=True)} "
        f"{click.style('Latest', bold=True)}"
    ]
    for r in records:
        status = update_status(r)
        latest = str(r.latest_version) if r.latest_version else "-"
        lines.append(
            f"{click.style(status.value.rjust(12), fg='green', bold=True)} "
            f"{r.name.ljust(width)} "
            f"{str(r.installed_version).ljust(12)} "
            f"{click.style(latest, **_STATUS_STYLE[status])}"
        )
    return lines


def _echo_report(report: UpdateReport, fmt: str) -> None:
    if fmt == "json":
        click.echo(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
        return
    if not report.records:
        click.echo("没有需要检查的已安装包。")
        return
    for line in format_update_table(report.records):
        click.echo(line)


@click.command()
@click.argument("names", nargs=-1)
@click.option("--all", "-a", "all_", is_flag=True, help="检查全部已安装包（未指定包名时的默认行为）")
@click.option("--git", "-g", is_flag=True, help="同时处理从 git 安装的包")
@click.option("--list", "-l", "list_only", is_flag=True, help="只列出可更新的包，不执行安装")
@click.option("--force", "-f", is_flag=True, help="安装时传递 --force")
@click.option("--locked", is_flag=True, help="安装时传递 --locked")
@click.option("--jobs", "-j", type=int, default=None, help="并发查询数（默认取配置 max_workers）")
@click.option(
    "--format", "fmt", default="table", type=click.Choice(["table", "json"]), help="输出格式",
)
@click.option("--root", default=None, help="cargo 安装根目录（覆盖自动查找）")
def update(
    names: tuple[str, ...], all_: bool, git: bool, list_only: bool,
    force: bool, locked: bool, jobs: int | None, fmt: str, root: str | None,
) -> None:
    """检查已安装包的更新，并重新安装有新版本的包

    指定 NAMES 时只处理这些包，并强制重新安装（等价于 cargo install -f NAMES）。
    """
    cfg = get_config()
    selected = None if all_ or not names else list(names)
    try:
        client = IndexClient(index_url=cfg.index_url, timeout=cfg.request_timeout)
        svc = UpdateService(client, max_workers=jobs or cfg.max_workers)
        report = svc.check(
            _manifest_path(root),
            include_git=git or cfg.include_git,
            names=selected,
        )
    except CrateupError as e:
        raise click.ClickException(str(e)) from e

    _echo_report(report, fmt)
    if list_only:
        return

    targets = report.records if selected else report.outdated
    if not targets:
        return

    installer = Installer(cargo=cfg.cargo, force=force or bool(selected), locked=locked)
    outcomes = installer.install_all(targets)
    failed = [o for o in outcomes if not o.success]
    for o in failed:
        click.echo(f"安装失败: {o.name} ({o.message.splitlines()[0]})", err=True)
    if failed:
        raise SystemExit(1)
