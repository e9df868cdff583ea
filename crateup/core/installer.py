"""cargo install 调用

按来源构造安装命令：
  - IndexSource   -> cargo install <name>
  - SourceControl -> cargo install --git <url> <name>

单包安装失败只记录在该包的 InstallOutcome 中，不中断其余包的安装。
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import assert_never

from crateup.core.exceptions import InstallError
from crateup.core.models import IndexSource, PackageRecord, SourceControl
from crateup.utils.shell import CommandExecutor, LocalExecutor

logger = logging.getLogger(__name__)


def install_command(
    record: PackageRecord,
    *,
    cargo: str = "cargo",
    force: bool = False,
    locked: bool = False,
) -> list[str]:
    """构造单个包的 cargo install 命令行"""
    cmd = [cargo, "install"]
    provenance = record.provenance
    if isinstance(provenance, SourceControl):
        cmd += ["--git", provenance.url]
    elif isinstance(provenance, IndexSource):
        pass
    else:
        assert_never(provenance)
    if force:
        cmd.append("--force")
    if locked:
        cmd.append("--locked")
    cmd.append(record.name)
    return cmd


@dataclass
class InstallOutcome:
    """单个包的安装结果"""

    name: str
    command: list[str]
    returncode: int = 0
    message: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0


class Installer:
    """通过 CommandExecutor 执行 cargo install，测试时可注入 fake 执行器"""

    def __init__(
        self,
        executor: CommandExecutor | None = None,
        *,
        cargo: str = "cargo",
        force: bool = False,
        locked: bool = False,
        capture: bool = False,
    ) -> None:
        self.executor = executor or LocalExecutor()
        self.cargo = cargo
        self.force = force
        self.locked = locked
        self.capture = capture

    def install(self, record: PackageRecord, *, force: bool | None = None) -> InstallOutcome:
        cmd = install_command(
            record, cargo=self.cargo,
            force=self.force if force is None else force,
            locked=self.locked,
        )
        logger.info("安装: %s", " ".join(cmd))
        try:
            result = self.executor.execute(cmd, capture=self.capture)
        except OSError as e:
            err = InstallError(f"无法启动 {self.cargo}: {e}")
            logger.error("安装 %s 失败: %s", record.name, err)
            return InstallOutcome(name=record.name, command=cmd, returncode=-1, message=str(err))

        if not result.success:
            message = f"退出码: {result.returncode}"
            if result.stderr:
                message += f"\n{result.stderr[-500:]}"
            logger.error("安装 %s 失败 (rc=%d)", record.name, result.returncode)
            return InstallOutcome(
                name=record.name, command=cmd,
                returncode=result.returncode, message=message,
            )

        return InstallOutcome(name=record.name, command=cmd, message="安装成功")

    def install_all(
        self, records: Iterable[PackageRecord], *, force: bool | None = None,
    ) -> list[InstallOutcome]:
        outcomes = [self.install(r, force=force) for r in records]
        failed = [o.name for o in outcomes if not o.success]
        if failed:
            logger.warning(
                "安装汇总: %d 成功, %d 失败 (%s)",
                len(outcomes) - len(failed), len(failed), ", ".join(failed),
            )
        return outcomes
