"""crateup 命令行接口

CLI 按功能拆分为子模块，每个模块注册自己的命令到 main group。
"""

from __future__ import annotations

import os
from pathlib import Path

import click

from crateup import __version__
from crateup.core.config import get_config, init_config
from crateup.core.exceptions import ConfigError
from crateup.core.install_root import crates_file, install_root
from crateup.utils.logger import setup_logging


def _manifest_path(root: str | None) -> Path:
    """按 --root > 配置 install_root > cargo 默认规则 解析清单路径"""
    if root:
        return crates_file(Path(root))
    cfg = get_config()
    if cfg.install_root:
        return crates_file(Path(cfg.install_root).expanduser())
    return crates_file(install_root())


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config", "-c", "config_path", default=None, envvar="CRATEUP_CONFIG",
    help="配置文件路径（YAML）",
)
def main(config_path: str | None) -> None:
    """crateup - 检查并升级 cargo install 安装的包"""
    setup_logging(
        level=os.getenv("CRATEUP_LOG_LEVEL", "WARNING"),
        json_output=os.getenv("CRATEUP_LOG_JSON", "") == "1",
    )
    if config_path:
        try:
            init_config(config_path)
        except ConfigError as e:
            raise click.ClickException(str(e)) from e


# 注册各子命令
from crateup.cli.cmd_update import register as _reg_update  # noqa: E402
from crateup.cli.cmd_misc import register as _reg_misc  # noqa: E402

_reg_update(main)
_reg_misc(main)
