"""cargo 安装根目录定位

查找顺序:
  1. $CARGO_INSTALL_ROOT
  2. $CARGO_HOME/config.toml 中的 install.root（相对用户主目录）
  3. $CARGO_HOME（默认 ~/.cargo）
"""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

CRATES_FILE = ".crates.toml"


def cargo_home(env: Mapping[str, str] | None = None, home: Path | None = None) -> Path:
    """返回 cargo 主目录：$CARGO_HOME 或 ~/.cargo"""
    env = os.environ if env is None else env
    if env.get("CARGO_HOME"):
        return Path(env["CARGO_HOME"])
    return (home or Path.home()) / ".cargo"


def _read_install_root(config_path: Path, home: Path) -> Path | None:
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.debug("无法读取 cargo 配置 %s: %s", config_path, e)
        return None

    install = data.get("install")
    root = install.get("root") if isinstance(install, dict) else None
    if not isinstance(root, str) or not root:
        return None
    return home / root


def install_root(env: Mapping[str, str] | None = None, home: Path | None = None) -> Path:
    """返回 cargo install 的安装根目录"""
    env = os.environ if env is None else env
    if env.get("CARGO_INSTALL_ROOT"):
        return Path(env["CARGO_INSTALL_ROOT"])

    home = home or Path.home()
    chome = cargo_home(env, home)
    configured = _read_install_root(chome / "config.toml", home)
    if configured is not None:
        logger.debug("使用 config.toml 中的 install.root: %s", configured)
        return configured
    return chome


def crates_file(root: Path) -> Path:
    return root / CRATES_FILE
