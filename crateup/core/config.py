"""集中配置管理

支持从 YAML 文件加载 + 编程式覆盖，CLI 入口显式初始化。
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field, fields

import yaml

from crateup.core.exceptions import ConfigError
from crateup.core.index_client import CRATES_IO_INDEX, DEFAULT_TIMEOUT
from crateup.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """全局配置"""

    # 索引
    index_url: str = CRATES_IO_INDEX
    request_timeout: float = DEFAULT_TIMEOUT

    # 执行
    max_workers: int = 8
    cargo: str = "cargo"
    include_git: bool = False

    # 安装根目录覆盖（为空时按 CARGO_INSTALL_ROOT / CARGO_HOME 规则查找）
    install_root: str = ""

    # 放不到字段里的配置项
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str) -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        try:
            data = load_yaml(path)
        except (yaml.YAMLError, OSError, ValueError) as e:
            raise ConfigError(f"无法加载配置文件 {path}: {e}") from e
        if not data:
            return cls()
        known = {f.name for f in fields(cls)} - {"extra"}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        try:
            cfg = cls(**matched)
        except TypeError as e:
            raise ConfigError(f"配置文件 {path} 内容无效: {e}") from e
        if cfg.max_workers < 1:
            raise ConfigError(f"max_workers 必须 >= 1，实际: {cfg.max_workers}")
        cfg.extra = extra
        return cfg

    def to_dict(self) -> dict:
        return asdict(self)


# 全局单例，首次 import 时不加载文件；由 CLI 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str) -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.info("配置已加载: %s", path)
    return _current


def reset_config() -> None:
    global _current  # noqa: PLW0603
    _current = None
