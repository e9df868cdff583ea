"""已安装包清单解析器

解析 cargo 安装根目录下的 .crates.toml:

    [v1]
    "bat 0.24.0 (registry+https://github.com/rust-lang/crates.io-index)" = ["bat"]
    "ruff 0.6.4 (git+https://github.com/astral-sh/ruff#43a5922f...)" = ["ruff"]

只解析 v1 表的键，值（二进制文件列表）忽略。

错误策略:
  - 单条键格式错误（字段不足、版本非法、来源语法不符）: 跳过该条，不影响其他条目
  - 文件不可读、TOML 非法、缺少 v1 表: 抛 ManifestUnreadableError
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path

from crateup.core.exceptions import InvalidVersionError, ManifestUnreadableError
from crateup.core.models import (
    GIT_PREFIX,
    INDEX_PREFIXES,
    IndexSource,
    PackageRecord,
    Provenance,
    SourceControl,
)
from crateup.core.semver import SemanticVersion

logger = logging.getLogger(__name__)

MANIFEST_TABLE = "v1"


def parse_provenance(spec: str) -> Provenance | None:
    """解析括号包裹的来源描述，语法不符时返回 None"""
    if not (spec.startswith("(") and spec.endswith(")")):
        return None
    inner = spec[1:-1]

    if inner.startswith(GIT_PREFIX):
        url, sep, commit = inner[len(GIT_PREFIX):].partition("#")
        if not sep:
            return None
        return SourceControl(url=url, commit=commit)

    for prefix in INDEX_PREFIXES:
        if inner.startswith(prefix):
            return IndexSource(url=inner[len(prefix):], kind=prefix[:-1])
    return None


def parse_record(key: str) -> PackageRecord | None:
    """解析单条清单键，失败时返回 None"""
    parts = key.split(" ", 2)
    if len(parts) != 3:
        logger.debug("跳过字段不足的清单条目: %r", key)
        return None
    name, version_text, spec = parts
    if not name:
        logger.debug("跳过包名为空的清单条目: %r", key)
        return None

    try:
        version = SemanticVersion.parse(version_text)
    except InvalidVersionError:
        logger.debug("跳过版本号非法的清单条目: %r", key)
        return None

    provenance = parse_provenance(spec)
    if provenance is None:
        logger.debug("跳过来源无法识别的清单条目: %r", key)
        return None

    return PackageRecord(name=name, installed_version=version, provenance=provenance)


def parse_manifest(text: str) -> list[PackageRecord]:
    """解析清单文本，返回所有合法条目（保持表的迭代顺序，不去重）"""
    try:
        root = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ManifestUnreadableError(f"清单不是合法的 TOML: {e}") from e

    if MANIFEST_TABLE not in root:
        raise ManifestUnreadableError(f"清单中缺少 '{MANIFEST_TABLE}'")
    table = root[MANIFEST_TABLE]
    if not isinstance(table, dict):
        raise ManifestUnreadableError(f"清单中的 '{MANIFEST_TABLE}' 不是表")

    records = [r for r in map(parse_record, table) if r is not None]
    skipped = len(table) - len(records)
    if skipped:
        logger.info("清单中有 %d 条无法解析的条目已跳过", skipped)
    return records


def load_manifest(path: str | Path) -> list[PackageRecord]:
    """读取并解析清单文件"""
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestUnreadableError(f"无法读取清单 {p}: {e}") from e

    records = parse_manifest(text)
    logger.info("已从 %s 加载 %d 个已安装包", p, len(records))
    return records
