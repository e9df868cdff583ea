"""更新判定与检查流程

has_update() 是全函数：最新版本未知时视为"无更新"，不抛异常。

UpdateService 串联 清单解析 -> 来源过滤 -> 索引查询 -> 判定：
  - 各包查询互相独立，可在线程池中并发执行
  - 单包查询失败只影响该包（latest_version 保持未设置）
  - 结果顺序与清单迭代顺序一致，与查询完成顺序无关
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from crateup.core.index_client import IndexClient
from crateup.core.manifest import load_manifest
from crateup.core.models import PackageRecord

logger = logging.getLogger(__name__)


class UpdateStatus(str, Enum):
    UPDATE = "Update"
    FRESH = "Fresh"
    UNKNOWN = "Unknown"


def has_update(record: PackageRecord) -> bool:
    """最新版本已知且严格高于已安装版本时返回 True"""
    if record.latest_version is None:
        return False
    return record.latest_version > record.installed_version


def update_status(record: PackageRecord) -> UpdateStatus:
    if record.latest_version is None:
        return UpdateStatus.UNKNOWN
    return UpdateStatus.UPDATE if has_update(record) else UpdateStatus.FRESH


@dataclass
class UpdateReport:
    """一次更新检查的结果"""

    records: list[PackageRecord] = field(default_factory=list)

    @property
    def outdated(self) -> list[PackageRecord]:
        return [r for r in self.records if has_update(r)]

    @property
    def unknown(self) -> list[PackageRecord]:
        return [r for r in self.records if r.latest_version is None]

    def to_dict(self) -> dict:
        return {
            "total": len(self.records),
            "outdated": len(self.outdated),
            "unknown": len(self.unknown),
            "packages": [
                {**r.to_dict(), "status": update_status(r).value}
                for r in self.records
            ],
        }


class UpdateService:
    """已安装包的更新检查服务"""

    def __init__(self, client: IndexClient, max_workers: int = 1) -> None:
        self.client = client
        self.max_workers = max(1, max_workers)

    @staticmethod
    def select(
        records: Iterable[PackageRecord],
        *,
        include_git: bool = False,
        names: Sequence[str] | None = None,
    ) -> list[PackageRecord]:
        """按来源和包名过滤：git 包仅在 include_git 时保留；names 非空时只保留指定包"""
        records = list(records)
        selected = [r for r in records if include_git or not r.is_git]
        if names:
            wanted = set(names)
            selected = [r for r in selected if r.name in wanted]
            missing = wanted - {r.name for r in selected}
            git_only = {r.name for r in records if r.is_git and r.name in missing}
            for name in sorted(missing):
                if name in git_only:
                    logger.warning("%s 是从 git 安装的包，需要 --git 才会处理", name)
                else:
                    logger.warning("未找到已安装的包: %s", name)
        return selected

    def enrich(self, records: Sequence[PackageRecord]) -> list[PackageRecord]:
        """为每条记录查询最新版本，返回顺序与输入一致"""
        if self.max_workers == 1 or len(records) <= 1:
            return [self.client.lookup(r) for r in records]

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            # map 按提交顺序产出结果
            return list(executor.map(self.client.lookup, records))

    def check(
        self,
        manifest_path: str | Path,
        *,
        include_git: bool = False,
        names: Sequence[str] | None = None,
    ) -> UpdateReport:
        """加载清单并查询全部选中包的最新版本

        清单文件不存在表示从未通过 cargo install 安装过包，返回空报告。
        """
        path = Path(manifest_path)
        if not path.exists():
            logger.info("清单文件不存在，没有已安装的包: %s", path)
            return UpdateReport()

        records = self.select(load_manifest(path), include_git=include_git, names=names)
        logger.info("查询 %d 个包的最新版本 (并行度 %d)", len(records), self.max_workers)
        report = UpdateReport(records=self.enrich(records))
        logger.info(
            "检查完成: %d 个可更新, %d 个未知",
            len(report.outdated), len(report.unknown),
        )
        return report
