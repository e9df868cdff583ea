"""核心数据模型

Provenance 是封闭的二选一类型：SourceControl（git 仓库 + commit）或
IndexSource（包索引地址）。消费方用 isinstance 分支并以 assert_never 收尾。

PackageRecord 为不可变值对象，由清单解析器创建，索引查询后通过
with_latest() 生成带最新版本的副本，之后只读。
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Union

from crateup.core.semver import SemanticVersion

GIT_PREFIX = "git+"
INDEX_PREFIXES = ("registry+", "sparse+")


@dataclass(frozen=True)
class SourceControl:
    """从 git 仓库指定 commit 安装的包"""

    url: str
    commit: str

    def spec(self) -> str:
        return f"({GIT_PREFIX}{self.url}#{self.commit})"


@dataclass(frozen=True)
class IndexSource:
    """从包索引安装的包

    kind 记录匹配到的前缀（"registry" 或 "sparse"），保证重新序列化时逐字节一致。
    """

    url: str
    kind: str = "registry"

    def spec(self) -> str:
        return f"({self.kind}+{self.url})"


Provenance = Union[SourceControl, IndexSource]


@dataclass(frozen=True)
class PackageRecord:
    """一条已安装包记录"""

    name: str
    installed_version: SemanticVersion
    provenance: Provenance
    latest_version: SemanticVersion | None = None

    @property
    def is_git(self) -> bool:
        return isinstance(self.provenance, SourceControl)

    def with_latest(self, version: SemanticVersion) -> PackageRecord:
        """返回填充了最新版本的副本"""
        return replace(self, latest_version=version)

    def key(self) -> str:
        """还原为 .crates.toml 中的键: "<name> <version> (<provenance>)" """
        return f"{self.name} {self.installed_version} {self.provenance.spec()}"

    def to_dict(self) -> dict[str, str | None]:
        data: dict[str, str | None] = {
            "name": self.name,
            "installed_version": str(self.installed_version),
            "latest_version": str(self.latest_version) if self.latest_version else None,
            "source": "git" if self.is_git else "index",
            "url": self.provenance.url,
        }
        if isinstance(self.provenance, SourceControl):
            data["commit"] = self.provenance.commit
        return data


@dataclass(frozen=True)
class IndexEntry:
    """索引文件中的一行（仅在单次查询期间存在）"""

    name: str
    vers: SemanticVersion
    yanked: bool = False
