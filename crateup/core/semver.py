"""语义化版本（SemVer 2.0.0）

cargo 记录的版本号严格遵循 major.minor.patch[-prerelease][+build]，
因此这里不接受 "v" 前缀，也不补全缺省的 minor/patch。

比较规则:
  - 依次比较 major / minor / patch
  - 带 prerelease 的版本低于同号正式版本
  - prerelease 标识逐段比较：纯数字段按整数比较，且低于字母数字段
  - build 元数据不参与比较与相等判断
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering

from crateup.core.exceptions import InvalidVersionError

_IDENT = r"(?:0|[1-9]\d*|[0-9A-Za-z-]*[A-Za-z-][0-9A-Za-z-]*)"

SEMVER_RE = re.compile(
    r"(?P<major>0|[1-9]\d*)"
    r"\.(?P<minor>0|[1-9]\d*)"
    r"\.(?P<patch>0|[1-9]\d*)"
    rf"(?:-(?P<prerelease>{_IDENT}(?:\.{_IDENT})*))?"
    r"(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?",
    re.ASCII,
)


@total_ordering
@dataclass(frozen=True, eq=False)
class SemanticVersion:
    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()
    build: tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str) -> SemanticVersion:
        """解析版本字符串，格式不合法时抛 InvalidVersionError"""
        if not isinstance(text, str):
            raise InvalidVersionError(f"版本号必须是字符串，实际类型: {type(text).__name__}")
        m = SEMVER_RE.fullmatch(text)
        if m is None:
            raise InvalidVersionError(f"无效的语义化版本: {text!r}")
        prerelease = m.group("prerelease")
        build = m.group("build")
        return cls(
            major=int(m.group("major")),
            minor=int(m.group("minor")),
            patch=int(m.group("patch")),
            prerelease=tuple(prerelease.split(".")) if prerelease else (),
            build=tuple(build.split(".")) if build else (),
        )

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += "-" + ".".join(self.prerelease)
        if self.build:
            text += "+" + ".".join(self.build)
        return text

    def _prerelease_key(self) -> tuple[tuple[int, int | str], ...]:
        # 数字段编码为 (0, int)，字母数字段编码为 (1, str)，保证数字段优先级更低
        return tuple(
            (0, int(ident)) if ident.isdigit() else (1, ident)
            for ident in self.prerelease
        )

    def _cmp_key(self) -> tuple:
        release_flag = 0 if self.prerelease else 1
        return (self.major, self.minor, self.patch, release_flag, self._prerelease_key())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._cmp_key() == other._cmp_key()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._cmp_key() < other._cmp_key()

    def __hash__(self) -> int:
        return hash(self._cmp_key())
