"""crates.io 稀疏索引客户端

按包名计算分片路径，拉取索引文件并解析出已发布的版本列表。

索引文件为换行分隔的 JSON，每行一条发布记录，至少包含 name 与 vers:

    {"name":"bat","vers":"0.24.0","deps":[...],"cksum":"...","yanked":false}

索引只追加、按发布顺序输出，因此"最新版本"取最后一条可解析行的版本，
不做按 semver 取最大值的比较（乱序索引下两者结果不同）。
"""

from __future__ import annotations

import http.client
import json
import logging
import urllib.error
import urllib.request
from typing import Any, Protocol

from crateup import __version__
from crateup.core.exceptions import (
    IndexDecodeError,
    IndexLookupError,
    IndexTransportError,
    InvalidVersionError,
    PackageNotFoundError,
)
from crateup.core.models import IndexEntry, PackageRecord
from crateup.core.semver import SemanticVersion
from crateup.utils.net import validate_index_url

logger = logging.getLogger(__name__)

CRATES_IO_INDEX = "https://index.crates.io"
DEFAULT_TIMEOUT = 30.0
USER_AGENT = f"crateup/{__version__}"


class Opener(Protocol):
    """可复用的连接句柄协议（urllib.request.OpenerDirector 满足此协议）"""

    def open(self, fullurl: Any, data: Any = None, timeout: float = ...) -> Any:
        ...


def shard_path(name: str) -> str:
    """按包名长度计算索引分片路径

    长度 1 -> 1/{name}
    长度 2 -> 2/{name}
    长度 3 -> 3/{首字符}/{name}
    长度 >=4 -> {前两个字符}/{第三四个字符}/{name}

    保留原始大小写，不做任何规范化。
    """
    if not name:
        raise ValueError("包名不能为空")
    if len(name) == 1:
        return f"1/{name}"
    if len(name) == 2:
        return f"2/{name}"
    if len(name) == 3:
        return f"3/{name[0]}/{name}"
    return f"{name[:2]}/{name[2:4]}/{name}"


def _decode_line(line: str) -> IndexEntry | None:
    try:
        data = json.loads(line)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict):
        return None
    name = data.get("name")
    vers = data.get("vers")
    if not isinstance(name, str) or not isinstance(vers, str):
        return None
    try:
        version = SemanticVersion.parse(vers)
    except InvalidVersionError:
        return None
    return IndexEntry(name=name, vers=version, yanked=bool(data.get("yanked", False)))


def parse_index_lines(text: str) -> list[IndexEntry]:
    """解析索引文件内容，跳过空行和无法解码的行"""
    entries: list[IndexEntry] = []
    for line in text.split("\n"):
        if not line.strip():
            continue
        entry = _decode_line(line)
        if entry is None:
            logger.debug("跳过无法解析的索引行: %.80s", line)
            continue
        entries.append(entry)
    return entries


class IndexClient:
    """索引查询客户端

    opener 为调用方传入的可复用连接句柄，只读共享，可跨线程使用；
    不传时每次请求使用 urllib.request.urlopen。
    """

    def __init__(
        self,
        index_url: str = CRATES_IO_INDEX,
        opener: Opener | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        validate_index_url(index_url, context="package index")
        self.index_url = index_url.rstrip("/")
        self.timeout = timeout
        self._opener = opener

    def index_url_for(self, name: str) -> str:
        return f"{self.index_url}/{shard_path(name)}"

    def _fetch(self, name: str) -> str:
        try:
            url = self.index_url_for(name)
            req = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
        except ValueError as e:
            raise IndexTransportError(f"无法为 {name!r} 构造索引请求: {e}", name=name) from e
        logger.debug("查询索引: %s", url)
        try:
            if self._opener is not None:
                resp = self._opener.open(req, timeout=self.timeout)
            else:
                resp = urllib.request.urlopen(req, timeout=self.timeout)  # nosec B310
            with resp:
                status = getattr(resp, "status", 200)
                if status != 200:
                    raise IndexTransportError(
                        f"索引返回非成功状态 {status}: {url}", name=name,
                    )
                body = resp.read()
        except urllib.error.HTTPError as e:
            raise IndexTransportError(
                f"索引返回非成功状态 {e.code}: {url}", name=name,
            ) from e
        except (urllib.error.URLError, http.client.HTTPException, OSError, ValueError) as e:
            raise IndexTransportError(f"请求索引失败: {url} - {e}", name=name) from e

        try:
            return body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise IndexDecodeError(f"索引响应不是合法的 UTF-8: {url}", name=name) from e

    def available_versions(self, name: str) -> list[SemanticVersion]:
        """按索引顺序返回已发布的全部版本"""
        return [entry.vers for entry in parse_index_lines(self._fetch(name))]

    def latest_version(self, name: str) -> SemanticVersion:
        """返回索引中最后一条可解析行的版本

        Raises:
            PackageNotFoundError: 没有任何可解析的版本行
            IndexTransportError: 网络错误或非 200 响应
            IndexDecodeError: 响应体无法解码
        """
        versions = self.available_versions(name)
        if not versions:
            raise PackageNotFoundError(f"索引中没有找到 '{name}' 的版本", name=name)
        return versions[-1]

    def lookup(self, record: PackageRecord) -> PackageRecord:
        """查询记录的最新版本；失败时原样返回（latest_version 保持未设置）"""
        try:
            latest = self.latest_version(record.name)
        except IndexLookupError as e:
            logger.warning("查询 %s 的最新版本失败 [%s]: %s", record.name, e.code, e)
            return record
        logger.debug("%s: 已安装 %s, 最新 %s", record.name, record.installed_version, latest)
        return record.with_latest(latest)
