"""共享测试工具：fake 索引连接句柄、fake 命令执行器"""

from __future__ import annotations

import http.client
import io
import threading
import urllib.error
from typing import Any

import pytest

from crateup.core.config import reset_config
from crateup.utils.logger import reset_logging
from crateup.utils.shell import CommandResult


class FakeResponse(io.BytesIO):
    def __init__(self, body: bytes, status: int = 200) -> None:
        super().__init__(body)
        self.status = status


class TruncatedResponse(FakeResponse):
    """读取正文时连接中断"""

    def read(self, *args: Any) -> bytes:
        raise http.client.IncompleteRead(b"{\"name\":\"bat\"", 100)


class FakeOpener:
    """按 URL 返回预置响应；未登记的 URL 返回 404"""

    def __init__(self, routes: dict[str, Any] | None = None) -> None:
        self.routes = dict(routes or {})
        self.requested: list[str] = []
        self._lock = threading.Lock()

    def open(self, req: Any, data: Any = None, timeout: float = 0) -> FakeResponse:
        url = req.full_url if hasattr(req, "full_url") else str(req)
        with self._lock:
            self.requested.append(url)
        route = self.routes.get(url)
        if route is None:
            raise urllib.error.HTTPError(url, 404, "Not Found", hdrs=None, fp=None)  # type: ignore[arg-type]
        if isinstance(route, BaseException):
            raise route
        if isinstance(route, FakeResponse):
            return route
        if isinstance(route, str):
            route = route.encode("utf-8")
        return FakeResponse(route)


class FakeExecutor:
    """记录命令并按包名返回预置退出码"""

    def __init__(self, fail: dict[str, int] | None = None) -> None:
        self.fail = fail or {}
        self.commands: list[list[str]] = []

    def execute(
        self,
        cmd: list[str],
        *,
        env: dict[str, str] | None = None,
        timeout: int | None = None,
        capture: bool = True,
    ) -> CommandResult:
        self.commands.append(cmd)
        rc = self.fail.get(cmd[-1], 0)
        return CommandResult(returncode=rc, stderr="error: boom" if rc else "")


def index_body(name: str, *versions: str) -> str:
    return "\n".join(
        f'{{"name":"{name}","vers":"{v}","deps":[],"cksum":"00","features":{{}},"yanked":false}}'
        for v in versions
    ) + "\n"


@pytest.fixture(autouse=True)
def _isolate_global_state():
    """每个测试使用独立的默认配置，并清理 CLI 安装的日志 handler"""
    reset_config()
    yield
    reset_config()
    reset_logging()
