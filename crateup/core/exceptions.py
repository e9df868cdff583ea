"""统一异常体系

所有业务异常继承 CrateupError，替代散落的 ValueError / RuntimeError。
CLI 层据此输出友好提示并以非零退出码结束。

分类:
  - 致命错误（ManifestUnreadableError / ConfigError）: 冒泡到顶层，终止本次运行
  - 单包查询错误（IndexLookupError 子类）: 由调用方就地吸收，表现为"最新版本未知"
  - 单包安装错误（InstallError）: 按包报告，不阻断其他包的安装
"""

from __future__ import annotations


class CrateupError(Exception):
    """基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(CrateupError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class ValidationError(CrateupError, ValueError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class ManifestUnreadableError(CrateupError):
    """已安装包清单（.crates.toml）无法读取或顶层结构不合法"""

    code = "MANIFEST_UNREADABLE"


class InvalidVersionError(CrateupError, ValueError):
    """版本号不符合语义化版本格式"""

    code = "INVALID_VERSION"


class IndexLookupError(CrateupError):
    """索引查询失败（单包级别）"""

    code = "LOOKUP_ERROR"

    def __init__(self, message: str, name: str = "") -> None:
        super().__init__(message)
        self.name = name


class PackageNotFoundError(IndexLookupError):
    """索引中没有可解析的版本行"""

    code = "LOOKUP_NOT_FOUND"


class IndexTransportError(IndexLookupError):
    """网络错误或非 200 响应"""

    code = "LOOKUP_TRANSPORT_ERROR"


class IndexDecodeError(IndexLookupError):
    """响应体无法解码"""

    code = "LOOKUP_DECODE_ERROR"


class InstallError(CrateupError):
    """cargo install 调用失败"""

    code = "INSTALL_FAILED"
