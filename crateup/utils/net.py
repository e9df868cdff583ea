"""索引地址校验"""

from __future__ import annotations

from urllib.parse import urlparse

from crateup.core.exceptions import ValidationError

_ALLOWED_SCHEMES = frozenset(("http", "https"))


def validate_index_url(url: str, *, context: str = "") -> None:
    """索引根地址必须是带主机名的 http/https URL，且不能携带查询串或片段

    Raises:
        ValidationError: 地址不合法，details 中列出每一条不满足的规则
    """
    parsed = urlparse(url)
    problems: list[str] = []
    if parsed.scheme not in _ALLOWED_SCHEMES:
        problems.append(f"不允许的 URL 协议 '{parsed.scheme}'，仅支持 http/https")
    if not parsed.netloc:
        problems.append("缺少主机名")
    if parsed.query or parsed.fragment:
        problems.append("不能包含查询串或片段")
    if problems:
        label = f" ({context})" if context else ""
        raise ValidationError(
            f"无效的索引地址{label}: {url}: {'; '.join(problems)}",
            details=problems,
        )
