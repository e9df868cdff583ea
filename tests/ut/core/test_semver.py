"""语义化版本解析与比较测试"""

from __future__ import annotations

import pytest

from crateup.core.exceptions import InvalidVersionError
from crateup.core.semver import SemanticVersion


class TestParse:
    def test_plain_release(self) -> None:
        v = SemanticVersion.parse("0.24.0")
        assert (v.major, v.minor, v.patch) == (0, 24, 0)
        assert v.prerelease == () and v.build == ()

    def test_prerelease_and_build(self) -> None:
        v = SemanticVersion.parse("1.0.0-alpha.1+build.5")
        assert v.prerelease == ("alpha", "1")
        assert v.build == ("build", "5")
        assert v.is_prerelease

    @pytest.mark.parametrize("text", ["0.6.4", "1.0.0-rc.1", "2.3.4+20240101", "1.0.0-x-y.7+a.b"])
    def test_str_reproduces_input(self, text: str) -> None:
        assert str(SemanticVersion.parse(text)) == text

    @pytest.mark.parametrize(
        "text",
        [
            "", "1", "1.2", "v1.2.3", "1.2.3.4", "01.2.3", "1.02.3", "1.2.3-", "1.2.3-01", "1.2.3+",
            "a.b.c", " 1.2.3", "1١.0.0", "1.0.0\n", "١.2.3",
        ],
    )
    def test_invalid_rejected(self, text: str) -> None:
        with pytest.raises(InvalidVersionError):
            SemanticVersion.parse(text)

    def test_invalid_is_value_error(self) -> None:
        with pytest.raises(ValueError, match="无效的语义化版本"):
            SemanticVersion.parse("latest")


class TestOrdering:
    @pytest.mark.parametrize(
        ("lower", "higher"),
        [
            ("0.6.4", "0.6.5"),
            ("0.9.9", "0.10.0"),
            ("1.9.0", "2.0.0"),
            ("1.0.0-alpha", "1.0.0"),
            ("1.0.0-alpha", "1.0.0-alpha.1"),
            ("1.0.0-alpha.1", "1.0.0-alpha.beta"),
            ("1.0.0-alpha.beta", "1.0.0-beta"),
            ("1.0.0-beta.2", "1.0.0-beta.11"),
            ("1.0.0-rc.1", "1.0.0"),
        ],
    )
    def test_precedence(self, lower: str, higher: str) -> None:
        assert SemanticVersion.parse(lower) < SemanticVersion.parse(higher)
        assert SemanticVersion.parse(higher) > SemanticVersion.parse(lower)

    def test_build_metadata_ignored(self) -> None:
        a = SemanticVersion.parse("1.0.0+a")
        b = SemanticVersion.parse("1.0.0+b")
        assert a == b
        assert not a < b and not b < a
        assert hash(a) == hash(b)

    def test_not_comparable_with_str(self) -> None:
        assert SemanticVersion.parse("1.0.0") != "1.0.0"
