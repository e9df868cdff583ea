"""已安装包清单解析测试"""

from __future__ import annotations

from pathlib import Path

import pytest

from crateup.core.exceptions import ManifestUnreadableError
from crateup.core.manifest import load_manifest, parse_manifest, parse_provenance, parse_record
from crateup.core.models import IndexSource, SourceControl
from crateup.core.semver import SemanticVersion

CRATES_IO = "https://github.com/rust-lang/crates.io-index"
RUFF_COMMIT = "43a5922f6f11784f74e6f553467b1be802bc2213"

MANIFEST = f'''
[v1]
"bat 0.24.0 (registry+{CRATES_IO})" = ["bat"]
"ruff 0.6.4 (git+https://github.com/astral-sh/ruff#{RUFF_COMMIT})" = ["ruff"]
"ripgrep 14.1.0 (sparse+https://index.crates.io/)" = ["rg"]
"broken 1.0 (registry+{CRATES_IO})" = ["broken"]
"nobrackets 1.0.0 registry+{CRATES_IO}" = []
'''


class TestParseRecord:
    def test_registry_entry(self) -> None:
        r = parse_record(f"bat 0.24.0 (registry+{CRATES_IO})")
        assert r is not None
        assert r.name == "bat"
        assert r.installed_version == SemanticVersion(0, 24, 0)
        assert r.provenance == IndexSource(url=CRATES_IO, kind="registry")
        assert r.latest_version is None

    def test_git_entry(self) -> None:
        r = parse_record(f"ruff 0.6.4 (git+https://github.com/astral-sh/ruff#{RUFF_COMMIT})")
        assert r is not None
        assert r.installed_version == SemanticVersion(0, 6, 4)
        assert r.provenance == SourceControl(url="https://github.com/astral-sh/ruff", commit=RUFF_COMMIT)
        assert r.is_git

    def test_git_splits_on_first_hash(self) -> None:
        r = parse_record("x 1.0.0 (git+https://h/r?branch=a#b#c)")
        assert r is not None
        assert r.provenance == SourceControl(url="https://h/r?branch=a", commit="b#c")

    def test_sparse_entry(self) -> None:
        r = parse_record("ripgrep 14.1.0 (sparse+https://index.crates.io/)")
        assert r is not None
        assert r.provenance == IndexSource(url="https://index.crates.io/", kind="sparse")

    @pytest.mark.parametrize(
        "key",
        [
            "bat",
            "bat 0.24.0",
            f"bat 0.24 (registry+{CRATES_IO})",
            f"bat 0.24.0 registry+{CRATES_IO})",
            f"bat 0.24.0 (registry+{CRATES_IO}",
            "bat 0.24.0 (path+file:///home/me/bat)",
            "ruff 0.6.4 (git+https://github.com/astral-sh/ruff)",
            "",
            " 1.0.0 (registry+https://x)",
        ],
    )
    def test_malformed_entry_returns_none(self, key: str) -> None:
        assert parse_record(key) is None

    @pytest.mark.parametrize(
        "key",
        [
            f"bat 0.24.0 (registry+{CRATES_IO})",
            "ripgrep 14.1.0 (sparse+https://Index.Crates.IO/)",
            f"ruff 0.6.4-rc.1+meta (git+https://github.com/astral-sh/ruff#{RUFF_COMMIT})",
        ],
    )
    def test_key_round_trip(self, key: str) -> None:
        r = parse_record(key)
        assert r is not None
        assert r.key() == key


class TestParseProvenance:
    def test_empty_parens(self) -> None:
        assert parse_provenance("()") is None

    def test_git_empty_commit_allowed(self) -> None:
        assert parse_provenance("(git+https://h/r#)") == SourceControl(url="https://h/r", commit="")


class TestParseManifest:
    def test_valid_entries_kept_invalid_skipped(self) -> None:
        records = parse_manifest(MANIFEST)
        assert {r.name for r in records} == {"bat", "ruff", "ripgrep"}

    def test_values_ignored(self) -> None:
        text = f'[v1]\n"bat 0.24.0 (registry+{CRATES_IO})" = 42\n'
        assert [r.name for r in parse_manifest(text)] == ["bat"]

    def test_empty_table(self) -> None:
        assert parse_manifest("[v1]\n") == []

    def test_missing_v1(self) -> None:
        with pytest.raises(ManifestUnreadableError, match="v1"):
            parse_manifest('[v2]\ninstalls = {}\n')

    def test_v1_not_table(self) -> None:
        with pytest.raises(ManifestUnreadableError, match="不是表"):
            parse_manifest('v1 = "nope"\n')

    def test_invalid_toml(self) -> None:
        with pytest.raises(ManifestUnreadableError):
            parse_manifest("[v1\n")


class TestLoadManifest:
    def test_load_from_file(self, tmp_path: Path) -> None:
        path = tmp_path / ".crates.toml"
        path.write_text(MANIFEST, encoding="utf-8")
        assert len(load_manifest(path)) == 3

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ManifestUnreadableError, match="无法读取清单"):
            load_manifest(tmp_path / "missing.toml")
