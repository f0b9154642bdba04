"""Tests for the packwiz manifest scanner."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from modpackinfo.contracts.errors import ErrorKind, ManifestParseError, MissingFieldError
from modpackinfo.contracts.records import Side
from modpackinfo.manifest import (
    ScanResult,
    classify_metafile,
    find_pack_archives,
    load_metafile,
    read_index,
    scan_manifest,
)

MODRINTH_METAFILE = """
name = "Sodium"
filename = "sodium-fabric-0.5.3.jar"
side = "client"

[download]
url = "https://cdn.modrinth.com/data/AANobbMI/versions/sodium.jar"
hash-format = "sha512"
hash = "abc"

[update.modrinth]
mod-id = "AANobbMI"
version = "OihdIimA"
"""

CURSEFORGE_METAFILE = """
name = "Create"
filename = "create-1.20.1-0.5.1.jar"
side = "both"

[download]
hash-format = "sha1"
hash = "def"
mode = "metadata:curseforge"

[update.curseforge]
file-id = 4835191
project-id = 328085
"""

HOSTED_METAFILE = """
name = "Custom Tweaks"
filename = "custom-tweaks.jar"
side = "server"

[download]
url = "https://example.com/custom-tweaks.jar"
hash-format = "sha256"
hash = "123"
"""


def write_pack(root: Path, metafiles: dict[str, str], extra_entries: str = "") -> Path:
    """Write an index.toml listing ``metafiles`` plus their contents."""
    entries = []
    for rel, content in metafiles.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        entries.append(f'[[files]]\nfile = "{rel}"\nhash = "0"\nmetafile = true\n')
    index = root / "index.toml"
    index.write_text('hash-format = "sha256"\n\n' + "\n".join(entries) + extra_entries)
    return index


class TestReadIndex:
    """Tests for read_index()."""

    def test_paths_relative_to_index_directory(self, tmp_path: Path) -> None:
        index = write_pack(tmp_path, {"mods/sodium.pw.toml": MODRINTH_METAFILE})
        assert read_index(index) == [tmp_path / "mods" / "sodium.pw.toml"]

    def test_non_metafile_entries_ignored(self, tmp_path: Path) -> None:
        extra = (
            '\n[[files]]\nfile = "config/sodium.json"\nhash = "1"\n'
            '\n[[files]]\nfile = "mods/other.pw.toml"\nhash = "2"\nmetafile = false\n'
        )
        index = write_pack(tmp_path, {"mods/sodium.pw.toml": MODRINTH_METAFILE}, extra)
        assert read_index(index) == [tmp_path / "mods" / "sodium.pw.toml"]

    def test_missing_files_array(self, tmp_path: Path) -> None:
        index = tmp_path / "index.toml"
        index.write_text('hash-format = "sha256"\n')
        with pytest.raises(MissingFieldError, match="files"):
            read_index(index)

    def test_missing_index_file(self, tmp_path: Path) -> None:
        with pytest.raises(ManifestParseError) as exc_info:
            read_index(tmp_path / "index.toml")
        assert exc_info.value.kind == ErrorKind.PARSE

    def test_invalid_toml(self, tmp_path: Path) -> None:
        index = tmp_path / "index.toml"
        index.write_text("[[files]\nfile = ")
        with pytest.raises(ManifestParseError, match="Invalid TOML"):
            read_index(index)


class TestScanManifest:
    """Tests for scan_manifest()."""

    def test_three_buckets(self, tmp_path: Path) -> None:
        index = write_pack(
            tmp_path,
            {
                "mods/sodium.pw.toml": MODRINTH_METAFILE,
                "mods/create.pw.toml": CURSEFORGE_METAFILE,
                "mods/custom.pw.toml": HOSTED_METAFILE,
            },
        )

        result = scan_manifest(index)

        assert result.modrinth_ids == ["AANobbMI"]
        assert result.curseforge_ids == [328085]
        assert len(result.hosted) == 1
        assert result.diagnostics == []
        assert result.total == 3

    def test_hosted_record_fields(self, tmp_path: Path) -> None:
        index = write_pack(tmp_path, {"mods/custom.pw.toml": HOSTED_METAFILE})

        record = scan_manifest(index).hosted[0]

        assert record.name == "Custom Tweaks"
        assert record.side == Side.SERVER
        assert record.url == "https://example.com/custom-tweaks.jar"
        assert record.game_versions == []
        assert record.loaders == []

    def test_manifest_order_kept(self, tmp_path: Path) -> None:
        second = MODRINTH_METAFILE.replace("AANobbMI", "gvQqBUqZ")
        index = write_pack(
            tmp_path,
            {"mods/a.pw.toml": second, "mods/b.pw.toml": MODRINTH_METAFILE},
        )
        assert scan_manifest(index).modrinth_ids == ["gvQqBUqZ", "AANobbMI"]

    def test_accepts_str_path(self, tmp_path: Path) -> None:
        index = write_pack(tmp_path, {"mods/sodium.pw.toml": MODRINTH_METAFILE})
        assert scan_manifest(str(index)).modrinth_ids == ["AANobbMI"]

    def test_empty_manifest(self, tmp_path: Path) -> None:
        index = tmp_path / "index.toml"
        index.write_text('hash-format = "sha256"\nfiles = []\n')
        assert scan_manifest(index) == ScanResult()

    def test_missing_metafile_aborts(self, tmp_path: Path) -> None:
        index = write_pack(tmp_path, {})
        index.write_text('[[files]]\nfile = "mods/gone.pw.toml"\nmetafile = true\n')
        with pytest.raises(ManifestParseError, match="gone.pw.toml"):
            scan_manifest(index)

    def test_malformed_metafile_aborts(self, tmp_path: Path) -> None:
        index = write_pack(tmp_path, {"mods/bad.pw.toml": "name = \n"})
        with pytest.raises(ManifestParseError):
            scan_manifest(index)

    def test_ambiguous_update_skipped(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        both = MODRINTH_METAFILE + "\n[update.curseforge]\nproject-id = 1\n"
        index = write_pack(
            tmp_path,
            {"mods/both.pw.toml": both, "mods/create.pw.toml": CURSEFORGE_METAFILE},
        )

        with caplog.at_level(logging.WARNING):
            result = scan_manifest(index)

        assert result.modrinth_ids == []
        assert result.curseforge_ids == [328085]
        assert len(result.diagnostics) == 1
        assert result.diagnostics[0].kind == ErrorKind.AMBIGUOUS
        assert result.diagnostics[0].source is not None
        assert result.diagnostics[0].source.endswith("both.pw.toml")
        assert "unrecognized update section" in caplog.text

    def test_unknown_registry_skipped(self, tmp_path: Path) -> None:
        github = HOSTED_METAFILE + '\n[update.github]\nrepo = "x/y"\n'
        index = write_pack(tmp_path, {"mods/gh.pw.toml": github})

        result = scan_manifest(index)

        assert result.total == 0
        assert [d.kind for d in result.diagnostics] == [ErrorKind.AMBIGUOUS]


class TestClassifyMetafile:
    """Field validation in classify_metafile()."""

    def test_modrinth_id_must_be_string(self) -> None:
        with pytest.raises(MissingFieldError, match="update.modrinth.mod-id"):
            classify_metafile({"update": {"modrinth": {"mod-id": 5}}}, ScanResult(), "a.pw.toml")

    def test_curseforge_id_must_be_integer(self) -> None:
        with pytest.raises(MissingFieldError, match="update.curseforge.project-id"):
            classify_metafile(
                {"update": {"curseforge": {"project-id": "328085"}}}, ScanResult(), "a.pw.toml"
            )

    def test_curseforge_id_bool_rejected(self) -> None:
        with pytest.raises(MissingFieldError):
            classify_metafile(
                {"update": {"curseforge": {"project-id": True}}}, ScanResult(), "a.pw.toml"
            )

    def test_hosted_missing_download_url(self) -> None:
        data = {"name": "X", "side": "both", "download": {"hash": "0"}}
        with pytest.raises(MissingFieldError, match="download.url"):
            classify_metafile(data, ScanResult(), "x.pw.toml")

    def test_hosted_missing_name(self) -> None:
        data = {"side": "both", "download": {"url": "https://x"}}
        with pytest.raises(MissingFieldError, match="'name'"):
            classify_metafile(data, ScanResult(), "x.pw.toml")

    def test_hosted_invalid_side(self) -> None:
        data = {"name": "X", "side": "sideways", "download": {"url": "https://x"}}
        with pytest.raises(MissingFieldError) as exc_info:
            classify_metafile(data, ScanResult(), "x.pw.toml")
        assert exc_info.value.field == "side"

    def test_error_names_metafile(self) -> None:
        with pytest.raises(MissingFieldError) as exc_info:
            classify_metafile({"name": "X"}, ScanResult(), "mods/x.pw.toml")
        assert exc_info.value.source == "mods/x.pw.toml"


class TestFindPackArchives:
    """Tests for find_pack_archives()."""

    def test_only_prism_zips(self, tmp_path: Path) -> None:
        for name in ["prism-pack-1.1.zip", "prism-pack-1.0.zip", "other.zip", "prism.txt", "index.toml"]:
            (tmp_path / name).write_text("")
        (tmp_path / "prism-dir.zip").mkdir()

        assert find_pack_archives(tmp_path) == ["prism-pack-1.0.zip", "prism-pack-1.1.zip"]

    def test_missing_directory(self, tmp_path: Path) -> None:
        assert find_pack_archives(tmp_path / "missing") == []


class TestLoadMetafile:
    """Tests for load_metafile()."""

    def test_parsed_table(self, tmp_path: Path) -> None:
        path = tmp_path / "sodium.pw.toml"
        path.write_text(MODRINTH_METAFILE)

        data = load_metafile(path)

        assert data["name"] == "Sodium"
        assert data["update"]["modrinth"]["mod-id"] == "AANobbMI"

    def test_not_utf8(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.pw.toml"
        path.write_bytes(b'name = "\xff\xfe"\n')

        with pytest.raises(ManifestParseError, match="Invalid TOML") as exc_info:
            load_metafile(path)
        assert exc_info.value.kind == ErrorKind.PARSE
        assert exc_info.value.source == str(path)

    def test_unreadable(self, tmp_path: Path) -> None:
        with pytest.raises(ManifestParseError) as exc_info:
            load_metafile(tmp_path / "missing.pw.toml")
        assert exc_info.value.source == str(tmp_path / "missing.pw.toml")
