"""
Manifest scanner for packwiz-style modpacks.

Reads the root index (index.toml) and every metafile it lists, sorting
each mod into one of three provenance buckets:

    [update.modrinth]   mod-id = "AANobbMI"   -> Modrinth batch
    [update.curseforge] project-id = 394468   -> CurseForge batch
    no [update]         name/side/download.url -> hosted record

Metafile paths are relative to the directory holding the index.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from modpackinfo.contracts.errors import (
    AmbiguousUpdateError,
    Diagnostic,
    ManifestParseError,
    MissingFieldError,
)
from modpackinfo.contracts.records import ModRecord, make_record

logger = logging.getLogger(__name__)

MODRINTH_SECTION = "modrinth"
CURSEFORGE_SECTION = "curseforge"

ARCHIVE_PREFIX = "prism"
ARCHIVE_SUFFIX = ".zip"


@dataclass
class ScanResult:
    """
    Output of a manifest scan.

    Attributes:
        modrinth_ids: Modrinth project ids, in manifest order.
        curseforge_ids: CurseForge project ids, in manifest order.
        hosted: Records for self-described (externally hosted) mods.
        diagnostics: Metafiles skipped because of an unclassifiable update section.
    """

    modrinth_ids: list[str] = field(default_factory=list)
    curseforge_ids: list[int] = field(default_factory=list)
    hosted: list[ModRecord] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def total(self) -> int:
        """Number of classified metafiles."""
        return len(self.modrinth_ids) + len(self.curseforge_ids) + len(self.hosted)


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except OSError as e:
        raise ManifestParseError(f"Cannot read {path}: {e}", source=str(path)) from e
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        raise ManifestParseError(f"Invalid TOML in {path}: {e}", source=str(path)) from e


def _require_table(data: dict[str, Any], key: str, dotted: str, source: str) -> dict[str, Any]:
    value = data.get(key)
    if not isinstance(value, dict):
        raise MissingFieldError(dotted, source=source, expected="a table")
    return value


def _require_str(data: dict[str, Any], key: str, dotted: str, source: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise MissingFieldError(dotted, source=source, expected="a string")
    return value


def _require_int(data: dict[str, Any], key: str, dotted: str, source: str) -> int:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise MissingFieldError(dotted, source=source, expected="an integer")
    return value


def read_index(index_path: Path) -> list[Path]:
    """
    List the metafiles referenced by a root index.

    Only ``[[files]]`` entries with a string ``file`` and ``metafile = true``
    are kept; other entries are ignored.

    Args:
        index_path: Path to index.toml.

    Returns:
        Metafile paths resolved against the index directory, in index order.

    Raises:
        ManifestParseError: If the index cannot be read or parsed.
        MissingFieldError: If the index has no ``files`` array.
    """
    index = _load_toml(index_path)
    files = index.get("files")
    if not isinstance(files, list):
        raise MissingFieldError("files", source=str(index_path), expected="an array")

    base = index_path.parent
    paths: list[Path] = []
    for entry in files:
        if not isinstance(entry, dict):
            continue
        file = entry.get("file")
        metafile = entry.get("metafile")
        if isinstance(file, str) and metafile is True:
            paths.append(base / file)
    return paths


def load_metafile(path: Path) -> dict[str, Any]:
    """
    Read and parse one metafile.

    Raises:
        ManifestParseError: If the file cannot be read or is not valid TOML.
    """
    return _load_toml(path)


def classify_metafile(data: dict[str, Any], result: ScanResult, source: str) -> None:
    """
    Add one parsed metafile to the matching bucket of ``result``.

    Args:
        data: Parsed metafile table.
        result: Scan result to extend.
        source: Metafile path, for diagnostics and errors.

    Raises:
        MissingFieldError: If a field the chosen bucket needs is missing.
    """
    if "update" not in data:
        download = _require_table(data, "download", "download", source)
        result.hosted.append(
            make_record(
                source=source,
                name=_require_str(data, "name", "name", source),
                side=_require_str(data, "side", "side", source),
                url=_require_str(download, "url", "download.url", source),
            )
        )
        return

    update = data["update"]
    curseforge = update.get(CURSEFORGE_SECTION) if isinstance(update, dict) else None
    modrinth = update.get(MODRINTH_SECTION) if isinstance(update, dict) else None

    if curseforge is not None and modrinth is None:
        if not isinstance(curseforge, dict):
            raise MissingFieldError("update.curseforge", source=source, expected="a table")
        result.curseforge_ids.append(
            _require_int(curseforge, "project-id", "update.curseforge.project-id", source)
        )
        return

    if modrinth is not None and curseforge is None:
        if not isinstance(modrinth, dict):
            raise MissingFieldError("update.modrinth", source=source, expected="a table")
        result.modrinth_ids.append(
            _require_str(modrinth, "mod-id", "update.modrinth.mod-id", source)
        )
        return

    what = "both curseforge and modrinth" if curseforge is not None else "neither curseforge nor modrinth"
    error = AmbiguousUpdateError(f"Update section names {what}, skipping", source=source)
    logger.warning("Skipping metafile with unrecognized update section", extra={"metafile": source})
    result.diagnostics.append(Diagnostic.from_error(error))


def scan_manifest(index_path: Path | str) -> ScanResult:
    """
    Scan a modpack index and classify every metafile it references.

    Any unreadable file or missing required field aborts the scan; an
    unclassifiable update section only skips that metafile.

    Args:
        index_path: Path to index.toml.

    Returns:
        ScanResult with both registry batches and the hosted records.

    Raises:
        ManifestParseError: If a file cannot be read or parsed.
        MissingFieldError: If a required field is missing.
    """
    index_path = Path(index_path)
    logger.info("Scanning modpack index", extra={"index": str(index_path)})

    result = ScanResult()
    for metafile in read_index(index_path):
        classify_metafile(load_metafile(metafile), result, str(metafile))

    logger.info(
        "Scanned modpack index",
        extra={
            "modrinth": len(result.modrinth_ids),
            "curseforge": len(result.curseforge_ids),
            "hosted": len(result.hosted),
            "skipped": len(result.diagnostics),
        },
    )
    return result


def find_pack_archives(directory: Path | str) -> list[str]:
    """
    List distributable pack archives (``prism*.zip``) in a directory.

    Args:
        directory: Directory to look in.

    Returns:
        Archive file names, sorted; empty if the directory does not exist.
    """
    directory = Path(directory)
    if not directory.is_dir():
        return []
    return sorted(
        p.name
        for p in directory.iterdir()
        if p.is_file() and p.name.startswith(ARCHIVE_PREFIX) and p.name.endswith(ARCHIVE_SUFFIX)
    )
