"""Local modpack manifest reading (packwiz index.toml + metafiles)."""

from modpackinfo.manifest.scanner import (
    ScanResult,
    classify_metafile,
    find_pack_archives,
    load_metafile,
    read_index,
    scan_manifest,
)

__all__ = [
    "ScanResult",
    "classify_metafile",
    "find_pack_archives",
    "load_metafile",
    "read_index",
    "scan_manifest",
]
