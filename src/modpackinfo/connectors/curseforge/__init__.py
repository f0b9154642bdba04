"""
CurseForge registry connector.

- One batched ``POST /v1/mods`` per run, authenticated with ``x-api-key``
- Versions and loaders aggregated across latestFilesIndexes
- Side is always unknown
"""

from modpackinfo.connectors.curseforge.client import CurseForgeClient
from modpackinfo.connectors.curseforge.normalizer import fetch_curseforge_mods, normalize_mod
from modpackinfo.connectors.curseforge.types import (
    LOADER_NAMES,
    CurseForgeMod,
    FileIndex,
    ModLoaderType,
    loader_name,
)

__all__ = [
    "LOADER_NAMES",
    "CurseForgeClient",
    "CurseForgeMod",
    "FileIndex",
    "ModLoaderType",
    "fetch_curseforge_mods",
    "loader_name",
    "normalize_mod",
]
