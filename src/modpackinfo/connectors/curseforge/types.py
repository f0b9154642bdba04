"""
Types for the CurseForge v1 API.

CurseForge exposes no side metadata. Version and loader facts come from
``latestFilesIndexes``, which has one entry per published
(gameVersion, modLoader) combination.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ModLoaderType(IntEnum):
    """CurseForge ``modLoader`` codes."""

    ANY = 0
    FORGE = 1
    CAULDRON = 2
    LITELOADER = 3
    FABRIC = 4
    QUILT = 5
    NEOFORGE = 6


LOADER_NAMES: dict[int, str] = {
    ModLoaderType.ANY: "any",
    ModLoaderType.FORGE: "forge",
    ModLoaderType.CAULDRON: "cauldron",
    ModLoaderType.LITELOADER: "liteloader",
    ModLoaderType.FABRIC: "fabric",
    ModLoaderType.QUILT: "quilt",
    ModLoaderType.NEOFORGE: "neoforge",
}

UNKNOWN_LOADER = "unknown"


def loader_name(code: Any) -> str:
    """Map a ``modLoader`` value to a loader name.

    Null, non-integer and unlisted codes all map to "unknown".
    """
    if isinstance(code, bool) or not isinstance(code, int):
        return UNKNOWN_LOADER
    return LOADER_NAMES.get(code, UNKNOWN_LOADER)


@dataclass(frozen=True)
class FileIndex:
    """
    One ``latestFilesIndexes`` entry.

    Attributes:
        game_version: Game version the file targets.
        loader: Loader name, or None when the entry has no ``modLoader`` key.
    """

    game_version: str
    loader: str | None = None

    @classmethod
    def from_raw(cls, data: dict[str, Any]) -> FileIndex:
        """Parse from a raw file index object.

        Raises:
            KeyError: If gameVersion is missing.
            TypeError: If gameVersion is not a string.
        """
        game_version = data["gameVersion"]
        if not isinstance(game_version, str):
            raise TypeError("gameVersion must be a string")
        loader = loader_name(data["modLoader"]) if "modLoader" in data else None
        return cls(game_version=game_version, loader=loader)


@dataclass
class CurseForgeMod:
    """
    A mod from ``POST /v1/mods``.

    Attributes:
        name: Display name.
        website_url: ``links.websiteUrl``.
        file_indexes: Parsed ``latestFilesIndexes``.
    """

    name: str
    website_url: str
    file_indexes: list[FileIndex] = field(default_factory=list)

    @classmethod
    def from_raw(cls, data: dict[str, Any]) -> CurseForgeMod:
        """Parse from a raw mod object.

        Raises:
            KeyError: If a required field is missing.
            TypeError: If a field has the wrong type.
        """
        name = data["name"]
        links = data["links"]
        if not isinstance(links, dict):
            raise TypeError("links must be an object")
        website_url = links["websiteUrl"]
        if not isinstance(name, str) or not isinstance(website_url, str):
            raise TypeError("name and links.websiteUrl must be strings")

        raw_indexes = data["latestFilesIndexes"]
        if not isinstance(raw_indexes, list) or not all(isinstance(i, dict) for i in raw_indexes):
            raise TypeError("latestFilesIndexes must be a list of objects")

        return cls(
            name=name,
            website_url=website_url,
            file_indexes=[FileIndex.from_raw(i) for i in raw_indexes],
        )

    @property
    def game_versions(self) -> set[str]:
        """Distinct game versions across all file indexes."""
        return {i.game_version for i in self.file_indexes}

    @property
    def loaders(self) -> set[str]:
        """Distinct loader names across file indexes that declare one."""
        return {i.loader for i in self.file_indexes if i.loader is not None}
