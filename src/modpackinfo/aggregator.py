"""
Join point for the three record sources.

Records from hosted metafiles, Modrinth and CurseForge are concatenated
in that order and sorted by (name, side). The sort is stable, so records
with equal keys keep their source order. Duplicates across sources are
kept.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from modpackinfo.contracts.records import ModRecord


def record_sort_key(record: ModRecord) -> tuple[str, str]:
    """Display order key: name, then side string."""
    return (record.name, record.side.value)


def aggregate(
    hosted: Iterable[ModRecord],
    modrinth: Iterable[ModRecord],
    curseforge: Iterable[ModRecord],
) -> list[ModRecord]:
    """
    Merge all sources into one display-ordered list.

    Args:
        hosted: Records built from self-described metafiles.
        modrinth: Normalized Modrinth records.
        curseforge: Normalized CurseForge records.

    Returns:
        New list sorted by (name, side); the inputs are not modified.
    """
    records = [*hosted, *modrinth, *curseforge]
    records.sort(key=record_sort_key)
    return records
