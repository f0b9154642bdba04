"""
CurseForge mod -> ModRecord mapping.

Game versions are sorted newest first but, unlike the Modrinth path, are
not restricted to 1.x releases.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from modpackinfo.connectors.curseforge.types import CurseForgeMod
from modpackinfo.contracts.errors import Diagnostic, ErrorKind, MissingFieldError
from modpackinfo.contracts.records import ModRecord, Side, make_record
from modpackinfo.versions import sort_game_versions

if TYPE_CHECKING:
    from collections.abc import Sequence

    from modpackinfo.connectors.curseforge.client import CurseForgeClient

logger = logging.getLogger(__name__)

SOURCE = "curseforge"


def normalize_mod(raw: dict[str, Any]) -> ModRecord:
    """
    Convert one raw CurseForge mod into a ModRecord.

    Raises:
        MissingFieldError: If a required field is missing or mistyped.
        VersionFormatError: If a game version cannot be ordered.
    """
    try:
        mod = CurseForgeMod.from_raw(raw)
    except KeyError as e:
        raise MissingFieldError(str(e.args[0]), source=SOURCE) from e
    except TypeError as e:
        raise MissingFieldError(str(e), source=SOURCE, expected="well-typed") from e

    return make_record(
        source=SOURCE,
        name=mod.name,
        side=Side.UNKNOWN,
        url=mod.website_url,
        game_versions=sort_game_versions(sorted(mod.game_versions)),
        loaders=sorted(mod.loaders),
    )


async def fetch_curseforge_mods(
    mod_ids: Sequence[int],
    client: CurseForgeClient | None,
    *,
    diagnostics: list[Diagnostic] | None = None,
) -> list[ModRecord]:
    """
    Fetch and normalize a batch of CurseForge mods.

    An empty batch returns immediately. A missing client (no API key
    configured) skips the batch and records a diagnostic instead of
    failing the run.

    Args:
        mod_ids: CurseForge project ids from the manifest.
        client: CurseForge API client, or None when no key is configured.
        diagnostics: List that receives a diagnostic when the batch is skipped.

    Returns:
        One ModRecord per returned mod.

    Raises:
        RegistryRequestError: If the lookup fails.
        MissingFieldError: If the response lacks a required field.
        VersionFormatError: If a game version cannot be ordered.
    """
    if not mod_ids:
        return []

    if client is None:
        message = f"No CurseForge API key configured, skipping {len(mod_ids)} mod(s)"
        logger.warning(
            "No CurseForge API key configured, skipping batch",
            extra={"count": len(mod_ids)},
        )
        if diagnostics is not None:
            diagnostics.append(
                Diagnostic(kind=ErrorKind.MISSING_CREDENTIAL, message=message, source=SOURCE)
            )
        return []

    items = await client.get_mods(mod_ids)
    mods: list[ModRecord] = []
    for raw in items:
        if not isinstance(raw, dict):
            raise MissingFieldError("data[]", source=SOURCE, expected="an object")
        mods.append(normalize_mod(raw))

    logger.info("Normalized CurseForge mods", extra={"count": len(mods)})
    return mods
