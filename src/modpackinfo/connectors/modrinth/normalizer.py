"""
Modrinth project -> ModRecord mapping.

Side is derived from the (client_side, server_side) support levels:

    (required | optional, unsupported) -> client
    (unsupported, required | optional) -> server
    anything else                      -> both
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from modpackinfo.config import DEFAULT_MODRINTH_WEB_URL
from modpackinfo.connectors.modrinth.types import ModrinthProject
from modpackinfo.contracts.errors import MissingFieldError
from modpackinfo.contracts.records import ModRecord, Side, make_record
from modpackinfo.versions import filter_game_versions, sort_game_versions

if TYPE_CHECKING:
    from collections.abc import Sequence

    from modpackinfo.connectors.modrinth.client import ModrinthClient

logger = logging.getLogger(__name__)

SOURCE = "modrinth"

_SUPPORTED = frozenset({"required", "optional"})
_UNSUPPORTED = "unsupported"


def derive_side(client_side: Any, server_side: Any) -> Side:
    """Map Modrinth support levels to a Side."""
    if client_side in _SUPPORTED and server_side == _UNSUPPORTED:
        return Side.CLIENT
    if client_side == _UNSUPPORTED and server_side in _SUPPORTED:
        return Side.SERVER
    return Side.BOTH


def normalize_project(raw: dict[str, Any], web_url: str = DEFAULT_MODRINTH_WEB_URL) -> ModRecord:
    """
    Convert one raw Modrinth project into a ModRecord.

    Args:
        raw: Project object from ``/projects``.
        web_url: Project page prefix; the slug is appended.

    Raises:
        MissingFieldError: If a required project field is missing or mistyped.
    """
    try:
        project = ModrinthProject.from_raw(raw)
    except KeyError as e:
        raise MissingFieldError(str(e.args[0]), source=SOURCE) from e
    except TypeError as e:
        raise MissingFieldError(str(e), source=SOURCE, expected="well-typed") from e

    return make_record(
        source=SOURCE,
        name=project.title,
        side=derive_side(project.client_side, project.server_side),
        url=f"{web_url.rstrip('/')}/{project.slug}",
        game_versions=sort_game_versions(filter_game_versions(project.game_versions)),
        loaders=sorted(project.loaders),
    )


async def fetch_modrinth_mods(
    mod_ids: Sequence[str],
    client: ModrinthClient,
    *,
    web_url: str = DEFAULT_MODRINTH_WEB_URL,
) -> list[ModRecord]:
    """
    Fetch and normalize a batch of Modrinth projects.

    An empty batch returns immediately without touching the network.

    Args:
        mod_ids: Modrinth project ids from the manifest.
        client: Modrinth API client.
        web_url: Project page prefix.

    Returns:
        One ModRecord per returned project.

    Raises:
        RegistryRequestError: If the lookup fails.
        MissingFieldError: If a project lacks a required field.
    """
    if not mod_ids:
        return []

    projects = await client.get_projects(mod_ids)
    mods: list[ModRecord] = []
    for raw in projects:
        if not isinstance(raw, dict):
            raise MissingFieldError("project", source=SOURCE, expected="an object")
        mods.append(normalize_project(raw, web_url))

    if len(mods) != len(mod_ids):
        logger.warning(
            "Modrinth returned a different number of projects than requested",
            extra={"requested": len(mod_ids), "returned": len(mods)},
        )
    logger.info("Normalized Modrinth projects", extra={"count": len(mods)})
    return mods
