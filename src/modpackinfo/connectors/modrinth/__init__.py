"""
Modrinth registry connector.

- One batched ``GET /v2/projects`` per run
- Side derived from client/server support levels
- Game versions restricted to 1.x releases, newest first
"""

from modpackinfo.connectors.modrinth.client import ModrinthClient
from modpackinfo.connectors.modrinth.normalizer import (
    derive_side,
    fetch_modrinth_mods,
    normalize_project,
)
from modpackinfo.connectors.modrinth.types import ModrinthProject

__all__ = [
    "ModrinthClient",
    "ModrinthProject",
    "derive_side",
    "fetch_modrinth_mods",
    "normalize_project",
]
