"""
Types for the Modrinth v2 API.

Only the project fields the normalizer reads are modelled. Support levels
are kept as raw values: the API documents "required", "optional",
"unsupported" and "unknown", and anything else falls through to "both".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ModrinthProject:
    """
    A project from ``GET /v2/projects``.

    Attributes:
        title: Display name.
        slug: URL slug of the project page.
        client_side: Client support level.
        server_side: Server support level.
        loaders: Loader names the project supports.
        game_versions: Game versions the project declares, unfiltered.
    """

    title: str
    slug: str
    client_side: Any
    server_side: Any
    loaders: list[str] = field(default_factory=list)
    game_versions: list[str] = field(default_factory=list)

    @classmethod
    def from_raw(cls, data: dict[str, Any]) -> ModrinthProject:
        """Parse from a raw project object.

        Raises:
            KeyError: If a required field is missing.
            TypeError: If a field has the wrong type.
        """
        title = data["title"]
        slug = data["slug"]
        if not isinstance(title, str) or not isinstance(slug, str):
            raise TypeError("title and slug must be strings")
        return cls(
            title=title,
            slug=slug,
            client_side=data["client_side"],
            server_side=data["server_side"],
            loaders=_string_list(data["loaders"], "loaders"),
            game_versions=_string_list(data["game_versions"], "game_versions"),
        )


def _string_list(value: Any, name: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise TypeError(f"{name} must be a list of strings")
    return list(value)
