"""Game version filtering and ordering.

Release versions look like ``1.20`` or ``1.20.1``. Ordering only looks at
the minor and patch components (the major is always 1), newest first:

    1.20.1 < 1.20 < 1.19.4 < 1.19
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from modpackinfo.contracts.errors import VersionFormatError

if TYPE_CHECKING:
    from collections.abc import Iterable

# Release versions of the 1.x line: 1.x or 1.x.y
GAME_VERSION_PATTERN = re.compile(r"1\.[0-9]+(\.[0-9]+)?")

_NUMERIC = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class GameVersion:
    """Parsed game version components.

    Attributes:
        minor: Second dot-separated component.
        patch: Third component, 0 when absent.
        raw: Original version string.
    """

    minor: int
    patch: int
    raw: str

    def __str__(self) -> str:
        """Return the raw version string."""
        return self.raw

    @property
    def sort_key(self) -> tuple[int, int]:
        """Key that orders newest first under ascending sort."""
        return (-self.minor, -self.patch)


def is_release_version(version: str) -> bool:
    """Check whether a version string is a 1.x or 1.x.y release."""
    return GAME_VERSION_PATTERN.fullmatch(version) is not None


def filter_game_versions(versions: Iterable[str]) -> list[str]:
    """Drop snapshots, betas and anything outside the 1.x release line."""
    return [v for v in versions if is_release_version(v)]


def parse_game_version(version: str) -> GameVersion:
    """Parse the minor and patch components of a version string.

    Args:
        version: Version string such as "1.20.1".

    Returns:
        GameVersion with parsed components.

    Raises:
        VersionFormatError: If minor or patch is missing or not numeric.
    """
    parts = version.split(".")
    if len(parts) < 2 or not _NUMERIC.fullmatch(parts[1]):
        raise VersionFormatError(f"Invalid game version: {version!r} (no numeric minor)")

    patch = "0"
    if len(parts) > 2:
        patch = parts[2]
        if not _NUMERIC.fullmatch(patch):
            raise VersionFormatError(f"Invalid game version: {version!r} (non-numeric patch)")

    return GameVersion(minor=int(parts[1]), patch=int(patch), raw=version)


def compare_game_versions(a: str, b: str) -> int:
    """Compare two version strings, newest first.

    Returns:
        Negative if ``a`` sorts before ``b`` (``a`` is newer), positive if it
        sorts after, 0 when minor and patch are equal.

    Raises:
        VersionFormatError: If either string is malformed.
    """
    key_a = parse_game_version(a).sort_key
    key_b = parse_game_version(b).sort_key
    return (key_a > key_b) - (key_a < key_b)


def sort_game_versions(versions: Iterable[str]) -> list[str]:
    """Sort version strings newest first.

    The sort is stable, so versions comparing equal (e.g. "1.20" and
    "1.20.0") keep their input order.

    Raises:
        VersionFormatError: If any string is malformed.
    """
    parsed = [parse_game_version(v) for v in versions]
    return [v.raw for v in sorted(parsed, key=lambda v: v.sort_key)]
