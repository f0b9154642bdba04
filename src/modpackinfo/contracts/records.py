"""
Unified mod record and output document.

ModRecord is the only shape that crosses component boundaries: the
manifest scanner, both registry normalizers and the aggregator all produce
or consume it.
"""

from __future__ import annotations

from enum import Enum

import orjson
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from modpackinfo.contracts.errors import MissingFieldError


class Side(str, Enum):
    """Runtime side(s) that must install a mod."""

    CLIENT = "client"
    SERVER = "server"
    BOTH = "both"
    UNKNOWN = "unknown"


class ModRecord(BaseModel):
    """
    One mod in the modpack, independent of where its metadata came from.

    Attributes:
        name: Display name.
        side: Which runtime side requires the mod.
        url: Canonical web page of the mod.
        game_versions: Supported game versions, newest first.
        loaders: Supported mod loaders, ascending and unique.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1, description="Display name")
    side: Side = Field(..., description="Runtime side requiring the mod")
    url: str = Field(..., min_length=1, description="Canonical web page")
    game_versions: list[str] = Field(default_factory=list, description="Newest first")
    loaders: list[str] = Field(default_factory=list, description="Ascending, unique")

    @field_validator("loaders")
    @classmethod
    def normalize_loaders(cls, v: list[str]) -> list[str]:
        """Keep loaders as a sorted set."""
        return sorted(set(v))

    def to_json(self) -> bytes:
        """Serialize to JSON bytes using orjson."""
        return orjson.dumps(self.model_dump(mode="json"))

    @classmethod
    def from_json(cls, data: bytes | str) -> ModRecord:
        """Deserialize from JSON."""
        if isinstance(data, str):
            data = data.encode()
        return cls.model_validate(orjson.loads(data))


def make_record(
    *,
    source: str,
    name: str,
    side: Side | str,
    url: str,
    game_versions: list[str] | None = None,
    loaders: list[str] | None = None,
) -> ModRecord:
    """
    Build a ModRecord, reporting validation failures as MissingFieldError.

    Args:
        source: Metafile path or registry name, used in error messages.
        name: Display name.
        side: Side value or its string form.
        url: Canonical web page.
        game_versions: Ordered game versions.
        loaders: Loader names.

    Raises:
        MissingFieldError: If a field is empty or side is not a known value.
    """
    try:
        return ModRecord(
            name=name,
            side=side,
            url=url,
            game_versions=game_versions or [],
            loaders=loaders or [],
        )
    except ValidationError as e:
        field = ".".join(str(p) for p in e.errors()[0]["loc"]) or "record"
        raise MissingFieldError(field, source=source, expected="valid") from e


class ModpackInfo(BaseModel):
    """
    Document handed to renderers: the sorted mods plus pack archives.

    Attributes:
        mods: Aggregated records in display order.
        zips: File names of downloadable pack archives.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    mods: list[ModRecord] = Field(default_factory=list)
    zips: list[str] = Field(default_factory=list)

    def to_json(self, *, indent: bool = False) -> bytes:
        """Serialize to JSON bytes using orjson."""
        option = orjson.OPT_INDENT_2 if indent else 0
        return orjson.dumps(self.model_dump(mode="json"), option=option)
