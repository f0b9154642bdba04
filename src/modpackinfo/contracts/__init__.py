"""Data contracts shared by every pipeline stage."""

from modpackinfo.contracts.errors import (
    AmbiguousUpdateError,
    Diagnostic,
    ErrorKind,
    ManifestParseError,
    MissingFieldError,
    ModpackError,
    RegistryRequestError,
    VersionFormatError,
)
from modpackinfo.contracts.records import ModpackInfo, ModRecord, Side, make_record

__all__ = [
    "AmbiguousUpdateError",
    "Diagnostic",
    "ErrorKind",
    "ManifestParseError",
    "MissingFieldError",
    "ModRecord",
    "ModpackError",
    "ModpackInfo",
    "RegistryRequestError",
    "Side",
    "VersionFormatError",
    "make_record",
]
