"""
Error taxonomy for the modpack pipeline.

Every failure that aborts a run is a ModpackError subclass tagged with an
ErrorKind, so callers can tell a broken manifest from an unreachable
registry without string matching. Non-fatal skips are reported as
Diagnostic entries instead of exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(str, Enum):
    """Category of a pipeline failure or diagnostic."""

    PARSE = "parse"
    NETWORK = "network"
    MISSING_FIELD = "missing_field"
    AMBIGUOUS = "ambiguous"
    MISSING_CREDENTIAL = "missing_credential"


class ModpackError(Exception):
    """Base exception for all pipeline failures."""

    kind: ErrorKind = ErrorKind.PARSE

    def __init__(self, message: str, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source


class ManifestParseError(ModpackError):
    """Raised when an index or metafile cannot be read or is not valid TOML."""

    kind = ErrorKind.PARSE


class VersionFormatError(ModpackError, ValueError):
    """Raised when a game version string cannot be compared."""

    kind = ErrorKind.PARSE


class MissingFieldError(ModpackError):
    """Raised when a required field is absent or has the wrong type."""

    kind = ErrorKind.MISSING_FIELD

    def __init__(self, field: str, source: str | None = None, expected: str | None = None) -> None:
        message = f"Missing required field {field!r}"
        if expected:
            message = f"Field {field!r} missing or not {expected}"
        if source:
            message = f"{message} in {source}"
        super().__init__(message, source=source)
        self.field = field
        self.expected = expected


class RegistryRequestError(ModpackError):
    """Raised when a registry lookup fails (HTTP error, timeout, bad body)."""

    kind = ErrorKind.NETWORK

    def __init__(self, message: str, registry: str, status: int | None = None) -> None:
        super().__init__(message, source=registry)
        self.registry = registry
        self.status = status


class AmbiguousUpdateError(ModpackError):
    """An update section names neither or both known registries."""

    kind = ErrorKind.AMBIGUOUS


@dataclass(frozen=True)
class Diagnostic:
    """
    Non-fatal problem recorded during a run.

    Attributes:
        kind: Category of the problem.
        message: Human-readable description.
        source: Metafile path or registry name the problem relates to.
    """

    kind: ErrorKind
    message: str
    source: str | None = None

    @classmethod
    def from_error(cls, error: ModpackError) -> Diagnostic:
        """Downgrade an error to a diagnostic."""
        return cls(kind=error.kind, message=str(error), source=error.source)

    def to_dict(self) -> dict[str, str | None]:
        """Convert to dictionary."""
        return {"kind": self.kind.value, "message": self.message, "source": self.source}
