"""
Pipeline configuration.

The CurseForge credential is an explicit config value. Only
ModpackConfig.from_env() looks at the process environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from modpackinfo.connectors.backoff import BackoffConfig

if TYPE_CHECKING:
    from collections.abc import Mapping

# Checked in order; FORGE_API_KEY is the legacy name
CURSEFORGE_API_KEY_ENV_VARS = ("CURSEFORGE_API_KEY", "FORGE_API_KEY")

# Never log these
REDACTED_ENV_VARS = frozenset(CURSEFORGE_API_KEY_ENV_VARS)

DEFAULT_MODRINTH_BASE_URL = "https://api.modrinth.com/v2"
DEFAULT_MODRINTH_WEB_URL = "https://modrinth.com/mod"
DEFAULT_CURSEFORGE_BASE_URL = "https://api.curseforge.com/v1"
DEFAULT_USER_AGENT = "modpack-info/0.1.0"


@dataclass
class ModpackConfig:
    """
    Configuration for one pipeline run.

    Attributes:
        index_path: Root index document (packwiz index.toml).
        curseforge_api_key: CurseForge credential; None skips the CurseForge batch.
        modrinth_base_url: Modrinth API base URL.
        modrinth_web_url: Prefix for Modrinth project pages (slug is appended).
        curseforge_base_url: CurseForge API base URL.
        request_timeout_s: Total timeout per HTTP request.
        max_retries: Retries for transient failures (429, 5xx, connection errors).
        user_agent: User-Agent sent to both registries.
    """

    index_path: Path = Path("index.toml")
    curseforge_api_key: str | None = None
    modrinth_base_url: str = DEFAULT_MODRINTH_BASE_URL
    modrinth_web_url: str = DEFAULT_MODRINTH_WEB_URL
    curseforge_base_url: str = DEFAULT_CURSEFORGE_BASE_URL
    request_timeout_s: float = 10.0
    max_retries: int = 2
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self) -> None:
        self.index_path = Path(self.index_path)
        if not self.curseforge_api_key:
            self.curseforge_api_key = None
        if self.request_timeout_s <= 0:
            raise ValueError(f"request_timeout_s must be > 0, got {self.request_timeout_s}")
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")
        for name in ("modrinth_base_url", "modrinth_web_url", "curseforge_base_url"):
            url = getattr(self, name)
            if not url.startswith(("http://", "https://")):
                raise ValueError(f"{name} must be an http(s) URL, got {url!r}")
            setattr(self, name, url.rstrip("/"))
        if not self.user_agent:
            raise ValueError("user_agent must not be empty")

    @property
    def has_curseforge_credential(self) -> bool:
        """Check whether the CurseForge batch can be fetched."""
        return self.curseforge_api_key is not None

    def backoff_config(self) -> BackoffConfig:
        """Retry policy for registry requests."""
        return BackoffConfig(max_retries=self.max_retries)

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> ModpackConfig:
        """
        Build a config, taking the CurseForge credential from the environment.

        An explicit ``curseforge_api_key`` override wins over the environment.

        Args:
            environ: Environment mapping (default os.environ).
            **overrides: Field values passed to the constructor.
        """
        env = os.environ if environ is None else environ
        if "curseforge_api_key" not in overrides:
            for var in CURSEFORGE_API_KEY_ENV_VARS:
                value = env.get(var, "").strip()
                if value:
                    overrides["curseforge_api_key"] = value
                    break
        return cls(**overrides)
