"""
Async client for the CurseForge v1 API.

Every request carries the ``x-api-key`` credential. The key is passed in
explicitly; this module never reads the environment.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from modpackinfo.config import DEFAULT_CURSEFORGE_BASE_URL, DEFAULT_USER_AGENT
from modpackinfo.connectors.http import RegistryHttpClient
from modpackinfo.contracts.errors import MissingFieldError

if TYPE_CHECKING:
    import random
    from collections.abc import Sequence

    from modpackinfo.connectors.backoff import BackoffConfig

logger = logging.getLogger(__name__)


class CurseForgeClient(RegistryHttpClient):
    """Client for CurseForge mod lookups."""

    registry = "curseforge"

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_CURSEFORGE_BASE_URL,
        *,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout_s: float = 10.0,
        backoff_config: BackoffConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            api_key: CurseForge API key.
            base_url: API base URL.
            user_agent: User-Agent header.
            timeout_s: Total timeout per request attempt.
            backoff_config: Retry policy.
            rng: Optional seeded RNG for deterministic jitter.

        Raises:
            ValueError: If api_key is empty.
        """
        if not api_key:
            raise ValueError("CurseForge api_key must not be empty")
        super().__init__(
            base_url,
            timeout_s=timeout_s,
            headers={"x-api-key": api_key, "User-Agent": user_agent},
            backoff_config=backoff_config,
            rng=rng,
        )

    async def get_mods(self, mod_ids: Sequence[int]) -> list[dict[str, Any]]:
        """
        Fetch several mods in one request.

        Args:
            mod_ids: CurseForge project ids.

        Returns:
            Raw mod objects from the ``data`` array.

        Raises:
            RegistryRequestError: If the request fails.
            MissingFieldError: If the body has no ``data`` array.
        """
        logger.info("Fetching CurseForge mods", extra={"count": len(mod_ids)})
        body = await self._request("POST", "/mods", json={"modIds": list(mod_ids)})

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, list):
            raise MissingFieldError("data", source=self.registry, expected="an array")
        return data
