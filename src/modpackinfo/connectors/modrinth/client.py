"""
Async client for the Modrinth v2 API.

Modrinth accepts a JSON array of ids on ``/projects``, so a whole batch is
one request regardless of how many mods the pack references.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import orjson

from modpackinfo.config import DEFAULT_MODRINTH_BASE_URL, DEFAULT_USER_AGENT
from modpackinfo.connectors.http import RegistryHttpClient
from modpackinfo.contracts.errors import RegistryRequestError

if TYPE_CHECKING:
    import random
    from collections.abc import Sequence

    from modpackinfo.connectors.backoff import BackoffConfig

logger = logging.getLogger(__name__)


class ModrinthClient(RegistryHttpClient):
    """Client for Modrinth project lookups."""

    registry = "modrinth"

    def __init__(
        self,
        base_url: str = DEFAULT_MODRINTH_BASE_URL,
        *,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout_s: float = 10.0,
        backoff_config: BackoffConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        super().__init__(
            base_url,
            timeout_s=timeout_s,
            headers={"User-Agent": user_agent},
            backoff_config=backoff_config,
            rng=rng,
        )

    async def get_projects(self, mod_ids: Sequence[str]) -> list[dict[str, Any]]:
        """
        Fetch several projects in one request.

        Args:
            mod_ids: Project ids or slugs.

        Returns:
            Raw project objects, in the order Modrinth returns them.

        Raises:
            RegistryRequestError: If the request fails or the body is not a list.
        """
        logger.info("Fetching Modrinth projects", extra={"count": len(mod_ids)})
        ids = orjson.dumps(list(mod_ids)).decode()
        data = await self._request("GET", "/projects", params={"ids": ids})

        if not isinstance(data, list):
            raise RegistryRequestError(
                "Modrinth /projects returned a non-list body",
                registry=self.registry,
            )
        return data
