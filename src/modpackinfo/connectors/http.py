"""
Shared async HTTP plumbing for registry clients.

A registry client issues a single batched request per run. Transient
failures are retried with backoff; anything else surfaces as
RegistryRequestError so the run fails as a whole.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Any

import aiohttp
import orjson

from modpackinfo.connectors.backoff import (
    BackoffConfig,
    BackoffState,
    compute_backoff_delay,
    handle_error_response,
    is_retryable_status,
    parse_retry_after,
)
from modpackinfo.contracts.errors import RegistryRequestError

logger = logging.getLogger(__name__)


class RegistryHttpClient:
    """
    Base class for registry API clients.

    Subclasses set ``registry`` and add one method per endpoint, each
    built on _request().
    """

    registry: str = "registry"

    def __init__(
        self,
        base_url: str,
        *,
        timeout_s: float = 10.0,
        headers: dict[str, str] | None = None,
        backoff_config: BackoffConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: API base URL without trailing slash.
            timeout_s: Total timeout per request attempt.
            headers: Default headers sent with every request.
            backoff_config: Retry policy.
            rng: Optional seeded RNG for deterministic jitter in tests.
        """
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._headers = {"Accept": "application/json", **(headers or {})}
        self._backoff_config = backoff_config or BackoffConfig()
        self._rng = rng
        self._session: aiohttp.ClientSession | None = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._timeout_s)
            self._session = aiohttp.ClientSession(timeout=timeout, headers=self._headers)
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> RegistryHttpClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
    ) -> Any:
        """
        Make a request and decode the JSON body, retrying transient failures.

        Args:
            method: HTTP method.
            path: Endpoint path appended to the base URL.
            params: Query parameters.
            json: JSON request body.

        Returns:
            Decoded JSON response.

        Raises:
            RegistryRequestError: On non-retryable status, exhausted retries,
                timeout, connection failure or an undecodable body.
        """
        url = f"{self._base_url}{path}"
        state = BackoffState()

        while True:
            retry_after_ms: int | None = None
            try:
                session = await self._get_session()
                async with session.request(method, url, params=params, json=json) as response:
                    status = response.status
                    if status < 400:
                        state.reset()
                        try:
                            return await response.json(loads=orjson.loads, content_type=None)
                        except ValueError as e:
                            raise RegistryRequestError(
                                f"{self.registry} returned an invalid JSON body",
                                registry=self.registry,
                                status=status,
                            ) from e

                    text = await response.text()
                    retry_after_ms = parse_retry_after(response.headers.get("Retry-After"))
                    failure = RegistryRequestError(
                        f"{self.registry} request failed: HTTP {status}: {text[:200]}",
                        registry=self.registry,
                        status=status,
                    )
                    if not is_retryable_status(status):
                        logger.error(
                            "Registry request rejected",
                            extra={"registry": self.registry, "status": status, "url": url},
                        )
                        raise failure

                    rate_limit = handle_error_response(status, retry_after_ms)
                    if rate_limit is not None:
                        failure.__cause__ = rate_limit
                    logger.warning(
                        "Registry request failed, will retry" if rate_limit is None else "Registry rate limit hit",
                        extra={
                            "registry": self.registry,
                            "status": status,
                            "attempt": state.attempt + 1,
                            "retry_after_ms": retry_after_ms,
                        },
                    )
            except (aiohttp.ClientError, TimeoutError) as e:
                failure = RegistryRequestError(
                    f"{self.registry} request failed: {type(e).__name__}: {e}",
                    registry=self.registry,
                )
                failure.__cause__ = e
                logger.warning(
                    "Registry request error",
                    extra={"registry": self.registry, "error": str(e), "attempt": state.attempt + 1},
                )

            state.record_error()
            if state.exhausted(self._backoff_config):
                raise failure

            delay_ms = compute_backoff_delay(
                self._backoff_config, state, retry_after_ms, rng=self._rng
            )
            logger.debug(
                "Backing off before retry",
                extra={"registry": self.registry, "delay_ms": delay_ms, "attempt": state.attempt},
            )
            await asyncio.sleep(delay_ms / 1000)
