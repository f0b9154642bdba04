"""Connectors for the remote mod registries.

Registry clients live in their own subpackages (modrinth, curseforge) and
share the retrying HTTP base in connectors.http.
"""

from modpackinfo.connectors.backoff import (
    BackoffConfig,
    BackoffState,
    RateLimitError,
    compute_backoff_delay,
    handle_error_response,
    is_retryable_status,
    parse_retry_after,
)
from modpackinfo.connectors.http import RegistryHttpClient

__all__ = [
    "BackoffConfig",
    "BackoffState",
    "RateLimitError",
    "RegistryHttpClient",
    "compute_backoff_delay",
    "handle_error_response",
    "is_retryable_status",
    "parse_retry_after",
]
