"""
Modpack info pipeline.

Scans the local manifest, fetches the Modrinth and CurseForge batches
concurrently and aggregates everything into one sorted record list:

    scan_manifest -> {fetch_modrinth_mods, fetch_curseforge_mods} -> aggregate

A failure in either registry cancels the other fetch and fails the run.
No partial record list is ever returned.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from modpackinfo.aggregator import aggregate
from modpackinfo.connectors.curseforge import CurseForgeClient, fetch_curseforge_mods
from modpackinfo.connectors.modrinth import ModrinthClient, fetch_modrinth_mods
from modpackinfo.contracts.errors import ModpackError
from modpackinfo.manifest import scan_manifest

if TYPE_CHECKING:
    from modpackinfo.config import ModpackConfig
    from modpackinfo.contracts.errors import Diagnostic
    from modpackinfo.contracts.records import ModRecord

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """
    Outcome of one pipeline run.

    Attributes:
        success: True when every stage completed.
        records: Aggregated records; empty on failure.
        diagnostics: Non-fatal skips recorded along the way.
        error: The failure that aborted the run, if any.
    """

    success: bool
    records: list[ModRecord] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    error: ModpackError | None = None

    def raise_for_error(self) -> None:
        """Re-raise the error carried by a failed result."""
        if self.error is not None:
            raise self.error


class ModpackPipeline:
    """
    Runs the scan, fetch and aggregate stages for one modpack.

    Clients passed in are used as-is and left open; clients the pipeline
    builds itself are closed by close(). The CurseForge client is only
    built when the config carries an API key.
    """

    def __init__(
        self,
        config: ModpackConfig,
        modrinth_client: ModrinthClient | None = None,
        curseforge_client: CurseForgeClient | None = None,
    ) -> None:
        self._config = config
        self._owned: list[ModrinthClient | CurseForgeClient] = []

        if modrinth_client is None:
            modrinth_client = ModrinthClient(
                config.modrinth_base_url,
                user_agent=config.user_agent,
                timeout_s=config.request_timeout_s,
                backoff_config=config.backoff_config(),
            )
            self._owned.append(modrinth_client)

        if curseforge_client is None and config.curseforge_api_key is not None:
            curseforge_client = CurseForgeClient(
                config.curseforge_api_key,
                config.curseforge_base_url,
                user_agent=config.user_agent,
                timeout_s=config.request_timeout_s,
                backoff_config=config.backoff_config(),
            )
            self._owned.append(curseforge_client)

        self._modrinth = modrinth_client
        self._curseforge = curseforge_client
        self.diagnostics: list[Diagnostic] = []

    @property
    def config(self) -> ModpackConfig:
        """Configuration for this pipeline."""
        return self._config

    async def collect(self) -> list[ModRecord]:
        """
        Run all stages and return the aggregated records.

        Diagnostics from this run are available in ``self.diagnostics``.

        Returns:
            Records sorted by (name, side).

        Raises:
            ModpackError: If the manifest is invalid or a registry lookup fails.
        """
        self.diagnostics = []
        started = time.monotonic()

        scan = scan_manifest(self._config.index_path)
        self.diagnostics.extend(scan.diagnostics)

        tasks = [
            asyncio.create_task(
                fetch_modrinth_mods(
                    scan.modrinth_ids,
                    self._modrinth,
                    web_url=self._config.modrinth_web_url,
                )
            ),
            asyncio.create_task(
                fetch_curseforge_mods(
                    scan.curseforge_ids,
                    self._curseforge,
                    diagnostics=self.diagnostics,
                )
            ),
        ]
        try:
            modrinth, curseforge = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        records = aggregate(scan.hosted, modrinth, curseforge)
        logger.info(
            "Collected modpack records",
            extra={
                "records": len(records),
                "hosted": len(scan.hosted),
                "modrinth": len(modrinth),
                "curseforge": len(curseforge),
                "diagnostics": len(self.diagnostics),
                "elapsed_ms": int((time.monotonic() - started) * 1000),
            },
        )
        return records

    async def run(self) -> PipelineResult:
        """
        Run all stages, reporting failure in the result instead of raising.

        Returns:
            PipelineResult; on failure records is empty and error is set.
        """
        try:
            records = await self.collect()
        except ModpackError as e:
            logger.error(
                "Pipeline failed",
                extra={"kind": e.kind.value, "source": e.source, "error": str(e)},
            )
            return PipelineResult(
                success=False,
                diagnostics=list(self.diagnostics),
                error=e,
            )
        return PipelineResult(success=True, records=records, diagnostics=list(self.diagnostics))

    async def close(self) -> None:
        """Close HTTP sessions of clients this pipeline created."""
        for client in self._owned:
            await client.close()

    async def __aenter__(self) -> ModpackPipeline:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
