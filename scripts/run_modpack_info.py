#!/usr/bin/env python3
"""
Build the modpack info document.

Scans a packwiz index, looks up Modrinth and CurseForge mods, and writes
{"mods": [...], "zips": [...]} as JSON for the site renderer.

Usage:
    python -m scripts.run_modpack_info --index pack/index.toml -o modpack.json
    python -m scripts.run_modpack_info --index pack/index.toml --pretty
    CURSEFORGE_API_KEY=... python -m scripts.run_modpack_info --archives-dir dist

Without CURSEFORGE_API_KEY (or the legacy FORGE_API_KEY) CurseForge mods
are skipped with a warning. Any manifest or registry failure exits with
status 1 and writes nothing.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from modpackinfo.config import (
    DEFAULT_CURSEFORGE_BASE_URL,
    DEFAULT_MODRINTH_BASE_URL,
    ModpackConfig,
)
from modpackinfo.contracts.records import ModpackInfo
from modpackinfo.logging_config import setup_logging
from modpackinfo.manifest import find_pack_archives
from modpackinfo.pipeline import ModpackPipeline

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)


async def build_modpack_info(config: ModpackConfig, archives_dir: Path) -> ModpackInfo | None:
    """
    Run the pipeline and assemble the output document.

    Args:
        config: Pipeline configuration.
        archives_dir: Directory searched for pack archives.

    Returns:
        The document, or None if the pipeline failed.
    """
    async with ModpackPipeline(config) as pipeline:
        result = await pipeline.run()

    for diagnostic in result.diagnostics:
        logger.warning(
            "Skipped: %s",
            diagnostic.message,
            extra={"kind": diagnostic.kind.value, "source": diagnostic.source},
        )

    if not result.success:
        return None
    return ModpackInfo(mods=result.records, zips=find_pack_archives(archives_dir))


def write_output(info: ModpackInfo, output: Path | None, *, pretty: bool = False) -> None:
    """Write the document to a file, or stdout when output is None."""
    data = info.to_json(indent=pretty)
    if output is None:
        sys.stdout.write(data.decode() + "\n")
        sys.stdout.flush()
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(data + b"\n")
    logger.info("Wrote modpack info", extra={"output": str(output), "mods": len(info.mods)})


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Build the modpack info document from a packwiz index.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--index",
        type=Path,
        default=Path("index.toml"),
        help="Path to the packwiz index.toml (default: ./index.toml)",
    )
    parser.add_argument(
        "--archives-dir",
        type=Path,
        default=None,
        help="Directory searched for prism*.zip pack archives (default: index directory)",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        help="Write JSON to this file instead of stdout",
    )
    parser.add_argument(
        "--timeout-s",
        type=float,
        default=10.0,
        help="Total timeout per registry request in seconds (default: 10)",
    )
    parser.add_argument(
        "--max-retries",
        type=int,
        default=2,
        help="Retries for rate limits, 5xx and connection errors (default: 2)",
    )
    parser.add_argument(
        "--modrinth-url",
        default=DEFAULT_MODRINTH_BASE_URL,
        help="Modrinth API base URL",
    )
    parser.add_argument(
        "--curseforge-url",
        default=DEFAULT_CURSEFORGE_BASE_URL,
        help="CurseForge API base URL",
    )
    parser.add_argument(
        "--pretty",
        action="store_true",
        help="Indent the JSON output",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit logs as JSON lines on stderr",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        json_format=args.json_logs,
    )

    try:
        config = ModpackConfig.from_env(
            index_path=args.index,
            request_timeout_s=args.timeout_s,
            max_retries=args.max_retries,
            modrinth_base_url=args.modrinth_url,
            curseforge_base_url=args.curseforge_url,
        )
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return 1

    archives_dir = args.archives_dir if args.archives_dir is not None else config.index_path.parent
    info = asyncio.run(build_modpack_info(config, archives_dir))
    if info is None:
        return 1

    try:
        write_output(info, args.output, pretty=args.pretty)
    except OSError as e:
        logger.error("Failed to write output: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
