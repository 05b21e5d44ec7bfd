"""High-level orchestration for producing the worker bundle."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Collection, Dict

from .bundler import Bundler
from .compressor import compress_page, minify_script
from .config import BuildConfig
from .constants import build_constants, read_icon
from .models import Artifact, BuildReport, CompressedAsset
from .packager import build_header, package_artifact, write_script
from .templates import discover_pages, read_page, resolve_page

logger = logging.getLogger("worker_bundle")


def process_pages(
    asset_root: Path,
    version: str,
    reserved: Collection[str],
) -> Dict[str, CompressedAsset]:
    """Resolve and compress every page, one at a time in discovery order."""
    assets: Dict[str, CompressedAsset] = {}
    for page_dir in discover_pages(asset_root):
        bundle = read_page(asset_root, page_dir, reserved)
        html = resolve_page(bundle, version, minify_script)
        assets[bundle.name] = compress_page(bundle.name, html)
    logger.info("Assets bundled successfully (%d page(s))", len(assets))
    return assets


async def run_build(config: BuildConfig, bundler: Bundler) -> BuildReport:
    """Run the whole pipeline; the first failure aborts before any output."""
    timings: Dict[str, float] = {}

    start = time.perf_counter()
    assets = process_pages(
        config.asset_root, config.version, config.reserved_pages
    )
    icon_b64 = read_icon(config.icon_path)
    defines = build_constants(assets, icon_b64, config.version)
    timings["assets"] = time.perf_counter() - start

    start = time.perf_counter()
    output = await bundler.bundle(config.entry_point, defines)
    timings["bundle"] = time.perf_counter() - start
    logger.info("Worker bundled successfully")

    start = time.perf_counter()
    artifact = Artifact(code=output.code, timestamp_header=build_header())
    script_path, archive_path = package_artifact(artifact, config.dist_dir)
    source_map_path = None
    if output.source_map is not None:
        source_map_path = write_script(
            script_path.with_name(script_path.name + ".map"), output.source_map
        )
        logger.debug("Saved source map to %s", source_map_path)
    timings["package"] = time.perf_counter() - start

    return BuildReport(
        script_path=script_path,
        archive_path=archive_path,
        pages=sorted(assets),
        stage_seconds=timings,
        source_map_path=source_map_path,
    )
