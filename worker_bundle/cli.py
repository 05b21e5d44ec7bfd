"""Command-line entry point for the worker build."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Sequence

from .builder import run_build
from .bundler import EsbuildBundler
from .config import DEFAULT_EXTERNAL_MODULES, BuildConfig, read_package_version
from .errors import BuildError

logger = logging.getLogger("worker_bundle.cli")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Embed templated HTML pages into a browser worker script and "
            "package it as a deployable zip archive."
        ),
    )
    parser.add_argument(
        "--root",
        default=".",
        type=Path,
        help="Project root holding package.json, src/ and dist/",
    )
    parser.add_argument(
        "--assets",
        type=Path,
        default=None,
        help="Directory with one subdirectory per page (default: <root>/src/assets)",
    )
    parser.add_argument(
        "--entry",
        type=Path,
        default=None,
        help="Worker entry point (default: <root>/src/worker.ts)",
    )
    parser.add_argument(
        "--icon",
        type=Path,
        default=None,
        help="Icon embedded as __ICON__ (default: <assets>/favicon.ico)",
    )
    parser.add_argument(
        "--dist",
        type=Path,
        default=None,
        help="Output directory for worker.js and worker.zip (default: <root>/dist)",
    )
    parser.add_argument(
        "--version-override",
        default=None,
        help="Use this version instead of the one declared in package.json",
    )
    parser.add_argument(
        "--external",
        action="append",
        default=None,
        help="Module specifier left unresolved by the bundler (repeatable)",
    )
    parser.add_argument(
        "--sourcemap",
        action="store_true",
        help="Also write worker.js.map next to the bundle",
    )
    parser.add_argument(
        "--node",
        default=None,
        help="Node.js executable used to run esbuild",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> BuildConfig:
    root = Path(args.root).resolve()
    version = args.version_override or read_package_version(root)
    return BuildConfig(
        project_root=root,
        version=version,
        asset_root=args.assets.resolve() if args.assets else None,
        entry_point=args.entry.resolve() if args.entry else None,
        icon_path=args.icon.resolve() if args.icon else None,
        dist_dir=args.dist.resolve() if args.dist else None,
        external_modules=tuple(args.external or DEFAULT_EXTERNAL_MODULES),
        sourcemap=args.sourcemap,
        node_binary=args.node,
    )


def _run(args: argparse.Namespace) -> None:
    config = build_config(args)
    logger.info("Building worker %s from %s", config.version, config.project_root)
    bundler = EsbuildBundler(
        outfile=config.script_output,
        external=config.external_modules,
        sourcemap=config.sourcemap,
        node_binary=config.node_binary,
        cwd=config.project_root,
    )
    report = asyncio.run(run_build(config, bundler))
    logger.info(
        "Done in %.2fs (%d page(s) embedded)",
        report.total_seconds,
        len(report.pages),
    )
    for stage, seconds in report.stage_seconds.items():
        logger.debug("Stage %s took %.2fs", stage, seconds)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    try:
        _run(args)
    except BuildError as exc:
        logger.error("Build failed: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
