"""Configuration objects and constants for the worker build."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from .errors import MissingInputError

ARCHIVE_ENTRY_NAME = "_worker.js"
SCRIPT_OUTPUT_NAME = "worker.js"
ARCHIVE_OUTPUT_NAME = "worker.zip"

DEFAULT_RESERVED_PAGES: Tuple[str, ...] = ("error",)
DEFAULT_EXTERNAL_MODULES: Tuple[str, ...] = ("cloudflare:sockets",)


@dataclass
class BuildConfig:
    """Top-level settings that control a single build run."""

    project_root: Path
    version: str
    asset_root: Optional[Path] = None
    entry_point: Optional[Path] = None
    icon_path: Optional[Path] = None
    dist_dir: Optional[Path] = None
    reserved_pages: Tuple[str, ...] = DEFAULT_RESERVED_PAGES
    external_modules: Tuple[str, ...] = DEFAULT_EXTERNAL_MODULES
    sourcemap: bool = False
    node_binary: Optional[str] = None

    def __post_init__(self) -> None:
        if self.asset_root is None:
            self.asset_root = self.project_root / "src" / "assets"
        if self.entry_point is None:
            self.entry_point = self.project_root / "src" / "worker.ts"
        if self.icon_path is None:
            self.icon_path = self.asset_root / "favicon.ico"
        if self.dist_dir is None:
            self.dist_dir = self.project_root / "dist"

    @property
    def script_output(self) -> Path:
        return self.dist_dir / SCRIPT_OUTPUT_NAME

    @property
    def archive_output(self) -> Path:
        return self.dist_dir / ARCHIVE_OUTPUT_NAME


def read_package_version(project_root: Path) -> str:
    """Return the ``version`` field of the project's ``package.json``."""
    manifest = project_root / "package.json"
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise MissingInputError(f"package manifest not found: {manifest}") from exc
    except (OSError, ValueError) as exc:
        raise MissingInputError(f"unable to read {manifest}: {exc}") from exc
    version = data.get("version") if isinstance(data, dict) else None
    if not isinstance(version, str) or not version:
        raise MissingInputError(f"{manifest} does not declare a version")
    return version
