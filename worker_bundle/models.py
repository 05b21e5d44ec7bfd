"""Data models used throughout the build pipeline."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from .config import ARCHIVE_ENTRY_NAME


@dataclass
class PageBundle:
    """Raw fragments read from one page directory."""

    name: str
    raw_html: str
    raw_style: Optional[str] = None
    raw_script: Optional[str] = None

    @property
    def asset_only(self) -> bool:
        return self.raw_style is None and self.raw_script is None


@dataclass
class CompressedAsset:
    """Minified, gzip-compressed and base64-encoded page markup."""

    source_logical_name: str
    encoded_payload: str
    minified_html: str

    @property
    def literal(self) -> str:
        """The payload as a quoted string literal for generated code."""
        return json.dumps(self.encoded_payload)


@dataclass
class BundleOutput:
    """Text returned by the external bundler."""

    code: str
    source_map: Optional[str] = None


@dataclass
class Artifact:
    """Final bundled script ready to be written to disk."""

    code: str
    timestamp_header: str
    archive_entry_name: str = ARCHIVE_ENTRY_NAME

    @property
    def text(self) -> str:
        return self.timestamp_header + self.code


@dataclass
class BuildReport:
    """Outputs and timing details for a finished build."""

    script_path: Path
    archive_path: Path
    pages: List[str]
    stage_seconds: Dict[str, float] = field(default_factory=dict)
    source_map_path: Optional[Path] = None

    @property
    def total_seconds(self) -> float:
        return sum(self.stage_seconds.values())
