"""Write the bundled worker script and its single-entry zip archive."""

from __future__ import annotations

import datetime as dt
import io
import logging
import zipfile
from pathlib import Path
from typing import Optional, Tuple

from .config import ARCHIVE_ENTRY_NAME, ARCHIVE_OUTPUT_NAME, SCRIPT_OUTPUT_NAME
from .errors import PackagingError
from .models import Artifact

logger = logging.getLogger("worker_bundle")

# Zip entries carry a DOS timestamp; pin it so archives only differ by content.
ENTRY_DATE_TIME = (1980, 1, 1, 0, 0, 0)


def build_header(now: Optional[dt.datetime] = None) -> str:
    """Build marker and type-check suppression lines prepended to the bundle."""
    now = now or dt.datetime.now(dt.timezone.utc)
    timestamp = now.replace(microsecond=0).isoformat().replace("+00:00", "Z")
    return f"// Build: {timestamp}\n// @ts-nocheck\n"


def write_script(path: Path, text: str) -> Path:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(text.encode("utf-8"))
    except OSError as exc:
        raise PackagingError(f"unable to write {path}: {exc}") from exc
    return path


def archive_bytes(text: str, entry_name: str = ARCHIVE_ENTRY_NAME) -> bytes:
    """Return a zip archive holding ``text`` as its only, deflated entry."""
    buffer = io.BytesIO()
    info = zipfile.ZipInfo(entry_name, date_time=ENTRY_DATE_TIME)
    info.compress_type = zipfile.ZIP_DEFLATED
    try:
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
            archive.writestr(info, text.encode("utf-8"))
    except (zipfile.BadZipFile, zipfile.LargeZipFile, ValueError) as exc:
        raise PackagingError(f"unable to build archive: {exc}") from exc
    return buffer.getvalue()


def write_archive(path: Path, text: str, entry_name: str = ARCHIVE_ENTRY_NAME) -> Path:
    data = archive_bytes(text, entry_name)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as exc:
        raise PackagingError(f"unable to write {path}: {exc}") from exc
    return path


def package_artifact(artifact: Artifact, dist_dir: Path) -> Tuple[Path, Path]:
    """Write the plain script and the archive; both hold identical text."""
    text = artifact.text
    script_path = write_script(dist_dir / SCRIPT_OUTPUT_NAME, text)
    logger.info("Saved worker script to %s", script_path)
    archive_path = write_archive(
        dist_dir / ARCHIVE_OUTPUT_NAME, text, artifact.archive_entry_name
    )
    logger.info("Saved worker archive to %s", archive_path)
    return script_path, archive_path
