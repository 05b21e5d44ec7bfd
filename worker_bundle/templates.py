"""Page discovery and placeholder substitution for templated HTML pages."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Callable, Collection, Dict, List, Optional

from .config import DEFAULT_RESERVED_PAGES
from .errors import MissingInputError
from .models import PageBundle

logger = logging.getLogger("worker_bundle")

MARKUP_FILE = "index.html"
STYLE_FILE = "style.css"
SCRIPT_FILE = "script.js"

VERSION_PLACEHOLDER = "__VERSION__"
STYLE_PLACEHOLDER = "__STYLE__"
SCRIPT_PLACEHOLDER = "__SCRIPT__"

_PLACEHOLDER_PATTERN = re.compile(
    "|".join(
        re.escape(token)
        for token in (VERSION_PLACEHOLDER, STYLE_PLACEHOLDER, SCRIPT_PLACEHOLDER)
    )
)


def page_name(asset_root: Path, page_dir: Path) -> str:
    """Logical page name: the directory path relative to the asset root."""
    return page_dir.relative_to(asset_root).as_posix()


def discover_pages(asset_root: Path) -> List[Path]:
    """Return every directory below ``asset_root`` holding a markup file."""
    if not asset_root.is_dir():
        raise MissingInputError(f"asset directory not found: {asset_root}")
    return sorted(
        markup.parent
        for markup in asset_root.rglob(MARKUP_FILE)
        if markup.is_file() and markup.parent != asset_root
    )


def _read_fragment(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise MissingInputError(f"unable to read {path}: {exc}") from exc


def read_page(
    asset_root: Path,
    page_dir: Path,
    reserved: Collection[str] = DEFAULT_RESERVED_PAGES,
) -> PageBundle:
    """Read the fragments of one page directory into a :class:`PageBundle`.

    Reserved pages only load their markup; every other page must also ship
    a style and a script file.
    """
    name = page_name(asset_root, page_dir)
    raw_html = _read_fragment(page_dir / MARKUP_FILE)
    if name in reserved:
        logger.debug("Page %s is reserved; skipping style and script", name)
        return PageBundle(name=name, raw_html=raw_html)
    return PageBundle(
        name=name,
        raw_html=raw_html,
        raw_style=_read_fragment(page_dir / STYLE_FILE),
        raw_script=_read_fragment(page_dir / SCRIPT_FILE),
    )


def substitute_placeholders(
    html: str,
    version: str,
    style: Optional[str] = None,
    script: Optional[str] = None,
) -> str:
    """Replace every placeholder occurrence in a single pass.

    ``__VERSION__`` is always replaced. ``__STYLE__`` and ``__SCRIPT__`` are
    only replaced when ``style`` and ``script`` are given; otherwise they are
    left as-is. Inserted values are never scanned again.
    """
    values: Dict[str, str] = {VERSION_PLACEHOLDER: version}
    if style is not None and script is not None:
        values[STYLE_PLACEHOLDER] = f"<style>{style}</style>"
        values[SCRIPT_PLACEHOLDER] = script

    def _replace(match: re.Match) -> str:
        token = match.group(0)
        return values.get(token, token)

    return _PLACEHOLDER_PATTERN.sub(_replace, html)


def resolve_page(
    bundle: PageBundle,
    version: str,
    minify_script: Callable[[str], str],
) -> str:
    """Produce the fully substituted markup for one page."""
    if bundle.asset_only:
        return substitute_placeholders(bundle.raw_html, version)
    script = minify_script(bundle.raw_script or "")
    return substitute_placeholders(
        bundle.raw_html,
        version,
        style=bundle.raw_style or "",
        script=script,
    )
