"""Build-time constants injected into the worker entry script."""

from __future__ import annotations

import base64
import json
from pathlib import Path
from typing import Dict, Mapping

from .errors import MissingInputError
from .models import CompressedAsset

EMPTY_LITERAL = '""'
ICON_CONSTANT = "__ICON__"
VERSION_CONSTANT = "__VERSION__"

# Symbolic constant -> page directory name.
PAGE_CONSTANTS: Dict[str, str] = {
    "__PANEL_HTML_CONTENT__": "panel",
    "__LOGIN_HTML_CONTENT__": "login",
    "__ERROR_HTML_CONTENT__": "error",
    "__SECRETS_HTML_CONTENT__": "secrets",
}


def page_literal(assets: Mapping[str, CompressedAsset], page: str) -> str:
    """Quoted payload for ``page``, or an empty string literal if absent."""
    asset = assets.get(page)
    if asset is None:
        return EMPTY_LITERAL
    return asset.literal


def read_icon(path: Path) -> str:
    """Read the icon file and return it base64-encoded."""
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise MissingInputError(f"unable to read icon {path}: {exc}") from exc
    return base64.b64encode(data).decode("ascii")


def build_constants(
    assets: Mapping[str, CompressedAsset],
    icon_b64: str,
    version: str,
) -> Dict[str, str]:
    """Map every well-known symbol to the literal that replaces it."""
    constants = {
        symbol: page_literal(assets, page) for symbol, page in PAGE_CONSTANTS.items()
    }
    constants[ICON_CONSTANT] = json.dumps(icon_b64)
    constants[VERSION_CONSTANT] = json.dumps(version)
    return constants
