"""Minification and compression helpers for embedded page markup."""

from __future__ import annotations

import base64
import binascii
import gzip
import logging
import re
import zlib

import htmlmin
import rcssmin
import rjsmin

from .errors import TransformError
from .models import CompressedAsset

logger = logging.getLogger("worker_bundle")

GZIP_LEVEL = 9

_STYLE_BLOCK = re.compile(r"(<style\b[^>]*>)(.*?)(</style>)", re.IGNORECASE | re.DOTALL)


def minify_script(code: str) -> str:
    """Strip comments and whitespace from a script without renaming anything."""
    try:
        return rjsmin.jsmin(code).strip()
    except Exception as exc:  # pylint: disable=broad-except
        raise TransformError(f"script minification failed: {exc}") from exc


def minify_style_blocks(html: str) -> str:
    """Minify the body of every inline <style> element."""
    return _STYLE_BLOCK.sub(
        lambda match: match.group(1) + rcssmin.cssmin(match.group(2)) + match.group(3),
        html,
    )


def minify_markup(html: str) -> str:
    """Collapse whitespace, unquote safe attributes and minify inline CSS.

    Runs of whitespace shrink to a single space rather than disappearing, so
    the gap between inline elements survives. Comments are kept.
    """
    try:
        return htmlmin.minify(
            minify_style_blocks(html),
            remove_comments=False,
            remove_empty_space=False,
            remove_optional_attribute_quotes=True,
        )
    except Exception as exc:  # pylint: disable=broad-except
        raise TransformError(f"markup minification failed: {exc}") from exc


def compress_markup(html: str) -> bytes:
    """Gzip the markup with a zeroed header timestamp for stable output."""
    return gzip.compress(html.encode("utf-8"), compresslevel=GZIP_LEVEL, mtime=0)


def encode_payload(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def decode_payload(payload: str) -> str:
    """Invert :func:`encode_payload` and :func:`compress_markup`."""
    try:
        return gzip.decompress(base64.b64decode(payload, validate=True)).decode("utf-8")
    except (binascii.Error, OSError, EOFError, zlib.error, UnicodeDecodeError) as exc:
        raise TransformError(f"payload is not valid gzip+base64: {exc}") from exc


def compress_page(name: str, html: str) -> CompressedAsset:
    """Minify, compress and encode the substituted markup of one page."""
    minified = minify_markup(html)
    try:
        payload = encode_payload(compress_markup(minified))
    except (OSError, ValueError) as exc:
        raise TransformError(f"compression of page {name} failed: {exc}") from exc
    logger.debug(
        "Page %s: %d chars -> %d minified -> %d encoded",
        name,
        len(html),
        len(minified),
        len(payload),
    )
    return CompressedAsset(
        source_logical_name=name,
        encoded_payload=payload,
        minified_html=minified,
    )
