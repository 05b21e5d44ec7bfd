"""Tests for the build constant mapping."""

import base64
import json
from pathlib import Path

import pytest

from worker_bundle.compressor import compress_page
from worker_bundle.constants import (
    EMPTY_LITERAL,
    PAGE_CONSTANTS,
    build_constants,
    page_literal,
    read_icon,
)
from worker_bundle.errors import MissingInputError


def test_absent_page_falls_back_to_empty_literal() -> None:
    assert page_literal({}, "secrets") == '""'


def test_every_key_is_present() -> None:
    assets = {"panel": compress_page("panel", "<p>panel</p>")}
    constants = build_constants(assets, "aWNvbg==", "1.2.3")
    assert set(constants) == set(PAGE_CONSTANTS) | {"__ICON__", "__VERSION__"}
    assert constants["__PANEL_HTML_CONTENT__"] == assets["panel"].literal
    for symbol in ("__LOGIN_HTML_CONTENT__", "__ERROR_HTML_CONTENT__", "__SECRETS_HTML_CONTENT__"):
        assert constants[symbol] == EMPTY_LITERAL
    assert constants["__VERSION__"] == '"1.2.3"'
    assert json.loads(constants["__ICON__"]) == "aWNvbg=="


def test_read_icon(tmp_path: Path) -> None:
    icon = tmp_path / "favicon.ico"
    icon.write_bytes(b"\x00\x01\x02")
    assert base64.b64decode(read_icon(icon)) == b"\x00\x01\x02"


def test_missing_icon(tmp_path: Path) -> None:
    with pytest.raises(MissingInputError):
        read_icon(tmp_path / "favicon.ico")
