"""Tests for page discovery and placeholder substitution."""

from pathlib import Path

import pytest

from worker_bundle.config import DEFAULT_RESERVED_PAGES
from worker_bundle.errors import MissingInputError
from worker_bundle.models import PageBundle
from worker_bundle.templates import (
    discover_pages,
    read_page,
    resolve_page,
    substitute_placeholders,
)


class TestDiscoverPages:
    def test_finds_directories_with_markup(self, project: Path) -> None:
        assets = project / "src" / "assets"
        (assets / "notes").mkdir()
        pages = discover_pages(assets)
        assert [p.name for p in pages] == ["error", "panel"]

    def test_nested_directories_use_relative_names(self, project: Path) -> None:
        assets = project / "src" / "assets"
        nested = assets / "admin" / "users"
        nested.mkdir(parents=True)
        (nested / "index.html").write_text("<p>x</p>", encoding="utf-8")
        bundle = read_page(assets, nested, reserved=["admin/users"])
        assert bundle.name == "admin/users"

    def test_missing_asset_root(self, tmp_path: Path) -> None:
        with pytest.raises(MissingInputError):
            discover_pages(tmp_path / "nope")


class TestReadPage:
    def test_reads_all_fragments(self, project: Path) -> None:
        assets = project / "src" / "assets"
        bundle = read_page(assets, assets / "panel")
        assert bundle.raw_style == "body{color:red}"
        assert bundle.raw_script == "console.log('hi')"
        assert not bundle.asset_only

    def test_reserved_page_skips_style_and_script(self, project: Path) -> None:
        assets = project / "src" / "assets"
        bundle = read_page(assets, assets / "error")
        assert bundle.asset_only
        assert bundle.raw_style is None
        assert bundle.raw_script is None

    def test_missing_script_is_fatal(self, project: Path) -> None:
        assets = project / "src" / "assets"
        (assets / "panel" / "script.js").unlink()
        with pytest.raises(MissingInputError, match="script.js"):
            read_page(assets, assets / "panel")


class TestSubstitutePlaceholders:
    def test_replaces_every_version_occurrence(self) -> None:
        html = "<p>__VERSION__</p><i>__VERSION__</i>"
        assert substitute_placeholders(html, "2.0") == "<p>2.0</p><i>2.0</i>"

    def test_version_only_leaves_other_placeholders(self) -> None:
        html = "__VERSION__ __STYLE__ __SCRIPT__"
        assert substitute_placeholders(html, "1") == "1 __STYLE__ __SCRIPT__"

    def test_style_is_wrapped(self) -> None:
        result = substitute_placeholders("__STYLE__|__STYLE__", "1", "a{}", "x()")
        assert result == "<style>a{}</style>|<style>a{}</style>"

    def test_inserted_values_are_not_rescanned(self) -> None:
        result = substitute_placeholders(
            "__SCRIPT__ __STYLE__", "9", style="__SCRIPT__", script="'__VERSION__'"
        )
        assert result == "'__VERSION__' <style>__SCRIPT__</style>"


class TestResolvePage:
    def test_script_is_minified_before_insertion(self) -> None:
        bundle = PageBundle("p", "__SCRIPT__", raw_style="", raw_script="  a()  ")
        assert resolve_page(bundle, "1", lambda code: code.strip()) == "a()"

    def test_asset_only_page_never_minifies_script(self) -> None:
        def fail(code: str) -> str:
            raise AssertionError("should not be called")

        bundle = PageBundle("error", "<b>__VERSION__</b>")
        assert resolve_page(bundle, "3.1", fail) == "<b>3.1</b>"


class TestUndecodableFragments:
    def test_invalid_utf8_markup_is_fatal(self, project: Path) -> None:
        assets = project / "src" / "assets"
        (assets / "panel" / "index.html").write_bytes(b"<p>\xff</p>")
        with pytest.raises(MissingInputError, match="index.html"):
            read_page(assets, assets / "panel")

    def test_invalid_utf8_style_is_fatal(self, project: Path) -> None:
        assets = project / "src" / "assets"
        (assets / "panel" / "style.css").write_bytes(b"body{content:'\xfe'}")
        with pytest.raises(MissingInputError, match="style.css"):
            read_page(assets, assets / "panel")

    def test_default_reserved_pages_come_from_config(self, project: Path) -> None:
        assets = project / "src" / "assets"
        assert "error" in DEFAULT_RESERVED_PAGES
        assert read_page(assets, assets / "error").asset_only
