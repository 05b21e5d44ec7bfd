"""Shared fixtures: a small worker project and an in-process bundler."""

import json
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

import pytest

from worker_bundle.models import BundleOutput

ENTRY_SOURCE = """\
const pages = {
  panel: __PANEL_HTML_CONTENT__,
  login: __LOGIN_HTML_CONTENT__,
  error: __ERROR_HTML_CONTENT__,
  secrets: __SECRETS_HTML_CONTENT__,
};
export default { pages, icon: __ICON__, version: __VERSION__ };
"""

ICON_BYTES = b"\x00\x00\x01\x00icon-bytes"


class FakeBundler:
    """Replaces each define in the entry source, like esbuild's --define."""

    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.calls: List[Tuple[Path, Dict[str, str]]] = []

    async def bundle(self, entry: Path, defines: Mapping[str, str]) -> BundleOutput:
        self.calls.append((entry, dict(defines)))
        if self.error is not None:
            raise self.error
        code = entry.read_text(encoding="utf-8")
        for name, value in defines.items():
            code = code.replace(name, value)
        return BundleOutput(code=code)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    assets = root / "src" / "assets"

    panel = assets / "panel"
    panel.mkdir(parents=True)
    (panel / "index.html").write_text(
        "<html>__VERSION__-__STYLE__-__SCRIPT__</html>", encoding="utf-8"
    )
    (panel / "style.css").write_text("body{color:red}", encoding="utf-8")
    (panel / "script.js").write_text("console.log('hi')", encoding="utf-8")

    error = assets / "error"
    error.mkdir()
    (error / "index.html").write_text(
        "<html>\n  <body>\n    <p>Error page __VERSION__</p>\n  </body>\n</html>\n",
        encoding="utf-8",
    )

    (assets / "favicon.ico").write_bytes(ICON_BYTES)
    (root / "src" / "worker.ts").write_text(ENTRY_SOURCE, encoding="utf-8")
    (root / "package.json").write_text(
        json.dumps({"name": "worker", "version": "1.2.3"}), encoding="utf-8"
    )
    return root


@pytest.fixture
def fake_bundler() -> FakeBundler:
    return FakeBundler()
