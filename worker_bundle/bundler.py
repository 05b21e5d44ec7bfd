"""External bundler collaborator.

The pipeline only depends on the :class:`Bundler` protocol. The default
implementation drives esbuild's JavaScript API through a short Node.js
driver so that large build constants travel over stdin instead of the
command line.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import shutil
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

from .errors import BundlerError
from .models import BundleOutput

logger = logging.getLogger("worker_bundle")

NODE_ENV_OVERRIDE = "WORKER_BUNDLE_NODE"

_DRIVER = """
const chunks = [];
process.stdin.on('data', (chunk) => chunks.push(chunk));
process.stdin.on('end', async () => {
  try {
    const options = JSON.parse(Buffer.concat(chunks).toString('utf8'));
    const { build } = require('esbuild');
    const result = await build({ ...options, write: false, logLevel: 'silent' });
    const outputs = result.outputFiles.map((file) => ({ path: file.path, text: file.text }));
    process.stdout.write(JSON.stringify({ outputs }));
  } catch (err) {
    process.stderr.write(String((err && err.message) || err));
    process.exitCode = 1;
  }
});
"""


class Bundler(Protocol):
    async def bundle(self, entry: Path, defines: Mapping[str, str]) -> BundleOutput:
        ...


class EsbuildBundler:
    """Bundle a browser entry point into one ESM module with esbuild."""

    def __init__(
        self,
        outfile: Path,
        external: Sequence[str] = (),
        sourcemap: bool = False,
        node_binary: Optional[str] = None,
        cwd: Optional[Path] = None,
    ) -> None:
        self.outfile = outfile
        self.external = list(external)
        self.sourcemap = sourcemap
        self.node_binary = node_binary
        self.cwd = cwd

    def _resolve_node(self) -> str:
        if self.node_binary:
            return self.node_binary
        override = os.getenv(NODE_ENV_OVERRIDE)
        if override:
            logger.debug("%s override detected: %s", NODE_ENV_OVERRIDE, override)
            return override
        found = shutil.which("node")
        if not found:
            raise BundlerError("node executable not found; install Node.js and esbuild")
        return found

    def build_options(self, entry: Path, defines: Mapping[str, str]) -> Dict[str, Any]:
        return {
            "entryPoints": [str(entry)],
            "outfile": str(self.outfile),
            "bundle": True,
            "format": "esm",
            "platform": "browser",
            "target": "esnext",
            "sourcemap": self.sourcemap,
            "loader": {".ts": "ts"},
            "external": self.external,
            "define": dict(defines),
        }

    async def bundle(self, entry: Path, defines: Mapping[str, str]) -> BundleOutput:
        node = self._resolve_node()
        options = json.dumps(self.build_options(entry, defines)).encode("utf-8")
        logger.debug("Running esbuild on %s via %s", entry, node)
        try:
            process = await asyncio.create_subprocess_exec(
                node,
                "-e",
                _DRIVER,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(self.cwd) if self.cwd else None,
            )
        except OSError as exc:
            raise BundlerError(f"unable to start {node}: {exc}") from exc
        stdout, stderr = await process.communicate(options)
        if process.returncode != 0:
            message = stderr.decode("utf-8", errors="replace").strip()
            raise BundlerError(message or f"esbuild exited with status {process.returncode}")
        return _parse_outputs(stdout)


def _parse_outputs(stdout: bytes) -> BundleOutput:
    try:
        outputs: List[Dict[str, str]] = json.loads(stdout.decode("utf-8"))["outputs"]
    except (ValueError, KeyError, TypeError) as exc:
        raise BundlerError(f"unexpected esbuild output: {exc}") from exc
    code: Optional[str] = None
    source_map: Optional[str] = None
    for output in outputs:
        if output["path"].endswith(".map"):
            source_map = output["text"]
        elif code is None:
            code = output["text"]
    if code is None:
        raise BundlerError("esbuild produced no output files")
    return BundleOutput(code=code, source_map=source_map)
