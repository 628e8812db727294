"""
Remotion Engines
================
Bundling and rendering engines driven as Node subprocesses.

@remotion/bundler and @remotion/renderer only run under Node, so each engine
call runs a short script with ``node -e`` inside the synthesized project,
where the engine packages resolve from the project's node_modules.
"""

import asyncio
import json
import shutil
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Type, Union

from loguru import logger

from .errors import BundleError, EngineError, RenderError

STDERR_TAIL_CHARS = 4000

BUNDLE_SCRIPT = """
const {bundle} = require('@remotion/bundler');
bundle({entryPoint: process.argv[1]})
  .then((location) => {
    process.stdout.write('\\n' + JSON.stringify({bundleLocation: location}) + '\\n');
  })
  .catch((err) => {
    console.error((err && err.stack) || String(err));
    process.exit(1);
  });
"""

RENDER_SCRIPT = """
const {renderMedia} = require('@remotion/renderer');
const composition = JSON.parse(process.argv[1]);
renderMedia({
  composition,
  serveUrl: process.argv[2],
  codec: process.argv[3],
  outputLocation: process.argv[4],
})
  .then(() => {
    process.stdout.write('\\n' + JSON.stringify({outputLocation: process.argv[4]}) + '\\n');
  })
  .catch((err) => {
    console.error((err && err.stack) || String(err));
    process.exit(1);
  });
"""


class BundlingEngine(ABC):
    """Turns an entry module into a servable bundle."""

    @abstractmethod
    async def bundle(self, entry_path: Path) -> str:
        """
        Bundle the project rooted at the entry module.

        Returns:
            Bundle location (URL or directory path)

        Raises:
            BundleError: If the project does not build
        """
        pass


class RenderingEngine(ABC):
    """Renders a composition from a bundle to a video file."""

    @abstractmethod
    async def render(
        self,
        composition: Dict[str, Any],
        serve_url: str,
        codec: str,
        output_path: Path,
    ) -> None:
        """
        Render ``composition`` and write the video to ``output_path``.

        Raises:
            RenderError: If rendering fails
        """
        pass


def _tail(text: str) -> str:
    return text[-STDERR_TAIL_CHARS:]


async def run_node_command(
    cmd: List[str],
    cwd: Union[str, Path],
    error_cls: Type[EngineError],
    timeout: Optional[float] = None,
    label: str = "node",
) -> Tuple[str, str]:
    """
    Run a command and collect its output.

    Args:
        cmd: Command and arguments
        cwd: Working directory
        error_cls: Error raised on failure (BundleError or RenderError)
        timeout: Seconds before the process is killed (None waits forever)
        label: Log prefix

    Returns:
        (stdout, stderr) decoded as text
    """
    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            cwd=str(cwd),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise error_cls(f"{label}: could not start {cmd[0]}: {e}") from e

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        logger.error(f"[{label}] Timed out after {timeout}s")
        raise error_cls(f"{label}: timed out after {timeout}s", returncode=process.returncode)

    out = stdout.decode(errors="replace") if stdout else ""
    err = stderr.decode(errors="replace") if stderr else ""

    if process.returncode != 0:
        logger.error(f"[{label}] Exited with {process.returncode}: {_tail(err)}")
        raise error_cls(
            f"{label} failed (exit {process.returncode}): {_tail(err).strip() or 'Unknown error'}",
            returncode=process.returncode,
            stderr=_tail(err),
        )

    return out, err


def _last_json_line(stdout: str) -> Optional[Dict[str, Any]]:
    for line in reversed(stdout.splitlines()):
        line = line.strip()
        if line.startswith("{"):
            try:
                return json.loads(line)
            except json.JSONDecodeError:
                continue
    return None


async def install_dependencies(
    project_root: Union[str, Path],
    npm_path: str = "npm",
    timeout: Optional[float] = None,
) -> None:
    """
    Run ``npm install`` in the project unless node_modules already exists.

    Raises:
        BundleError: If dependencies cannot be installed
    """
    project_root = Path(project_root)
    if (project_root / "node_modules").exists():
        logger.debug(f"[Install] node_modules present in {project_root.name}, skipping")
        return

    logger.info(f"[Install] npm install in {project_root.name}")
    await run_node_command(
        [npm_path, "install", "--no-audit", "--no-fund"],
        cwd=project_root,
        error_cls=BundleError,
        timeout=timeout,
        label="Install",
    )


async def link_shared_node_modules(
    project_root: Union[str, Path],
    cache_dir: Union[str, Path],
    npm_path: str = "npm",
    timeout: Optional[float] = None,
) -> None:
    """
    Point the project's node_modules at a cache installed once from the same manifest.

    The cache is reinstalled only when the project's package.json differs from
    the one it was installed from.

    Raises:
        BundleError: If the cache cannot be installed or linked
    """
    project_root = Path(project_root)
    cache_dir = Path(cache_dir)
    link = project_root / "node_modules"
    if link.exists() or link.is_symlink():
        return

    try:
        cache_dir.mkdir(parents=True, exist_ok=True)
        manifest = (project_root / "package.json").read_text(encoding="utf-8")
        cached_manifest = cache_dir / "package.json"
        if not cached_manifest.exists() or cached_manifest.read_text(encoding="utf-8") != manifest:
            logger.info(f"[Install] Refreshing node_modules cache at {cache_dir}")
            cached_manifest.write_text(manifest, encoding="utf-8")
            shutil.rmtree(cache_dir / "node_modules", ignore_errors=True)
    except OSError as e:
        raise BundleError(f"Install: cannot prepare node_modules cache {cache_dir}: {e}") from e

    await install_dependencies(cache_dir, npm_path, timeout)

    try:
        link.symlink_to(cache_dir / "node_modules", target_is_directory=True)
    except OSError as e:
        raise BundleError(f"Install: cannot link node_modules cache: {e}") from e
    logger.debug(f"[Install] Linked {project_root.name}/node_modules -> {cache_dir}")


class NodeBundlingEngine(BundlingEngine):
    """Runs @remotion/bundler's bundle() in a Node child process."""

    def __init__(
        self,
        node_path: str = "node",
        npm_path: str = "npm",
        install_deps: bool = True,
        timeout: Optional[float] = None,
        install_timeout: Optional[float] = None,
        node_modules_cache: Optional[Union[str, Path]] = None,
    ):
        self.node_path = node_path
        self.npm_path = npm_path
        self.install_deps = install_deps
        self.timeout = timeout
        self.install_timeout = install_timeout
        self.node_modules_cache = Path(node_modules_cache) if node_modules_cache else None
        # Serializes cache installs between concurrent renders
        self._cache_lock = asyncio.Lock()

    async def _prepare_dependencies(self, project_root: Path) -> None:
        if self.node_modules_cache is None:
            await install_dependencies(project_root, self.npm_path, self.install_timeout)
            return
        async with self._cache_lock:
            await link_shared_node_modules(
                project_root, self.node_modules_cache, self.npm_path, self.install_timeout
            )

    async def bundle(self, entry_path: Path) -> str:
        entry_path = Path(entry_path)
        # Entry lives at <root>/src/index.ts
        project_root = entry_path.parent.parent

        if self.install_deps:
            await self._prepare_dependencies(project_root)

        stdout, _ = await run_node_command(
            [self.node_path, "-e", BUNDLE_SCRIPT, str(entry_path)],
            cwd=project_root,
            error_cls=BundleError,
            timeout=self.timeout,
            label="Bundler",
        )

        result = _last_json_line(stdout)
        if not result or not result.get("bundleLocation"):
            raise BundleError("Bundler: no bundle location in engine output")
        return result["bundleLocation"]


class NodeRenderingEngine(RenderingEngine):
    """Runs @remotion/renderer's renderMedia() in a Node child process."""

    def __init__(self, node_path: str = "node", timeout: Optional[float] = None):
        self.node_path = node_path
        self.timeout = timeout

    async def render(
        self,
        composition: Dict[str, Any],
        serve_url: str,
        codec: str,
        output_path: Path,
    ) -> None:
        output_path = Path(output_path)
        await run_node_command(
            [
                self.node_path,
                "-e",
                RENDER_SCRIPT,
                json.dumps(composition),
                serve_url,
                codec,
                str(output_path),
            ],
            cwd=output_path.parent,
            error_cls=RenderError,
            timeout=self.timeout,
            label="Render",
        )
