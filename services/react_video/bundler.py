"""
Bundler Adapter
===============
Bundles a synthesized project so the rendering engine can serve it.
"""

from pathlib import Path
from typing import Union

from loguru import logger

from .engines import BundlingEngine
from .errors import BundleError
from .models import BundleArtifact


class BundlerAdapter:
    """Calls the bundling engine on a project's entry module."""

    def __init__(self, engine: BundlingEngine):
        self.engine = engine

    async def bundle(self, entry_path: Union[str, Path]) -> BundleArtifact:
        """
        Bundle the project whose entry module is ``entry_path``.

        Raises:
            BundleError: Engine failure, usually a syntax or type error in the
                injected component or a missing dependency
        """
        logger.info(f"[Bundler] Bundling {entry_path}")
        try:
            location = await self.engine.bundle(Path(entry_path))
        except BundleError:
            raise
        except Exception as e:
            raise BundleError(f"Bundling failed: {e}") from e

        logger.info(f"[Bundler] Bundle ready: {location}")
        return BundleArtifact(location=str(location))
