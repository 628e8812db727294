"""
Render Orchestrator
===================
Drives the rendering engine for one composition.
"""

import time
from pathlib import Path
from typing import Union

from loguru import logger

from .engines import RenderingEngine
from .errors import RenderError
from .models import DEFAULT_CODEC, BundleArtifact, CompositionDescriptor


class RenderOrchestrator:
    """
    Renders a bundled composition to a video file.

    The codec is fixed; there is no retry.
    """

    def __init__(self, engine: RenderingEngine, codec: str = DEFAULT_CODEC):
        self.engine = engine
        self.codec = codec

    async def render(
        self,
        descriptor: CompositionDescriptor,
        bundle: BundleArtifact,
        output_path: Union[str, Path],
    ) -> Path:
        """
        Render ``descriptor`` from ``bundle`` into ``output_path``.

        Returns:
            Absolute path of the written video

        Raises:
            RenderError: Engine failure, or no file at the output path
        """
        output_path = Path(output_path).resolve()
        start_time = time.time()

        logger.info(f"[Render] Starting render: {descriptor.id}")
        logger.info(f"  Size: {descriptor.width}x{descriptor.height}")
        logger.info(f"  Frames: {descriptor.duration_in_frames} @ {descriptor.fps}fps")
        logger.info(f"  Codec: {self.codec}")

        try:
            await self.engine.render(
                descriptor.to_engine_dict(self.codec),
                bundle.location,
                self.codec,
                output_path,
            )
        except RenderError:
            raise
        except Exception as e:
            raise RenderError(f"Rendering failed: {e}") from e

        if not output_path.is_file():
            raise RenderError(f"Rendering finished but no video was written to {output_path}")

        logger.info(f"[Render] Render complete: {output_path} ({time.time() - start_time:.2f}s)")
        return output_path
