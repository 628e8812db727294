"""
React Video Pipeline
====================
Linear react-code-to-video pipeline:

    validate -> convert duration -> synthesize project -> bundle -> render -> report

Each stage finishes before the next starts. The first failure aborts the run
and is raised unchanged. The ephemeral project is released on every exit
path; on success the video is moved out of it first.
"""

import shutil
import time
from contextlib import AbstractContextManager
from functools import partial
from pathlib import Path
from typing import Any, Callable, Optional, Union

from loguru import logger

from config import settings

from .bundler import BundlerAdapter
from .duration import duration_to_frames
from .engines import BundlingEngine, NodeBundlingEngine, NodeRenderingEngine, RenderingEngine
from .errors import FilesystemError
from .models import CompositionDescriptor, RenderRequest, RenderResult
from .project import ProjectSynthesizer, ephemeral_project_dir
from .renderer import RenderOrchestrator
from .validator import validate_arguments

WorkspaceFactory = Callable[[], AbstractContextManager]


class ReactVideoPipeline:
    """
    Renders caller-supplied React/Remotion code to an mp4.

    Usage:
        pipeline = ReactVideoPipeline()
        result = await pipeline.render({
            "code": source, "width": 1280, "height": 720, "duration": 3000,
        })
        print(result.video_path)
    """

    def __init__(
        self,
        bundling_engine: Optional[BundlingEngine] = None,
        rendering_engine: Optional[RenderingEngine] = None,
        synthesizer: Optional[ProjectSynthesizer] = None,
        output_dir: Optional[Union[str, Path]] = None,
        workspace_factory: Optional[WorkspaceFactory] = None,
        keep_projects: bool = settings.KEEP_PROJECTS,
    ):
        """
        Args:
            bundling_engine: Engine used by the bundler stage (Node by default)
            rendering_engine: Engine used by the render stage (Node by default)
            synthesizer: Project writer
            output_dir: Where finished videos are moved
            workspace_factory: Zero-argument callable returning a context
                manager that yields a fresh, empty project directory
            keep_projects: Leave projects (and the video inside) in place
        """
        if bundling_engine is None:
            bundling_engine = NodeBundlingEngine(
                node_path=settings.NODE_PATH,
                npm_path=settings.NPM_PATH,
                install_deps=settings.INSTALL_DEPS,
                timeout=settings.BUNDLE_TIMEOUT,
                install_timeout=settings.INSTALL_TIMEOUT,
                node_modules_cache=settings.NODE_MODULES_CACHE,
            )
        if rendering_engine is None:
            rendering_engine = NodeRenderingEngine(
                node_path=settings.NODE_PATH,
                timeout=settings.RENDER_TIMEOUT,
            )

        self.bundler = BundlerAdapter(bundling_engine)
        self.orchestrator = RenderOrchestrator(rendering_engine)
        self.synthesizer = synthesizer or ProjectSynthesizer()
        self.output_dir = Path(output_dir) if output_dir is not None else settings.OUTPUT_DIR
        self.keep_projects = keep_projects
        self.workspace_factory = workspace_factory or partial(
            ephemeral_project_dir, base_dir=settings.WORK_DIR, keep=keep_projects
        )

    async def render(self, payload: Any) -> RenderResult:
        """
        Validate raw tool arguments and render them.

        Raises:
            ArgumentError: Before any filesystem work
            FilesystemError, BundleError, RenderError: From later stages
        """
        request = validate_arguments(payload)
        return await self.render_request(request)

    async def render_request(self, request: RenderRequest) -> RenderResult:
        """Run every stage after validation for an already typed request."""
        start_time = time.time()
        duration_in_frames = duration_to_frames(request.duration, request.fps)
        descriptor = CompositionDescriptor(
            width=request.width,
            height=request.height,
            fps=request.fps,
            duration_in_frames=duration_in_frames,
        )

        with self.workspace_factory() as root:
            project = self.synthesizer.synthesize(request, duration_in_frames, root)
            job_id = project.name
            logger.info(f"[Pipeline] Job {job_id}: {duration_in_frames} frames")

            bundle = await self.bundler.bundle(project.entry_path)
            rendered = await self.orchestrator.render(descriptor, bundle, project.output_path)
            video_path = rendered if self.keep_projects else self._deliver(rendered, job_id)

        render_time = time.time() - start_time
        file_size = video_path.stat().st_size if video_path.exists() else 0
        logger.info(f"[Pipeline] Job {job_id} done: {video_path} ({render_time:.2f}s)")

        return RenderResult(
            job_id=job_id,
            video_path=str(video_path),
            duration_in_frames=duration_in_frames,
            render_time_seconds=render_time,
            file_size_bytes=file_size,
        )

    def _deliver(self, rendered: Path, job_id: str) -> Path:
        """Move the video out of the project before the project is removed."""
        destination = (self.output_dir / f"{job_id}{rendered.suffix}").resolve()
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            shutil.move(str(rendered), str(destination))
        except OSError as e:
            raise FilesystemError(f"Could not move video to {destination}: {e}") from e
        return destination
