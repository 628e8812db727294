"""
React Video Service
===================
Renders caller-supplied React/Remotion component code to a video file.

Architecture:
- Validator: tool arguments -> RenderRequest
- Project: ephemeral Remotion project around the component
- Bundler / Renderer: Node engines (@remotion/bundler, @remotion/renderer)
- Pipeline: linear chain of the above, one project per call
- Worker pool + tool registry: admission control and dispatch for transports
"""

from .errors import (
    ReactVideoError,
    ArgumentError,
    FilesystemError,
    BundleError,
    RenderError,
    UnknownToolError,
    PoolSaturatedError,
)
from .models import (
    COMPOSITION_ID,
    DEFAULT_CODEC,
    RenderRequest,
    CompositionDescriptor,
    BundleArtifact,
    RenderResult,
)
from .validator import validate_arguments
from .duration import duration_to_frames
from .project import EphemeralProject, ProjectSynthesizer, ephemeral_project_dir
from .engines import BundlingEngine, RenderingEngine, NodeBundlingEngine, NodeRenderingEngine
from .pipeline import ReactVideoPipeline
from .worker_pool import RenderWorkerPool
from .tools import REACT_TO_VIDEO_TOOL, ToolRegistry, create_default_registry

__all__ = [
    "ReactVideoError",
    "ArgumentError",
    "FilesystemError",
    "BundleError",
    "RenderError",
    "UnknownToolError",
    "PoolSaturatedError",
    "COMPOSITION_ID",
    "DEFAULT_CODEC",
    "RenderRequest",
    "CompositionDescriptor",
    "BundleArtifact",
    "RenderResult",
    "validate_arguments",
    "duration_to_frames",
    "EphemeralProject",
    "ProjectSynthesizer",
    "ephemeral_project_dir",
    "BundlingEngine",
    "RenderingEngine",
    "NodeBundlingEngine",
    "NodeRenderingEngine",
    "ReactVideoPipeline",
    "RenderWorkerPool",
    "REACT_TO_VIDEO_TOOL",
    "ToolRegistry",
    "create_default_registry",
]
