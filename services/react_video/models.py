"""
React Video Models
==================
Data models for render requests, compositions and results.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Union

Number = Union[int, float]

COMPOSITION_ID = "MyComp"
DEFAULT_CODEC = "h264"
DEFAULT_FPS = 30
OUTPUT_FILENAME = "output.mp4"


@dataclass
class RenderRequest:
    """Typed react_code_to_video arguments."""
    code: str  # React component source using remotion
    width: Number  # Pixels
    height: Number  # Pixels
    duration: Number  # Milliseconds
    fps: Number = DEFAULT_FPS


@dataclass
class CompositionDescriptor:
    """The single composition rendered for a request."""
    width: Number
    height: Number
    fps: Number
    duration_in_frames: int
    id: str = COMPOSITION_ID
    default_props: Dict[str, Any] = field(default_factory=dict)

    def to_engine_dict(self, codec: str = DEFAULT_CODEC) -> Dict[str, Any]:
        """Shape expected by the rendering engine's ``composition`` option."""
        return {
            "id": self.id,
            "width": self.width,
            "height": self.height,
            "fps": self.fps,
            "durationInFrames": self.duration_in_frames,
            "defaultProps": dict(self.default_props),
            "props": {},
            "defaultCodec": codec,
            "defaultOutName": OUTPUT_FILENAME.rsplit(".", 1)[0],
        }


@dataclass
class BundleArtifact:
    """Servable bundle produced by the bundling engine (URL or path)."""
    location: str


@dataclass
class RenderResult:
    """Successful render outcome."""
    job_id: str
    video_path: str  # Absolute path
    duration_in_frames: int
    render_time_seconds: float
    file_size_bytes: int
