"""
React Video Errors
==================
Error taxonomy for the react-to-video render pipeline.

Every error carries a ``kind`` so the transport layer can tell callers what
failed without parsing messages.
"""

from typing import Optional


class ReactVideoError(Exception):
    """Base class for render pipeline failures."""

    kind = "internal"


class ArgumentError(ReactVideoError):
    """Raised when tool arguments are missing or of the wrong type."""

    kind = "argument"

    def __init__(self, message: str, fields: Optional[list] = None):
        self.fields = fields or []
        super().__init__(message)


class FilesystemError(ReactVideoError):
    """Raised when the ephemeral project cannot be created or written."""

    kind = "filesystem"


class EngineError(ReactVideoError):
    """Failure reported by an external Node engine."""

    def __init__(
        self,
        message: str,
        returncode: Optional[int] = None,
        stderr: Optional[str] = None,
    ):
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)


class BundleError(EngineError):
    """Raised when bundling the synthesized project fails."""

    kind = "bundle"


class RenderError(EngineError):
    """Raised when the rendering engine fails to produce a video."""

    kind = "render"


class UnknownToolError(ReactVideoError):
    """Raised when a tool call names a tool that is not registered."""

    kind = "unknown_tool"


class PoolSaturatedError(ReactVideoError):
    """Raised when the render queue is full and the caller will not wait."""

    kind = "saturated"
