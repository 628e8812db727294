"""Millisecond duration to frame count conversion."""

import math

from .models import Number


def duration_to_frames(duration_ms: Number, fps: Number) -> int:
    """
    Convert a duration in milliseconds to a frame count at ``fps``.

    Always rounds up so a trailing partial frame is kept. Zero and negative
    values are not special-cased.
    """
    # Multiply before dividing: 100ms @ 30fps must be 3 frames, not 4
    return math.ceil(duration_ms * fps / 1000)
