"""
Argument Validator
==================
Turns an untyped tool-call payload into a RenderRequest.

Only types are checked. Zero or negative sizes and durations are passed
through to the engines untouched.
"""

from typing import Any, Union

from loguru import logger
from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt, StrictStr, ValidationError, field_validator

from .errors import ArgumentError
from .models import DEFAULT_FPS, RenderRequest

# Strict types reject bools and numeric strings; Infinity and NaN are rejected too
StrictNumber = Union[StrictInt, StrictFloat]


class ReactToVideoArgs(BaseModel):
    """Schema for react_code_to_video arguments."""

    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    code: StrictStr
    width: StrictNumber
    height: StrictNumber
    duration: StrictNumber
    fps: StrictNumber = DEFAULT_FPS

    @field_validator("width", "height", "duration", "fps", mode="before")
    @classmethod
    def reject_bool(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("must be a number, not a boolean")
        return value


def validate_arguments(payload: Any) -> RenderRequest:
    """
    Validate tool arguments.

    Args:
        payload: Raw arguments from the transport (expected to be a mapping)

    Returns:
        RenderRequest with fps defaulted to 30

    Raises:
        ArgumentError: If a required field is missing or has the wrong type
    """
    if not isinstance(payload, dict):
        raise ArgumentError("Invalid arguments for react_code_to_video: expected an object")

    # An explicit null fps means "use the default"
    if payload.get("fps", DEFAULT_FPS) is None:
        payload = {k: v for k, v in payload.items() if k != "fps"}

    try:
        args = ReactToVideoArgs.model_validate(payload)
    except ValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
        logger.debug(f"[Validator] Rejected arguments: {fields}")
        raise ArgumentError(
            f"Invalid arguments for react_code_to_video: {', '.join(fields)}",
            fields=fields,
        ) from e

    return RenderRequest(
        code=args.code,
        width=args.width,
        height=args.height,
        duration=args.duration,
        fps=args.fps,
    )
