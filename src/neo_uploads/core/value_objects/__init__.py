"""Upload pipeline value objects."""

from .pipeline_stage import PipelineStage
from .transform import (
    NoAction,
    Skip,
    Command,
    CustomFunction,
    TransformInstruction,
    NO_ACTION,
    SKIP,
    convert,
    ffmpeg,
    coerce_instruction,
)

__all__ = [
    "PipelineStage",
    "NoAction",
    "Skip",
    "Command",
    "CustomFunction",
    "TransformInstruction",
    "NO_ACTION",
    "SKIP",
    "convert",
    "ffmpeg",
    "coerce_instruction",
]
