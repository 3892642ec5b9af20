"""Pipeline stage value object."""

from enum import Enum


class PipelineStage(str, Enum):
    """Stage at which a store or delete operation stopped."""

    ACQUISITION = "acquisition"
    VALIDATION = "validation"
    PROCESSING = "processing"
    PERSISTENCE = "persistence"
    DELETION = "deletion"
