"""File validators."""

from .mime_type_validator import (
    MimeTypeValidator,
    create_mime_type_validator,
    is_known_content_type,
    extension_matches,
)

__all__ = [
    "MimeTypeValidator",
    "create_mime_type_validator",
    "is_known_content_type",
    "extension_matches",
]
